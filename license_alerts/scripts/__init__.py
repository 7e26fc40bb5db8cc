"""
Command-line entry points. Each one exits 0 on success and 1 on failure;
nothing raised inside a run escapes ``main()``.
"""
import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def guarded(run, *args) -> int:
    try:
        return run(*args)
    except Exception as e:
        print(f"ERROR: Unexpected error: {e}", file=sys.stderr)
        return 1
