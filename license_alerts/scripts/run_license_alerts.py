"""
Run the whole alert workflow: expiration check, then notifications.

Usage:
    python -m license_alerts.scripts.run_license_alerts
    python -m license_alerts.scripts.run_license_alerts --schedule
"""
import argparse

from license_alerts.config import Settings
from license_alerts.scheduler import run_forever
from license_alerts.scripts import guarded, setup_logging
from license_alerts.workflow import run_license_alerts


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="run-license-alerts",
        description="Check license expirations and send renewal notifications",
    )
    parser.add_argument(
        "--schedule",
        action="store_true",
        help="keep running and trigger the workflow on LICENSE_ALERTS_CRON (UTC)",
    )
    parser.add_argument("--cron", help="override LICENSE_ALERTS_CRON, e.g. '0 6 * * *'")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def run(argv: list[str] | None = None) -> int:
    args = create_parser().parse_args(argv)

    settings = Settings.from_env()
    if args.cron:
        settings.cron = args.cron
    setup_logging("DEBUG" if args.verbose else settings.log_level)

    if args.schedule:
        run_forever(settings)
        return 0

    return run_license_alerts(settings).exit_code


def main(argv: list[str] | None = None) -> int:
    return guarded(run, argv)


if __name__ == "__main__":
    raise SystemExit(main())
