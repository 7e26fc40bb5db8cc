"""
Email account owners about the renewal alerts created today.
Run it after check_license_expirations.

Usage:
    python -m license_alerts.scripts.process_license_notifications
"""
from license_alerts.config import Settings
from license_alerts.notifications import process_license_notifications
from license_alerts.scripts import guarded, setup_logging
from license_alerts.workflow import banner, print_process_summary


def run() -> int:
    settings = Settings.from_env()
    setup_logging(settings.log_level)

    banner("License Notification Processing Script")
    print()

    result = process_license_notifications(settings)

    print()
    print_process_summary(result)
    return 0 if result.ok else 1


def main() -> int:
    return guarded(run)


if __name__ == "__main__":
    raise SystemExit(main())
