"""
Trigger the license expiration check once.

Usage:
    python -m license_alerts.scripts.check_license_expirations

Requires SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY (a .env file is read).
"""
from license_alerts.config import Settings
from license_alerts.expirations import check_license_expirations
from license_alerts.scripts import guarded, setup_logging
from license_alerts.workflow import banner, print_check_summary


def run() -> int:
    settings = Settings.from_env()
    setup_logging(settings.log_level)

    banner("License Expiration Check Script")
    print()

    result = check_license_expirations(settings)

    print()
    print_check_summary(result)
    return 0 if result.ok else 1


def main() -> int:
    return guarded(run)


if __name__ == "__main__":
    raise SystemExit(main())
