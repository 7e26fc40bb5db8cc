"""
Notification processor: emails the owners of every account that received a
renewal alert today.

Alerts are selected by their ``sent_at`` falling inside the current UTC day,
so running the processor twice on the same day sends the emails twice.
"""
import logging
import math
from datetime import datetime, timedelta, timezone

from license_alerts.config import Settings
from license_alerts.db import SupabaseClient
from license_alerts.emails import render_license_expiration_email
from license_alerts.errors import RemoteCallError
from license_alerts.mailer import SMTPMailer
from license_alerts.models import Account, Administrator, ExpirationAlert, ProcessResult, parse_timestamp

logger = logging.getLogger(__name__)

ALERTS_TABLE = "license_renewal_alerts"
ALERT_COLUMNS = (
    "id,license_id,account_id,alert_type,sent_at,"
    "software_licenses(id,name,vendor,expiration_date)"
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def day_window(now: datetime) -> tuple[datetime, datetime]:
    start = now.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


def days_until(expiration_date: str, now: datetime) -> int:
    expires = parse_timestamp(expiration_date)
    if expires is None:
        raise ValueError("license has no expiration date")
    if expires.tzinfo is None:
        expires = expires.replace(tzinfo=timezone.utc)
    return math.ceil((expires - now).total_seconds() / 86400)


def license_detail_url(site_url: str, account_slug: str, license_id: str) -> str:
    return f"{site_url}/home/{account_slug}/licenses/{license_id}"


def fetch_todays_alerts(client: SupabaseClient, now: datetime) -> list[ExpirationAlert]:
    start, end = day_window(now)
    rows = client.select(
        ALERTS_TABLE,
        columns=ALERT_COLUMNS,
        filters=[
            ("sent_at", f"gte.{start.isoformat()}"),
            ("sent_at", f"lt.{end.isoformat()}"),
        ],
    )
    return [ExpirationAlert.from_row(r) for r in rows]


def fetch_account(client: SupabaseClient, account_id: str) -> Account | None:
    row = client.select_one("accounts", columns="id,name,slug", filters=[("id", f"eq.{account_id}")])
    return Account.from_row(row) if row else None


def fetch_administrators(client: SupabaseClient, account_id: str) -> list[Administrator]:
    rows = client.select(
        "accounts_memberships",
        columns="user_id,users:user_id(id,email)",
        filters=[("account_id", f"eq.{account_id}"), ("role", "eq.owner")],
    )
    return [Administrator.from_row(r) for r in rows]


def notify_alert(
    settings: Settings,
    client: SupabaseClient,
    mailer: SMTPMailer,
    alert: ExpirationAlert,
    now: datetime,
    errors: list[str],
) -> tuple[int, int]:
    """Emails the account owners for one alert. Returns (sent, failed)."""
    lic = alert.license
    if lic is None:
        logger.warning("License not found for alert %s", alert.id)
        errors.append(f"License not found for alert {alert.id}")
        return 0, 0

    logger.info("Processing alert for license: %s", lic.name)

    try:
        account = fetch_account(client, alert.account_id)
    except RemoteCallError as e:
        logger.error("Account lookup failed for alert %s: %s", alert.id, e.message)
        account = None
    if account is None:
        errors.append(f"Account not found for alert {alert.id}")
        return 0, 0

    try:
        admins = fetch_administrators(client, alert.account_id)
    except RemoteCallError as e:
        logger.error("Failed to fetch admins for alert %s: %s", alert.id, e.message)
        errors.append(f"Failed to fetch admins for alert {alert.id}")
        return 0, 0

    if not admins:
        logger.warning("No administrators found for account %s", alert.account_id)
        errors.append(f"No administrators found for account {alert.account_id}")
        return 0, 0

    days = days_until(lic.expiration_date, now)
    url = license_detail_url(settings.site_url, account.slug, lic.id)

    sent = failed = 0
    for admin in admins:
        if not admin.email:
            logger.warning("Administrator %s has no email address", admin.user_id)
            continue

        try:
            email = render_license_expiration_email(
                license_name=lic.name,
                vendor=lic.vendor,
                expiration_date=lic.expiration_date,
                days_until_expiry=days,
                license_detail_url=url,
                alert_type=alert.alert_type,
                product_name=settings.product_name,
            )
            mailer.send_email(
                to=admin.email,
                sender=settings.email_sender,
                subject=email.subject,
                html=email.html,
                text=email.text,
            )
        except Exception as e:
            logger.error("Failed to send email to %s: %s", admin.email, e)
            errors.append(f"Failed to send email to {admin.email}: {e}")
            failed += 1
            continue

        logger.info("Email sent to %s for license %s", admin.email, lic.name)
        sent += 1

    return sent, failed


def process_license_notifications(
    settings: Settings,
    client: SupabaseClient | None = None,
    mailer: SMTPMailer | None = None,
    now: datetime | None = None,
) -> ProcessResult:
    missing = settings.missing_database_settings()
    if missing:
        return ProcessResult(
            success=False,
            errors=["Missing required environment variables: " + " or ".join(missing)],
        )

    owns_client = client is None
    if owns_client:
        client = SupabaseClient.from_settings(settings)
    now = now or utcnow()

    errors: list[str] = []
    emails_sent = 0
    emails_failed = 0

    try:
        logger.info("Fetching license renewal alerts created today...")
        try:
            alerts = fetch_todays_alerts(client, now)
        except RemoteCallError as e:
            logger.error("Error fetching alerts: %s", e.message)
            return ProcessResult(success=False, errors=[f"Failed to fetch alerts: {e.message}"])

        if not alerts:
            logger.info("No alerts to process today")
            return ProcessResult(success=True)

        logger.info("Found %d alerts to process", len(alerts))
        mailer = mailer or SMTPMailer(settings.email)

        for alert in alerts:
            # a malformed alert must not hold back the others
            try:
                sent, failed = notify_alert(settings, client, mailer, alert, now, errors)
            except Exception as e:
                logger.error("Error processing alert %s: %s", alert.id, e)
                errors.append(f"Error processing alert {alert.id}: {e}")
                continue
            emails_sent += sent
            emails_failed += failed

        return ProcessResult(
            success=True,
            total_alerts=len(alerts),
            processed_alerts=len(alerts),
            emails_sent=emails_sent,
            emails_failed=emails_failed,
            errors=errors,
        )

    except Exception as e:
        logger.exception("Unexpected error processing notifications")
        return ProcessResult(
            success=False,
            emails_sent=emails_sent,
            emails_failed=emails_failed,
            errors=[str(e) or "Unknown error"],
        )

    finally:
        if owns_client:
            client.close()
