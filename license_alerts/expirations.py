"""
Expiration scanner: triggers the database-side check that creates renewal
alerts, and reads back its execution log.
"""
import logging
import time

from license_alerts.config import Settings
from license_alerts.db import SupabaseClient
from license_alerts.errors import RemoteCallError
from license_alerts.models import CheckResult, CheckStats, ExecutionLog

logger = logging.getLogger(__name__)

CHECK_RPC = "check_license_expirations_with_logging"
STATS_RPC = "get_license_expiration_check_stats"
LOG_TABLE = "license_expiration_check_logs"


def _count_from_rpc(data) -> int | None:
    """
    Newer deployments return the number of alerts created straight from the
    procedure. Older ones return void, in which case we fall back to the log.
    """
    if isinstance(data, bool):
        return None
    if isinstance(data, int):
        return data
    if isinstance(data, list) and len(data) == 1:
        data = data[0]
    if isinstance(data, dict) and data.get("alerts_created") is not None:
        return int(data["alerts_created"])
    return None


def trigger_expiration_check(client: SupabaseClient) -> int | None:
    """Runs the check once. Returns the created-alert count when the procedure reports it."""
    return _count_from_rpc(client.rpc(CHECK_RPC))


def get_check_logs(client: SupabaseClient, limit: int = 10) -> list[ExecutionLog]:
    rows = client.select(LOG_TABLE, order="started_at.desc", limit=limit)
    return [ExecutionLog.from_row(r) for r in rows]


def get_latest_check_log(client: SupabaseClient) -> ExecutionLog | None:
    logs = get_check_logs(client, limit=1)
    return logs[0] if logs else None


def get_check_stats(client: SupabaseClient) -> CheckStats:
    data = client.rpc(STATS_RPC)
    if isinstance(data, list):
        data = data[0] if data else None
    if not data:
        return CheckStats()
    return CheckStats.from_row(data)


def check_license_expirations(
    settings: Settings,
    client: SupabaseClient | None = None,
    clock=time.monotonic,
) -> CheckResult:
    missing = settings.missing_database_settings()
    if missing:
        return CheckResult(
            success=False,
            error="Missing required environment variables: " + " or ".join(missing),
        )

    owns_client = client is None
    if owns_client:
        client = SupabaseClient.from_settings(settings)

    start = clock()

    def elapsed_ms() -> int:
        return int((clock() - start) * 1000)

    try:
        logger.info("Starting license expiration check...")

        try:
            alerts_created = trigger_expiration_check(client)
        except RemoteCallError as e:
            logger.error("Error executing license expiration check: %s", e.message)
            return CheckResult(success=False, duration_ms=elapsed_ms(), error=e.message)

        duration_ms = elapsed_ms()
        status = "success"

        if alerts_created is None:
            # Best-effort: the procedure already ran, a failed read does not undo that.
            try:
                latest = get_latest_check_log(client)
            except Exception as e:
                logger.warning("Could not fetch execution log: %s", e)
                latest = None

            alerts_created = 0
            if latest is not None:
                alerts_created = latest.alerts_created
                status = latest.status
                if latest.error_message:
                    logger.error("Execution log error message: %s", latest.error_message)

        logger.info(
            "License expiration check completed in %sms: %s alerts created (status=%s)",
            duration_ms, alerts_created, status,
        )
        return CheckResult(
            success=True,
            duration_ms=duration_ms,
            alerts_created=alerts_created,
            status=status,
        )

    except Exception as e:
        logger.exception("Unexpected error during license expiration check")
        return CheckResult(success=False, duration_ms=elapsed_ms(), error=str(e) or "Unknown error")

    finally:
        if owns_client:
            client.close()
