"""
Workflow orchestrator.

Runs the expiration check, then the notification processor, in-process and
strictly in that order:

- a failed check aborts the run; notifications are never attempted
- failed notifications are reported as a warning and the run continues to
  its summary
- the exit code is 0 only when both steps succeeded

There are no retries. A failed run is expected to be re-triggered by the next
cron tick or by an operator.
"""
import logging
import sys
import time

from license_alerts.config import Settings
from license_alerts.db import SupabaseClient
from license_alerts.expirations import check_license_expirations
from license_alerts.mailer import SMTPMailer
from license_alerts.models import CheckResult, ProcessResult, StepResult, WorkflowResult
from license_alerts.notifications import process_license_notifications
from license_alerts.webex import format_workflow_summary, post_to_webex

logger = logging.getLogger(__name__)

RULE = "=" * 60

CHECK_STEP = "Expiration Check"
NOTIFY_STEP = "Notifications"


def banner(title: str) -> None:
    print(RULE)
    print(title)
    print(RULE)


def print_check_summary(result: CheckResult) -> None:
    banner("Result Summary")
    print(f"Success: {str(result.success).lower()}")
    if result.duration_ms is not None:
        print(f"Duration: {result.duration_ms}ms")
    if result.success:
        print(f"Alerts Created: {result.alerts_created}")
        if result.status:
            print(f"Status: {result.status}")
    if result.error:
        print(f"Error: {result.error}", file=sys.stderr)
    print()


def print_process_summary(result: ProcessResult) -> None:
    banner("Result Summary")
    print(f"Success: {str(result.success).lower()}")
    print(f"Total Alerts: {result.total_alerts}")
    print(f"Processed Alerts: {result.processed_alerts}")
    print(f"Emails Sent: {result.emails_sent}")
    print(f"Emails Failed: {result.emails_failed}")
    if result.errors:
        print()
        print("Errors:")
        for i, error in enumerate(result.errors, 1):
            print(f"  {i}. {error}")
    print()


def run_check_step(settings: Settings, client: SupabaseClient | None = None) -> StepResult:
    result = check_license_expirations(settings, client=client)
    print_check_summary(result)
    return StepResult(name=CHECK_STEP, success=result.ok, error=result.error, detail=result)


def run_notify_step(
    settings: Settings,
    client: SupabaseClient | None = None,
    mailer: SMTPMailer | None = None,
) -> StepResult:
    result = process_license_notifications(settings, client=client, mailer=mailer)
    print_process_summary(result)
    error = "; ".join(result.errors) if not result.ok and result.errors else None
    return StepResult(name=NOTIFY_STEP, success=result.ok, error=error, detail=result)


def print_workflow_summary(result: WorkflowResult) -> None:
    print()
    banner("Workflow Summary")
    print(f"Total Duration: {result.duration_ms}ms")
    print(f"Step 1: {'Success' if result.check.success else 'Failed'} ({CHECK_STEP})")
    if result.notify is None:
        print(f"Step 2: Skipped ({NOTIFY_STEP})")
    elif result.notify.success:
        print(f"Step 2: Success ({NOTIFY_STEP})")
    else:
        print(f"Step 2: Completed with errors ({NOTIFY_STEP})")
    print()


def publish_summary(settings: Settings, result: WorkflowResult) -> None:
    if not settings.webex_webhook_url:
        return
    try:
        post_to_webex(settings.webex_webhook_url, format_workflow_summary(result), timeout=settings.request_timeout)
    except Exception as e:
        logger.warning("Could not post workflow summary to Webex: %s", e)


def run_license_alerts(
    settings: Settings,
    client: SupabaseClient | None = None,
    mailer: SMTPMailer | None = None,
    check=run_check_step,
    notify=run_notify_step,
    clock=time.monotonic,
) -> WorkflowResult:
    banner("License Alerts Workflow")
    print()
    print("This run will:")
    print("1. Check for expiring licenses and create alerts")
    print("2. Process alerts and send email notifications")
    print()

    start = clock()

    def finish(check_result: StepResult, notify_result: StepResult | None) -> WorkflowResult:
        result = WorkflowResult(
            check=check_result,
            notify=notify_result,
            duration_ms=int((clock() - start) * 1000),
        )
        print_workflow_summary(result)
        publish_summary(settings, result)
        return result

    # One connection pool for both steps; without credentials the check step reports the error.
    owns_client = client is None and not settings.missing_database_settings()
    if owns_client:
        client = SupabaseClient.from_settings(settings)

    try:
        banner("Running: Step 1: Check License Expirations")
        check_result = check(settings, client=client)

        if not check_result.success:
            print(f"\nLicense expiration check failed. Aborting workflow. {check_result.error or ''}".rstrip(),
                  file=sys.stderr)
            return finish(check_result, None)

        print("License expiration check completed successfully")

        banner("Running: Step 2: Process License Notifications")
        notify_result = notify(settings, client=client, mailer=mailer)

        if notify_result.success:
            print("Notification processing completed successfully")
        else:
            logger.warning("Notification processing completed with errors")

        return finish(check_result, notify_result)

    finally:
        if owns_client:
            client.close()
