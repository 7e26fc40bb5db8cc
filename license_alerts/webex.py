from datetime import datetime, timezone

import requests

from license_alerts.models import WorkflowResult


def post_to_webex(webhook_url: str, markdown: str, timeout: int = 15) -> None:
    if not webhook_url:
        raise RuntimeError("WEBEX_INCOMING_WEBHOOK_URL not set in .env")

    resp = requests.post(
        webhook_url,
        json={"markdown": markdown},
        timeout=timeout,
    )
    if resp.status_code >= 300:
        raise RuntimeError(f"Webex webhook error {resp.status_code}: {resp.text}")


def format_workflow_summary(result: WorkflowResult, now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    check = result.check.detail
    notify = result.notify.detail if result.notify else None

    lines = [
        "**License Alerts Workflow**",
        f"- Result: **{'success' if result.success else 'failed'}**",
        f"- Expiration check: {'ok' if result.check.success else 'failed'}",
    ]
    if check is not None and result.check.success:
        lines.append(f"- Alerts created: {check.alerts_created}")
    if result.check.error:
        lines.append(f"- Check error: {result.check.error}")

    if result.notify is None:
        lines.append("- Notifications: skipped")
    else:
        lines.append(f"- Notifications: {'ok' if result.notify.success else 'completed with errors'}")
        if notify is not None:
            lines.append(f"- Emails sent: {notify.emails_sent}, failed: {notify.emails_failed}")

    lines.append(f"- Duration: {result.duration_ms}ms")
    lines.append(f"- Time (UTC): {now.isoformat()}")
    return "\n".join(lines)
