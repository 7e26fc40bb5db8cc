from unittest.mock import MagicMock, patch

import pytest

from license_alerts.models import CheckResult, StepResult, WorkflowResult
from license_alerts.webex import format_workflow_summary, post_to_webex


def test_post_to_webex_sends_markdown():
    with patch("license_alerts.webex.requests.post", return_value=MagicMock(status_code=204)) as post:
        post_to_webex("https://webex.example.test/hook", "**hi**")

    post.assert_called_once_with("https://webex.example.test/hook", json={"markdown": "**hi**"}, timeout=15)


def test_post_to_webex_raises_on_http_error():
    with patch("license_alerts.webex.requests.post", return_value=MagicMock(status_code=400, text="bad")):
        with pytest.raises(RuntimeError, match="Webex webhook error 400: bad"):
            post_to_webex("https://webex.example.test/hook", "x")


def test_post_to_webex_requires_url():
    with pytest.raises(RuntimeError, match="WEBEX_INCOMING_WEBHOOK_URL"):
        post_to_webex("", "x")


def test_summary_for_aborted_run():
    result = WorkflowResult(
        check=StepResult("Expiration Check", False, error="connection refused",
                         detail=CheckResult(success=False, error="connection refused")),
        notify=None,
        duration_ms=40,
    )

    text = format_workflow_summary(result)

    assert "**failed**" in text
    assert "Check error: connection refused" in text
    assert "Notifications: skipped" in text
