from unittest.mock import patch

import pytest

from license_alerts.scripts import check_license_expirations, process_license_notifications, run_license_alerts


@pytest.fixture
def no_credentials(monkeypatch):
    for name in ("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY"):
        monkeypatch.delenv(name, raising=False)
    # keep a developer's .env out of the test
    monkeypatch.setattr("license_alerts.config.load_dotenv", lambda: False)
    for script in (check_license_expirations, process_license_notifications, run_license_alerts):
        monkeypatch.setattr(script, "setup_logging", lambda level: None)


@pytest.mark.parametrize("script", [check_license_expirations, process_license_notifications])
def test_missing_credentials_exit_1_without_network(no_credentials, script, capsys):
    with patch("license_alerts.db.create_client") as create_client:
        assert script.main() == 1

    create_client.assert_not_called()
    captured = capsys.readouterr()
    assert "Missing required environment variables" in captured.out + captured.err


def test_workflow_missing_credentials_exit_1_without_network(no_credentials):
    with patch("license_alerts.db.create_client") as create_client:
        assert run_license_alerts.main([]) == 1

    create_client.assert_not_called()


def test_unexpected_error_is_trapped(no_credentials, capsys):
    with patch.object(run_license_alerts, "run_license_alerts", side_effect=RuntimeError("boom")):
        assert run_license_alerts.main([]) == 1

    assert "ERROR: Unexpected error: boom" in capsys.readouterr().err


def test_schedule_flag_starts_scheduler(no_credentials):
    with patch.object(run_license_alerts, "run_forever") as run_forever:
        assert run_license_alerts.main(["--schedule", "--cron", "0 7 * * *"]) == 0

    settings = run_forever.call_args.args[0]
    assert settings.cron == "0 7 * * *"
