import pytest

from license_alerts.config import Settings
from license_alerts.errors import ConfigError

ENV_VARS = [
    "SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY",
    "SITE_URL", "NEXT_PUBLIC_SITE_URL", "PRODUCT_NAME", "NEXT_PUBLIC_PRODUCT_NAME",
    "SMTP_PORT", "SMTP_USE_SSL", "LICENSE_ALERTS_CRON", "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_reads_and_strips_environment(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "  https://db.example.test  ")
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "key")
    monkeypatch.setenv("NEXT_PUBLIC_SITE_URL", "https://app.example.test/")
    monkeypatch.setenv("SMTP_PORT", "465")
    monkeypatch.setenv("SMTP_USE_SSL", "true")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings.from_env(load_env_file=False)

    assert settings.supabase_url == "https://db.example.test"
    assert settings.site_url == "https://app.example.test"
    assert settings.product_name == "Fluxera"
    assert settings.email.smtp_port == 465
    assert settings.email.use_ssl is True
    assert settings.log_level == "DEBUG"
    settings.require_database()


def test_missing_database_settings():
    settings = Settings.from_env(load_env_file=False)

    assert settings.missing_database_settings() == ["SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY"]
    with pytest.raises(ConfigError, match="SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY"):
        settings.require_database()
