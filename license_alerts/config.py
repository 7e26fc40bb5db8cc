import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from license_alerts.errors import ConfigError


def env(name: str, default: str | None = None) -> str:
    v = os.getenv(name, default)
    return (v or "").strip()


def env_bool(name: str, default: bool = False) -> bool:
    return env(name, "true" if default else "false").lower() in ("1", "true", "yes", "on")


def env_first(*names: str, default: str = "") -> str:
    """First non-empty value among several variable names."""
    for name in names:
        v = env(name)
        if v:
            return v
    return default


@dataclass
class EmailConfig:
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    use_tls: bool = True
    use_ssl: bool = False
    timeout: int = 30

    @classmethod
    def from_env(cls) -> "EmailConfig":
        return cls(
            smtp_host=env("SMTP_HOST", "localhost"),
            smtp_port=int(env("SMTP_PORT", "587")),
            smtp_username=env("SMTP_USERNAME"),
            smtp_password=env("SMTP_PASSWORD"),
            use_tls=env_bool("SMTP_USE_TLS", True),
            use_ssl=env_bool("SMTP_USE_SSL", False),
            timeout=int(env("SMTP_TIMEOUT", "30")),
        )


@dataclass
class Settings:
    """
    Everything the workflow reads from the environment, resolved once and
    passed into each step.
    """

    # Hosted database (PostgREST)
    supabase_url: str = ""
    service_role_key: str = ""
    request_timeout: int = 30

    # Email content
    site_url: str = ""
    product_name: str = "Fluxera"
    email_sender: str = "noreply@fluxera.app"
    email: EmailConfig = field(default_factory=EmailConfig)

    # Optional run summary to a Webex space
    webex_webhook_url: str = ""

    # Scheduling
    cron: str = "0 6 * * *"
    scheduler_enabled: bool = False

    log_level: str = "INFO"

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "Settings":
        # Load .env values into environment variables
        if load_env_file:
            load_dotenv()

        return cls(
            supabase_url=env_first("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL"),
            service_role_key=env("SUPABASE_SERVICE_ROLE_KEY"),
            request_timeout=int(env("REQUEST_TIMEOUT_SECONDS", "30")),
            site_url=env_first("SITE_URL", "NEXT_PUBLIC_SITE_URL").rstrip("/"),
            product_name=env_first("PRODUCT_NAME", "NEXT_PUBLIC_PRODUCT_NAME", default="Fluxera"),
            email_sender=env("EMAIL_SENDER", "noreply@fluxera.app"),
            email=EmailConfig.from_env(),
            webex_webhook_url=env("WEBEX_INCOMING_WEBHOOK_URL"),
            cron=env("LICENSE_ALERTS_CRON", "0 6 * * *"),
            scheduler_enabled=env_bool("LICENSE_ALERTS_SCHEDULER_ENABLED", False),
            log_level=env("LOG_LEVEL", "INFO").upper(),
        )

    def missing_database_settings(self) -> list[str]:
        missing = []
        if not self.supabase_url:
            missing.append("SUPABASE_URL")
        if not self.service_role_key:
            missing.append("SUPABASE_SERVICE_ROLE_KEY")
        return missing

    def require_database(self) -> None:
        missing = self.missing_database_settings()
        if missing:
            raise ConfigError(
                "Missing required environment variables: " + " or ".join(missing)
            )
