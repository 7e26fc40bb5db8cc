"""Shared fixtures: settings and in-memory stand-ins for the database and mailer."""
import pytest

from license_alerts.config import Settings


class FakeClient:
    """Records every call; answers from canned results keyed by RPC name / table."""

    def __init__(self, rpc_results=None, tables=None, errors=None):
        self.rpc_results = rpc_results or {}
        self.tables = tables or {}
        self.errors = errors or {}
        self.calls = []

    def _maybe_raise(self, key):
        if key in self.errors:
            raise self.errors[key]

    def rpc(self, name, params=None):
        self.calls.append(("rpc", name, params))
        self._maybe_raise(name)
        return self.rpc_results.get(name)

    def select(self, table, columns="*", filters=None, order=None, limit=None):
        self.calls.append(("select", table, filters, order, limit))
        self._maybe_raise(table)
        rows = self.tables.get(table, [])
        return rows[:limit] if limit is not None else list(rows)

    def select_one(self, table, columns="*", filters=None):
        rows = self.select(table, columns=columns, filters=filters, limit=1)
        return rows[0] if rows else None

    def close(self):
        pass


class FakeMailer:
    def __init__(self, fail_for=()):
        self.fail_for = set(fail_for)
        self.sent = []

    def send_email(self, to, sender, subject, html, text=None):
        if to in self.fail_for:
            raise RuntimeError("SMTP 550 mailbox unavailable")
        self.sent.append({"to": to, "sender": sender, "subject": subject, "html": html, "text": text})


@pytest.fixture
def settings():
    return Settings(
        supabase_url="https://db.example.test",
        service_role_key="service-role-key",
        site_url="https://app.example.test",
        product_name="Fluxera",
        email_sender="alerts@example.test",
    )


@pytest.fixture
def unconfigured_settings():
    return Settings()


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def fake_mailer():
    return FakeMailer()


@pytest.fixture
def make_client():
    return FakeClient


@pytest.fixture
def make_mailer():
    return FakeMailer
