"""
Access to the hosted database through the Supabase client.

Every read and procedure call the workflow makes goes through here, so the
rest of the package only sees plain rows and ``RemoteCallError``.
"""
import logging
from typing import Any

import httpx
from postgrest.exceptions import APIError
from supabase import Client, create_client
from supabase.lib.client_options import ClientOptions

from license_alerts.config import Settings
from license_alerts.errors import RemoteCallError

logger = logging.getLogger(__name__)


def _status_code(e: APIError) -> int | None:
    code = getattr(e, "code", None)
    return int(code) if isinstance(code, str) and code.isdigit() else None


def _execute(query) -> Any:
    try:
        return query.execute().data
    except APIError as e:
        raise RemoteCallError(e.message or str(e), status_code=_status_code(e)) from e
    except httpx.HTTPError as e:
        raise RemoteCallError(str(e)) from e


class SupabaseClient:
    def __init__(self, url: str, service_role_key: str, timeout: int = 30, client: Client | None = None):
        if client is None:
            # Service-role access; no user session to refresh
            options = ClientOptions(
                schema="public",
                auto_refresh_token=False,
                persist_session=False,
                postgrest_client_timeout=timeout,
            )
            client = create_client(url, service_role_key, options=options)
        self.client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "SupabaseClient":
        settings.require_database()
        return cls(settings.supabase_url, settings.service_role_key, timeout=settings.request_timeout)

    def rpc(self, name: str, params: dict | None = None) -> Any:
        logger.debug("rpc %s", name)
        return _execute(self.client.rpc(name, params or {}))

    def select(
        self,
        table: str,
        columns: str = "*",
        filters: list[tuple[str, str]] | None = None,
        order: str | None = None,
        limit: int | None = None,
    ) -> list[dict]:
        """
        filters are PostgREST pairs, e.g. ("account_id", "eq.<id>").
        order is "<column>.asc" or "<column>.desc".
        """
        query = self.client.table(table).select(columns)
        for column, criteria in filters or []:
            operator, _, value = criteria.partition(".")
            query = query.filter(column, operator, value)
        if order:
            column, _, direction = order.partition(".")
            query = query.order(column, desc=direction == "desc")
        if limit is not None:
            query = query.limit(limit)

        logger.debug("select %s %s order=%s limit=%s", table, filters, order, limit)
        return _execute(query) or []

    def select_one(self, table: str, columns: str = "*",
                   filters: list[tuple[str, str]] | None = None) -> dict | None:
        rows = self.select(table, columns=columns, filters=filters, limit=1)
        return rows[0] if rows else None

    def close(self) -> None:
        self.client.postgrest.session.close()
