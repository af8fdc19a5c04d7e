"""Data access gateway over the Supabase (PostgREST) backend.

Services never touch the Supabase client directly: they receive a
``DataGateway`` and call its five operations.  ``SupabaseGateway`` is the
production implementation; tests substitute their own.

The ``supabase`` client is synchronous, so every request is pushed to a
worker thread with ``asyncio.to_thread``.  That keeps the event loop free
and lets the aggregator overlap its per-user count lookups.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

from supabase import Client, create_client

from app.core.config import settings

logger = logging.getLogger(__name__)

_client: Client | None = None


def get_supabase() -> Client:
    """Return the process-wide Supabase client, creating it on first call."""
    global _client
    if _client is None:
        _client = create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
    return _client


class DataGateway(Protocol):
    """Operations the admin services need from the backend."""

    async def list_records(
        self,
        table: str,
        order_by: str,
        descending: bool = True,
        filters: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]: ...

    async def get_record(self, table: str, record_id: Any) -> dict[str, Any] | None: ...

    async def count(self, table: str, field: str, value: Any) -> int: ...

    async def update(self, table: str, record_id: Any, fields: dict[str, Any]) -> None: ...

    async def delete(self, table: str, field: str, value: Any) -> None: ...


class SupabaseGateway:
    """``DataGateway`` backed by a ``supabase.Client``.

    Errors raised by postgrest (``APIError``) or the transport propagate
    unchanged; callers decide whether a failure is fatal.
    """

    def __init__(self, client: Client | None = None) -> None:
        self._client = client

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_supabase()
        return self._client

    async def list_records(
        self,
        table: str,
        order_by: str,
        descending: bool = True,
        filters: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        def _run() -> list[dict[str, Any]]:
            query = self.client.table(table).select("*")
            for field, value in (filters or {}).items():
                query = query.eq(field, value)
            result = query.order(order_by, desc=descending).execute()
            return result.data or []

        return await asyncio.to_thread(_run)

    async def get_record(self, table: str, record_id: Any) -> dict[str, Any] | None:
        def _run() -> dict[str, Any] | None:
            result = (
                self.client.table(table)
                .select("*")
                .eq("id", record_id)
                .limit(1)
                .execute()
            )
            rows = result.data or []
            return rows[0] if rows else None

        return await asyncio.to_thread(_run)

    async def count(self, table: str, field: str, value: Any) -> int:
        def _run() -> int:
            result = (
                self.client.table(table)
                .select("*", count="exact", head=True)
                .eq(field, value)
                .execute()
            )
            return result.count or 0

        return await asyncio.to_thread(_run)

    async def update(self, table: str, record_id: Any, fields: dict[str, Any]) -> None:
        def _run() -> None:
            self.client.table(table).update(fields).eq("id", record_id).execute()

        await asyncio.to_thread(_run)
        logger.debug(
            "record_updated",
            extra={"table": table, "record_id": str(record_id), "fields": list(fields)},
        )

    async def delete(self, table: str, field: str, value: Any) -> None:
        def _run() -> None:
            self.client.table(table).delete().eq(field, value).execute()

        await asyncio.to_thread(_run)
        logger.debug(
            "records_deleted",
            extra={"table": table, "field": field},
        )


def get_gateway() -> DataGateway:
    """FastAPI dependency returning the production gateway."""
    return SupabaseGateway()
