"""Dependency wiring for the per-request data store."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from fastapi import Request

from postgate.config import settings
from postgate.services.data_store import DataStore, InMemoryDataStore, SupabaseDataStore

logger = logging.getLogger(__name__)

_in_memory_store: InMemoryDataStore | None = None


def get_in_memory_store() -> InMemoryDataStore:
    """Return the process-wide in-memory store used for local development."""
    global _in_memory_store
    if _in_memory_store is None:
        _in_memory_store = InMemoryDataStore()
    return _in_memory_store


async def get_data_store(request: Request) -> AsyncIterator[DataStore]:
    """Yield the data store for a single request.

    A new Supabase client is created per request carrying the caller's
    ``Authorization`` header, so nothing is shared between callers. Its
    connections are closed once the response has been produced.
    """
    if settings.use_in_memory_backend:
        yield get_in_memory_store()
        return
    if not settings.has_supabase_credentials:
        raise RuntimeError(
            "SUPABASE_URL and SUPABASE_ANON_KEY must be configured "
            "(or set USE_IN_MEMORY_BACKEND=true)"
        )
    store = await SupabaseDataStore.connect(
        settings.supabase_url,
        settings.supabase_anon_key,
        request.headers.get("Authorization"),
    )
    try:
        yield store
    finally:
        await store.aclose()
