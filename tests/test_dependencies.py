"""Tests for postgate/dependencies.py."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from postgate import dependencies
from postgate.dependencies import get_data_store, get_in_memory_store
from postgate.main import app
from postgate.services.data_store import InMemoryDataStore, SupabaseDataStore


def _request(authorization: str | None = None) -> MagicMock:
    request = MagicMock()
    request.headers = {"Authorization": authorization} if authorization else {}
    return request


def _supabase_client() -> MagicMock:
    """Client with closable auth/postgrest sessions and an empty posts table."""
    client = MagicMock()
    client.auth.get_user = AsyncMock(return_value=MagicMock(user=MagicMock(id="user-1")))
    client.auth.close = AsyncMock()
    client.postgrest.aclose = AsyncMock()
    query = MagicMock()
    for method in ("select", "eq", "in_", "order"):
        getattr(query, method).return_value = query
    query.execute = AsyncMock(return_value=MagicMock(data=[]))
    client.table.return_value = query
    return client


@pytest.fixture
def supabase_settings(monkeypatch):
    monkeypatch.setattr(dependencies.settings, "use_in_memory_backend", False)
    monkeypatch.setattr(dependencies.settings, "supabase_url", "https://proj.supabase.co")
    monkeypatch.setattr(dependencies.settings, "supabase_anon_key", "anon")


@pytest.mark.asyncio
async def test_in_memory_backend(monkeypatch):
    monkeypatch.setattr(dependencies.settings, "use_in_memory_backend", True)
    stores = get_data_store(_request())
    store = await stores.__anext__()
    assert isinstance(store, InMemoryDataStore)
    assert store is get_in_memory_store()
    with pytest.raises(StopAsyncIteration):
        await stores.__anext__()


@pytest.mark.asyncio
async def test_missing_credentials_raise(monkeypatch):
    monkeypatch.setattr(dependencies.settings, "use_in_memory_backend", False)
    monkeypatch.setattr(dependencies.settings, "supabase_url", "")
    with pytest.raises(RuntimeError):
        await get_data_store(_request()).__anext__()


@pytest.mark.asyncio
async def test_supabase_store_per_request(supabase_settings):
    client = _supabase_client()
    with patch.object(
        dependencies.SupabaseDataStore,
        "connect",
        new=AsyncMock(return_value=SupabaseDataStore(client)),
    ) as connect:
        stores = get_data_store(_request("Bearer caller"))
        store = await stores.__anext__()
        assert store._client is client
        client.postgrest.aclose.assert_not_awaited()

        with pytest.raises(StopAsyncIteration):
            await stores.__anext__()

    connect.assert_awaited_once_with("https://proj.supabase.co", "anon", "Bearer caller")
    client.auth.close.assert_awaited_once()
    client.postgrest.aclose.assert_awaited_once()


@pytest.mark.asyncio
async def test_postgrest_closed_even_if_auth_close_fails():
    client = _supabase_client()
    client.auth.close = AsyncMock(side_effect=RuntimeError("already closed"))
    store = SupabaseDataStore(client)
    with pytest.raises(RuntimeError):
        await store.aclose()
    client.postgrest.aclose.assert_awaited_once()


def test_client_closed_after_each_request(supabase_settings):
    clients = [_supabase_client(), _supabase_client()]
    connect = AsyncMock(side_effect=[SupabaseDataStore(c) for c in clients])
    with patch.object(dependencies.SupabaseDataStore, "connect", new=connect):
        with TestClient(app) as http:
            for _ in clients:
                resp = http.get("/posts", headers={"Authorization": "Bearer t"})
                assert resp.status_code == 200

    for client in clients:
        client.auth.close.assert_awaited_once()
        client.postgrest.aclose.assert_awaited_once()
