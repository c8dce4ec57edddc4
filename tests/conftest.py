"""Test fixtures for the API and the in-memory data store."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from fastapi.testclient import TestClient

from postgate.dependencies import get_data_store
from postgate.main import app
from postgate.services.data_store import InMemoryDataStore

ALICE_ID = "user-alice"
BOB_ID = "user-bob"
TOKENS = {"alice-token": ALICE_ID, "bob-token": BOB_ID}


@pytest.fixture
def store() -> InMemoryDataStore:
    return InMemoryDataStore(tokens=TOKENS)


@pytest.fixture
def client(store: InMemoryDataStore):
    app.dependency_overrides[get_data_store] = lambda: store
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.pop(get_data_store, None)


@pytest.fixture
def alice_headers() -> dict[str, str]:
    return {"Authorization": "Bearer alice-token"}


@pytest.fixture
def bob_headers() -> dict[str, str]:
    return {"Authorization": "Bearer bob-token"}


@pytest.fixture
def seed(store: InMemoryDataStore):
    """Write rows straight into the in-memory tables, bypassing the gate."""

    def _seed(table: str, **row):
        stamp = datetime.now(UTC).isoformat()
        if table == "posts":
            row = {
                "content": None,
                "status": "draft",
                "published": False,
                "tags": None,
                "view_count": 0,
                "published_at": None,
                "created_at": stamp,
                "updated_at": stamp,
                **row,
            }
        elif table == "categories":
            row = {"description": None, "created_at": stamp, "updated_at": stamp, **row}
        elif table == "profiles":
            row = {
                "username": None,
                "full_name": None,
                "avatar_url": None,
                "updated_at": None,
                **row,
            }
        store.tables[table].append(row)
        return row

    return _seed


@pytest.fixture
def alice_post(seed):
    return seed(
        "posts",
        id="post-1",
        user_id=ALICE_ID,
        title="Original title",
        content="<p>Original</p>",
        slug="original-title",
        tags=["intro"],
    )


@pytest.fixture
def categories(seed):
    return [
        seed("categories", id="cat-news", name="News", slug="news"),
        seed("categories", id="cat-art", name="Art", slug="art"),
        seed("categories", id="cat-tech", name="Tech", slug="tech"),
    ]


@pytest.fixture
def profiles(seed):
    return [
        seed("profiles", id=ALICE_ID, username="alice", full_name="Alice Liddell"),
        seed("profiles", id=BOB_ID, username="bob", full_name="Bob"),
    ]
