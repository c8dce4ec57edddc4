"""Data store abstraction over the Supabase identity service and tables."""

from __future__ import annotations

import copy
import logging
import uuid
from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

from postgrest.exceptions import APIError
from supabase import AsyncClient, AuthError, acreate_client
from supabase.lib.client_options import AsyncClientOptions

from postgate.results import Err, Ok, Result

logger = logging.getLogger(__name__)

Row = dict[str, Any]


class DataStore(ABC):
    """Identity lookup plus table-level select/insert/update/delete.

    Every method returns a ``Result``; store errors come back as
    ``UPSTREAM_FAILURE`` carrying the store's own message.
    """

    @abstractmethod
    async def get_user_id(self, token: str) -> Result[str]:
        """Resolve a bearer token to the id of an active user."""

    @abstractmethod
    async def select(
        self,
        table: str,
        columns: str = "*",
        *,
        eq: dict[str, Any] | None = None,
        in_: dict[str, Sequence[Any]] | None = None,
        order: str | None = None,
        descending: bool = False,
    ) -> Result[list[Row]]:
        """Read rows matching every ``eq`` and ``in_`` filter."""

    @abstractmethod
    async def insert(self, table: str, rows: Row | list[Row]) -> Result[list[Row]]:
        """Insert one or many rows and return them as stored."""

    @abstractmethod
    async def update(
        self, table: str, values: Row, *, eq: dict[str, Any]
    ) -> Result[list[Row]]:
        """Apply ``values`` to rows matching ``eq``."""

    @abstractmethod
    async def delete(self, table: str, *, eq: dict[str, Any]) -> Result[list[Row]]:
        """Delete rows matching ``eq``."""

    async def aclose(self) -> None:
        """Release any connections held by the store."""


# ==========================================
# Supabase
# ==========================================
class SupabaseDataStore(DataStore):
    """Data store backed by an async supabase-py client.

    The client is expected to carry the caller's ``Authorization`` header so
    that row-level security applies to every query.
    """

    def __init__(self, client: AsyncClient) -> None:
        self._client = client

    @classmethod
    async def connect(
        cls, url: str, key: str, authorization: str | None = None
    ) -> SupabaseDataStore:
        """Create a per-request client acting on behalf of the caller."""
        headers = {"Authorization": authorization} if authorization else {}
        client = await acreate_client(
            url,
            key,
            options=AsyncClientOptions(
                headers=headers,
                persist_session=False,
                auto_refresh_token=False,
            ),
        )
        return cls(client)

    async def get_user_id(self, token: str) -> Result[str]:
        try:
            response = await self._client.auth.get_user(token)
        except AuthError as exc:
            logger.info("Identity service rejected token: %s", exc)
            return Err.unauthorized()
        if response is None or response.user is None:
            return Err.unauthorized()
        return Ok(str(response.user.id))

    async def _execute(self, query, operation: str, table: str) -> Result[list[Row]]:
        try:
            response = await query.execute()
        except APIError as exc:
            logger.warning("Supabase %s on %s failed: %s", operation, table, exc.message)
            return Err.upstream(exc.message or str(exc))
        return Ok(list(response.data or []))

    async def select(
        self,
        table: str,
        columns: str = "*",
        *,
        eq: dict[str, Any] | None = None,
        in_: dict[str, Sequence[Any]] | None = None,
        order: str | None = None,
        descending: bool = False,
    ) -> Result[list[Row]]:
        query = self._client.table(table).select(columns)
        for column, value in (eq or {}).items():
            query = query.eq(column, value)
        for column, values in (in_ or {}).items():
            query = query.in_(column, list(values))
        if order:
            query = query.order(order, desc=descending)
        return await self._execute(query, "select", table)

    async def insert(self, table: str, rows: Row | list[Row]) -> Result[list[Row]]:
        query = self._client.table(table).insert(rows)
        return await self._execute(query, "insert", table)

    async def update(
        self, table: str, values: Row, *, eq: dict[str, Any]
    ) -> Result[list[Row]]:
        query = self._client.table(table).update(values)
        for column, value in eq.items():
            query = query.eq(column, value)
        return await self._execute(query, "update", table)

    async def delete(self, table: str, *, eq: dict[str, Any]) -> Result[list[Row]]:
        query = self._client.table(table).delete()
        for column, value in eq.items():
            query = query.eq(column, value)
        return await self._execute(query, "delete", table)

    async def aclose(self) -> None:
        # auth and postgrest each own an httpx pool
        try:
            await self._client.auth.close()
        finally:
            await self._client.postgrest.aclose()


# ==========================================
# In-memory (local development & tests)
# ==========================================
_DEFAULTS: dict[str, Row] = {
    "posts": {
        "content": None,
        "status": "draft",
        "published": False,
        "tags": None,
        "view_count": 0,
        "published_at": None,
    },
    "categories": {"description": None},
    "post_categories": {},
    "profiles": {
        "username": None,
        "full_name": None,
        "avatar_url": None,
        "updated_at": None,
    },
}
_IDENTIFIED = {"posts", "categories"}
_UNIQUE_KEYS: dict[str, list[tuple[str, ...]]] = {
    "posts": [("id",), ("slug",)],
    "categories": [("id",), ("slug",)],
    "post_categories": [("post_id", "category_id")],
    "profiles": [("id",), ("username",)],
}
_FOREIGN_KEYS: dict[str, dict[str, str]] = {
    "post_categories": {"post_id": "posts", "category_id": "categories"},
}
# parent table -> [(child table, child column)], ON DELETE CASCADE
_CASCADES: dict[str, list[tuple[str, str]]] = {
    "posts": [("post_categories", "post_id")],
    "categories": [("post_categories", "category_id")],
}


def _now() -> str:
    return datetime.now(UTC).isoformat()


def _project(row: Row, columns: str) -> Row:
    if columns.strip() == "*":
        return copy.deepcopy(row)
    wanted = [c.strip() for c in columns.split(",") if c.strip()]
    return {c: copy.deepcopy(row.get(c)) for c in wanted}


def _matches(row: Row, eq: dict[str, Any] | None, in_: dict | None = None) -> bool:
    for column, value in (eq or {}).items():
        if row.get(column) != value:
            return False
    for column, values in (in_ or {}).items():
        if row.get(column) not in values:
            return False
    return True


class InMemoryDataStore(DataStore):
    """Dict-backed store mimicking the Postgres tables behind Supabase.

    Enforces the unique, foreign key and cascade rules of the real schema so
    that relink failures and slug collisions behave as they do upstream.
    """

    def __init__(self, tokens: dict[str, str] | None = None) -> None:
        self.tokens: dict[str, str] = dict(tokens or {})
        self.tables: dict[str, list[Row]] = {name: [] for name in _DEFAULTS}
        self.calls: list[tuple[str, str]] = []
        self._failures: dict[tuple[str, str], str] = {}

    def reset(self) -> None:
        for rows in self.tables.values():
            rows.clear()
        self.calls.clear()
        self._failures.clear()

    def fail_next(self, operation: str, table: str, message: str) -> None:
        """Make the next ``operation`` on ``table`` return an upstream error."""
        self._failures[(operation, table)] = message

    @property
    def writes(self) -> list[tuple[str, str]]:
        return [call for call in self.calls if call[0] != "select"]

    def _begin(self, operation: str, table: str) -> Err | None:
        self.calls.append((operation, table))
        message = self._failures.pop((operation, table), None)
        if message is not None:
            return Err.upstream(message)
        if table not in self.tables:
            return Err.upstream(f'relation "public.{table}" does not exist')
        return None

    def _violation(self, table: str, candidate: Row, others: list[Row]) -> Err | None:
        for key in _UNIQUE_KEYS.get(table, []):
            value = tuple(candidate.get(c) for c in key)
            # NULLs never collide
            if None in value:
                continue
            if any(tuple(o.get(c) for c in key) == value for o in others):
                name = f"{table}_{'_'.join(key)}_key"
                return Err.upstream(
                    f'duplicate key value violates unique constraint "{name}"'
                )
        for column, parent in _FOREIGN_KEYS.get(table, {}).items():
            if not any(p.get("id") == candidate.get(column) for p in self.tables[parent]):
                return Err.upstream(
                    f'insert or update on table "{table}" violates foreign key '
                    f'constraint "{table}_{column}_fkey"'
                )
        return None

    async def get_user_id(self, token: str) -> Result[str]:
        user_id = self.tokens.get(token)
        if user_id is None:
            return Err.unauthorized()
        return Ok(user_id)

    async def select(
        self,
        table: str,
        columns: str = "*",
        *,
        eq: dict[str, Any] | None = None,
        in_: dict[str, Sequence[Any]] | None = None,
        order: str | None = None,
        descending: bool = False,
    ) -> Result[list[Row]]:
        failure = self._begin("select", table)
        if failure:
            return failure
        rows = [r for r in self.tables[table] if _matches(r, eq, in_)]
        if order:
            rows.sort(
                key=lambda r: (r.get(order) is not None, r.get(order) or ""),
                reverse=descending,
            )
        return Ok([_project(r, columns) for r in rows])

    async def insert(self, table: str, rows: Row | list[Row]) -> Result[list[Row]]:
        failure = self._begin("insert", table)
        if failure:
            return failure
        batch = [rows] if isinstance(rows, dict) else list(rows)
        prepared: list[Row] = []
        for row in batch:
            stored = {**copy.deepcopy(_DEFAULTS[table]), **copy.deepcopy(row)}
            if table in _IDENTIFIED:
                stored.setdefault("id", str(uuid.uuid4()))
                stamp = _now()
                stored.setdefault("created_at", stamp)
                stored.setdefault("updated_at", stamp)
            violation = self._violation(table, stored, self.tables[table] + prepared)
            if violation:
                return violation
            prepared.append(stored)
        self.tables[table].extend(prepared)
        return Ok([copy.deepcopy(r) for r in prepared])

    async def update(
        self, table: str, values: Row, *, eq: dict[str, Any]
    ) -> Result[list[Row]]:
        failure = self._begin("update", table)
        if failure:
            return failure
        targets = [r for r in self.tables[table] if _matches(r, eq)]
        for target in targets:
            others = [r for r in self.tables[table] if r is not target]
            violation = self._violation(table, {**target, **values}, others)
            if violation:
                return violation
        for target in targets:
            target.update(copy.deepcopy(values))
        return Ok([copy.deepcopy(r) for r in targets])

    async def delete(self, table: str, *, eq: dict[str, Any]) -> Result[list[Row]]:
        failure = self._begin("delete", table)
        if failure:
            return failure
        removed = [r for r in self.tables[table] if _matches(r, eq)]
        self.tables[table] = [r for r in self.tables[table] if not _matches(r, eq)]
        for child, column in _CASCADES.get(table, []):
            ids = {r.get("id") for r in removed}
            self.tables[child] = [r for r in self.tables[child] if r.get(column) not in ids]
        return Ok(removed)
