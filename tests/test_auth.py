"""Tests for postgate/auth.py — bearer token gate."""

from __future__ import annotations

import pytest

from postgate.auth import authenticate, extract_bearer_token
from postgate.results import Err, ErrorKind, Ok


class TestExtractBearerToken:
    def test_missing_header(self):
        result = extract_bearer_token(None)
        assert result == Err(ErrorKind.UNAUTHORIZED, "Missing authorization header")

    @pytest.mark.parametrize("header", ["Basic abc", "Bearer", "Bearer   ", "token"])
    def test_malformed_header(self, header):
        result = extract_bearer_token(header)
        assert isinstance(result, Err)
        assert result.kind is ErrorKind.UNAUTHORIZED

    @pytest.mark.parametrize("header", ["Bearer abc", "bearer abc", "BEARER abc "])
    def test_token_extracted(self, header):
        assert extract_bearer_token(header) == Ok("abc")


class TestAuthenticate:
    @pytest.mark.asyncio
    async def test_known_token_resolves_user(self, store):
        assert await authenticate(store, "Bearer alice-token") == Ok("user-alice")

    @pytest.mark.asyncio
    async def test_unknown_token_rejected(self, store):
        result = await authenticate(store, "Bearer stolen-token")
        assert result == Err.unauthorized()

    @pytest.mark.asyncio
    async def test_missing_header_never_hits_store(self, store):
        result = await authenticate(store, None)
        assert result.status_code == 401
        assert store.calls == []
