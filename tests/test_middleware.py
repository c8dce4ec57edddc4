"""Tests for postgate/middleware/security.py — EdgeHeadersMiddleware."""

from __future__ import annotations

from unittest.mock import AsyncMock

from starlette.applications import Starlette
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from postgate.dependencies import get_data_store
from postgate.main import app
from postgate.middleware.security import EdgeHeadersMiddleware


class TestEdgeHeaders:
    """Preflight and response headers on the real app."""

    def test_preflight_answers_ok(self, client):
        resp = client.options("/functions/v1/posts-create")
        assert resp.status_code == 200
        assert resp.text == "ok"
        assert resp.headers["Access-Control-Allow-Origin"] == "*"
        assert resp.headers["Access-Control-Allow-Headers"] == (
            "authorization, x-client-info, apikey, content-type"
        )

    def test_preflight_skips_auth(self, client, store):
        client.options("/functions/v1/posts-update")
        assert store.calls == []

    def test_cors_on_error_responses(self, client):
        resp = client.post("/functions/v1/posts-create", json={})
        assert resp.status_code == 401
        assert resp.headers["Access-Control-Allow-Origin"] == "*"

    def test_cors_on_unhandled_500(self, client):
        def broken_store():
            raise RuntimeError("SUPABASE_URL and SUPABASE_ANON_KEY must be configured")

        app.dependency_overrides[get_data_store] = broken_store
        resp = client.post("/functions/v1/posts-create", json={})
        assert resp.status_code == 500
        assert resp.json() == {
            "error": "SUPABASE_URL and SUPABASE_ANON_KEY must be configured"
        }
        assert resp.headers["Access-Control-Allow-Origin"] == "*"
        assert "authorization" in resp.headers["Access-Control-Allow-Headers"]

    def test_cors_on_router_500(self, client, alice_headers, store):
        store.select = AsyncMock(side_effect=RuntimeError("connection reset"))
        resp = client.get("/posts", headers=alice_headers)
        assert resp.status_code == 500
        assert resp.headers["Access-Control-Allow-Origin"] == "*"

    def test_hardening_headers(self, client):
        resp = client.get("/healthz")
        assert resp.headers.get("X-Content-Type-Options") == "nosniff"
        assert "Referrer-Policy" in resp.headers

    def test_request_id_echoed(self, client):
        resp = client.get("/healthz")
        assert resp.headers.get("X-Request-ID")


def _standalone_app(**options) -> Starlette:
    async def endpoint(request):
        return JSONResponse(
            {"ok": True}, headers={"Access-Control-Allow-Origin": "https://own.example"}
        )

    app = Starlette(routes=[Route("/", endpoint)])
    app.add_middleware(EdgeHeadersMiddleware, **options)
    return app


def test_custom_origin_and_headers():
    client = TestClient(
        _standalone_app(allow_origin="https://blog.example", allow_headers=["x-a", "x-b"])
    )
    resp = client.options("/")
    assert resp.headers["Access-Control-Allow-Origin"] == "https://blog.example"
    assert resp.headers["Access-Control-Allow-Headers"] == "x-a, x-b"


def test_route_headers_win_over_defaults():
    client = TestClient(_standalone_app())
    resp = client.get("/")
    assert resp.headers["Access-Control-Allow-Origin"] == "https://own.example"
