from __future__ import annotations

from collections.abc import Callable, Iterable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

DEFAULT_ALLOW_HEADERS = ("authorization", "x-client-info", "apikey", "content-type")


def cors_headers(
    allow_origin: str = "*", allow_headers: Iterable[str] = DEFAULT_ALLOW_HEADERS
) -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Headers": ", ".join(allow_headers),
    }


class EdgeHeadersMiddleware(BaseHTTPMiddleware):
    """
    Edge-function style response headers.
    - Answers every CORS preflight (OPTIONS) with 200 "ok"
    - Permissive CORS headers on every response
    - A small set of hardening headers suitable for a JSON API
    """

    def __init__(
        self,
        app,
        *,
        allow_origin: str = "*",
        allow_headers: Iterable[str] = DEFAULT_ALLOW_HEADERS,
        referrer_policy: str = "strict-origin-when-cross-origin",
    ) -> None:
        super().__init__(app)
        self.cors_headers = cors_headers(allow_origin, allow_headers)
        self.referrer_policy = referrer_policy

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Preflight never reaches the routers
        if request.method == "OPTIONS":
            return PlainTextResponse("ok", status_code=200, headers=self.cors_headers)

        response = await call_next(request)

        for name, value in self.cors_headers.items():
            response.headers.setdefault(name, value)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", self.referrer_policy)
        return response
