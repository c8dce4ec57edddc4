"""
FastAPI Application - Post sanitization & authorization gate
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from postgate.config import settings
from postgate.middleware.security import EdgeHeadersMiddleware, cors_headers
from postgate.observability.logging import configure_logging
from postgate.routers.categories import router as categories_router
from postgate.routers.functions import router as functions_router
from postgate.routers.posts import router as posts_router
from postgate.routers.profile import router as profile_router

logger = logging.getLogger(__name__)


# ==========================================
# Application Lifespan
# ==========================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    backend = "in-memory" if settings.use_in_memory_backend else "supabase"
    logger.info("Starting postgate (backend=%s)", backend)
    if not settings.use_in_memory_backend and not settings.has_supabase_credentials:
        logger.warning("Supabase credentials missing; requests will fail")
    yield
    logger.info("Shutting down postgate")


# ==========================================
# Environment
# ==========================================
configure_logging(settings.log_level.upper(), json_output=settings.json_logs)
IS_PROD = settings.is_production
CORS_HEADERS = cors_headers(settings.cors_allow_origin, settings.cors_allow_headers)


# ==========================================
# Exception handlers
# ==========================================
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Last-resort boundary: every failure leaves as a JSON error.

    Runs outside the edge headers middleware, so CORS headers are added here.
    """
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse({"error": str(exc)}, status_code=500, headers=CORS_HEADERS)


# ==========================================
# FastAPI Application
# ==========================================
app = FastAPI(
    title="postgate",
    description="Sanitization and authorization gate for blog post writes",
    version="1.0.0",
    lifespan=lifespan,
    docs_url=None if IS_PROD else "/docs",
    redoc_url=None if IS_PROD else "/redoc",
    openapi_url=None if IS_PROD else "/openapi.json",
)
# Order: edge headers -> correlation id (outermost)
app.add_middleware(
    EdgeHeadersMiddleware,
    allow_origin=settings.cors_allow_origin,
    allow_headers=settings.cors_allow_headers,
)
app.add_middleware(CorrelationIdMiddleware, header_name="X-Request-ID")
app.add_exception_handler(Exception, unhandled_exception_handler)


# ==========================================
# Health
# ==========================================
@app.get("/healthz", tags=["system"], summary="Health check", response_model=dict)
async def health_check() -> dict:
    if IS_PROD:
        return {"status": "healthy"}
    backend = "in-memory" if settings.use_in_memory_backend else "supabase"
    return {"status": "healthy", "backend": backend, "version": app.version}


# ==========================================
# Routers
# ==========================================
app.include_router(functions_router)
app.include_router(posts_router)
app.include_router(categories_router)
app.include_router(profile_router)
