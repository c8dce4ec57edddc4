"""Edge function endpoints: posts-create and posts-update."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from postgate.config import settings
from postgate.dependencies import get_data_store
from postgate.results import Err
from postgate.routers.envelope import authorize, error_response, read_body
from postgate.schemas.post import CreatePostRequest, Post, UpdatePostRequest
from postgate.services.data_store import DataStore
from postgate.services.post_service import post_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix=settings.functions_prefix, tags=["functions"])


@router.post("/posts-create", name="posts_create")
async def posts_create(
    request: Request,
    store: DataStore = Depends(get_data_store),
) -> JSONResponse:
    """Create a post: auth -> validate -> sanitize -> insert -> link categories."""
    try:
        user_id = await authorize(request, store)
        if isinstance(user_id, Err):
            return error_response(user_id)

        body = await read_body(request, CreatePostRequest)
        if isinstance(body, Err):
            return error_response(body)

        created = await post_service.create_post(store, user_id.value, body.value)
        if isinstance(created, Err):
            return error_response(created)

        post = Post.model_validate(created.value).model_dump(mode="json")
        return JSONResponse({"success": True, "post": post})
    except Exception as exc:
        logger.exception("posts-create failed")
        return error_response(Err.unexpected(str(exc)))


@router.post("/posts-update", name="posts_update")
async def posts_update(
    request: Request,
    store: DataStore = Depends(get_data_store),
) -> JSONResponse:
    """Update a post: auth -> ownership -> sanitize -> update -> relink categories."""
    try:
        user_id = await authorize(request, store)
        if isinstance(user_id, Err):
            return error_response(user_id)

        body = await read_body(request, UpdatePostRequest)
        if isinstance(body, Err):
            return error_response(body)

        updated = await post_service.update_post(store, user_id.value, body.value)
        if isinstance(updated, Err):
            return error_response(updated)

        return JSONResponse({"success": True})
    except Exception as exc:
        logger.exception("posts-update failed")
        return error_response(Err.unexpected(str(exc)))
