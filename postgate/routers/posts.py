"""Post read and delete endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from postgate.dependencies import get_data_store
from postgate.results import Err
from postgate.routers.envelope import authorize, error_response
from postgate.schemas.category import Category
from postgate.schemas.post import Post
from postgate.services.data_store import DataStore
from postgate.services.post_service import post_service

router = APIRouter(prefix="/posts", tags=["posts"])


def _dump_post(row: dict) -> dict:
    return Post.model_validate(row).model_dump(mode="json")


@router.get("", name="list_posts")
async def list_posts(
    request: Request, store: DataStore = Depends(get_data_store)
) -> JSONResponse:
    """Posts visible to the caller, newest first."""
    user_id = await authorize(request, store)
    if isinstance(user_id, Err):
        return error_response(user_id)
    posts = await post_service.list_posts(store)
    if isinstance(posts, Err):
        return error_response(posts)
    return JSONResponse({"posts": [_dump_post(row) for row in posts.value]})


@router.get("/{post_id}", name="get_post")
async def get_post(
    post_id: str, request: Request, store: DataStore = Depends(get_data_store)
) -> JSONResponse:
    user_id = await authorize(request, store)
    if isinstance(user_id, Err):
        return error_response(user_id)
    post = await post_service.get_post(store, post_id)
    if isinstance(post, Err):
        return error_response(post)
    return JSONResponse({"post": _dump_post(post.value)})


@router.delete("/{post_id}", name="delete_post")
async def delete_post(
    post_id: str, request: Request, store: DataStore = Depends(get_data_store)
) -> JSONResponse:
    """Delete a post owned by the caller."""
    user_id = await authorize(request, store)
    if isinstance(user_id, Err):
        return error_response(user_id)
    deleted = await post_service.delete_post(store, post_id, user_id.value)
    if isinstance(deleted, Err):
        return error_response(deleted)
    return JSONResponse({"success": True})


@router.get("/{post_id}/categories", name="get_post_categories")
async def get_post_categories(
    post_id: str, request: Request, store: DataStore = Depends(get_data_store)
) -> JSONResponse:
    user_id = await authorize(request, store)
    if isinstance(user_id, Err):
        return error_response(user_id)
    categories = await post_service.get_post_categories(store, post_id)
    if isinstance(categories, Err):
        return error_response(categories)
    return JSONResponse(
        {
            "categories": [
                Category.model_validate(row).model_dump(mode="json")
                for row in categories.value
            ]
        }
    )
