"""Category endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from postgate.dependencies import get_data_store
from postgate.results import Err
from postgate.routers.envelope import authorize, error_response, read_body
from postgate.schemas.category import Category, CreateCategoryRequest
from postgate.services.category_service import category_service
from postgate.services.data_store import DataStore

router = APIRouter(prefix="/categories", tags=["categories"])


def _dump_category(row: dict) -> dict:
    return Category.model_validate(row).model_dump(mode="json")


@router.get("", name="list_categories")
async def list_categories(
    request: Request, store: DataStore = Depends(get_data_store)
) -> JSONResponse:
    """All categories, ordered by name."""
    user_id = await authorize(request, store)
    if isinstance(user_id, Err):
        return error_response(user_id)
    categories = await category_service.list_categories(store)
    if isinstance(categories, Err):
        return error_response(categories)
    return JSONResponse(
        {"categories": [_dump_category(row) for row in categories.value]}
    )


@router.post("", name="create_category")
async def create_category(
    request: Request, store: DataStore = Depends(get_data_store)
) -> JSONResponse:
    user_id = await authorize(request, store)
    if isinstance(user_id, Err):
        return error_response(user_id)
    body = await read_body(request, CreateCategoryRequest)
    if isinstance(body, Err):
        return error_response(body)
    created = await category_service.create_category(store, body.value)
    if isinstance(created, Err):
        return error_response(created)
    return JSONResponse({"success": True, "category": _dump_category(created.value)})


@router.delete("/{category_id}", name="delete_category")
async def delete_category(
    category_id: str, request: Request, store: DataStore = Depends(get_data_store)
) -> JSONResponse:
    user_id = await authorize(request, store)
    if isinstance(user_id, Err):
        return error_response(user_id)
    deleted = await category_service.delete_category(store, category_id)
    if isinstance(deleted, Err):
        return error_response(deleted)
    return JSONResponse({"success": True})
