"""Profile endpoints for the authenticated caller."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from postgate.dependencies import get_data_store
from postgate.results import Err
from postgate.routers.envelope import authorize, error_response, read_body
from postgate.schemas.profile import Profile, UpdateProfileRequest
from postgate.services.data_store import DataStore
from postgate.services.profile_service import profile_service

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", name="get_profile")
async def get_profile(
    request: Request, store: DataStore = Depends(get_data_store)
) -> JSONResponse:
    user_id = await authorize(request, store)
    if isinstance(user_id, Err):
        return error_response(user_id)
    profile = await profile_service.get_profile(store, user_id.value)
    if isinstance(profile, Err):
        return error_response(profile)
    return JSONResponse(
        {"profile": Profile.model_validate(profile.value).model_dump(mode="json")}
    )


@router.patch("", name="update_profile")
async def update_profile(
    request: Request, store: DataStore = Depends(get_data_store)
) -> JSONResponse:
    """Partial update of the caller's username, full name or avatar."""
    user_id = await authorize(request, store)
    if isinstance(user_id, Err):
        return error_response(user_id)
    body = await read_body(request, UpdateProfileRequest)
    if isinstance(body, Err):
        return error_response(body)
    updated = await profile_service.update_profile(store, user_id.value, body.value)
    if isinstance(updated, Err):
        return error_response(updated)
    return JSONResponse({"success": True})
