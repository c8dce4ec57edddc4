"""Request/response helpers shared by the routers.

Responses use the edge-function envelope: ``{"error": message}`` on failure,
``{"success": true, ...}`` on writes.
"""

from __future__ import annotations

import json
from typing import TypeVar

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from postgate.auth import authenticate
from postgate.results import Err, Ok, Result
from postgate.services.data_store import DataStore

M = TypeVar("M", bound=BaseModel)


def error_response(err: Err) -> JSONResponse:
    return JSONResponse({"error": err.message}, status_code=err.status_code)


async def authorize(request: Request, store: DataStore) -> Result[str]:
    return await authenticate(store, request.headers.get("Authorization"))


async def read_body(request: Request, model: type[M]) -> Result[M]:
    """Parse the JSON body into ``model``; any problem is a BAD_REQUEST."""
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return Err.bad_request("Invalid JSON body")
    if not isinstance(payload, dict):
        return Err.bad_request("Request body must be a JSON object")
    try:
        return Ok(model.model_validate(payload))
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "body"
        return Err.bad_request(f"Invalid {field}: {first['msg']}")
