"""Bearer token verification against the identity service."""

from __future__ import annotations

import logging

from postgate.results import Err, Ok, Result
from postgate.services.data_store import DataStore

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


def extract_bearer_token(authorization: str | None) -> Result[str]:
    """Pull the token out of an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return Err.unauthorized("Missing authorization header")
    if not authorization.lower().startswith(BEARER_PREFIX):
        return Err.unauthorized()
    token = authorization[len(BEARER_PREFIX) :].strip()
    if not token:
        return Err.unauthorized()
    return Ok(token)


async def authenticate(store: DataStore, authorization: str | None) -> Result[str]:
    """Resolve the caller's user id, or fail with ``UNAUTHORIZED``.

    No retries: a failed verification ends the request.
    """
    token = extract_bearer_token(authorization)
    if isinstance(token, Err):
        logger.info("Rejected request: %s", token.message)
        return token
    user_id = await store.get_user_id(token.value)
    if isinstance(user_id, Err):
        logger.info("Rejected request: token did not resolve to a user")
        return Err.unauthorized()
    return user_id
