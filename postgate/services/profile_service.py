"""Profile reads and updates for the authenticated caller."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from postgate.results import Err, Ok, Result
from postgate.schemas.profile import UpdateProfileRequest
from postgate.security.sanitizer import HtmlSanitizer, html_sanitizer
from postgate.services.data_store import DataStore, Row

logger = logging.getLogger(__name__)

PROFILES = "profiles"
PROFILE_COLUMNS = "id, username, full_name, avatar_url, updated_at"
AVATAR_SCHEMES = ("http://", "https://")


class ProfileService:
    """Service for the caller's own row in ``profiles``.

    Every operation is keyed on the authenticated user id, so a caller can
    never address another user's profile.
    """

    def __init__(self, sanitizer: HtmlSanitizer | None = None) -> None:
        self.sanitizer = sanitizer or html_sanitizer

    async def get_profile(self, store: DataStore, user_id: str) -> Result[Row]:
        rows = await store.select(PROFILES, PROFILE_COLUMNS, eq={"id": user_id})
        if isinstance(rows, Err):
            return rows
        if not rows.value:
            return Err.not_found("Profile not found")
        return Ok(rows.value[0])

    def _clean(self, value: str | None) -> str | None:
        if value is None:
            return None
        return self.sanitizer.clean_text(value) or None

    def _build_changes(self, request: UpdateProfileRequest) -> Result[dict[str, Any]]:
        present = request.model_fields_set
        changes: dict[str, Any] = {}
        for field in ("username", "full_name"):
            if field in present:
                changes[field] = self._clean(getattr(request, field))
        if "avatar_url" in present:
            avatar_url = request.avatar_url or None
            if avatar_url and not avatar_url.lower().startswith(AVATAR_SCHEMES):
                return Err.bad_request("Avatar URL must use http or https")
            changes["avatar_url"] = avatar_url
        changes["updated_at"] = datetime.now(UTC).isoformat()
        return Ok(changes)

    async def update_profile(
        self, store: DataStore, user_id: str, request: UpdateProfileRequest
    ) -> Result[None]:
        """Apply a partial update to the caller's profile.

        Args:
            store: Per-request data store
            user_id: Authenticated caller, also the profile id
            request: Fields to change; absent fields are left alone

        Returns:
            Ok(None), BAD_REQUEST for an unusable avatar URL, NOT_FOUND when
            the caller has no profile row, or the store's own error
        """
        changes = self._build_changes(request)
        if isinstance(changes, Err):
            return changes
        updated = await store.update(PROFILES, changes.value, eq={"id": user_id})
        if isinstance(updated, Err):
            return updated
        if not updated.value:
            return Err.not_found("Profile not found")
        logger.info("Updated profile %s", user_id)
        return Ok(None)


profile_service = ProfileService()
