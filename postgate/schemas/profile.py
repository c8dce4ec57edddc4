"""Pydantic schemas for user profiles."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class UpdateProfileRequest(BaseModel):
    """Partial profile update; only fields present in the body are applied."""

    model_config = ConfigDict(extra="ignore")

    username: str | None = None
    full_name: str | None = None
    avatar_url: str | None = None


class Profile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    username: str | None = None
    full_name: str | None = None
    avatar_url: str | None = None
    updated_at: datetime | None = None
