"""Pydantic schemas for categories."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class CreateCategoryRequest(BaseModel):
    """Schema for creating a category."""

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    slug: str | None = None
    description: str | None = None


class Category(BaseModel):
    """Category row as stored."""

    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    slug: str
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
