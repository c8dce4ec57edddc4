"""Pydantic schemas for posts and their category links."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict


class PostStatus(str, Enum):
    """Post status. Moves one way: draft -> published."""

    DRAFT = "draft"
    PUBLISHED = "published"


class CreatePostRequest(BaseModel):
    """Body of the posts-create function.

    ``title`` and ``slug`` are optional here so that a missing value is
    reported with the gate's own message rather than a schema error.
    """

    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    content: str | None = None
    slug: str | None = None
    status: PostStatus | None = None
    tags: list[str] | None = None
    category_ids: list[str] | None = None


class UpdatePostRequest(BaseModel):
    """Body of the posts-update function.

    Partial update: only fields present in the body are applied. Use
    ``model_fields_set`` to tell an absent field from an explicit null.
    """

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    title: str | None = None
    content: str | None = None
    slug: str | None = None
    status: PostStatus | None = None
    tags: list[str] | None = None
    category_ids: list[str] | None = None


class Post(BaseModel):
    """Post row as stored."""

    model_config = ConfigDict(extra="allow")

    id: str
    user_id: str
    title: str
    content: str | None = None
    slug: str
    status: PostStatus = PostStatus.DRAFT
    published: bool = False
    tags: list[str] | None = None
    view_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
    published_at: datetime | None = None


class PostCategory(BaseModel):
    """Many-to-many link between a post and a category."""

    post_id: str
    category_id: str
