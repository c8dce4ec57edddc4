"""Post write gate: ownership, sanitization, persistence and category relink."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from postgate.results import Err, Ok, Result
from postgate.schemas.post import (
    CreatePostRequest,
    PostCategory,
    PostStatus,
    UpdatePostRequest,
)
from postgate.security.sanitizer import HtmlSanitizer, html_sanitizer
from postgate.services.data_store import DataStore, Row
from postgate.utils.slugs import normalize_slug

logger = logging.getLogger(__name__)

POSTS = "posts"
POST_CATEGORIES = "post_categories"
CATEGORIES = "categories"


def _now() -> str:
    return datetime.now(UTC).isoformat()


def _link_rows(post_id: str, category_ids: list[str]) -> list[Row]:
    # Repeated ids would trip the composite key; keep first occurrence order.
    unique_ids = list(dict.fromkeys(category_ids))
    return [
        PostCategory(post_id=post_id, category_id=category_id).model_dump()
        for category_id in unique_ids
    ]


class PostService:
    """Service for post operations behind the auth gate."""

    def __init__(self, sanitizer: HtmlSanitizer | None = None) -> None:
        self.sanitizer = sanitizer or html_sanitizer

    # ------------------------------------------------------------------
    # Ownership
    # ------------------------------------------------------------------
    async def ensure_owner(
        self, store: DataStore, post_id: str, user_id: str
    ) -> Result[Row]:
        """Load a post's owner and reject callers who do not own it.

        Args:
            store: Per-request data store
            post_id: Target post id
            user_id: Authenticated caller

        Returns:
            Ok with ``user_id``, ``status`` and ``published_at`` of the post,
            NOT_FOUND when it does not exist, FORBIDDEN for non-owners
        """
        rows = await store.select(
            POSTS, "user_id, status, published_at", eq={"id": post_id}
        )
        if isinstance(rows, Err) or not rows.value:
            return Err.not_found("Post not found")
        existing = rows.value[0]
        if existing.get("user_id") != user_id:
            logger.warning("User %s denied write on post %s", user_id, post_id)
            return Err.forbidden("Forbidden: You can only update your own posts")
        return Ok(existing)

    # ------------------------------------------------------------------
    # Category links
    # ------------------------------------------------------------------
    async def link_categories(
        self, store: DataStore, post_id: str, category_ids: list[str]
    ) -> Result[None]:
        if not category_ids:
            return Ok(None)
        inserted = await store.insert(POST_CATEGORIES, _link_rows(post_id, category_ids))
        if isinstance(inserted, Err):
            return inserted
        return Ok(None)

    async def replace_categories(
        self, store: DataStore, post_id: str, category_ids: list[str]
    ) -> Result[None]:
        """Replace the full association set: delete all, then insert."""
        removed = await store.delete(POST_CATEGORIES, eq={"post_id": post_id})
        if isinstance(removed, Err):
            return removed
        return await self.link_categories(store, post_id, category_ids)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------
    async def create_post(
        self, store: DataStore, user_id: str, request: CreatePostRequest
    ) -> Result[Row]:
        """Sanitize and insert a post, then link its categories.

        All-or-nothing for the caller: if linking fails the new post is
        deleted again and the link error is returned.
        """
        if not request.title or not request.slug:
            return Err.bad_request("Title and slug are required")

        status = request.status or PostStatus.DRAFT
        is_published = status == PostStatus.PUBLISHED
        row: Row = {
            "user_id": user_id,
            "title": self.sanitizer.clean_text(request.title),
            "content": self.sanitizer.clean_content(request.content),
            "slug": normalize_slug(request.slug),
            "status": status.value,
            "published": is_published,
            "tags": self.sanitizer.clean_tags(request.tags),
            "published_at": _now() if is_published else None,
        }

        inserted = await store.insert(POSTS, row)
        if isinstance(inserted, Err):
            return inserted
        if not inserted.value:
            return Err.upstream("Insert returned no row")
        post = inserted.value[0]

        linked = await self.link_categories(store, post["id"], request.category_ids or [])
        if isinstance(linked, Err):
            logger.warning(
                "Category link failed for new post %s, removing it", post["id"]
            )
            rollback = await store.delete(POSTS, eq={"id": post["id"]})
            if isinstance(rollback, Err):
                logger.error(
                    "Compensating delete of post %s failed: %s",
                    post["id"],
                    rollback.message,
                )
            return linked

        logger.info("Created post %s for user %s", post["id"], user_id)
        return Ok(post)

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------
    def _validate_update(self, request: UpdatePostRequest) -> Err | None:
        present = request.model_fields_set
        if not request.id:
            return Err.bad_request("Post ID is required")
        for field in ("title", "slug"):
            if field in present and not getattr(request, field):
                return Err.bad_request(f"{field.capitalize()} cannot be empty")
        if "status" in present and request.status is None:
            return Err.bad_request("Status cannot be null")
        return None

    def _build_changes(
        self, request: UpdatePostRequest, existing: Row
    ) -> Result[dict[str, Any]]:
        present = request.model_fields_set
        changes: dict[str, Any] = {"updated_at": _now()}

        if "title" in present:
            changes["title"] = self.sanitizer.clean_text(request.title)
        if "content" in present:
            changes["content"] = self.sanitizer.clean_content(request.content)
        if "slug" in present:
            changes["slug"] = normalize_slug(request.slug)
        if "status" in present:
            if (
                request.status == PostStatus.DRAFT
                and existing.get("status") == PostStatus.PUBLISHED.value
            ):
                return Err.bad_request("Published posts cannot be reverted to draft")
            changes["status"] = request.status.value
            changes["published"] = request.status == PostStatus.PUBLISHED
            if request.status == PostStatus.PUBLISHED and not existing.get(
                "published_at"
            ):
                changes["published_at"] = _now()
        if "tags" in present:
            changes["tags"] = self.sanitizer.clean_tags(request.tags)
        return Ok(changes)

    async def update_post(
        self, store: DataStore, user_id: str, request: UpdatePostRequest
    ) -> Result[None]:
        """Apply a partial update on behalf of the post's owner.

        A failed category replace after a successful field update is reported
        but not rolled back.
        """
        invalid = self._validate_update(request)
        if invalid:
            return invalid

        owned = await self.ensure_owner(store, request.id, user_id)
        if isinstance(owned, Err):
            return owned

        changes = self._build_changes(request, owned.value)
        if isinstance(changes, Err):
            return changes

        updated = await store.update(POSTS, changes.value, eq={"id": request.id})
        if isinstance(updated, Err):
            return updated

        if request.category_ids is not None:
            relinked = await self.replace_categories(
                store, request.id, request.category_ids
            )
            if isinstance(relinked, Err):
                logger.warning(
                    "Post %s updated but category relink failed: %s",
                    request.id,
                    relinked.message,
                )
                return relinked

        logger.info("Updated post %s", request.id)
        return Ok(None)

    # ------------------------------------------------------------------
    # Reads & delete
    # ------------------------------------------------------------------
    async def list_posts(self, store: DataStore) -> Result[list[Row]]:
        return await store.select(POSTS, order="created_at", descending=True)

    async def get_post(self, store: DataStore, post_id: str) -> Result[Row]:
        rows = await store.select(POSTS, eq={"id": post_id})
        if isinstance(rows, Err):
            return rows
        if not rows.value:
            return Err.not_found("Post not found")
        return Ok(rows.value[0])

    async def delete_post(
        self, store: DataStore, post_id: str, user_id: str
    ) -> Result[None]:
        owned = await self.ensure_owner(store, post_id, user_id)
        if isinstance(owned, Err):
            return owned
        removed = await store.delete(POSTS, eq={"id": post_id})
        if isinstance(removed, Err):
            return removed
        logger.info("Deleted post %s", post_id)
        return Ok(None)

    async def get_post_categories(
        self, store: DataStore, post_id: str
    ) -> Result[list[Row]]:
        """Return the categories linked to a post, ordered by name."""
        links = await store.select(POST_CATEGORIES, "category_id", eq={"post_id": post_id})
        if isinstance(links, Err):
            return links
        category_ids = [link["category_id"] for link in links.value]
        if not category_ids:
            return Ok([])
        return await store.select(CATEGORIES, in_={"id": category_ids}, order="name")


# Singleton instance
post_service = PostService()
