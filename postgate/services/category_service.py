"""Category operations."""

from __future__ import annotations

import logging

from postgate.results import Err, Ok, Result
from postgate.schemas.category import CreateCategoryRequest
from postgate.security.sanitizer import HtmlSanitizer, html_sanitizer
from postgate.services.data_store import DataStore, Row
from postgate.utils.slugs import normalize_slug

logger = logging.getLogger(__name__)

CATEGORIES = "categories"


class CategoryService:
    def __init__(self, sanitizer: HtmlSanitizer | None = None) -> None:
        self.sanitizer = sanitizer or html_sanitizer

    async def list_categories(self, store: DataStore) -> Result[list[Row]]:
        return await store.select(CATEGORIES, order="name")

    async def create_category(
        self, store: DataStore, request: CreateCategoryRequest
    ) -> Result[Row]:
        """Create a category with plain-text name/description and a normalized slug."""
        if not request.name or not request.slug:
            return Err.bad_request("Name and slug are required")
        description = (
            self.sanitizer.clean_text(request.description)
            if request.description
            else None
        )
        inserted = await store.insert(
            CATEGORIES,
            {
                "name": self.sanitizer.clean_text(request.name),
                "slug": normalize_slug(request.slug),
                "description": description or None,
            },
        )
        if isinstance(inserted, Err):
            return inserted
        if not inserted.value:
            return Err.upstream("Insert returned no row")
        category = inserted.value[0]
        logger.info("Created category %s", category["id"])
        return Ok(category)

    async def delete_category(self, store: DataStore, category_id: str) -> Result[None]:
        # Unconditional: links to posts go with the category.
        removed = await store.delete(CATEGORIES, eq={"id": category_id})
        if isinstance(removed, Err):
            return removed
        return Ok(None)


category_service = CategoryService()
