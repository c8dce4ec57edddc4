"""Slug normalization for posts and categories."""

from __future__ import annotations

import re

_DISALLOWED = re.compile(r"[^a-z0-9-]")


def normalize_slug(text: str) -> str:
    """Rewrite arbitrary text into a URL-safe token.

    Lowercases, then replaces every character outside ``[a-z0-9-]`` with a
    hyphen. Runs of hyphens are kept as-is, so distinct inputs may collide;
    the store's unique constraint rejects duplicates.

    Args:
        text: Free text, e.g. a user-supplied slug or title

    Returns:
        URL-safe slug (possibly empty)
    """
    return _DISALLOWED.sub("-", text.lower())
