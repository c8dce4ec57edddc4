"""Security façade for sanitization and the edge headers middleware."""

# Middleware lives under postgate.middleware; exposed here for convenience
from postgate.middleware.security import EdgeHeadersMiddleware  # noqa: F401

from .sanitizer import (  # noqa: F401
    ACTIVE_CONTENT_TAGS,
    CONTENT_ATTRIBUTES,
    CONTENT_TAGS,
    HtmlSanitizer,
    html_sanitizer,
)

__all__ = [
    "ACTIVE_CONTENT_TAGS",
    "CONTENT_ATTRIBUTES",
    "CONTENT_TAGS",
    "HtmlSanitizer",
    "html_sanitizer",
    "EdgeHeadersMiddleware",
]
