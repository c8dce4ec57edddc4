"""HTML sanitization for user-supplied post fields.

Titles, tags and category names are reduced to plain text. Post content keeps
a small allow-list of structural and inline tags. Elements that can execute
or embed active content are removed together with everything inside them;
any other disallowed tag is unwrapped so its text survives.
"""

from __future__ import annotations

from collections.abc import Iterable

import bleach
from bs4 import BeautifulSoup

CONTENT_TAGS = frozenset(
    {
        "p",
        "br",
        "strong",
        "em",
        "u",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "ul",
        "ol",
        "li",
        "a",
        "blockquote",
        "code",
        "pre",
    }
)
CONTENT_ATTRIBUTES = {"*": ["href", "title", "target"]}
CONTENT_PROTOCOLS = frozenset({"http", "https", "mailto"})

# Dropped with their children, never unwrapped.
ACTIVE_CONTENT_TAGS = (
    "script",
    "style",
    "noscript",
    "iframe",
    "object",
    "embed",
    "template",
)


class HtmlSanitizer:
    """Allow-list sanitizer built on bleach."""

    def __init__(
        self,
        *,
        content_tags: Iterable[str] = CONTENT_TAGS,
        content_attributes: dict[str, list[str]] | None = None,
        protocols: Iterable[str] = CONTENT_PROTOCOLS,
    ) -> None:
        self.content_tags = frozenset(content_tags)
        if content_attributes is None:
            content_attributes = CONTENT_ATTRIBUTES
        self.content_attributes = dict(content_attributes)
        self.protocols = frozenset(protocols)

    @staticmethod
    def _drop_active_content(value: str) -> str:
        if "<" not in value:
            return value
        # Same tokenizer as bleach, parsed in body context so nothing lands in <head>
        soup = BeautifulSoup("<body>" + value, "html5lib")
        for element in soup(ACTIVE_CONTENT_TAGS):
            element.decompose()
        return soup.body.decode_contents()

    def clean_text(self, value: str) -> str:
        """Strip every tag, keeping only the text.

        Args:
            value: Untrusted input such as a title or tag

        Returns:
            Plain text with ``&``, ``<`` and ``>`` escaped
        """
        return bleach.clean(
            self._drop_active_content(value),
            tags=frozenset(),
            attributes={},
            strip=True,
            strip_comments=True,
        )

    def clean_content(self, value: str | None) -> str | None:
        """Sanitize post body HTML against the content allow-list.

        Args:
            value: Untrusted HTML, may be empty or None

        Returns:
            Sanitized HTML, or None when there is nothing left to store
        """
        if not value:
            return None
        cleaned = bleach.clean(
            self._drop_active_content(value),
            tags=self.content_tags,
            attributes=self.content_attributes,
            protocols=self.protocols,
            strip=True,
            strip_comments=True,
        )
        return cleaned or None

    def clean_tags(self, values: list[str] | None) -> list[str] | None:
        if values is None:
            return None
        return [self.clean_text(tag) for tag in values]


html_sanitizer = HtmlSanitizer()
