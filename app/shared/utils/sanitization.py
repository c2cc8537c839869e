"""Input sanitization utilities for XSS and path injection prevention."""

import html
import re
from typing import ClassVar

import nh3


class InputSanitizer:
    """
    Strip markup from user text and make values safe for storage paths.

    Parameterized queries remain the primary defense against injection;
    these helpers keep stored free text display-safe.
    """

    ALLOWED_TAGS: ClassVar[set[str]] = set()
    PATH_SEGMENT_PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"[^A-Za-z0-9_-]")

    @classmethod
    def sanitize_html(cls, value: str) -> str:
        """Remove all HTML tags with nh3 (no tags or attributes allowed)."""
        if not value:
            return value
        return nh3.clean(value, tags=cls.ALLOWED_TAGS, attributes={})

    @classmethod
    def sanitize_text(cls, value: str | None) -> str | None:
        """Strip markup and surrounding whitespace; None passes through.

        nh3 serializes its output as HTML, so entities are unescaped again:
        the result is plain text and literal ``&`` or ``<`` survive unchanged.
        """
        if value is None:
            return None
        return html.unescape(cls.sanitize_html(value)).strip()

    @classmethod
    def sanitize_path_segment(cls, value: str) -> str:
        """Replace anything outside ``[A-Za-z0-9_-]`` with underscores.

        Raises:
            ValueError: If the value is empty.
        """
        if not value:
            raise ValueError("Path segment must not be empty")
        return cls.PATH_SEGMENT_PATTERN.sub("_", value)


def sanitize_text(value: str | None) -> str | None:
    """Module-level shortcut for InputSanitizer.sanitize_text."""
    return InputSanitizer.sanitize_text(value)
