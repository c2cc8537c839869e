"""Shared utilities: datetime, generators, sanitization."""

from app.shared.utils.datetime import (
    coerce_date,
    ensure_utc,
    from_timestamp_utc,
    parse_iso_datetime,
    utc_now,
)
from app.shared.utils.generators import generate_cuid
from app.shared.utils.sanitization import InputSanitizer, sanitize_text

__all__ = [
    "generate_cuid",
    "utc_now",
    "ensure_utc",
    "from_timestamp_utc",
    "parse_iso_datetime",
    "coerce_date",
    "InputSanitizer",
    "sanitize_text",
]
