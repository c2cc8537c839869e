"""Tests for free-text sanitization."""

import pytest

from app.shared.utils.sanitization import InputSanitizer, sanitize_text


@pytest.mark.parametrize(
    "value",
    ["Smith & Jones", "if a < b and b > c", "Tom's \"notes\"", "R&D 100% done"],
)
def test_plain_text_is_unchanged(value: str) -> None:
    assert sanitize_text(value) == value


def test_sanitizing_twice_is_stable() -> None:
    once = sanitize_text("Smith & Jones <b>LLP</b>")
    assert once == "Smith & Jones LLP"
    assert sanitize_text(once) == once


def test_tags_and_script_content_are_removed() -> None:
    assert sanitize_text("<script>alert(1)</script>Memo") == "Memo"
    assert sanitize_text("  <i>Reply</i> to objection ") == "Reply to objection"


def test_none_passes_through() -> None:
    assert sanitize_text(None) is None


def test_path_segment_replaces_unsafe_characters() -> None:
    assert InputSanitizer.sanitize_path_segment("user/../1") == "user____1"
    with pytest.raises(ValueError):
        InputSanitizer.sanitize_path_segment("")
