"""Unit tests for input sanitization helpers."""

import pytest

from app.utils.sanitization import sanitize_email, sanitize_list, sanitize_text, sanitize_url


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("  Blue   denim  jacket ", "Blue denim jacket"),
        ("<b>Linen</b> shirt", "Linen shirt"),
        ("<script>alert(1)</script>Coat", "alert(1)Coat"),
        ("JavaScript:alert(1)", "alert(1)"),
        ("", ""),
        (None, ""),
    ],
)
def test_sanitize_text(raw, expected) -> None:
    assert sanitize_text(raw) == expected


def test_sanitize_email() -> None:
    assert sanitize_email("  Ada@Example.COM ") == "ada@example.com"
    assert sanitize_email(None) == ""


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("https://cdn.example.com/a.png", "https://cdn.example.com/a.png"),
        (" http://example.com ", "http://example.com"),
        ("javascript:alert(1)", ""),
        ("ftp://example.com/file", ""),
        ("", ""),
    ],
)
def test_sanitize_url(raw, expected) -> None:
    assert sanitize_url(raw) == expected


def test_sanitize_list_drops_empty_values() -> None:
    assert sanitize_list([" casual ", "<i></i>", "summer  wear"]) == ["casual", "summer wear"]
    assert sanitize_list(None) == []
