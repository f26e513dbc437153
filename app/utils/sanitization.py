"""Helpers for cleaning user-supplied text before validation or storage."""

from __future__ import annotations

import re
from typing import Iterable

_HTML_TAG_RE = re.compile(r"<[^>]*>")
_JS_PROTOCOL_RE = re.compile(r"javascript:", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")
_HTTP_URL_RE = re.compile(r"^https?://", re.IGNORECASE)


def sanitize_text(value: str | None) -> str:
    """Strip HTML tags and ``javascript:`` and collapse whitespace.

    Examples:
        >>> sanitize_text("  <b>Blue</b>   denim  ")
        'Blue denim'
        >>> sanitize_text(None)
        ''
    """
    if not value:
        return ""

    text = _HTML_TAG_RE.sub("", value)
    text = _JS_PROTOCOL_RE.sub("", text)
    text = _WHITESPACE_RE.sub(" ", text)
    return text.strip()


def sanitize_email(value: str | None) -> str:
    """Trim and lower-case an email address."""
    if not value:
        return ""
    return value.strip().lower()


def sanitize_url(value: str | None) -> str:
    """Return the URL if it uses http(s), otherwise an empty string."""
    if not value:
        return ""

    url = value.strip()
    if not _HTTP_URL_RE.match(url):
        return ""
    return _JS_PROTOCOL_RE.sub("", url)


def sanitize_list(values: Iterable[str] | None) -> list[str]:
    """Sanitize each string and drop the ones left empty."""
    if not values:
        return []
    cleaned = (sanitize_text(v) for v in values)
    return [v for v in cleaned if v]
