"""Shared helpers for recognising font stylesheet requests and page markup."""

from __future__ import annotations

from collections.abc import Sized
import re
from typing import Any
from urllib.parse import urlsplit

from fontsmith.fonts.constants import (
    AMPERSAND_FORMS,
    GOOGLE_FONTS_CSS_PATH,
    GOOGLE_FONTS_HOST,
    MIN_CANDIDATES,
)


_ALLOWED_SCHEMES = {"", "http", "https"}
_HTML_TAG = re.compile(r"<html[\s>]", re.IGNORECASE)
_HTML5_DOCTYPE = re.compile(r"^\s*<!doctype\s+html\s*>", re.IGNORECASE)
_XSL_STYLESHEET = re.compile(r"<\?xml-stylesheet|<xsl:stylesheet", re.IGNORECASE)


def normalize_ampersands(url: str) -> str:
    """Collapse HTML-encoded ampersands back to a literal ``&``."""
    for form in AMPERSAND_FORMS[1:]:
        url = url.replace(form, "&")
    return url


def is_google_fonts_url(url: Any) -> bool:
    """Return whether ``url`` targets the Google Fonts stylesheet endpoint."""
    if not isinstance(url, str):
        return False
    candidate = url.strip()
    if not candidate:
        return False
    try:
        parts = urlsplit(candidate)
    except ValueError:
        return False
    if parts.scheme.lower() not in _ALLOWED_SCHEMES:
        return False
    # Relative paths have no network location and never match.
    if (parts.hostname or "").lower() != GOOGLE_FONTS_HOST:
        return False
    return parts.path.rstrip("/") == GOOGLE_FONTS_CSS_PATH


def rel_values(value: Any) -> list[str]:
    """Return the lower-cased tokens of a ``rel`` attribute value."""
    if value is None:
        return []
    if isinstance(value, str):
        tokens = value.split()
    else:
        tokens = [str(item) for item in value]
    return [token.strip().lower() for token in tokens if token.strip()]


def has_enough_elements(candidates: Sized | None) -> bool:
    """Return whether there are enough candidates to make merging worthwhile."""
    return candidates is not None and len(candidates) >= MIN_CANDIDATES


def has_html_tag(content: str) -> bool:
    return bool(_HTML_TAG.search(content))


def has_html5_doctype(content: str) -> bool:
    return bool(_HTML5_DOCTYPE.search(content))


def has_xsl_stylesheet(content: str) -> bool:
    return bool(_XSL_STYLESHEET.search(content))


__all__ = [
    "has_enough_elements",
    "has_html5_doctype",
    "has_html_tag",
    "has_xsl_stylesheet",
    "is_google_fonts_url",
    "normalize_ampersands",
    "rel_values",
]
