"""Shared constants for Google Fonts request handling."""

from __future__ import annotations


GOOGLE_FONTS_HOST = "fonts.googleapis.com"
GOOGLE_FONTS_CSS_PATH = "/css"
GOOGLE_FONTS_CSS_URL = f"https://{GOOGLE_FONTS_HOST}{GOOGLE_FONTS_CSS_PATH}"

WEBFONT_LOADER_URL = "https://ajax.googleapis.com/ajax/libs/webfont/1/webfont.js"

COMBINED_HANDLE = "fontsmith-combined"
COMBINED_TEXT_HANDLE_PREFIX = "fontsmith-combined-txt-"

# Spellings of the ampersand that may separate query parameters in markup.
AMPERSAND_FORMS = ("&", "&#038;", "&#38;", "&amp;")

MIN_CANDIDATES = 2


__all__ = [
    "AMPERSAND_FORMS",
    "COMBINED_HANDLE",
    "COMBINED_TEXT_HANDLE_PREFIX",
    "GOOGLE_FONTS_CSS_PATH",
    "GOOGLE_FONTS_CSS_URL",
    "GOOGLE_FONTS_HOST",
    "MIN_CANDIDATES",
    "WEBFONT_LOADER_URL",
]
