"""Locate font stylesheet links in HTML and swap them for combined requests."""

from __future__ import annotations

from collections.abc import Iterable
from functools import lru_cache
from html.entities import html5
import logging
import re
import warnings

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning
from bs4.builder import ParserRejectedMarkup
from bs4.element import Tag

from fontsmith.fonts.utils import is_google_fonts_url, normalize_ampersands, rel_values


logger = logging.getLogger(__name__)

_HEAD_OPEN = re.compile(r"<head(?:\s[^>]*)?>", re.IGNORECASE)


def is_candidate_link(node: Tag) -> bool:
    """Return whether ``node`` is a stylesheet link pointing at Google Fonts.

    Alternate stylesheets are not loaded by default and never qualify.
    """
    if (node.name or "").lower() != "link":
        return False
    if rel_values(node.get("rel")) != ["stylesheet"]:
        return False
    return is_google_fonts_url(node.get("href"))


def find_font_hrefs(markup: str) -> list[str]:
    """Return the Google Fonts stylesheet hrefs found in ``markup``, in order."""
    if not markup:
        return []
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
        try:
            soup = BeautifulSoup(markup, "html.parser")
        except ParserRejectedMarkup as exc:
            logger.warning("Unable to parse markup for font links: %s", exc)
            return []

    hrefs: list[str] = []
    for node in soup.find_all("link"):
        if isinstance(node, Tag) and is_candidate_link(node):
            hrefs.append(str(node.get("href")).strip())
    return hrefs


@lru_cache(maxsize=None)
def _char_pattern(char: str) -> str:
    """Match ``char`` or any character reference that decodes to it."""
    code = ord(char)
    forms = [re.escape(char), f"&#0*{code};", f"&#[xX]0*(?i:{code:x});"]
    forms.extend(
        re.escape(f"&{name}")
        for name, value in html5.items()
        if value == char and name.endswith(";")
    )
    return "(?:" + "|".join(forms) + ")"


def link_pattern(url: str) -> re.Pattern[str]:
    """Build a pattern matching the ``<link>`` element that references ``url``.

    Every character of the URL may be spelled as a character reference, the
    href may be quoted in any way, padded with whitespace and surrounded by
    other attributes, and whitespace trailing the tag is consumed with it.
    """
    body = "".join(_char_pattern(char) for char in normalize_ampersands(url))
    return re.compile(
        r"(?i:<link\b[^>]*?(?<![\w-])href)\s*=\s*['\"\\]*\s*"
        + body
        + r"(?=['\"\\\s>/]|$)[^>]*>\s*",
        re.DOTALL,
    )


def removable_hrefs(markup: str, urls: Iterable[str]) -> list[str]:
    """Return the ``urls`` whose ``<link>`` element can be removed from ``markup``."""
    removable: list[str] = []
    for url in urls:
        if link_pattern(url).search(markup):
            removable.append(url)
        else:
            logger.warning("Font link for %s cannot be located in the markup; left as is.", url)
    return removable


def remove_links(markup: str, urls: Iterable[str]) -> str:
    """Remove every ``<link>`` element referencing one of ``urls``."""
    for url in urls:
        markup, count = link_pattern(url).subn("", markup)
        if not count:
            logger.debug("No link element found for %s", url)
    return markup


def insert_in_head(markup: str, fragment: str) -> str:
    """Insert ``fragment`` right after the first ``<head>`` opening tag.

    Markup without a head section is returned unchanged.
    """
    match = _HEAD_OPEN.search(markup)
    if match is None:
        logger.warning("No <head> element found; combined font markup not inserted.")
        return markup
    return markup[: match.end()] + fragment + markup[match.end() :]


def rewrite_markup(markup: str, font_markup: str, font_links: Iterable[str]) -> str:
    """Replace the stylesheets in ``font_links`` with ``font_markup``."""
    return insert_in_head(remove_links(markup, font_links), font_markup)


__all__ = [
    "find_font_hrefs",
    "insert_in_head",
    "is_candidate_link",
    "link_pattern",
    "removable_hrefs",
    "remove_links",
    "rewrite_markup",
]
