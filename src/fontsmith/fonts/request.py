"""Decompose Google Fonts stylesheet URLs into single-family requests.

The legacy ``/css`` endpoint accepts a ``family`` parameter made of
pipe-separated entries, each one ``Name[:variants[:subsets]]``::

    family=Roboto:400,700|Open+Sans&subset=latin,cyrillic&text=Hello

Every entry becomes its own :class:`FontRequest` so downstream merging always
works on single-family units.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
import logging
import re
from urllib.parse import parse_qsl, urlsplit

from fontsmith.core.exceptions import InvalidFontRequestError
from fontsmith.fonts.utils import normalize_ampersands


logger = logging.getLogger(__name__)

_FAMILY_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9 ._'-]*$")
_TOKEN = re.compile(r"^[A-Za-z0-9_-]+$")


def _split_tokens(raw: str) -> tuple[str, ...]:
    """Return unique, non-empty comma-separated tokens in encounter order."""
    seen: dict[str, None] = {}
    for chunk in raw.split(","):
        token = chunk.strip()
        if token and _TOKEN.match(token):
            seen.setdefault(token, None)
    return tuple(seen)


@dataclass(frozen=True, slots=True)
class FontRequest:
    """A single font family requested by one stylesheet URL."""

    family: str
    variants: tuple[str, ...] = ()
    subsets: tuple[str, ...] = ()
    text: str | None = None
    source_url: str = ""

    @property
    def is_restricted(self) -> bool:
        return self.text is not None

    def mergeable_with(self, other: FontRequest) -> bool:
        """Return whether both requests can share a combined URL."""
        return self.text == other.text

    def to_mapping(self) -> dict[str, object]:
        return {
            "family": self.family,
            "variants": list(self.variants),
            "subsets": list(self.subsets),
            "text": self.text,
            "source_url": self.source_url,
        }


def parse_font_family(
    segment: str,
    *,
    subsets: Iterable[str] = (),
    text: str | None = None,
    source_url: str = "",
) -> FontRequest:
    """Parse one ``Name[:variants[:subsets]]`` entry of a ``family`` parameter.

    Raises:
        InvalidFontRequestError: if the family name is empty or malformed.
    """
    name, _, remainder = segment.partition(":")
    family = " ".join(name.split())
    if not family:
        raise InvalidFontRequestError(f"Empty font family in segment {segment!r}.")
    if not _FAMILY_NAME.match(family):
        raise InvalidFontRequestError(f"Malformed font family {family!r}.")

    raw_variants, _, raw_subsets = remainder.partition(":")
    merged_subsets = dict.fromkeys(subsets)
    merged_subsets.update(dict.fromkeys(_split_tokens(raw_subsets)))

    return FontRequest(
        family=family,
        variants=_split_tokens(raw_variants),
        subsets=tuple(merged_subsets),
        text=text,
        source_url=source_url,
    )


def parse_font_url(url: str) -> list[FontRequest]:
    """Return the requests encoded in a Google Fonts stylesheet ``url``.

    Malformed family entries are skipped; a URL without any usable family
    yields an empty list.
    """
    try:
        query = urlsplit(normalize_ampersands(url.strip())).query
    except ValueError:
        logger.debug("Skipping unparsable font URL %r", url)
        return []

    families: list[str] = []
    subsets: tuple[str, ...] = ()
    text: str | None = None
    for key, value in parse_qsl(query, keep_blank_values=True):
        if key == "family":
            families.extend(value.split("|"))
        elif key == "subset":
            subsets = _split_tokens(value)
        elif key == "text":
            text = value or None

    requests: list[FontRequest] = []
    for segment in families:
        try:
            requests.append(
                parse_font_family(segment, subsets=subsets, text=text, source_url=url)
            )
        except InvalidFontRequestError as exc:
            logger.debug("Skipping font family in %s: %s", url, exc)
    return requests


__all__ = ["FontRequest", "parse_font_family", "parse_font_url"]
