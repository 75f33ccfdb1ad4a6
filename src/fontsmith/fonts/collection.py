"""Merge font stylesheet requests into the fewest equivalent URLs.

Requests are grouped by their restriction text. A group is merged only when it
was requested by at least two stylesheets; a lone stylesheet gains nothing
from being rewritten and is left where it is. Each merged group becomes one
URL listing every family once, with the union of its variants and subsets.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from functools import cached_property
import logging
from urllib.parse import quote_plus

from fontsmith.fonts.constants import GOOGLE_FONTS_CSS_URL, MIN_CANDIDATES
from fontsmith.fonts.request import FontRequest, parse_font_url


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CombinedResult:
    """Replacement URLs produced for one collection."""

    main_url: str | None = None
    restricted_urls: tuple[str, ...] = ()
    original_urls: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.main_url is None and not self.restricted_urls

    @property
    def urls(self) -> tuple[str, ...]:
        """Return the main URL (when present) followed by the restricted URLs."""
        head = (self.main_url,) if self.main_url else ()
        return head + self.restricted_urls


@dataclass(slots=True)
class _FamilyMerge:
    families: dict[str, dict[str, None]] = field(default_factory=dict)
    subsets: dict[str, None] = field(default_factory=dict)

    def add(self, request: FontRequest) -> None:
        variants = self.families.setdefault(request.family, {})
        variants.update(dict.fromkeys(request.variants))
        self.subsets.update(dict.fromkeys(request.subsets))


def build_font_url(
    families: Sequence[tuple[str, Sequence[str]]],
    *,
    subsets: Sequence[str] = (),
    text: str | None = None,
) -> str:
    """Serialise families, subsets and restriction text into a stylesheet URL."""
    entries = []
    for name, variants in families:
        entry = quote_plus(name, safe="'")
        if variants:
            entry += ":" + ",".join(variants)
        entries.append(entry)

    url = f"{GOOGLE_FONTS_CSS_URL}?family={'|'.join(entries)}"
    if subsets:
        url += "&subset=" + ",".join(subsets)
    if text is not None:
        url += "&text=" + quote_plus(text, safe="")
    return url


def merge_requests(requests: Iterable[FontRequest], *, text: str | None = None) -> str:
    """Return one URL covering every family in ``requests``."""
    merge = _FamilyMerge()
    for request in requests:
        if not request.family:
            continue
        merge.add(request)
    families = [(name, tuple(variants)) for name, variants in merge.families.items()]
    return build_font_url(families, subsets=tuple(merge.subsets), text=text)


class FontCollection:
    """Font requests gathered from the stylesheets of a single page render.

    Each stylesheet URL contributes the requests it encodes. URLs that do not
    yield a single usable family are ignored.
    """

    def __init__(self, urls: Iterable[str] = ()) -> None:
        entries: list[tuple[str, tuple[FontRequest, ...]]] = []
        for url in urls:
            requests = tuple(request for request in parse_font_url(url) if request.family)
            if not requests:
                logger.debug("Ignoring font URL without usable families: %s", url)
                continue
            entries.append((url, requests))
        self._entries = tuple(entries)

    def __iter__(self) -> Iterator[FontRequest]:
        return iter(self.requests)

    @property
    def stylesheet_count(self) -> int:
        """Return how many usable stylesheet URLs were collected."""
        return len(self._entries)

    @property
    def sources(self) -> tuple[str, ...]:
        return tuple(url for url, _ in self._entries)

    @property
    def requests(self) -> tuple[FontRequest, ...]:
        return tuple(request for _, requests in self._entries for request in requests)

    def groups(self) -> dict[str | None, list[tuple[str, tuple[FontRequest, ...]]]]:
        """Return stylesheet entries keyed by restriction text, in encounter order."""
        grouped: dict[str | None, list[tuple[str, tuple[FontRequest, ...]]]] = {}
        for url, requests in self._entries:
            grouped.setdefault(requests[0].text, []).append((url, requests))
        return grouped

    @cached_property
    def result(self) -> CombinedResult:
        return self.combine()

    def combine(self) -> CombinedResult:
        """Merge the collection into a :class:`CombinedResult`."""
        if len(self._entries) < MIN_CANDIDATES:
            return CombinedResult()

        main_url: str | None = None
        restricted: list[str] = []
        consumed: dict[str, None] = {}

        for text, entries in self.groups().items():
            if len(entries) < MIN_CANDIDATES:
                continue
            url = merge_requests(
                (request for _, requests in entries for request in requests), text=text
            )
            if text is None:
                main_url = url
            else:
                restricted.append(url)
            consumed.update(dict.fromkeys(source for source, _ in entries))

        result = CombinedResult(
            main_url=main_url,
            restricted_urls=tuple(restricted),
            original_urls=tuple(consumed),
        )
        logger.debug(
            "Combined %d font stylesheet(s) into %d request(s)",
            len(result.original_urls),
            len(result.urls),
        )
        return result


__all__ = ["CombinedResult", "FontCollection", "build_font_url", "merge_requests"]
