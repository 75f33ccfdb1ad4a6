"""Integration layer wiring the font consolidation engine into a host renderer.

Two extension points are exposed:

`process_style_handles`
: Registration-list mode. Receives the ordered names of the stylesheets about
  to be printed, swaps the Google Fonts ones for combined registrations and
  returns the new list.

`start_buffering` / `end_buffering`
: Markup mode. The host captures the rendered page in an `OutputBufferStack`
  and hands the captured text back for rewriting when the buffer is closed.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, fields
from io import StringIO
import logging

from fontsmith.core.config import OperationMode, OptimizerConfig
from fontsmith.fonts.collection import CombinedResult, FontCollection
from fontsmith.fonts.constants import COMBINED_HANDLE, COMBINED_TEXT_HANDLE_PREFIX
from fontsmith.fonts.formatter import build_fonts_markup
from fontsmith.fonts.markup import find_font_hrefs, removable_hrefs, rewrite_markup
from fontsmith.fonts.utils import (
    has_enough_elements,
    has_html5_doctype,
    has_html_tag,
    has_xsl_stylesheet,
    is_google_fonts_url,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RequestContext:
    """Flags describing the request being rendered.

    Only plain front-end page renders are worth buffering; any flag set to
    ``True`` disables markup scanning for the request.
    """

    admin: bool = False
    feed: bool = False
    cron: bool = False
    cli: bool = False
    app_request: bool = False
    xmlrpc: bool = False
    short_init: bool = False

    @property
    def is_frontend(self) -> bool:
        return not any(getattr(self, item.name) for item in fields(self))


class StyleRegistry:
    """Named stylesheet registrations owned by the host for a single pass."""

    def __init__(self, styles: Mapping[str, str] | None = None) -> None:
        self._styles: dict[str, str] = dict(styles or {})

    def __contains__(self, handle: object) -> bool:
        return handle in self._styles

    def __len__(self) -> int:
        return len(self._styles)

    @property
    def handles(self) -> list[str]:
        return list(self._styles)

    def register(self, handle: str, url: str) -> None:
        self._styles[handle] = url

    def deregister(self, handle: str) -> None:
        self._styles.pop(handle, None)

    def query(self, handle: str) -> str | None:
        return self._styles.get(handle)

    def to_mapping(self) -> dict[str, str]:
        return dict(self._styles)


def _unused_handle(registry: StyleRegistry, name: str) -> str:
    """Return ``name``, suffixed while another registration already owns it."""
    candidate, suffix = name, 2
    while candidate in registry:
        candidate = f"{name}-{suffix}"
        suffix += 1
    return candidate


BufferCallback = Callable[[str], str]


class OutputBufferStack:
    """Nested output capture levels, innermost last."""

    def __init__(self) -> None:
        self._levels: list[tuple[StringIO, BufferCallback | None]] = []
        self._flushed = StringIO()

    @property
    def level(self) -> int:
        return len(self._levels)

    def start(self, callback: BufferCallback | None = None) -> bool:
        self._levels.append((StringIO(), callback))
        return True

    def write(self, text: str) -> None:
        target = self._levels[-1][0] if self._levels else self._flushed
        target.write(text)

    def end(self) -> str:
        """Close the innermost level and pass its content to the outer one."""
        if not self._levels:
            raise RuntimeError("No output buffer is active.")
        buffer, callback = self._levels.pop()
        content = buffer.getvalue()
        if callback is not None:
            content = callback(content)
        self.write(content)
        return content

    def end_all(self) -> str:
        while self._levels:
            self.end()
        return self.getvalue()

    def clean(self) -> None:
        """Discard every active level together with its captured content."""
        self._levels.clear()

    def getvalue(self) -> str:
        return self._flushed.getvalue()


class FontOptimizer:
    """Combine multiple Google Fonts stylesheet requests into fewer ones."""

    def __init__(self, config: OptimizerConfig | None = None) -> None:
        self.config = config or OptimizerConfig()
        self.candidates: list[str] = []
        self._enqueued: dict[str, str] = {}

    @property
    def mode(self) -> OperationMode:
        return self.config.operation_mode

    def reset(self) -> None:
        """Forget per-pass bookkeeping."""
        self.candidates = []
        self._enqueued.clear()

    def get_enqueued(self, handle: str | None = None) -> dict[str, str] | str | None:
        """Return every registration made by the optimizer, or a single URL."""
        if handle is not None:
            return self._enqueued.get(handle)
        return dict(self._enqueued)

    # Registration-list mode

    def find_candidate_handles(
        self, handles: Sequence[str], registry: StyleRegistry
    ) -> dict[str, str]:
        """Map the handles pointing at Google Fonts stylesheets to their URLs."""
        candidates: dict[str, str] = {}
        for handle in handles:
            url = registry.query(handle)
            if url and is_google_fonts_url(url):
                candidates[handle] = url
        return candidates

    def process_style_handles(
        self, handles: Sequence[str], registry: StyleRegistry
    ) -> list[str]:
        """Replace Google Fonts registrations in ``handles`` with combined ones."""
        candidate_handles = self.find_candidate_handles(handles, registry)
        if not has_enough_elements(candidate_handles):
            return list(handles)

        self.candidates = list(candidate_handles.values())
        result = FontCollection(self.candidates).combine()
        if result.is_empty:
            return list(handles)

        consumed = {
            handle for handle, url in candidate_handles.items() if url in result.original_urls
        }
        self._dequeue_style_handles(registry, consumed)
        new_handles: list[str] = []
        if result.main_url:
            handle = _unused_handle(registry, COMBINED_HANDLE)
            self._enqueue_style(registry, handle, result.main_url)
            new_handles.append(handle)
        index = 0
        for url in result.restricted_urls:
            index += 1
            while f"{COMBINED_TEXT_HANDLE_PREFIX}{index}" in registry:
                index += 1
            handle = f"{COMBINED_TEXT_HANDLE_PREFIX}{index}"
            self._enqueue_style(registry, handle, url)
            new_handles.append(handle)

        logger.info(
            "Replaced %d font stylesheet registration(s) with %d",
            len(consumed),
            len(new_handles),
        )
        dropped = consumed.union(new_handles)
        return [handle for handle in handles if handle not in dropped] + new_handles

    def _enqueue_style(self, registry: StyleRegistry, handle: str, url: str) -> None:
        registry.register(handle, url)
        self._enqueued[handle] = url

    def _dequeue_style_handles(self, registry: StyleRegistry, handles: set[str]) -> None:
        for handle in handles:
            registry.deregister(handle)
            self._enqueued.pop(handle, None)

    # Markup mode

    def process_markup(self, markup: str) -> str:
        """Return ``markup`` with its Google Fonts stylesheets combined."""
        self.candidates = find_font_hrefs(markup)
        if not has_enough_elements(self.candidates):
            return markup

        # Only links that can be taken out of the page may be merged.
        result = FontCollection(removable_hrefs(markup, self.candidates)).combine()
        if result.is_empty:
            return markup

        font_markup = self.build_fonts_markup(result)
        logger.info(
            "Combined %d font stylesheet(s) found in markup into %d",
            len(result.original_urls),
            len(result.urls),
        )
        return rewrite_markup(markup, font_markup, result.original_urls)

    def build_fonts_markup(self, result: CombinedResult) -> str:
        return build_fonts_markup(result, self.config.output_tag_format)

    @staticmethod
    def should_buffer(context: RequestContext | None = None) -> bool:
        """Return whether the current request is a front-end page render."""
        return (context or RequestContext()).is_frontend

    @staticmethod
    def is_markup_doable(content: str) -> bool:
        """Return whether ``content`` is an HTML document worth scanning."""
        is_html = has_html_tag(content) or has_html5_doctype(content)
        return is_html and not has_xsl_stylesheet(content)

    def start_buffering(
        self, buffers: OutputBufferStack, context: RequestContext | None = None
    ) -> bool:
        """Open a capture level whose content is rewritten when it closes."""
        if not self.should_buffer(context):
            return False
        if self.config.clean_output_buffers:
            buffers.clean()
        return buffers.start(self.end_buffering)

    def end_buffering(self, markup: str) -> str:
        if not self.is_markup_doable(markup):
            return markup
        return self.process_markup(markup)

    def process_output(self, markup: str, context: RequestContext | None = None) -> str:
        """Capture-then-transform ``markup`` for hosts without a buffer stack."""
        if not self.should_buffer(context):
            return markup
        return self.end_buffering(markup)


__all__ = [
    "FontOptimizer",
    "OutputBufferStack",
    "RequestContext",
    "StyleRegistry",
]
