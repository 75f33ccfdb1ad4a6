"""Implementation of the ``fontsmith inspect`` command."""

from __future__ import annotations

from rich.markup import escape
from rich.table import Table

from fontsmith.fonts.collection import FontCollection
from fontsmith.fonts.utils import is_google_fonts_url

from .._options import UrlsArgument
from ..state import CLIState, emit_warning, get_cli_state


def _print_url(state: CLIState, label: str, url: str) -> None:
    state.console.print(f"{label}: {url}", soft_wrap=True, markup=False, emoji=False)


def inspect(urls: UrlsArgument) -> None:
    """Show how Google Fonts stylesheet URLs would be parsed and combined."""
    state = get_cli_state()

    candidates: list[str] = []
    for url in urls:
        if is_google_fonts_url(url):
            candidates.append(url)
        else:
            emit_warning(f"Not a Google Fonts stylesheet URL: {url}")

    collection = FontCollection(candidates)

    table = Table(title="Font requests")
    table.add_column("Family", style="bold")
    table.add_column("Variants")
    table.add_column("Subsets")
    table.add_column("Text")
    for request in collection:
        table.add_row(
            request.family,
            ", ".join(request.variants) or "-",
            ", ".join(request.subsets) or "-",
            escape(repr(request.text)) if request.text is not None else "-",
        )
    state.console.print(table)

    result = collection.combine()
    if result.is_empty:
        state.console.print("Nothing to combine.")
        return

    if result.main_url:
        _print_url(state, "combined", result.main_url)
    for url in result.restricted_urls:
        _print_url(state, "restricted", url)
    state.console.print(f"replaces {len(result.original_urls)} stylesheet(s)")
