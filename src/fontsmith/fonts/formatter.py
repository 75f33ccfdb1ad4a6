"""Render combined font requests as HTML."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from fontsmith.core.config import OutputTagFormat
from fontsmith.fonts.collection import CombinedResult
from fontsmith.fonts.constants import WEBFONT_LOADER_URL
from fontsmith.fonts.request import FontRequest, parse_font_url


TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"


@lru_cache(maxsize=1)
def _environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(TEMPLATE_DIR),
        autoescape=True,
        keep_trailing_newline=True,
    )


def _loader_family(request: FontRequest) -> str:
    name = request.family
    if request.subsets:
        return f"{name}:{','.join(request.variants)}:{','.join(request.subsets)}"
    if request.variants:
        return f"{name}:{','.join(request.variants)}"
    return name


def build_link_markup(result: CombinedResult) -> str:
    """Return one stylesheet ``<link>`` per combined URL."""
    return _environment().get_template("links.html").render(urls=result.urls)


def build_script_markup(result: CombinedResult) -> str:
    """Return a WebFont loader snippet requesting the combined URLs.

    The main URL goes through the loader's ``google`` module. Restricted URLs
    carry a ``text`` parameter that module cannot express, so they are loaded
    verbatim through the ``custom`` module.
    """
    config: dict[str, dict[str, list[str]]] = {}
    if result.main_url:
        config["google"] = {
            "families": [_loader_family(request) for request in parse_font_url(result.main_url)]
        }
    if result.restricted_urls:
        families: dict[str, None] = {}
        for url in result.restricted_urls:
            families.update(dict.fromkeys(request.family for request in parse_font_url(url)))
        config["custom"] = {"families": list(families), "urls": list(result.restricted_urls)}

    template = _environment().get_template("webfont_loader.html")
    return template.render(config=config, loader=WEBFONT_LOADER_URL)


def build_fonts_markup(
    result: CombinedResult,
    markup_type: OutputTagFormat = OutputTagFormat.LINK_ELEMENTS,
) -> str:
    """Render ``result`` using the requested markup flavour."""
    if result.is_empty:
        return ""
    if markup_type is OutputTagFormat.LOADER_SCRIPT:
        return build_script_markup(result)
    return build_link_markup(result)


__all__ = ["TEMPLATE_DIR", "build_fonts_markup", "build_link_markup", "build_script_markup"]
