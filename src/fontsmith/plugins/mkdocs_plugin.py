"""MkDocs plugin combining Google Fonts stylesheet requests.

In registration mode the plugin rewrites ``extra_css`` once per build. In
markup mode every rendered page is scanned, which also catches the font links
a theme writes into its templates.
"""

from __future__ import annotations

from typing import Any

from mkdocs.config import config_options
from mkdocs.config.defaults import MkDocsConfig
from mkdocs.exceptions import PluginError
from mkdocs.plugins import BasePlugin
from mkdocs.structure.pages import Page
from mkdocs.utils import log

from fontsmith.core.config import build_config
from fontsmith.core.exceptions import ConfigurationError
from fontsmith.optimizer import FontOptimizer, RequestContext, StyleRegistry


EXTRA_CSS_HANDLE_PREFIX = "extra-css-"


class FontOptimizerPlugin(BasePlugin):
    """Merge the Google Fonts stylesheets of a site into combined requests."""

    config_scheme = (
        ("enabled", config_options.Type(bool, default=True)),
        ("mode", config_options.Type(str, default="registrationFiltering")),
        ("markup_type", config_options.Type(str, default="linkElements")),
        ("clean_output_buffers", config_options.Type(bool, default=False)),
    )

    def __init__(self) -> None:
        self._optimizer: FontOptimizer | None = None

    def _build_optimizer(self) -> FontOptimizer:
        try:
            config = build_config(
                {
                    "operation_mode": self.config.get("mode", "registrationFiltering"),
                    "output_tag_format": self.config.get("markup_type", "linkElements"),
                    "clean_output_buffers": self.config.get("clean_output_buffers", False),
                }
            )
        except ConfigurationError as exc:
            raise PluginError(f"fontsmith: {exc}") from exc
        return FontOptimizer(config)

    def _filter_extra_css(self, optimizer: FontOptimizer, entries: list[Any]) -> list[Any]:
        urls = {
            f"{EXTRA_CSS_HANDLE_PREFIX}{index}": str(entry)
            for index, entry in enumerate(entries, start=1)
        }
        originals = dict(zip(urls, entries, strict=True))
        registry = StyleRegistry(urls)

        handles = optimizer.process_style_handles(list(urls), registry)
        filtered = [originals.get(handle) or registry.query(handle) for handle in handles]
        replaced = optimizer.get_enqueued()
        if replaced:
            log.info(
                "fontsmith: combined Google Fonts in extra_css into %d request(s)", len(replaced)
            )
        optimizer.reset()
        return filtered

    def on_config(self, config: MkDocsConfig) -> MkDocsConfig:
        """Prepare the optimizer and filter ``extra_css`` in registration mode."""
        self._optimizer = None
        if not self.config.get("enabled", True):
            return config

        optimizer = self._build_optimizer()
        self._optimizer = optimizer
        if not optimizer.config.scans_markup:
            entries = list(config.get("extra_css") or [])
            config["extra_css"] = self._filter_extra_css(optimizer, entries)
        return config

    def on_post_page(self, output: str, page: Page, config: MkDocsConfig) -> str:
        """Rewrite the rendered page when markup scanning is enabled."""
        del config
        optimizer = self._optimizer
        if optimizer is None or not optimizer.config.scans_markup:
            return output

        rewritten = optimizer.process_output(output, RequestContext())
        if rewritten != output:
            location = getattr(getattr(page, "file", None), "src_uri", None) or "page"
            log.debug("fontsmith: combined Google Fonts stylesheets on %s", location)
        optimizer.reset()
        return rewritten


__all__ = ["EXTRA_CSS_HANDLE_PREFIX", "FontOptimizerPlugin"]
