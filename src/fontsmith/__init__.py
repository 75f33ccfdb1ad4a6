"""Primary public API for fontsmith."""

from __future__ import annotations

from fontsmith.core.config import (
    OperationMode,
    OptimizerConfig,
    OutputTagFormat,
    build_config,
    load_config,
)
from fontsmith.core.exceptions import (
    ConfigurationError,
    FontsmithError,
    InvalidFontRequestError,
)
from fontsmith.fonts import (
    CombinedResult,
    FontCollection,
    FontRequest,
    build_fonts_markup,
    find_font_hrefs,
    is_google_fonts_url,
    parse_font_url,
    rewrite_markup,
)
from fontsmith.optimizer import FontOptimizer, OutputBufferStack, RequestContext, StyleRegistry
from fontsmith.version import get_version


__version__ = get_version()

__all__ = [
    "CombinedResult",
    "ConfigurationError",
    "FontCollection",
    "FontOptimizer",
    "FontRequest",
    "FontsmithError",
    "InvalidFontRequestError",
    "OperationMode",
    "OptimizerConfig",
    "OutputBufferStack",
    "OutputTagFormat",
    "RequestContext",
    "StyleRegistry",
    "__version__",
    "build_config",
    "build_fonts_markup",
    "find_font_hrefs",
    "get_version",
    "is_google_fonts_url",
    "load_config",
    "parse_font_url",
    "rewrite_markup",
]
