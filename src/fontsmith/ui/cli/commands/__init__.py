"""CLI command implementations exposed via ``fontsmith.ui.cli``."""

from __future__ import annotations

from .inspect_urls import inspect
from .optimize import optimize


__all__ = ["inspect", "optimize"]
