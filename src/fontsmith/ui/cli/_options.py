"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from fontsmith.core.config import OutputTagFormat


INPUTS_PANEL = "Input Handling"
OUTPUT_PANEL = "Output"
DIAGNOSTICS_PANEL = "Diagnostics"

InputPathArgument = Annotated[
    Path,
    typer.Argument(
        metavar="INPUT",
        help="HTML document whose Google Fonts stylesheets should be combined.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

UrlsArgument = Annotated[
    list[str],
    typer.Argument(
        metavar="URL...",
        help="Google Fonts stylesheet URLs to analyse.",
        rich_help_panel=INPUTS_PANEL,
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="YAML file holding optimizer options (outputTagFormat, ...).",
        exists=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

OutputPathOption = Annotated[
    Path | None,
    typer.Option(
        "--output",
        "-o",
        help="Write the rewritten document to this file instead of stdout.",
        dir_okay=False,
        resolve_path=True,
        rich_help_panel=OUTPUT_PANEL,
    ),
]

MarkupTypeOption = Annotated[
    OutputTagFormat | None,
    typer.Option(
        "--markup-type",
        "-m",
        help="Replacement markup: stylesheet links or a WebFont loader script.",
        case_sensitive=False,
        rich_help_panel=OUTPUT_PANEL,
    ),
]

ForceOption = Annotated[
    bool,
    typer.Option(
        "--force",
        help="Rewrite the input even when it does not look like an HTML document.",
        rich_help_panel=INPUTS_PANEL,
    ),
]
