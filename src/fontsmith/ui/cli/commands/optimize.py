"""Implementation of the ``fontsmith optimize`` command."""

from __future__ import annotations

from pathlib import Path

import typer

from fontsmith.core.config import OptimizerConfig, OutputTagFormat, load_config
from fontsmith.core.exceptions import ConfigurationError, exception_hint
from fontsmith.optimizer import FontOptimizer

from .._options import (
    ConfigOption,
    ForceOption,
    InputPathArgument,
    MarkupTypeOption,
    OutputPathOption,
)
from ..state import emit_error, emit_warning, get_cli_state


def _resolve_config(
    config_path: Path | None, markup_type: OutputTagFormat | None
) -> OptimizerConfig:
    config = load_config(config_path) if config_path is not None else OptimizerConfig()
    if markup_type is not None:
        config = config.model_copy(update={"output_tag_format": markup_type})
    return config


def optimize(
    input_path: InputPathArgument,
    output: OutputPathOption = None,
    markup_type: MarkupTypeOption = None,
    config_path: ConfigOption = None,
    force: ForceOption = False,
) -> None:
    """Combine the Google Fonts stylesheets of an HTML document."""
    state = get_cli_state()
    try:
        config = _resolve_config(config_path, markup_type)
    except ConfigurationError as exc:
        emit_error(exception_hint(exc) or str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    markup = input_path.read_text(encoding="utf-8")
    optimizer = FontOptimizer(config)
    if force:
        rewritten = optimizer.process_markup(markup)
    else:
        if not optimizer.is_markup_doable(markup):
            emit_warning(f"'{input_path.name}' is not an HTML document; left unchanged.")
        rewritten = optimizer.end_buffering(markup)

    if rewritten == markup and state.verbosity >= 1:
        state.console.log("No Google Fonts stylesheets to combine.")

    if output is None:
        typer.echo(rewritten, nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(rewritten, encoding="utf-8")
    if state.verbosity >= 1:
        state.console.log(f"Wrote {output}")
