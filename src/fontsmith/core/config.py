"""Configuration models used by the font optimizer.

OptimizerConfig

`operation_mode` (`OperationMode`)
: Selects where candidate stylesheets come from. `registrationFiltering`
  (default) only inspects named style registrations, `fullMarkupScan` captures
  the rendered page and scans the whole document.

`output_tag_format` (`OutputTagFormat`)
: Shape of the replacement markup. `linkElements` (default) emits one
  `<link rel="stylesheet">` per combined URL, `loaderScript` emits a single
  WebFont loader invocation.

`clean_output_buffers` (`bool`)
: Discard nested output buffers before the page capture starts. Only relevant
  to `fullMarkupScan`.

Every option also accepts its camelCase alias (`operationMode`,
`outputTagFormat`, `cleanOutputBuffers`) so configuration files written for
other hosts load unchanged.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import yaml

from fontsmith.core.exceptions import ConfigurationError


class OperationMode(str, Enum):
    """Where the optimizer looks for font stylesheet requests."""

    REGISTRATION_FILTERING = "registrationFiltering"
    FULL_MARKUP_SCAN = "fullMarkupScan"


class OutputTagFormat(str, Enum):
    """Markup flavour emitted for the combined requests."""

    LINK_ELEMENTS = "linkElements"
    LOADER_SCRIPT = "loaderScript"


_MODE_SHORTHANDS = {
    "enqueued_styles_only": OperationMode.REGISTRATION_FILTERING,
    "registration": OperationMode.REGISTRATION_FILTERING,
    "markup": OperationMode.FULL_MARKUP_SCAN,
}

_FORMAT_SHORTHANDS = {
    "link": OutputTagFormat.LINK_ELEMENTS,
    "links": OutputTagFormat.LINK_ELEMENTS,
    "script": OutputTagFormat.LOADER_SCRIPT,
}


class OptimizerConfig(BaseModel):
    """Switches controlling how font requests are found and replaced."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    operation_mode: OperationMode = Field(
        default=OperationMode.REGISTRATION_FILTERING,
        alias="operationMode",
        description="Source of candidate stylesheet requests",
    )
    output_tag_format: OutputTagFormat = Field(
        default=OutputTagFormat.LINK_ELEMENTS,
        alias="outputTagFormat",
        description="Replacement markup flavour",
    )
    clean_output_buffers: bool = Field(
        default=False,
        alias="cleanOutputBuffers",
        description="Flush nested buffers before scanning the page",
    )

    @field_validator("operation_mode", mode="before")
    @classmethod
    def _coerce_mode(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _MODE_SHORTHANDS.get(value.strip().lower(), value)
        return value

    @field_validator("output_tag_format", mode="before")
    @classmethod
    def _coerce_format(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _FORMAT_SHORTHANDS.get(value.strip().lower(), value)
        return value

    @property
    def scans_markup(self) -> bool:
        return self.operation_mode is OperationMode.FULL_MARKUP_SCAN


def build_config(options: Mapping[str, Any] | None = None) -> OptimizerConfig:
    """Validate ``options`` and wrap failures in :class:`ConfigurationError`."""
    try:
        return OptimizerConfig.model_validate(dict(options or {}))
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid optimizer options: {exc}") from exc


def load_config(path: Path) -> OptimizerConfig:
    """Load optimizer options from a YAML mapping stored at ``path``."""
    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigurationError(f"Unable to read configuration file '{path}'.") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Malformed YAML in configuration file '{path}'.") from exc

    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise ConfigurationError(
            f"Configuration file '{path}' must contain a mapping, got {type(payload).__name__}."
        )
    return build_config(payload)


__all__ = [
    "OperationMode",
    "OptimizerConfig",
    "OutputTagFormat",
    "build_config",
    "load_config",
]
