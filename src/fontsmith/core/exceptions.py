"""Custom exception hierarchy for the font request optimizer."""

from __future__ import annotations


class FontsmithError(RuntimeError):
    """Base exception for font optimization failures."""


class InvalidFontRequestError(FontsmithError, ValueError):
    """Raised when a font family segment cannot be interpreted."""


class ConfigurationError(FontsmithError):
    """Raised when optimizer options cannot be loaded or validated."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "ConfigurationError",
    "FontsmithError",
    "InvalidFontRequestError",
    "exception_hint",
    "exception_messages",
]
