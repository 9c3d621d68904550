"""Exceptions raised while loading style documents."""

from __future__ import annotations

from pathlib import Path


class StyleError(Exception):
    """Base class for all mdlstyle errors."""


class NotFoundError(StyleError, FileNotFoundError):
    """Raised when the style file does not exist."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"style file not found: {path}")


class ParseError(StyleError, ValueError):
    """Raised when a style document is malformed.

    Carries the offending path and 1-based line number when they are known.
    """

    def __init__(self, message: str, *, path: Path | None = None, line: int | None = None) -> None:
        self.message = message
        self.path = path
        self.line = line
        super().__init__(message)

    def __str__(self) -> str:
        location = str(self.path) if self.path is not None else "<string>"
        if self.line is not None:
            location = f"{location}:{self.line}"
        return f"{location}: {self.message}"


class RuleConflictError(ParseError):
    """Raised when a rule (or tag) is both enabled with options and excluded."""
