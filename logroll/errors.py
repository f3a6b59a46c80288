from __future__ import annotations

"""Typed error taxonomy.

Every failure that reaches an operator is one of these classes. Rotation
errors keep the offending path and chain the underlying ``OSError``.
"""

from typing import Optional

__all__ = [
    "LogrollError",
    "ConfigError",
    "CLIError",
    "RotationError",
    "SourceNotFound",
    "RenameFailed",
    "RecreateFailed",
    "WriteFailed",
    "format_error",
]


class LogrollError(Exception):
    """Base class for all typed, operator-facing errors in logroll."""
    pass


class ConfigError(LogrollError):
    """Configuration invalid, unknown keys, out-of-range values, etc."""
    pass


class CLIError(LogrollError):
    """Generic CLI failure wrapper for unexpected errors in CLI code paths."""
    pass


class RotationError(LogrollError):
    """A rotation step failed; nothing is retried past this point."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class SourceNotFound(RotationError):
    """The file to rotate does not exist or cannot be accessed."""
    pass


class RenameFailed(RotationError):
    """Neither the rename nor the copy+delete fallback completed."""
    pass


class RecreateFailed(RotationError):
    """The new file at the source path could not be opened after retries."""
    pass


class WriteFailed(RotationError):
    """The marker could not be written, flushed or closed cleanly."""
    pass


def format_error(e: BaseException) -> str:
    """Return a short, uniform operator-facing message like 'RenameFailed: detail'."""
    name = e.__class__.__name__
    msg = str(e).strip()
    return f"{name}: {msg}" if msg else name


# Keep star-export order deterministic for tests and tooling
__all__ = sorted(__all__)
