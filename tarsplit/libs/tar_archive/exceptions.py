"""Custom exceptions for tar splitting."""

from __future__ import annotations


class TarSplitError(RuntimeError):
    """Base exception for split errors."""


class ConfigurationError(TarSplitError):
    """Raised when chunk sizing or configuration values are missing or invalid."""


class PathError(TarSplitError):
    """Raised when the source is not a file or the target is not a directory."""


class ArchiveIOError(TarSplitError):
    """Raised when reading the source or writing a chunk fails."""
