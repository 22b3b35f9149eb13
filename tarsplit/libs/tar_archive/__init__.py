"""Top-level exports for the :mod:`tar_archive` package."""

from __future__ import annotations

from .base import ARCHIVE_FORMATS, ChunkArchiveWriter, resolve_format
from .context import ArchiveEntry, ChunkState, ChunkStatus
from .exceptions import ArchiveIOError, ConfigurationError, PathError, TarSplitError
from .reader import iter_entries
from .utils import (
    BLOCK_SIZE,
    chunk_filename,
    entry_footprint,
    round_up_to_block,
    source_stem,
)

__all__ = [
    "ARCHIVE_FORMATS",
    "ArchiveEntry",
    "ArchiveIOError",
    "BLOCK_SIZE",
    "ChunkArchiveWriter",
    "ChunkState",
    "ChunkStatus",
    "ConfigurationError",
    "PathError",
    "TarSplitError",
    "chunk_filename",
    "entry_footprint",
    "iter_entries",
    "resolve_format",
    "round_up_to_block",
    "source_stem",
]
