"""Utility helpers for tar block arithmetic and chunk naming."""

from __future__ import annotations

from pathlib import Path

BLOCK_SIZE = 512
"""Tar header and data are aligned to this many bytes."""


def round_up_to_block(size: int, block_size: int = BLOCK_SIZE) -> int:
    """Return *size* rounded up to the next multiple of *block_size*."""

    if size < 0:
        raise ValueError(f"Size must not be negative: {size}")
    return -(-size // block_size) * block_size


def entry_footprint(size: int, header_size: int = BLOCK_SIZE) -> int:
    """Return the bytes an entry of *size* occupies inside an archive.

    The data part is charged at least one block, so empty members still
    count ``header_size + 512``.
    """

    return header_size + max(BLOCK_SIZE, round_up_to_block(size))


def chunk_filename(prefix: str, stem: str, index: int) -> str:
    """Return the deterministic file name of chunk *index*."""

    return f"{prefix}_{stem}_{index}.tar"


def source_stem(source: Path) -> str:
    """Return the file stem of *source* used in chunk names.

    Only the last suffix is dropped, so ``backup.tar.gz`` gives ``backup.tar``.
    """

    return Path(source).stem
