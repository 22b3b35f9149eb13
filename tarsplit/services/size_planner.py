"""Derive the maximum chunk size for a split."""
from __future__ import annotations

from typing import Optional

from tarsplit.config import SplitLimits
from tarsplit.libs.tar_archive.exceptions import ConfigurationError

DEFAULT_LIMITS = SplitLimits()


def divide_rounded(numerator: int, denominator: int) -> int:
    """Integer division rounded to the nearest integer, halves rounded up."""
    return (2 * numerator + denominator) // (2 * denominator)


def plan_chunk_size(
    chunk_size: Optional[int],
    num_chunks: Optional[int],
    source_size: int,
    limits: SplitLimits = DEFAULT_LIMITS,
) -> int:
    """
    Return the maximum size in bytes of each output chunk.

    Args:
        chunk_size: Explicit maximum chunk size (exclusive with num_chunks)
        num_chunks: Desired number of chunks (exclusive with chunk_size)
        source_size: Size of the source archive in bytes
        limits: Minimum archive size and chunk count floors

    Returns:
        The chunk size threshold, used as a maximum rather than an average

    Raises:
        ConfigurationError: If the inputs are missing, conflicting or
            produce a chunk size outside the allowed range
    """
    if chunk_size is None and num_chunks is None:
        raise ConfigurationError("Must provide either chunk size or number of chunks")
    if chunk_size is not None and num_chunks is not None:
        raise ConfigurationError(
            "Chunk size and number of chunks are mutually exclusive"
        )
    if source_size < limits.min_archive_size:
        raise ConfigurationError(
            f"Source archive is less than {limits.min_archive_size} bytes ({source_size})"
        )

    if chunk_size is None:
        if num_chunks <= limits.min_num_chunks:
            raise ConfigurationError(
                f"Number of chunks must be greater than {limits.min_num_chunks}"
            )
        max_chunk_size = divide_rounded(source_size, num_chunks)
        if max_chunk_size < limits.min_archive_size:
            raise ConfigurationError(
                f"Calculated chunk size must be at least {limits.min_archive_size} bytes, "
                f"try providing a lower number of chunks (<{num_chunks})"
            )
        return max_chunk_size

    if chunk_size < limits.min_archive_size:
        raise ConfigurationError(
            f"Chunk size must be at least {limits.min_archive_size} bytes"
        )
    if chunk_size >= source_size:
        raise ConfigurationError(
            f"Chunk size must be less than source archive size "
            f"({chunk_size} >= {source_size})"
        )
    return chunk_size
