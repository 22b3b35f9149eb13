"""Sequential reader over the entries of a source archive."""

from __future__ import annotations

import logging
import tarfile
from pathlib import Path
from typing import Iterator

from .context import ArchiveEntry
from .exceptions import ArchiveIOError

logger = logging.getLogger(__name__)

HEADER_ERRORS = "surrogateescape"


def read_entry(
    archive: tarfile.TarFile,
    member: tarfile.TarInfo,
    archive_format: int,
    encoding: str,
) -> ArchiveEntry:
    """Build an :class:`ArchiveEntry` for the member the stream is positioned at."""

    try:
        header = member.tobuf(archive_format, encoding, HEADER_ERRORS)
    except ValueError as exc:
        raise ArchiveIOError(
            f"Entry '{member.name}' cannot be stored in the output format: {exc}"
        ) from exc
    fileobj = archive.extractfile(member) if member.isreg() else None
    return ArchiveEntry(
        path=member.name,
        size=member.size,
        header=header,
        member=member,
        fileobj=fileobj,
    )


def iter_entries(
    source: Path,
    archive_format: int = tarfile.PAX_FORMAT,
    encoding: str = "utf-8",
) -> Iterator[ArchiveEntry]:
    """Yield the entries of *source* in archive order.

    The archive is read as a forward-only stream, so each yielded entry's
    data must be consumed before the next entry is requested. Only
    uncompressed archives are accepted, since chunk sizes are planned
    against the size of the source file on disk.
    """

    source = Path(source)
    try:
        with tarfile.open(source, mode="r|", encoding=encoding) as archive:
            for member in archive:
                yield read_entry(archive, member, archive_format, encoding)
    except (OSError, tarfile.TarError) as exc:
        raise ArchiveIOError(f"Failed to read source archive {source}: {exc}") from exc
