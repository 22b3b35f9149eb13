"""Scoped writer for a single output chunk."""

from __future__ import annotations

import logging
import tarfile
from pathlib import Path
from typing import IO, Any, Optional

from .context import ArchiveEntry
from .exceptions import ArchiveIOError

logger = logging.getLogger(__name__)

ARCHIVE_FORMATS = {
    "gnu": tarfile.GNU_FORMAT,
    "pax": tarfile.PAX_FORMAT,
    "ustar": tarfile.USTAR_FORMAT,
}


def resolve_format(name: str) -> int:
    """Return the :mod:`tarfile` format constant for *name*."""

    try:
        return ARCHIVE_FORMATS[name.lower()]
    except KeyError as exc:
        raise ValueError(
            f"Unsupported archive format '{name}', expected one of "
            f"{', '.join(sorted(ARCHIVE_FORMATS))}"
        ) from exc


class ChunkArchiveWriter:
    """Own one output archive from creation until it is sealed.

    The writer is used as a context manager. Leaving the block normally
    seals the archive (end-of-archive blocks written, file closed). Leaving
    it with an exception discards the partial file instead, so no truncated
    archive is left behind.
    """

    def __init__(
        self,
        path: Path,
        archive_format: int = tarfile.PAX_FORMAT,
        encoding: str = "utf-8",
        copy_buffer_size: Optional[int] = None,
    ) -> None:
        self.path = Path(path)
        self.archive_format = archive_format
        self.encoding = encoding
        self.copy_buffer_size = copy_buffer_size
        self.bytes_written = 0
        self.entry_count = 0
        self.sealed = False
        self._handle: Optional[IO[bytes]] = None
        self._archive: Optional[tarfile.TarFile] = None

    def __enter__(self) -> "ChunkArchiveWriter":
        self.open()
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        exc_tb: Optional[Any],
    ) -> Optional[bool]:
        if exc_type is None:
            self.seal()
        else:
            self.discard()
        return None

    @property
    def is_open(self) -> bool:
        return self._archive is not None

    def open(self) -> None:
        """Create the chunk file and start an empty archive in it."""

        if self.is_open or self.sealed:
            raise ArchiveIOError(f"Chunk {self.path} was already opened")
        try:
            self._handle = self.path.open("wb")
            self._archive = tarfile.open(
                fileobj=self._handle,
                mode="w",
                format=self.archive_format,
                encoding=self.encoding,
                copybufsize=self.copy_buffer_size,
            )
        except (OSError, tarfile.TarError) as exc:
            self._close_handle()
            raise ArchiveIOError(f"Unable to create chunk {self.path}: {exc}") from exc
        logger.debug(f"Opened chunk {self.path}")

    def append(self, entry: ArchiveEntry) -> None:
        """Copy *entry* header and data into the archive."""

        if self._archive is None:
            raise ArchiveIOError(f"Chunk {self.path} is not open for writing")
        try:
            self._archive.addfile(entry.member, entry.fileobj)
        except (OSError, tarfile.TarError) as exc:
            raise ArchiveIOError(
                f"Failed to copy entry '{entry.path}' into {self.path}: {exc}"
            ) from exc
        self.bytes_written += entry.footprint
        self.entry_count += 1

    def seal(self) -> Path:
        """Write the end-of-archive trailer and close the file."""

        if self.sealed:
            return self.path
        if self._archive is None:
            raise ArchiveIOError(f"Chunk {self.path} is not open for writing")
        try:
            try:
                self._archive.close()
            finally:
                self._close_handle()
        except OSError as exc:
            self.discard()
            raise ArchiveIOError(f"Failed to seal chunk {self.path}: {exc}") from exc
        self._archive = None
        self.sealed = True
        logger.debug(
            f"Sealed chunk {self.path} ({self.entry_count} entries, "
            f"{self.bytes_written} bytes of entries)"
        )
        return self.path

    def discard(self) -> None:
        """Close the file without a trailer and delete it."""

        self._archive = None
        self._close_handle()
        if self.path.exists():
            self.path.unlink()
            logger.warning(f"Removed incomplete chunk {self.path}")

    def _close_handle(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None
