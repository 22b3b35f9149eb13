"""Context objects used while splitting an archive."""

from __future__ import annotations

import tarfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import IO, TYPE_CHECKING, List, Optional

from .utils import entry_footprint

if TYPE_CHECKING:  # pragma: no cover - typing aid only
    from .base import ChunkArchiveWriter


@dataclass(slots=True)
class ArchiveEntry:
    """A single member of the source archive.

    ``fileobj`` reads from the source stream and is only valid until the
    next entry is requested. It is ``None`` for members without data
    (directories, links, devices).
    """

    path: str
    size: int
    header: bytes
    member: tarfile.TarInfo
    fileobj: Optional[IO[bytes]] = None

    @property
    def footprint(self) -> int:
        """Bytes this entry occupies once written to a chunk."""

        return entry_footprint(self.size, header_size=len(self.header))


class ChunkStatus(str, Enum):
    """Lifecycle of the chunk currently being produced."""

    IDLE = "idle"
    ACCUMULATING = "accumulating"
    SEALED = "sealed"


@dataclass
class ChunkState:
    """Running accumulator owned by the chunk writer."""

    index: int = 0
    accumulated_size: int = 0
    entry_count: int = 0
    total_entries: int = 0
    status: ChunkStatus = ChunkStatus.IDLE
    writer: Optional["ChunkArchiveWriter"] = None
    sealed_paths: List[Path] = field(default_factory=list)

    def crosses_boundary(self, footprint: int, max_chunk_size: int) -> bool:
        """Return ``True`` when *footprint* does not fit in a non-empty chunk."""

        return (
            self.entry_count > 0
            and self.accumulated_size + footprint > max_chunk_size
        )

    def advance(self) -> None:
        """Move to the next chunk index with an empty accumulator."""

        self.index += 1
        self.accumulated_size = 0
        self.entry_count = 0
        self.status = ChunkStatus.IDLE
        self.writer = None
