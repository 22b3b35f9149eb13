"""Write the entries of a source archive into size-bounded chunk archives."""
from __future__ import annotations

import logging
import tarfile
from contextlib import ExitStack
from pathlib import Path
from typing import Iterable, List, Optional

from tarsplit.libs.tar_archive import (
    ArchiveEntry,
    ChunkArchiveWriter,
    ChunkState,
    ChunkStatus,
    chunk_filename,
)

logger = logging.getLogger(__name__)


class ChunkWriter:
    """Split an ordered entry stream into sealed chunk archives.

    Each entry is charged its footprint (header plus block-padded data).
    Before an entry is appended, the open chunk is sealed if it already
    holds an entry and the footprint would push it past ``max_chunk_size``.
    An entry larger than the maximum therefore always ends up alone in its
    chunk, and that chunk exceeds the maximum.
    """

    def __init__(
        self,
        target: Path,
        prefix: str,
        stem: str,
        max_chunk_size: int,
        archive_format: int = tarfile.PAX_FORMAT,
        encoding: str = "utf-8",
        copy_buffer_size: Optional[int] = None,
    ):
        self.target = Path(target)
        self.prefix = prefix
        self.stem = stem
        self.max_chunk_size = max_chunk_size
        self.archive_format = archive_format
        self.encoding = encoding
        self.copy_buffer_size = copy_buffer_size
        self.state = ChunkState()

    def chunk_path(self, index: int) -> Path:
        return self.target / chunk_filename(self.prefix, self.stem, index)

    def write(self, entries: Iterable[ArchiveEntry]) -> List[Path]:
        """
        Copy *entries* into chunk archives under the target directory.

        Returns:
            Paths of the sealed chunks in index order (at least one)
        """
        self.state = state = ChunkState()
        with ExitStack() as stack:
            for entry in entries:
                footprint = entry.footprint
                if state.crosses_boundary(footprint, self.max_chunk_size):
                    logger.info(f"Reached chunk boundary, writing chunk {state.index}")
                    self._seal_chunk(state, stack)

                if state.writer is None:
                    self._open_chunk(state, stack)

                if footprint > self.max_chunk_size:
                    logger.warning(
                        f"Entry '{entry.path}' ({footprint} bytes) exceeds the maximum "
                        f"chunk size of {self.max_chunk_size} bytes, chunk {state.index} "
                        f"will be oversized"
                    )

                state.writer.append(entry)
                state.accumulated_size += footprint
                state.entry_count += 1
                state.total_entries += 1

            if state.writer is None:
                self._open_chunk(state, stack)
            logger.info("Writing final chunk")
            self._seal_chunk(state, stack, final=True)

        return list(state.sealed_paths)

    def _open_chunk(self, state: ChunkState, stack: ExitStack) -> None:
        writer = ChunkArchiveWriter(
            self.chunk_path(state.index),
            archive_format=self.archive_format,
            encoding=self.encoding,
            copy_buffer_size=self.copy_buffer_size,
        )
        state.writer = stack.enter_context(writer)
        state.status = ChunkStatus.ACCUMULATING

    def _seal_chunk(self, state: ChunkState, stack: ExitStack, final: bool = False) -> None:
        # Closing the stack runs the writer's normal exit, which seals it.
        stack.close()
        state.status = ChunkStatus.SEALED
        state.sealed_paths.append(state.writer.path)
        logger.debug(
            f"Chunk {state.index} sealed with {state.entry_count} entries "
            f"({state.accumulated_size} bytes)"
        )
        if not final:
            state.advance()
