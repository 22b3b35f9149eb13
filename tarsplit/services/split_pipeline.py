"""Split pipeline orchestrating a complete archive split.

Pipeline Steps:
1. Validate - Check the request and the source/target paths
2. Plan - Derive the maximum chunk size from the source size
3. Split - Stream source entries into sealed chunk archives
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, MutableMapping, Optional
from uuid import uuid4

from tarsplit.config import AppConfig, get_config
from tarsplit.libs.tar_archive import (
    ConfigurationError,
    PathError,
    iter_entries,
    resolve_format,
    source_stem,
)

from .chunk_writer import ChunkWriter
from .size_planner import plan_chunk_size

logger = logging.getLogger(__name__)


class SplitStatus(str, Enum):
    """Split lifecycle states."""
    PENDING = "pending"
    VALIDATING = "validating"
    PLANNING = "planning"
    SPLITTING = "splitting"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class SplitRequest:
    """Inbound request to split an archive."""
    source: Path
    target: Path
    chunk_size: Optional[int] = None
    num_chunks: Optional[int] = None
    prefix: str = "split"

    def __post_init__(self) -> None:
        self.source = Path(self.source)
        self.target = Path(self.target)


@dataclass
class SplitState:
    """In-memory split tracking with step information."""
    workflow_id: str
    status: SplitStatus
    message: Optional[str] = None
    current_step: Optional[str] = None
    steps_completed: List[str] = field(default_factory=list)
    files_created: List[str] = field(default_factory=list)
    metrics: Dict[str, Any] = field(default_factory=dict)


class SplitPipeline:
    """Orchestrate validation, planning and chunk writing."""

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        status_store: Optional[MutableMapping[str, SplitState]] = None,
    ):
        """
        Initialize the split pipeline.

        Args:
            config: Application configuration (limits and archive options)
            status_store: Optional store for split states
        """
        self.config = config or get_config()
        self.status_store: MutableMapping[str, SplitState] = (
            status_store if status_store is not None else {}
        )

    def run(self, request: SplitRequest, workflow_id: Optional[str] = None) -> SplitState:
        """
        Execute the split.

        Args:
            request: Split request with source, target and sizing
            workflow_id: Optional workflow ID (generated if not provided)

        Returns:
            SplitState with final status
        """
        workflow_id = workflow_id or str(uuid4())
        state = SplitState(
            workflow_id=workflow_id,
            status=SplitStatus.PENDING,
            current_step="initializing",
        )
        self._update_state(state)

        try:
            # Step 1: Validate
            state.status = SplitStatus.VALIDATING
            state.current_step = "validate"
            self._update_state(state)

            self._validate_request(request)
            self._validate_paths(request)
            state.steps_completed.append("validate")

            # Step 2: Plan
            state.status = SplitStatus.PLANNING
            state.current_step = "plan"
            self._update_state(state)

            source_size = request.source.stat().st_size
            logger.info(f"Source archive is {source_size} bytes")
            max_chunk_size = plan_chunk_size(
                request.chunk_size,
                request.num_chunks,
                source_size,
                limits=self.config.limits,
            )
            logger.info(f"Maximum chunk size will be {max_chunk_size} bytes")
            state.metrics["source_size"] = source_size
            state.metrics["max_chunk_size"] = max_chunk_size
            state.steps_completed.append("plan")

            # Step 3: Split
            state.status = SplitStatus.SPLITTING
            state.current_step = "split"
            self._update_state(state)

            archive_format = resolve_format(self.config.archive.format)
            writer = ChunkWriter(
                request.target,
                request.prefix,
                source_stem(request.source),
                max_chunk_size,
                archive_format=archive_format,
                encoding=self.config.archive.encoding,
                copy_buffer_size=self.config.archive.copy_buffer_size,
            )
            try:
                chunk_paths = writer.write(
                    iter_entries(
                        request.source,
                        archive_format=archive_format,
                        encoding=self.config.archive.encoding,
                    )
                )
            finally:
                state.files_created.extend(str(p) for p in writer.state.sealed_paths)

            state.metrics["chunk_count"] = len(chunk_paths)
            state.metrics["entry_count"] = writer.state.total_entries
            state.steps_completed.append("split")

            state.status = SplitStatus.COMPLETED
            state.current_step = None
            state.message = f"Split {request.source.name} into {len(chunk_paths)} chunks"
            self._update_state(state)

            logger.info(f"Split completed for workflow {workflow_id}")
            return state

        except Exception as exc:
            state.status = SplitStatus.FAILED
            state.message = str(exc)
            self._update_state(state)
            logger.exception(f"Split failed for workflow {workflow_id}: {exc}")
            raise

    def _validate_request(self, request: SplitRequest) -> None:
        """Validate the split request."""
        if request.chunk_size is None and request.num_chunks is None:
            raise ConfigurationError("Must provide either chunk size or number of chunks")
        if request.chunk_size is not None and request.num_chunks is not None:
            raise ConfigurationError(
                "Chunk size and number of chunks are mutually exclusive"
            )
        if not request.prefix:
            raise ConfigurationError("Prefix must not be empty")

    def _validate_paths(self, request: SplitRequest) -> None:
        """Ensure the source is a file and the target an existing directory."""
        if not request.source.is_file():
            raise PathError(f"Source must point to an existing archive: {request.source}")
        if not request.target.is_dir():
            raise PathError(f"Target must point to an existing directory: {request.target}")

    def _update_state(self, state: SplitState) -> None:
        """Update the state in the store."""
        self.status_store[state.workflow_id] = state


def build_default_pipeline(
    status_store: Optional[MutableMapping[str, SplitState]] = None,
    config: Optional[AppConfig] = None,
    logger: Optional[logging.Logger] = None,
) -> SplitPipeline:
    """
    Build a SplitPipeline with default configuration.

    Args:
        status_store: Optional store for split states
        config: Optional configuration, the loaded one is used otherwise
        logger: Optional logger instance

    Returns:
        Configured SplitPipeline instance
    """
    pipeline = SplitPipeline(config=config, status_store=status_store)

    if logger:
        logger.debug("Default split pipeline constructed")

    return pipeline
