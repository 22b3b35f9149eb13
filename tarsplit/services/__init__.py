"""Service layer exports."""
from .split_pipeline import (
    SplitPipeline,
    SplitRequest,
    SplitState,
    SplitStatus,
    build_default_pipeline,
)
from .chunk_writer import ChunkWriter
from .size_planner import DEFAULT_LIMITS, divide_rounded, plan_chunk_size

__all__ = [
    # Pipeline
    "SplitPipeline",
    "SplitRequest",
    "SplitState",
    "SplitStatus",
    "build_default_pipeline",
    # Chunk writing
    "ChunkWriter",
    # Size planning
    "DEFAULT_LIMITS",
    "divide_rounded",
    "plan_chunk_size",
]
