"""Request/response models for split jobs."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator


class SplitJobRequest(BaseModel):
    """Payload for kicking off a split."""

    source: str
    target: str
    chunk_size: Optional[int] = Field(default=None, gt=0)
    num_chunks: Optional[int] = Field(default=None, gt=0)
    prefix: Optional[str] = None

    @model_validator(mode="after")
    def check_sizing(self) -> "SplitJobRequest":
        if (self.chunk_size is None) == (self.num_chunks is None):
            raise ValueError("Provide exactly one of chunk_size or num_chunks")
        return self


class SplitJobStatus(BaseModel):
    workflow_id: str
    status: str
    source: Optional[str] = None
    detail: Optional[str] = None
    chunks: List[str] = Field(default_factory=list)
    metrics: Dict[str, Any] = Field(default_factory=dict)
