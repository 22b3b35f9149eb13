"""Data models (Pydantic) for the application."""

from tarsplit.models.splits import SplitJobRequest, SplitJobStatus

__all__ = [
    "SplitJobRequest",
    "SplitJobStatus",
]
