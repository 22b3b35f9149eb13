"""Split job routes."""
from __future__ import annotations

import logging
from typing import Dict
from uuid import uuid4

from fastapi import APIRouter, BackgroundTasks, Body, HTTPException

from tarsplit.config import get_config
from tarsplit.models.splits import SplitJobRequest, SplitJobStatus
from tarsplit.services import (
    SplitPipeline,
    SplitRequest,
    SplitState,
    SplitStatus,
    build_default_pipeline,
)

router = APIRouter(prefix="/api/v1", tags=["splits"])
logger = logging.getLogger(__name__)

STATUSES: Dict[str, SplitJobStatus] = {}
PIPELINE_STATES: Dict[str, SplitState] = {}
pipeline: SplitPipeline = build_default_pipeline(status_store=PIPELINE_STATES, logger=logger)


def _state_to_status(state: SplitState, source: str = "") -> SplitJobStatus:
    return SplitJobStatus(
        workflow_id=state.workflow_id,
        status=state.status.value if isinstance(state.status, SplitStatus) else str(state.status),
        source=source,
        detail=state.message,
        chunks=list(state.files_created),
        metrics=dict(state.metrics),
    )


def _run_pipeline(workflow_id: str, payload: SplitJobRequest) -> None:
    """Run the split in the background."""
    STATUSES[workflow_id] = SplitJobStatus(
        workflow_id=workflow_id,
        status=SplitStatus.SPLITTING.value,
        source=payload.source,
    )
    request = SplitRequest(
        source=payload.source,
        target=payload.target,
        chunk_size=payload.chunk_size,
        num_chunks=payload.num_chunks,
        prefix=payload.prefix or get_config().archive.default_prefix,
    )
    try:
        pipeline.run(request, workflow_id=workflow_id)
    except Exception:
        logger.exception("Split workflow failed: %s", workflow_id)
    state = PIPELINE_STATES.get(workflow_id)
    if state is not None:
        STATUSES[workflow_id] = _state_to_status(state, source=payload.source)


@router.post("/splits", response_model=SplitJobStatus)
async def create_split(
    background_tasks: BackgroundTasks, payload: SplitJobRequest = Body(...)
) -> SplitJobStatus:
    workflow_id = str(uuid4())
    STATUSES[workflow_id] = SplitJobStatus(
        workflow_id=workflow_id,
        status=SplitStatus.PENDING.value,
        source=payload.source,
    )
    background_tasks.add_task(_run_pipeline, workflow_id, payload)
    return STATUSES[workflow_id]


@router.get("/splits/{workflow_id}", response_model=SplitJobStatus)
async def get_status(workflow_id: str) -> SplitJobStatus:
    status = STATUSES.get(workflow_id)
    if not status:
        raise HTTPException(status_code=404, detail="workflow_id not found")
    return status
