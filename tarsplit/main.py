"""FastAPI application entrypoint using router composition."""
from __future__ import annotations

import logging

from fastapi import APIRouter, FastAPI

import uvicorn

from tarsplit import __version__
from tarsplit.api.default import router as default_router
from tarsplit.api.splits import router as splits_router
from tarsplit.config import configure_logging, get_settings

router = APIRouter()
logger = logging.getLogger(__name__)

router.include_router(default_router)
router.include_router(splits_router)

settings = get_settings()
app = FastAPI(title=settings.app_name, version=__version__)
app.include_router(router)


if __name__ == "__main__":
    configure_logging()
    uvicorn.run("tarsplit.main:app", host="0.0.0.0", port=9000, reload=True)
