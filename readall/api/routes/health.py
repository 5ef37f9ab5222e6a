"""Health check API route."""

import logging
from pathlib import Path

from fastapi import APIRouter

from readall import __version__
from readall.api.dependencies import SettingsDep

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
def health_check(settings: SettingsDep) -> dict:
    """Health check endpoint."""
    documents_path = Path(settings.documents_path)
    storage_ready = documents_path.is_dir() or not documents_path.exists()
    if not storage_ready:
        logger.warning("Documents path %s is not a directory", documents_path)

    return {
        "status": "ok" if storage_ready else "degraded",
        "storage": "available" if storage_ready else "unavailable",
        "version": __version__,
    }
