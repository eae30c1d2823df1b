"""
Health check endpoints
"""

from typing import Any
from fastapi import APIRouter, Depends

from app.config import settings
from app.storage.base import StorageBackend
from app.storage.selector import get_storage

router = APIRouter()


@router.get("/live")
async def liveness() -> Any:
    """
    Kubernetes liveness probe
    """
    return {"status": "alive", "service": "eventhub-api"}


@router.get("/ready")
async def readiness(storage: StorageBackend = Depends(get_storage)) -> Any:
    """
    Kubernetes readiness probe; reports which storage backend is in use
    """
    return {
        "status": "ready",
        "backend": storage.kind.value,
        "version": settings.APP_VERSION
    }
