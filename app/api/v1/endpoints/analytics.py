"""
Organizer analytics endpoints
"""

from typing import Any
from fastapi import APIRouter, Depends

from app.core.security import require_organizer
from app.schemas.analytics import DashboardAnalytics, EventAnalytics
from app.schemas.user import UserRecord
from app.services.analytics_service import AnalyticsService
from app.storage.base import StorageBackend
from app.storage.selector import get_storage

router = APIRouter()


@router.get("/dashboard", response_model=DashboardAnalytics)
async def get_dashboard_analytics(
    current_user: UserRecord = Depends(require_organizer),
    storage: StorageBackend = Depends(get_storage)
) -> Any:
    """
    Totals and chart data across the organizer's events
    """
    return await AnalyticsService.get_dashboard(storage, current_user.id)


@router.get("/event/{event_id}", response_model=EventAnalytics)
async def get_event_analytics(
    event_id: str,
    current_user: UserRecord = Depends(require_organizer),
    storage: StorageBackend = Depends(get_storage)
) -> Any:
    """
    Sales figures for one of the organizer's events
    """
    return await AnalyticsService.get_event_summary(storage, event_id, current_user.id)
