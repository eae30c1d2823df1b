"""
Event management endpoints
"""

from typing import Any, List
import logging
from fastapi import APIRouter, Depends, Request, status

from app.core.security import require_organizer
from app.schemas.event import EventCreate, EventResponse, EventUpdate, OrganizerEventResponse
from app.schemas.response import MessageResponse
from app.schemas.user import UserRecord
from app.services.event_service import EventService
from app.storage.base import StorageBackend
from app.storage.selector import get_storage

router = APIRouter()
logger = logging.getLogger(__name__)


def get_event_service(request: Request, storage: StorageBackend = Depends(get_storage)) -> EventService:
    return EventService(storage, request.app.state.booking_service.locks)


@router.get("", response_model=List[EventResponse])
async def get_events(service: EventService = Depends(get_event_service)) -> Any:
    """
    Upcoming events, soonest first
    """
    return await service.list_upcoming()


@router.get("/my-events", response_model=List[OrganizerEventResponse])
async def get_my_events(
    current_user: UserRecord = Depends(require_organizer),
    service: EventService = Depends(get_event_service)
) -> Any:
    """
    Events created by the current organizer, attendees included
    """
    return await service.list_for_organizer(current_user.id)


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: str,
    service: EventService = Depends(get_event_service)
) -> Any:
    """
    Get event by ID
    """
    return await service.get_event(event_id)


@router.post("", response_model=OrganizerEventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    event_data: EventCreate,
    current_user: UserRecord = Depends(require_organizer),
    service: EventService = Depends(get_event_service)
) -> Any:
    """
    Create a new event owned by the current organizer
    """
    return await service.create_event(current_user.id, event_data)


@router.put("/{event_id}", response_model=OrganizerEventResponse)
async def update_event(
    event_id: str,
    event_update: EventUpdate,
    current_user: UserRecord = Depends(require_organizer),
    service: EventService = Depends(get_event_service)
) -> Any:
    """
    Update an event (owner only)
    """
    return await service.update_event(event_id, current_user.id, event_update)


@router.delete("/{event_id}", response_model=MessageResponse)
async def delete_event(
    event_id: str,
    current_user: UserRecord = Depends(require_organizer),
    service: EventService = Depends(get_event_service)
) -> Any:
    """
    Delete an event (owner only)
    """
    await service.delete_event(event_id, current_user.id)
    return MessageResponse(message="Event removed")
