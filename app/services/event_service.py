"""
Organizer event management
"""

from datetime import date
from typing import List, Optional
import logging

from app.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from app.core.locks import EventLocks
from app.schemas.event import EventCreate, EventRecord, EventUpdate
from app.storage.base import EventFilter, StorageBackend

logger = logging.getLogger(__name__)


class EventService:
    """Event CRUD with ownership checks"""

    def __init__(self, storage: StorageBackend, locks: Optional[EventLocks] = None):
        self.events = storage.events
        self.locks = locks if locks is not None else EventLocks()

    async def list_upcoming(self) -> List[EventRecord]:
        return await self.events.find(EventFilter(date_gte=date.today()))

    async def list_for_organizer(self, organizer_id: str) -> List[EventRecord]:
        return await self.events.find(EventFilter(organizer=organizer_id))

    async def get_event(self, event_id: str) -> EventRecord:
        event = await self.events.find_by_id(event_id)
        if event is None:
            raise NotFoundError("Event", event_id)
        return event

    async def create_event(self, organizer_id: str, payload: EventCreate) -> EventRecord:
        event = await self.events.create({**payload.model_dump(), "organizer": organizer_id})
        logger.info(f"Event {event.id} created by organizer {organizer_id}")
        return event

    async def _owned_event(self, event_id: str, actor_id: str) -> EventRecord:
        event = await self.get_event(event_id)
        if str(event.organizer) != str(actor_id):
            raise AuthorizationError("Not authorized to modify this event")
        return event

    async def update_event(self, event_id: str, actor_id: str, changes: EventUpdate) -> EventRecord:
        fields = changes.model_dump(exclude_unset=True, exclude_none=True)

        async with self.locks.hold(event_id):
            event = await self._owned_event(event_id, actor_id)

            capacity = fields.get("capacity")
            if capacity is not None and capacity < event.tickets_sold:
                raise ValidationError(
                    f"Capacity cannot be lower than the {event.tickets_sold} tickets already sold",
                    field="capacity"
                )

            updated = await self.events.update(event_id, fields)
            if updated is None:
                raise NotFoundError("Event", event_id)

        logger.info(f"Event {event_id} updated by organizer {actor_id}")
        return updated

    async def delete_event(self, event_id: str, actor_id: str) -> None:
        await self._owned_event(event_id, actor_id)

        deleted = await self.events.delete_one(EventFilter(id=event_id, organizer=actor_id))
        if not deleted:
            raise NotFoundError("Event", event_id)

        logger.info(f"Event {event_id} deleted by organizer {actor_id}")
