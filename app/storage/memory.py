"""In-process storage used when no external backend is reachable.

Contents live only as long as the process. Records are deep-copied on the way
in and out so callers never hold a reference into the store.
"""

import itertools
from typing import Any, Dict, List, Optional

from app.schemas.event import EventRecord
from app.schemas.payment import AttendeeRecord, TicketRecord
from app.schemas.user import UserRecord
from app.storage.base import (
    EventFilter,
    EventRepository,
    UserFilter,
    UserRepository,
    apply_event_changes,
    apply_user_changes,
    build_event,
    build_user,
    sort_by_date,
)


class MemoryStore:
    """Event and user collections with sequential string ids."""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.events: Dict[str, EventRecord] = {}
        self.users: Dict[str, UserRecord] = {}
        self._event_ids = itertools.count(1)
        self._user_ids = itertools.count(1)

    def next_event_id(self) -> str:
        event_id = str(next(self._event_ids))
        while event_id in self.events:
            event_id = str(next(self._event_ids))
        return event_id

    def next_user_id(self) -> str:
        user_id = str(next(self._user_ids))
        while user_id in self.users:
            user_id = str(next(self._user_ids))
        return user_id


# Process-wide store; selecting the mock backend again reuses its contents
memory_store = MemoryStore()


class MockEventRepository(EventRepository):

    def __init__(self, store: MemoryStore):
        self.store = store

    async def find(self, query: Optional[EventFilter] = None) -> List[EventRecord]:
        query = query or EventFilter()
        matches = [event.model_copy(deep=True) for event in self.store.events.values() if query.matches(event)]
        return sort_by_date(matches)

    async def find_by_id(self, event_id: str) -> Optional[EventRecord]:
        event = self.store.events.get(str(event_id))
        return event.model_copy(deep=True) if event else None

    async def create(self, data: Dict[str, Any]) -> EventRecord:
        event = build_event(self.store.next_event_id(), data)
        self.store.events[event.id] = event
        return event.model_copy(deep=True)

    async def update(self, event_id: str, changes: Dict[str, Any]) -> Optional[EventRecord]:
        event = self.store.events.get(str(event_id))
        if event is None:
            return None
        updated = apply_event_changes(event, changes)
        self.store.events[updated.id] = updated
        return updated.model_copy(deep=True)

    async def delete_one(self, query: EventFilter) -> bool:
        for event in sort_by_date(list(self.store.events.values())):
            if query.matches(event):
                del self.store.events[event.id]
                return True
        return False

    async def add_attendee(self, event_id: str, attendee: AttendeeRecord) -> Optional[EventRecord]:
        event = self.store.events.get(str(event_id))
        if event is None:
            return None
        event.attendees.append(attendee.model_copy(deep=True))
        return event.model_copy(deep=True)


class MockUserRepository(UserRepository):

    def __init__(self, store: MemoryStore):
        self.store = store

    async def find_one(self, query: UserFilter) -> Optional[UserRecord]:
        for user in self.store.users.values():
            if query.matches(user):
                return user.model_copy(deep=True)
        return None

    async def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        user = self.store.users.get(str(user_id))
        return user.model_copy(deep=True) if user else None

    async def create(self, data: Dict[str, Any]) -> UserRecord:
        user = build_user(self.store.next_user_id(), data)
        self.store.users[user.id] = user
        return user.model_copy(deep=True)

    async def update(self, user_id: str, changes: Dict[str, Any]) -> Optional[UserRecord]:
        user = self.store.users.get(str(user_id))
        if user is None:
            return None
        updated = apply_user_changes(user, changes)
        self.store.users[updated.id] = updated
        return updated.model_copy(deep=True)

    async def add_ticket(self, user_id: str, ticket: TicketRecord) -> Optional[UserRecord]:
        user = self.store.users.get(str(user_id))
        if user is None:
            return None
        user.tickets.append(ticket.model_copy(deep=True))
        return user.model_copy(deep=True)
