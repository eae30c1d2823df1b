"""Repository interfaces shared by all storage backends.

Each backend (SQL database, Redis document store, in-process memory) provides
an EventRepository and a UserRepository. Repositories return detached
records: mutating a returned record never changes what is stored.
"""

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional

from app.schemas.event import DEFAULT_EVENT_IMAGE, EventRecord
from app.schemas.payment import AttendeeRecord, TicketRecord
from app.schemas.user import UserRecord

EVENT_UPDATABLE_FIELDS = (
    "title", "description", "date", "time", "location",
    "price", "category", "capacity", "image",
)
USER_UPDATABLE_FIELDS = ("name", "phone", "otp_method")


class BackendUnavailableError(Exception):
    """A backend answered but cannot be used for reads and writes"""


class BackendKind(str, enum.Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    MOCK = "mock"


@dataclass(frozen=True)
class EventFilter:
    """Supported event predicates, AND-ed together."""

    id: Optional[str] = None
    organizer: Optional[str] = None
    date_gte: Optional[date] = None

    def matches(self, event: EventRecord) -> bool:
        if self.id is not None and event.id != self.id:
            return False
        if self.organizer is not None and str(event.organizer) != str(self.organizer):
            return False
        if self.date_gte is not None and event.date < self.date_gte:
            return False
        return True


@dataclass(frozen=True)
class UserFilter:
    """Lookup by id or by email."""

    id: Optional[str] = None
    email: Optional[str] = None

    def __post_init__(self) -> None:
        if self.id is None and self.email is None:
            raise ValueError("UserFilter needs an id or an email")

    def matches(self, user: UserRecord) -> bool:
        if self.id is not None and user.id != self.id:
            return False
        if self.email is not None and user.email.lower() != self.email.lower():
            return False
        return True


def sort_by_date(events: List[EventRecord]) -> List[EventRecord]:
    return sorted(events, key=lambda event: event.date)


def build_event(event_id: str, data: Dict[str, Any]) -> EventRecord:
    """Validate creation data into a fresh event with no attendees."""
    payload = {key: value for key, value in data.items() if key not in ("id", "attendees", "created_at")}
    if not payload.get("image"):
        payload["image"] = DEFAULT_EVENT_IMAGE
    return EventRecord.model_validate({
        **payload,
        "id": event_id,
        "attendees": [],
        "created_at": data.get("created_at") or datetime.now(timezone.utc),
    })


def build_user(user_id: str, data: Dict[str, Any]) -> UserRecord:
    payload = {key: value for key, value in data.items() if key not in ("id", "tickets", "created_at")}
    return UserRecord.model_validate({
        **payload,
        "id": user_id,
        "tickets": [],
        "created_at": data.get("created_at") or datetime.now(timezone.utc),
    })


def apply_event_changes(event: EventRecord, changes: Dict[str, Any]) -> EventRecord:
    """Return a copy of the event with the allowed fields replaced."""
    allowed = {key: value for key, value in changes.items() if key in EVENT_UPDATABLE_FIELDS}
    return EventRecord.model_validate({**event.model_dump(exclude={"available_tickets"}), **allowed})


def apply_user_changes(user: UserRecord, changes: Dict[str, Any]) -> UserRecord:
    allowed = {key: value for key, value in changes.items() if key in USER_UPDATABLE_FIELDS}
    return UserRecord.model_validate({**user.model_dump(), **allowed})


class EventRepository(ABC):
    """Persistence operations over events."""

    @abstractmethod
    async def find(self, query: Optional[EventFilter] = None) -> List[EventRecord]:
        """Return matching events ordered by date ascending."""
        ...

    @abstractmethod
    async def find_by_id(self, event_id: str) -> Optional[EventRecord]:
        ...

    async def find_one(self, query: EventFilter) -> Optional[EventRecord]:
        """Return the first matching event, or None."""
        if query.id is not None:
            event = await self.find_by_id(query.id)
            return event if event is not None and query.matches(event) else None
        matches = await self.find(query)
        return matches[0] if matches else None

    @abstractmethod
    async def create(self, data: Dict[str, Any]) -> EventRecord:
        """Store a new event; id, created_at and attendees are assigned here."""
        ...

    @abstractmethod
    async def update(self, event_id: str, changes: Dict[str, Any]) -> Optional[EventRecord]:
        """Replace editable fields. Attendees are never touched."""
        ...

    @abstractmethod
    async def delete_one(self, query: EventFilter) -> bool:
        """Delete the first matching event. Returns False if none matched."""
        ...

    @abstractmethod
    async def add_attendee(self, event_id: str, attendee: AttendeeRecord) -> Optional[EventRecord]:
        """Append an attendee entry. Returns None if the event is gone."""
        ...


class UserRepository(ABC):
    """Persistence operations over users."""

    @abstractmethod
    async def find_one(self, query: UserFilter) -> Optional[UserRecord]:
        ...

    @abstractmethod
    async def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        ...

    @abstractmethod
    async def create(self, data: Dict[str, Any]) -> UserRecord:
        """Store a new user. Email uniqueness is checked by the caller."""
        ...

    @abstractmethod
    async def update(self, user_id: str, changes: Dict[str, Any]) -> Optional[UserRecord]:
        ...

    @abstractmethod
    async def add_ticket(self, user_id: str, ticket: TicketRecord) -> Optional[UserRecord]:
        """Append a ticket to the user's history. Returns None if the user is gone."""
        ...


@dataclass
class StorageBackend:
    """Repositories bound to the backend chosen at startup."""

    kind: BackendKind
    events: EventRepository
    users: UserRepository
    closer: Optional[Callable[[], Awaitable[None]]] = None

    async def close(self) -> None:
        if self.closer is not None:
            await self.closer()
