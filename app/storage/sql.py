"""
Primary backend: events and users in a relational database via async SQLAlchemy
"""

from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker

from app.core.exceptions import ConflictError
from app.models.base import generate_id
from app.models.event import Event, EventAttendee
from app.models.user import User, UserTicket
from app.schemas.event import EventCategory, EventRecord
from app.schemas.payment import AttendeeRecord, TicketRecord
from app.schemas.user import OtpMethod, UserRecord, UserRole
from app.storage.base import (
    EVENT_UPDATABLE_FIELDS,
    USER_UPDATABLE_FIELDS,
    EventFilter,
    EventRepository,
    UserFilter,
    UserRepository,
    apply_event_changes,
    apply_user_changes,
    build_event,
    build_user,
)

logger = logging.getLogger(__name__)


def _event_select(query: EventFilter):
    stmt = select(Event)
    if query.id is not None:
        stmt = stmt.where(Event.id == str(query.id))
    if query.organizer is not None:
        stmt = stmt.where(Event.organizer == str(query.organizer))
    if query.date_gte is not None:
        stmt = stmt.where(Event.date >= query.date_gte)
    return stmt.order_by(Event.date, Event.created_at)


def _event_columns(record: EventRecord) -> Dict[str, Any]:
    values = {field: getattr(record, field) for field in EVENT_UPDATABLE_FIELDS}
    values["category"] = EventCategory(values["category"])
    return values


def _user_columns(record: UserRecord) -> Dict[str, Any]:
    values = {field: getattr(record, field) for field in USER_UPDATABLE_FIELDS}
    values["otp_method"] = OtpMethod(values["otp_method"])
    return values


class SqlEventRepository(EventRepository):
    """Events table with attendees in a child table"""

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    async def find(self, query: Optional[EventFilter] = None) -> List[EventRecord]:
        async with self.session_factory() as session:
            result = await session.execute(_event_select(query or EventFilter()))
            return [EventRecord.model_validate(event) for event in result.scalars().all()]

    async def find_by_id(self, event_id: str) -> Optional[EventRecord]:
        async with self.session_factory() as session:
            event = await session.get(Event, str(event_id))
            return EventRecord.model_validate(event) if event else None

    async def create(self, data: Dict[str, Any]) -> EventRecord:
        record = build_event(generate_id(), data)
        async with self.session_factory() as session:
            session.add(Event(
                id=record.id,
                organizer=record.organizer,
                created_at=record.created_at,
                **_event_columns(record)
            ))
            await session.commit()
        return record

    async def update(self, event_id: str, changes: Dict[str, Any]) -> Optional[EventRecord]:
        async with self.session_factory() as session:
            event = await session.get(Event, str(event_id))
            if event is None:
                return None

            updated = apply_event_changes(EventRecord.model_validate(event), changes)
            for field, value in _event_columns(updated).items():
                setattr(event, field, value)

            await session.commit()
            return EventRecord.model_validate(event)

    async def delete_one(self, query: EventFilter) -> bool:
        async with self.session_factory() as session:
            result = await session.execute(_event_select(query).limit(1))
            event = result.scalars().first()
            if event is None:
                return False

            await session.delete(event)
            await session.commit()
            return True

    async def add_attendee(self, event_id: str, attendee: AttendeeRecord) -> Optional[EventRecord]:
        async with self.session_factory() as session:
            event = await session.get(Event, str(event_id))
            if event is None:
                return None

            event.attendees.append(EventAttendee(**attendee.model_dump()))
            await session.commit()
            return EventRecord.model_validate(event)


class SqlUserRepository(UserRepository):
    """Users table with ticket history in a child table"""

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    async def find_one(self, query: UserFilter) -> Optional[UserRecord]:
        stmt = select(User)
        if query.id is not None:
            stmt = stmt.where(User.id == str(query.id))
        if query.email is not None:
            stmt = stmt.where(func.lower(User.email) == query.email.lower())

        async with self.session_factory() as session:
            result = await session.execute(stmt.limit(1))
            user = result.scalars().first()
            return UserRecord.model_validate(user) if user else None

    async def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        async with self.session_factory() as session:
            user = await session.get(User, str(user_id))
            return UserRecord.model_validate(user) if user else None

    async def create(self, data: Dict[str, Any]) -> UserRecord:
        record = build_user(generate_id(), data)
        async with self.session_factory() as session:
            session.add(User(
                id=record.id,
                email=record.email,
                password_hash=record.password_hash,
                role=UserRole(record.role),
                created_at=record.created_at,
                **_user_columns(record)
            ))
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                logger.warning(f"Duplicate registration for {record.email}")
                raise ConflictError("User already exists", details={"field": "email"})
        return record

    async def update(self, user_id: str, changes: Dict[str, Any]) -> Optional[UserRecord]:
        async with self.session_factory() as session:
            user = await session.get(User, str(user_id))
            if user is None:
                return None

            updated = apply_user_changes(UserRecord.model_validate(user), changes)
            for field, value in _user_columns(updated).items():
                setattr(user, field, value)

            await session.commit()
            return UserRecord.model_validate(user)

    async def add_ticket(self, user_id: str, ticket: TicketRecord) -> Optional[UserRecord]:
        async with self.session_factory() as session:
            user = await session.get(User, str(user_id))
            if user is None:
                return None

            user.tickets.append(UserTicket(**ticket.model_dump()))
            await session.commit()
            return UserRecord.model_validate(user)
