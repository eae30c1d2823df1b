"""
Event schemas
"""

import enum
from datetime import date as Date, datetime
from typing import Any, Dict, List, Optional

from pydantic import Field, computed_field

from app.schemas.base import BaseSchema
from app.schemas.payment import AttendeeRecord

DEFAULT_EVENT_IMAGE = "https://images.unsplash.com/photo-1540575467063-178a50c2df87?w=800&q=80"


class EventCategory(str, enum.Enum):
    CONCERT = "concert"
    CONFERENCE = "conference"
    WORKSHOP = "workshop"
    SPORTS = "sports"
    THEATER = "theater"
    FESTIVAL = "festival"
    OTHER = "other"


class EventBase(BaseSchema):
    """Base event schema"""
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=5000)
    date: Date
    time: str = Field(..., min_length=1, max_length=20)
    location: str = Field(..., min_length=1, max_length=255)
    price: float = Field(..., ge=0)
    category: EventCategory = EventCategory.OTHER
    capacity: int = Field(..., ge=1)


class EventCreate(EventBase):
    """Event creation schema"""
    image: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "title": "Jazz Night at the Alliance",
                "description": "An intimate evening of smooth jazz featuring local artists",
                "date": "2026-12-15",
                "time": "19:30",
                "location": "Alliance Francaise, Nairobi",
                "price": 1200,
                "category": "concert",
                "capacity": 150
            }
        }
    }


class EventUpdate(BaseSchema):
    """Event update schema, only provided fields change"""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1, max_length=5000)
    date: Optional[Date] = None
    time: Optional[str] = Field(None, min_length=1, max_length=20)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    price: Optional[float] = Field(None, ge=0)
    category: Optional[EventCategory] = None
    capacity: Optional[int] = Field(None, ge=1)
    image: Optional[str] = None


class EventRecord(EventBase):
    """Stored event with its attendee entries

    available_tickets is derived from the attendees on every access and is
    left out of the persisted document.
    """
    id: str
    organizer: str
    image: str = DEFAULT_EVENT_IMAGE
    attendees: List[AttendeeRecord] = Field(default_factory=list)
    created_at: datetime

    @property
    def tickets_sold(self) -> int:
        return sum(attendee.quantity for attendee in self.attendees)

    @computed_field(alias="availableTickets")
    @property
    def available_tickets(self) -> int:
        return self.capacity - self.tickets_sold

    def to_document(self) -> Dict[str, Any]:
        """Serialize for storage, without derived fields"""
        return self.model_dump(mode="json", exclude={"available_tickets"})


class EventResponse(EventBase):
    """Public event representation"""
    id: str
    organizer: str
    image: str
    created_at: datetime
    available_tickets: int


class OrganizerEventResponse(EventResponse):
    """Event representation for its organizer, attendees included"""
    attendees: List[AttendeeRecord] = []
