"""
Event model
"""

from sqlalchemy import Column, Date, DateTime, Enum, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.models.base import BaseModel, utcnow
from app.schemas.event import DEFAULT_EVENT_IMAGE, EventCategory
from app.schemas.payment import PAYMENT_METHOD_MPESA


class Event(BaseModel):
    """
    Event published by an organizer
    """
    __tablename__ = "events"

    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    date = Column(Date, nullable=False, index=True)
    time = Column(String(20), nullable=False)
    location = Column(String(255), nullable=False)
    price = Column(Float, nullable=False, default=0)
    category = Column(Enum(EventCategory), default=EventCategory.OTHER, nullable=False)
    capacity = Column(Integer, nullable=False)
    image = Column(String(500), nullable=False, default=DEFAULT_EVENT_IMAGE)
    # Not a foreign key: seeded events belong to a synthetic organizer id
    organizer = Column(String(64), nullable=False, index=True)

    attendees = relationship(
        "EventAttendee",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="EventAttendee.id",
        lazy="selectin"
    )

    def __repr__(self):
        return f"<Event(id={self.id}, title={self.title}, capacity={self.capacity})>"


class EventAttendee(Base):
    """
    One purchase recorded against an event
    """
    __tablename__ = "event_attendees"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(64), nullable=False)
    ticket_number = Column(String(32), nullable=False)
    quantity = Column(Integer, nullable=False)
    total_amount = Column(Float, nullable=False)
    purchase_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    payment_method = Column(String(32), default=PAYMENT_METHOD_MPESA, nullable=False)
    receipt_number = Column(String(64), nullable=False)

    event = relationship("Event", back_populates="attendees")
