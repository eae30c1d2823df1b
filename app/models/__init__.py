"""
Database models
"""

from app.models.base import BaseModel
from app.models.user import User, UserTicket
from app.models.event import Event, EventAttendee

__all__ = [
    "BaseModel",
    "User",
    "UserTicket",
    "Event",
    "EventAttendee",
]
