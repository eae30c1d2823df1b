"""
Pydantic schemas for request and response validation
"""

from app.schemas.user import (
    UserCreate,
    UserUpdate,
    UserResponse,
    UserLogin,
    UserRecord,
    Token
)
from app.schemas.event import (
    EventCreate,
    EventUpdate,
    EventRecord,
    EventResponse,
    OrganizerEventResponse
)
from app.schemas.payment import (
    AttendeeRecord,
    TicketRecord,
    PaymentRequest,
    PaymentResponse,
    PurchaseConfirmation
)
from app.schemas.response import (
    ErrorResponse,
    MessageResponse
)

__all__ = [
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "UserLogin",
    "UserRecord",
    "Token",
    "EventCreate",
    "EventUpdate",
    "EventRecord",
    "EventResponse",
    "OrganizerEventResponse",
    "AttendeeRecord",
    "TicketRecord",
    "PaymentRequest",
    "PaymentResponse",
    "PurchaseConfirmation",
    "ErrorResponse",
    "MessageResponse"
]
