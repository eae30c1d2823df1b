"""
Purchase records and payment request/response schemas
"""

from datetime import date as Date, datetime
from typing import Any

from pydantic import Field

from app.schemas.base import BaseSchema

PAYMENT_METHOD_MPESA = "M-Pesa"


class PurchaseRecord(BaseSchema):
    """Fields shared by the attendee entry and its mirrored ticket"""
    ticket_number: str
    quantity: int = Field(..., ge=1)
    total_amount: float = Field(..., ge=0)
    purchase_date: datetime
    payment_method: str = PAYMENT_METHOD_MPESA
    receipt_number: str


class AttendeeRecord(PurchaseRecord):
    """Purchase entry embedded in an event"""
    user_id: str


class TicketRecord(PurchaseRecord):
    """Purchase entry mirrored into the buyer's history"""
    event_id: str


class PaymentRequest(BaseSchema):
    """Body of POST /payments/process

    quantity is validated by the booking service so that a missing, boolean or
    non-positive value is reported as a 400 rather than a schema error. It
    must be a JSON integer: 2.0 and "2" are rejected like true is.
    """
    event_id: str = Field(..., min_length=1)
    quantity: Any = None
    phone_number: str = Field(..., min_length=1, max_length=20)

    model_config = {
        "json_schema_extra": {
            "example": {
                "eventId": "1",
                "quantity": 2,
                "phoneNumber": "254712345678"
            }
        }
    }


class PurchaseConfirmation(BaseSchema):
    """Ticket summary returned after a successful purchase"""
    ticket_number: str
    event_title: str
    event_date: Date
    event_time: str
    event_location: str
    quantity: int
    total_amount: float
    receipt_number: str


class PaymentResponse(BaseSchema):
    success: bool = True
    message: str = "Payment successful"
    ticket: PurchaseConfirmation
