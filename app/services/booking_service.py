"""
Ticket purchase: inventory check, payment and the attendee/ticket dual write
"""

from datetime import datetime, timezone
from typing import Any, Optional
import logging
import uuid

from fastapi import Request

from app.core.exceptions import (
    InsufficientInventoryError,
    NotFoundError,
    PartialBookingError,
    PaymentError,
    ValidationError,
)
from app.core.locks import EventLocks
from app.core.metrics import BOOKING_OUTCOMES
from app.schemas.payment import (
    PAYMENT_METHOD_MPESA,
    AttendeeRecord,
    PurchaseConfirmation,
    TicketRecord,
)
from app.services.payment_service import PaymentProvider
from app.storage.base import StorageBackend

logger = logging.getLogger(__name__)


def generate_ticket_number() -> str:
    return f"TKT-{uuid.uuid4().hex[:8].upper()}"


def generate_receipt_number() -> str:
    return f"RCPT-{uuid.uuid4().hex[:8].upper()}"


class BookingService:
    """
    Sells tickets for events held in the configured storage backend

    Purchases for the same event are serialized with a per-event lock from
    the inventory check until the attendee entry is written, so one process
    never sells more tickets than the event's capacity. Pass the same
    EventLocks to EventService so capacity edits wait for purchases.
    """

    def __init__(
        self,
        storage: StorageBackend,
        payment_provider: PaymentProvider,
        locks: Optional[EventLocks] = None
    ):
        self.storage = storage
        self.payment_provider = payment_provider
        self.locks = locks if locks is not None else EventLocks()

    @staticmethod
    def _partial(event_id, user_id, ticket_number, receipt_number, reason):
        BOOKING_OUTCOMES.labels(outcome="partial").inc()
        logger.error(
            f"Ticket {ticket_number} recorded on event {event_id} but not on user {user_id}: {reason}",
            extra={"context": {"ticket_number": ticket_number, "receipt_number": receipt_number}}
        )

    async def purchase(
        self,
        event_id: str,
        user_id: str,
        quantity: Any,
        phone_number: str
    ) -> PurchaseConfirmation:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            BOOKING_OUTCOMES.labels(outcome="invalid").inc()
            raise ValidationError("Quantity must be a positive whole number", field="quantity")

        async with self.locks.hold(event_id):
            event = await self.storage.events.find_by_id(event_id)
            if event is None:
                BOOKING_OUTCOMES.labels(outcome="not_found").inc()
                raise NotFoundError("Event", event_id)

            available = event.available_tickets
            if quantity > available:
                BOOKING_OUTCOMES.labels(outcome="insufficient").inc()
                raise InsufficientInventoryError(available=available, requested=quantity)

            total_amount = event.price * quantity
            ticket_number = generate_ticket_number()
            receipt_number = generate_receipt_number()

            result = await self.payment_provider.charge(phone_number, total_amount)
            if not result.success:
                BOOKING_OUTCOMES.labels(outcome="payment_failed").inc()
                raise PaymentError()
            if result.receipt_number:
                receipt_number = result.receipt_number

            purchase = {
                "ticket_number": ticket_number,
                "quantity": quantity,
                "total_amount": total_amount,
                "purchase_date": datetime.now(timezone.utc),
                "payment_method": PAYMENT_METHOD_MPESA,
                "receipt_number": receipt_number,
            }

            updated = await self.storage.events.add_attendee(
                event.id, AttendeeRecord(user_id=user_id, **purchase)
            )
            if updated is None:
                BOOKING_OUTCOMES.labels(outcome="not_found").inc()
                raise NotFoundError("Event", event_id)

        try:
            user = await self.storage.users.add_ticket(user_id, TicketRecord(event_id=event.id, **purchase))
        except Exception as e:
            self._partial(event.id, user_id, ticket_number, receipt_number, str(e) or e.__class__.__name__)
            raise PartialBookingError(ticket_number, receipt_number, str(e) or e.__class__.__name__) from e

        if user is None:
            self._partial(event.id, user_id, ticket_number, receipt_number, "User not found")
            raise PartialBookingError(ticket_number, receipt_number, "User not found")

        BOOKING_OUTCOMES.labels(outcome="success").inc()
        logger.info(f"User {user_id} bought {quantity} ticket(s) for event {event.id} ({ticket_number})")

        return PurchaseConfirmation(
            ticket_number=ticket_number,
            event_title=event.title,
            event_date=event.date,
            event_time=event.time,
            event_location=event.location,
            quantity=quantity,
            total_amount=total_amount,
            receipt_number=receipt_number,
        )


def get_booking_service(request: Request) -> BookingService:
    """
    Dependency returning the service created at startup
    """
    return request.app.state.booking_service
