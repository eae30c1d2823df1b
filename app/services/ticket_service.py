"""
Ticket Generation Service
Renders the downloadable plain-text receipt for a purchased ticket
"""

from typing import Optional
import logging

from app.config import settings
from app.core.exceptions import NotFoundError
from app.schemas.event import EventRecord
from app.schemas.payment import TicketRecord
from app.schemas.user import UserRecord
from app.storage.base import StorageBackend

logger = logging.getLogger(__name__)

RULE = "=" * 50


def format_amount(amount: float) -> str:
    return f"{settings.CURRENCY} {int(amount) if float(amount).is_integer() else f'{amount:.2f}'}"


def render_ticket_receipt(ticket: TicketRecord, event: EventRecord, user: UserRecord) -> str:
    """Bordered text receipt, one field per line"""
    lines = [
        RULE,
        "EVENT TICKET",
        RULE,
        f"Ticket Number: {ticket.ticket_number}",
        f"Event: {event.title}",
        f"Date: {event.date.isoformat()}",
        f"Time: {event.time}",
        f"Location: {event.location}",
        f"Quantity: {ticket.quantity}",
        f"Total Amount: {format_amount(ticket.total_amount)}",
        f"Phone: {user.phone or '-'}",
        f"Receipt: {ticket.receipt_number}",
        RULE,
        f"Thank you for booking with {settings.APP_NAME}!",
    ]
    return "\n".join(lines) + "\n"


class TicketGenerator:
    """Looks up a caller's ticket and renders its receipt"""

    @staticmethod
    async def receipt_for(storage: StorageBackend, user: UserRecord, ticket_number: str) -> str:
        ticket: Optional[TicketRecord] = user.find_ticket(ticket_number)
        if ticket is None:
            raise NotFoundError("Ticket", ticket_number)

        event = await storage.events.find_by_id(ticket.event_id)
        if event is None:
            logger.warning(f"Ticket {ticket_number} refers to missing event {ticket.event_id}")
            raise NotFoundError("Event", ticket.event_id)

        return render_ticket_receipt(ticket, event, user)
