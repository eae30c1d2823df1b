"""
Payment endpoints: ticket purchase, history and receipt download
"""

from typing import Any, List
import logging
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from app.core.security import get_current_user
from app.schemas.payment import PaymentRequest, PaymentResponse, TicketRecord
from app.schemas.user import UserRecord
from app.services.booking_service import BookingService, get_booking_service
from app.services.ticket_service import TicketGenerator
from app.storage.base import StorageBackend
from app.storage.selector import get_storage

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/process", response_model=PaymentResponse)
async def process_payment(
    payment_request: PaymentRequest,
    current_user: UserRecord = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service)
) -> Any:
    """
    Pay for tickets with M-Pesa and record the purchase
    """
    ticket = await booking_service.purchase(
        event_id=payment_request.event_id,
        user_id=current_user.id,
        quantity=payment_request.quantity,
        phone_number=payment_request.phone_number
    )
    return PaymentResponse(ticket=ticket)


@router.get("/history", response_model=List[TicketRecord])
async def get_payment_history(current_user: UserRecord = Depends(get_current_user)) -> Any:
    """
    Get payment history for the current user
    """
    return current_user.tickets


@router.get("/ticket/{ticket_number}", response_class=PlainTextResponse)
async def download_ticket(
    ticket_number: str,
    current_user: UserRecord = Depends(get_current_user),
    storage: StorageBackend = Depends(get_storage)
) -> Any:
    """
    Download a text receipt for one of the current user's tickets
    """
    receipt = await TicketGenerator.receipt_for(storage, current_user, ticket_number)
    return PlainTextResponse(
        receipt,
        headers={"Content-Disposition": f"attachment; filename={ticket_number}.txt"}
    )
