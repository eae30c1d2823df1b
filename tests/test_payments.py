"""
Tests for payment endpoints: purchase, history and receipt download
"""

import pytest
from httpx import AsyncClient

from app.services.booking_service import BookingService
from app.services.ticket_service import render_ticket_receipt
from app.schemas.event import EventRecord
from app.schemas.payment import TicketRecord
from app.schemas.user import UserRecord

from helpers import FixedPaymentProvider, auth_headers, register

PHONE = "254712345678"


async def buy(client: AsyncClient, headers: dict, event_id: str, quantity=1):
    return await client.post(
        "/api/payments/process",
        json={"eventId": event_id, "quantity": quantity, "phoneNumber": PHONE},
        headers=headers
    )


class TestProcessPayment:

    @pytest.mark.asyncio
    async def test_successful_purchase(self, client: AsyncClient, attendee_headers, created_event):
        response = await buy(client, attendee_headers, created_event["id"], quantity=2)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Payment successful"
        ticket = body["ticket"]
        assert ticket["ticketNumber"].startswith("TKT-")
        assert ticket["eventTitle"] == created_event["title"]
        assert ticket["eventDate"] == created_event["date"]
        assert ticket["quantity"] == 2
        assert ticket["totalAmount"] == 3000

        event = (await client.get(f"/api/events/{created_event['id']}")).json()
        assert event["availableTickets"] == 3

    @pytest.mark.asyncio
    async def test_insufficient_tickets(self, client: AsyncClient, attendee_headers, created_event):
        assert (await buy(client, attendee_headers, created_event["id"], quantity=3)).status_code == 200

        response = await buy(client, attendee_headers, created_event["id"], quantity=3)

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Only 2 tickets available"
        assert body["error"]["code"] == "INSUFFICIENT_TICKETS"
        assert body["error"]["details"]["available"] == 2

    @pytest.mark.asyncio
    async def test_payment_declined(self, client: AsyncClient, app, storage, attendee_headers, created_event):
        app.state.booking_service = BookingService(storage, FixedPaymentProvider(success=False))

        response = await buy(client, attendee_headers, created_event["id"])

        assert response.status_code == 400
        assert response.json()["message"] == "Payment failed. Please try again."
        assert response.json()["error"]["code"] == "PAYMENT_FAILED"
        assert (await client.get("/api/payments/history", headers=attendee_headers)).json() == []

    @pytest.mark.asyncio
    async def test_unknown_event(self, client: AsyncClient, attendee_headers):
        response = await buy(client, attendee_headers, "missing")

        assert response.status_code == 404

    @pytest.mark.asyncio
    @pytest.mark.parametrize("quantity", [0, -2, None, True, 2.0, "two"])
    async def test_invalid_quantity(self, client: AsyncClient, attendee_headers, created_event, quantity):
        response = await buy(client, attendee_headers, created_event["id"], quantity=quantity)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_requires_authentication(self, client: AsyncClient, created_event):
        response = await client.post(
            "/api/payments/process",
            json={"eventId": created_event["id"], "quantity": 1, "phoneNumber": PHONE}
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "NO_TOKEN"


class TestHistoryAndReceipts:

    @pytest.mark.asyncio
    async def test_history_lists_purchases_in_order(self, client: AsyncClient, attendee_headers, created_event):
        first = (await buy(client, attendee_headers, created_event["id"])).json()["ticket"]
        second = (await buy(client, attendee_headers, created_event["id"], quantity=2)).json()["ticket"]

        history = (await client.get("/api/payments/history", headers=attendee_headers)).json()
        tickets = (await client.get("/api/auth/tickets", headers=attendee_headers)).json()

        assert [item["ticketNumber"] for item in history] == [first["ticketNumber"], second["ticketNumber"]]
        assert history == tickets
        assert history[0]["eventId"] == created_event["id"]
        assert history[1]["paymentMethod"] == "M-Pesa"

    @pytest.mark.asyncio
    async def test_download_receipt(self, client: AsyncClient, attendee_headers, created_event):
        ticket = (await buy(client, attendee_headers, created_event["id"], quantity=2)).json()["ticket"]

        response = await client.get(
            f"/api/payments/ticket/{ticket['ticketNumber']}", headers=attendee_headers
        )

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.headers["content-disposition"] == f"attachment; filename={ticket['ticketNumber']}.txt"
        assert f"Ticket Number: {ticket['ticketNumber']}" in response.text
        assert "Total Amount: KES 3000" in response.text
        assert f"Receipt: {ticket['receiptNumber']}" in response.text

    @pytest.mark.asyncio
    async def test_cannot_download_someone_elses_receipt(self, client: AsyncClient, attendee_headers, created_event):
        ticket = (await buy(client, attendee_headers, created_event["id"])).json()["ticket"]
        stranger = auth_headers(await register(client))

        response = await client.get(f"/api/payments/ticket/{ticket['ticketNumber']}", headers=stranger)

        assert response.status_code == 404
        assert response.json()["message"] == "Ticket not found"


def test_render_ticket_receipt():
    event = EventRecord(
        id="1",
        title="Business Workshop",
        description="Skills",
        date="2026-11-20",
        time="10:00",
        location="Sarit Centre",
        price=500,
        category="workshop",
        capacity=100,
        organizer="demo-organizer",
        created_at="2026-10-01T00:00:00+00:00",
    )
    user = UserRecord(
        id="7",
        name="Achieng",
        email="achieng@example.com",
        phone="254711111111",
        password_hash="x",
        created_at="2026-10-01T00:00:00+00:00",
    )
    ticket = TicketRecord(
        event_id="1",
        ticket_number="TKT-0A1B2C3D",
        quantity=3,
        total_amount=1500,
        purchase_date="2026-10-02T09:30:00+00:00",
        receipt_number="MPESA-1700000000000",
    )

    lines = render_ticket_receipt(ticket, event, user).splitlines()

    assert lines[0] == "=" * 50
    assert lines[1] == "EVENT TICKET"
    assert "Event: Business Workshop" in lines
    assert "Date: 2026-11-20" in lines
    assert "Location: Sarit Centre" in lines
    assert "Quantity: 3" in lines
    assert "Total Amount: KES 1500" in lines
    assert "Phone: 254711111111" in lines
    assert "Receipt: MPESA-1700000000000" in lines
    assert lines[-1] == "Thank you for booking with EventHub!"
