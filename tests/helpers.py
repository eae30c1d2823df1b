"""
Shared test helpers: deterministic payment provider and payload builders
"""

import asyncio
from datetime import date, timedelta
from typing import List, Optional, Tuple
from uuid import uuid4

from httpx import AsyncClient

from app.services.payment_service import PaymentProvider, PaymentResult


class FixedPaymentProvider(PaymentProvider):
    """Deterministic provider that records every charge"""

    name = "fixed"

    def __init__(
        self,
        success: bool = True,
        receipt_number: Optional[str] = None,
        gate: Optional[asyncio.Event] = None
    ):
        self.success = success
        self.receipt_number = receipt_number
        self.gate = gate
        self.calls: List[Tuple[str, float]] = []

    async def charge(self, phone_number: str, amount: float) -> PaymentResult:
        self.calls.append((phone_number, amount))
        # Yield so concurrent purchases interleave the way a real provider would
        await asyncio.sleep(0)
        if self.gate is not None:
            await self.gate.wait()
        if not self.success:
            return PaymentResult(success=False, message="Declined")
        return PaymentResult(success=True, receipt_number=self.receipt_number, message="OK")


def future_date(days: int = 10) -> date:
    return date.today() + timedelta(days=days)


def event_payload(**overrides) -> dict:
    """Creation payload in the repository's snake_case form"""
    payload = {
        "title": "Jazz Night",
        "description": "Smooth jazz with local artists",
        "date": future_date(),
        "time": "19:30",
        "location": "Alliance Francaise, Nairobi",
        "price": 1000,
        "category": "concert",
        "capacity": 100,
        "organizer": "organizer-1",
    }
    payload.update(overrides)
    return payload


def user_payload(**overrides) -> dict:
    payload = {
        "name": "Wanjiku Kamau",
        "email": f"user_{uuid4().hex[:8]}@example.com",
        "phone": "254712345678",
        "password_hash": "not-a-real-hash",
        "role": "user",
        "otp_method": "email",
    }
    payload.update(overrides)
    return payload


async def register(client: AsyncClient, role: str = "user", **overrides) -> dict:
    """Register through the API and return the token response body"""
    body = {
        "name": f"Test {role.title()}",
        "email": f"{role}_{uuid4().hex[:8]}@example.com",
        "phone": "254712345678",
        "password": "Secret123!",
        "role": role,
    }
    body.update(overrides)
    response = await client.post("/api/auth/register", json=body)
    assert response.status_code == 201, response.text
    return response.json()


def auth_headers(token_body: dict) -> dict:
    return {"Authorization": f"Bearer {token_body['accessToken']}"}
