"""
Test configuration and fixtures
"""

import os

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Set test environment before the settings module is imported
os.environ["APP_ENV"] = "testing"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-that-is-at-least-32-characters"
os.environ["DATABASE_URL"] = ""
os.environ["REDIS_URL"] = ""
os.environ["PAYMENT_SIMULATION_DELAY_SECONDS"] = "0"
os.environ["LOG_LEVEL"] = "WARNING"

from app.config import settings  # noqa: E402
from app.services.booking_service import BookingService  # noqa: E402
from app.storage.base import BackendKind, StorageBackend  # noqa: E402
from app.storage.memory import MemoryStore, MockEventRepository, MockUserRepository  # noqa: E402

from helpers import FixedPaymentProvider, auth_headers, future_date, register  # noqa: E402


@pytest.fixture
def memory():
    """Fresh in-memory store, isolated from the process-wide one"""
    return MemoryStore()


@pytest.fixture
def storage(memory) -> StorageBackend:
    """Unseeded mock backend"""
    return StorageBackend(
        kind=BackendKind.MOCK,
        events=MockEventRepository(memory),
        users=MockUserRepository(memory),
    )


@pytest.fixture
def payment_provider() -> FixedPaymentProvider:
    return FixedPaymentProvider()


@pytest.fixture
def booking_service(storage, payment_provider) -> BookingService:
    return BookingService(storage, payment_provider)


@pytest.fixture
def app(storage, booking_service):
    """Application wired to the test backend

    ASGITransport does not run the lifespan, so state is set directly.
    """
    from app.main import app

    app.state.storage = storage
    app.state.booking_service = booking_service
    return app


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest_asyncio.fixture
async def organizer(client) -> dict:
    return await register(client, role="organizer")


@pytest_asyncio.fixture
async def attendee(client) -> dict:
    return await register(client, role="user")


@pytest.fixture
def organizer_headers(organizer) -> dict:
    return auth_headers(organizer)


@pytest.fixture
def attendee_headers(attendee) -> dict:
    return auth_headers(attendee)


@pytest.fixture
def api_event_body() -> dict:
    """Creation payload in the API's camelCase form"""
    return {
        "title": "Nairobi Tech Summit",
        "description": "Talks and workshops on cloud and AI",
        "date": future_date(20).isoformat(),
        "time": "09:00",
        "location": "KICC, Nairobi",
        "price": 1500,
        "category": "conference",
        "capacity": 5,
    }


@pytest_asyncio.fixture
async def created_event(client, organizer_headers, api_event_body) -> dict:
    response = await client.post("/api/events", json=api_event_body, headers=organizer_headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def test_settings():
    """Settings copy without external backends"""
    return settings.model_copy(update={"DATABASE_URL": None, "REDIS_URL": None})
