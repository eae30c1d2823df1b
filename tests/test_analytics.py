"""
Tests for organizer analytics
"""

import pytest
from httpx import AsyncClient

from app.schemas.event import EventRecord
from app.services.analytics_service import AnalyticsService, price_band

from helpers import auth_headers, register


def sale(number: int, quantity: int, amount: float, purchased: str) -> dict:
    return {
        "user_id": "u1",
        "ticket_number": f"TKT-{number:08d}",
        "quantity": quantity,
        "total_amount": amount,
        "purchase_date": purchased,
        "receipt_number": f"RCPT-{number:08d}",
    }


def event(event_id: str, category: str, price: float, capacity: int, attendees) -> EventRecord:
    return EventRecord(
        id=event_id,
        title=f"Event {event_id}",
        description="d",
        date="2026-12-01",
        time="18:00",
        location="Nairobi",
        price=price,
        category=category,
        capacity=capacity,
        organizer="org",
        attendees=attendees,
        created_at="2026-10-01T00:00:00+00:00",
    )


@pytest.fixture
def organizer_events():
    return [
        event("a", "concert", 1000, 100, [
            sale(1, 2, 2000, "2026-09-15T10:00:00+00:00"),
            sale(2, 1, 1000, "2026-10-03T10:00:00+00:00"),
        ]),
        event("b", "concert", 0, 50, [
            sale(3, 4, 0, "2026-10-01T10:00:00+00:00"),
        ]),
        event("c", "workshop", 6000, 10, []),
    ]


class TestDashboardFold:

    def test_totals(self, organizer_events):
        dashboard = AnalyticsService.dashboard(organizer_events)

        assert dashboard.total_events == 3
        assert dashboard.total_attendees == 7
        assert dashboard.total_revenue == 3000
        assert [(item.event_title, item.revenue, item.attendees) for item in dashboard.revenue_by_event] == [
            ("Event a", 3000, 3), ("Event b", 0, 4), ("Event c", 0, 0)
        ]
        assert [(item.name, item.value) for item in dashboard.revenue_by_event_for_pie] == [
            ("Event a", 3000), ("Event b", 0), ("Event c", 0)
        ]

    def test_categories_and_price_bands(self, organizer_events):
        dashboard = AnalyticsService.dashboard(organizer_events)

        categories = {item.name: item for item in dashboard.category_data}
        assert categories["Concert"].value == 3000
        assert categories["Concert"].count == 2
        assert categories["Concert"].color == "#8b5cf6"
        assert categories["Workshop"].color == "#10b981"

        assert [(item.name, item.value) for item in dashboard.price_range_data] == [
            ("Free", 1), ("KES 501-2000", 1), ("KES 5000+", 1)
        ]

    def test_monthly_series_and_recent_transactions(self, organizer_events):
        dashboard = AnalyticsService.dashboard(organizer_events)

        assert [(item.month, item.tickets, item.revenue) for item in dashboard.tickets_sold_over_time] == [
            ("2026-09", 2, 2000), ("2026-10", 5, 1000)
        ]
        assert [item.ticket_number for item in dashboard.recent_transactions] == [
            "TKT-00000002", "TKT-00000003", "TKT-00000001"
        ]

    def test_recent_transactions_capped_at_ten(self):
        sales = [sale(n, 1, 100, f"2026-10-{n:02d}T08:00:00+00:00") for n in range(1, 16)]
        dashboard = AnalyticsService.dashboard([event("x", "other", 100, 100, sales)])

        assert len(dashboard.recent_transactions) == 10
        assert dashboard.recent_transactions[0].ticket_number == "TKT-00000015"

    def test_empty_dashboard(self):
        dashboard = AnalyticsService.dashboard([])

        assert dashboard.total_events == 0
        assert dashboard.price_range_data == []
        assert dashboard.recent_transactions == []

    @pytest.mark.parametrize("price,band", [
        (0, "Free"), (1, "KES 1-500"), (500, "KES 1-500"), (501, "KES 501-2000"),
        (2000, "KES 501-2000"), (5000, "KES 2001-5000"), (5001, "KES 5000+"),
    ])
    def test_price_bands(self, price, band):
        assert price_band(price) == band

    def test_event_summary(self, organizer_events):
        summary = AnalyticsService.event_summary(organizer_events[0])

        assert summary.total_tickets_sold == 3
        assert summary.total_revenue == 3000
        assert summary.available_tickets == 97
        assert summary.occupancy_rate == 3.0
        assert len(summary.attendees) == 2

    def test_occupancy_rate_is_rounded(self):
        summary = AnalyticsService.event_summary(
            event("r", "other", 10, 3, [sale(1, 1, 10, "2026-10-01T00:00:00+00:00")])
        )
        assert summary.occupancy_rate == 33.33


class TestAnalyticsEndpoints:

    @pytest.mark.asyncio
    async def test_dashboard_covers_own_events(self, client: AsyncClient, organizer_headers, attendee_headers, created_event):
        await client.post(
            "/api/payments/process",
            json={"eventId": created_event["id"], "quantity": 2, "phoneNumber": "254712345678"},
            headers=attendee_headers
        )

        response = await client.get("/api/analytics/dashboard", headers=organizer_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["totalEvents"] == 1
        assert body["totalAttendees"] == 2
        assert body["totalRevenue"] == 3000
        assert body["categoryData"][0]["name"] == "Conference"
        assert body["priceRangeData"] == [{"name": "KES 501-2000", "value": 1}]
        assert body["recentTransactions"][0]["amount"] == 3000

    @pytest.mark.asyncio
    async def test_event_analytics(self, client: AsyncClient, organizer_headers, attendee_headers, created_event):
        await client.post(
            "/api/payments/process",
            json={"eventId": created_event["id"], "quantity": 1, "phoneNumber": "254712345678"},
            headers=attendee_headers
        )

        response = await client.get(f"/api/analytics/event/{created_event['id']}", headers=organizer_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["eventTitle"] == created_event["title"]
        assert body["totalTicketsSold"] == 1
        assert body["availableTickets"] == 4
        assert body["occupancyRate"] == 20.0
        assert body["attendees"][0]["quantity"] == 1

    @pytest.mark.asyncio
    async def test_event_analytics_for_foreign_event(self, client: AsyncClient, created_event):
        other = auth_headers(await register(client, role="organizer"))

        response = await client.get(f"/api/analytics/event/{created_event['id']}", headers=other)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_regular_users_are_forbidden(self, client: AsyncClient, attendee_headers):
        response = await client.get("/api/analytics/dashboard", headers=attendee_headers)

        assert response.status_code == 403
