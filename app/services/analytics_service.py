"""
Analytics Service for the organizer dashboard
Folds an organizer's events and their attendee entries into chart data
"""

from datetime import datetime, timezone
from typing import Dict, List
import logging

from app.core.exceptions import NotFoundError
from app.schemas.analytics import (
    CategorySlice,
    ChartSlice,
    DashboardAnalytics,
    EventAnalytics,
    EventRevenue,
    MonthlySales,
    Transaction,
)
from app.schemas.event import EventRecord
from app.storage.base import EventFilter, StorageBackend

logger = logging.getLogger(__name__)

CATEGORY_COLORS = {
    "concert": "#8b5cf6",
    "conference": "#3b82f6",
    "workshop": "#10b981",
    "sports": "#f59e0b",
    "theater": "#ec4899",
    "festival": "#f97316",
    "other": "#6366f1",
}

PRICE_BANDS = ["Free", "KES 1-500", "KES 501-2000", "KES 2001-5000", "KES 5000+"]

RECENT_TRANSACTIONS_LIMIT = 10


def price_band(price: float) -> str:
    if price == 0:
        return "Free"
    if price <= 500:
        return "KES 1-500"
    if price <= 2000:
        return "KES 501-2000"
    if price <= 5000:
        return "KES 2001-5000"
    return "KES 5000+"


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value.astimezone(timezone.utc)


class AnalyticsService:
    """Service for generating organizer analytics"""

    @staticmethod
    def dashboard(events: List[EventRecord]) -> DashboardAnalytics:
        """Aggregate totals, chart series and recent transactions"""
        total_attendees = 0
        total_revenue = 0.0
        revenue_by_event: List[EventRevenue] = []
        category_revenue: Dict[str, float] = {}
        category_count: Dict[str, int] = {}
        band_count = {band: 0 for band in PRICE_BANDS}
        monthly: Dict[str, MonthlySales] = {}
        transactions: List[Transaction] = []

        for event in events:
            attendees = sum(attendee.quantity for attendee in event.attendees)
            revenue = sum(attendee.total_amount for attendee in event.attendees)
            total_attendees += attendees
            total_revenue += revenue

            revenue_by_event.append(EventRevenue(
                event_title=event.title,
                revenue=revenue,
                attendees=attendees,
                price=event.price
            ))

            category = str(event.category)
            category_revenue[category] = category_revenue.get(category, 0.0) + revenue
            category_count[category] = category_count.get(category, 0) + 1

            band_count[price_band(event.price)] += 1

            for attendee in event.attendees:
                purchased = _as_utc(attendee.purchase_date)
                month = purchased.strftime("%Y-%m")
                sales = monthly.setdefault(month, MonthlySales(month=month, tickets=0, revenue=0.0))
                sales.tickets += attendee.quantity
                sales.revenue += attendee.total_amount

                transactions.append(Transaction(
                    ticket_number=attendee.ticket_number,
                    event_title=event.title,
                    quantity=attendee.quantity,
                    amount=attendee.total_amount,
                    purchase_date=purchased,
                    receipt_number=attendee.receipt_number
                ))

        transactions.sort(key=lambda transaction: transaction.purchase_date, reverse=True)

        return DashboardAnalytics(
            total_events=len(events),
            total_attendees=total_attendees,
            total_revenue=total_revenue,
            revenue_by_event=revenue_by_event,
            revenue_by_event_for_pie=[
                ChartSlice(name=item.event_title, value=item.revenue) for item in revenue_by_event
            ],
            category_data=[
                CategorySlice(
                    name=category.capitalize(),
                    value=revenue,
                    count=category_count[category],
                    color=CATEGORY_COLORS.get(category, CATEGORY_COLORS["other"])
                )
                for category, revenue in category_revenue.items()
            ],
            price_range_data=[
                ChartSlice(name=band, value=count) for band, count in band_count.items() if count > 0
            ],
            tickets_sold_over_time=[monthly[month] for month in sorted(monthly)],
            recent_transactions=transactions[:RECENT_TRANSACTIONS_LIMIT]
        )

    @staticmethod
    def event_summary(event: EventRecord) -> EventAnalytics:
        """Sales figures for a single event"""
        sold = event.tickets_sold
        return EventAnalytics(
            event_title=event.title,
            total_tickets_sold=sold,
            total_revenue=sum(attendee.total_amount for attendee in event.attendees),
            available_tickets=event.available_tickets,
            occupancy_rate=round(sold / event.capacity * 100, 2),
            attendees=event.attendees
        )

    @staticmethod
    async def get_dashboard(storage: StorageBackend, organizer_id: str) -> DashboardAnalytics:
        events = await storage.events.find(EventFilter(organizer=organizer_id))
        logger.debug(f"Building dashboard for organizer {organizer_id} over {len(events)} events")
        return AnalyticsService.dashboard(events)

    @staticmethod
    async def get_event_summary(storage: StorageBackend, event_id: str, organizer_id: str) -> EventAnalytics:
        event = await storage.events.find_one(EventFilter(id=event_id, organizer=organizer_id))
        if event is None:
            raise NotFoundError("Event", event_id)
        return AnalyticsService.event_summary(event)
