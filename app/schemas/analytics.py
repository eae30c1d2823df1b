"""
Organizer analytics schemas
"""

from datetime import datetime
from typing import List

from app.schemas.base import BaseSchema
from app.schemas.payment import AttendeeRecord


class EventRevenue(BaseSchema):
    event_title: str
    revenue: float
    attendees: int
    price: float


class ChartSlice(BaseSchema):
    name: str
    value: float


class CategorySlice(ChartSlice):
    count: int
    color: str


class MonthlySales(BaseSchema):
    month: str
    tickets: int
    revenue: float


class Transaction(BaseSchema):
    ticket_number: str
    event_title: str
    quantity: int
    amount: float
    purchase_date: datetime
    receipt_number: str


class DashboardAnalytics(BaseSchema):
    total_events: int
    total_attendees: int
    total_revenue: float
    revenue_by_event: List[EventRevenue]
    revenue_by_event_for_pie: List[ChartSlice]
    category_data: List[CategorySlice]
    price_range_data: List[ChartSlice]
    tickets_sold_over_time: List[MonthlySales]
    recent_transactions: List[Transaction]


class EventAnalytics(BaseSchema):
    event_title: str
    total_tickets_sold: int
    total_revenue: float
    available_tickets: int
    occupancy_rate: float
    attendees: List[AttendeeRecord]
