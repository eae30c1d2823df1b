"""
Prometheus metrics for requests and bookings
"""

from prometheus_client import REGISTRY, Counter, Histogram


def _counter(name: str, documentation: str, labels) -> Counter:
    try:
        return Counter(name, documentation, labels)
    except ValueError:
        # Already registered, e.g. when the module is reloaded in tests
        return REGISTRY._names_to_collectors[name]


def _histogram(name: str, documentation: str, labels) -> Histogram:
    try:
        return Histogram(name, documentation, labels)
    except ValueError:
        return REGISTRY._names_to_collectors[name]


REQUEST_COUNT = _counter(
    "app_requests_total",
    "Total requests",
    ["method", "endpoint", "status"]
)
REQUEST_DURATION = _histogram(
    "app_request_duration_seconds",
    "Request duration",
    ["method", "endpoint"]
)
BOOKING_OUTCOMES = _counter(
    "eventhub_bookings_total",
    "Ticket purchases by outcome",
    ["outcome"]
)
PAYMENT_DURATION = _histogram(
    "eventhub_payment_duration_seconds",
    "Time spent waiting on the payment provider",
    ["provider"]
)
