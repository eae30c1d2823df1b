"""
API endpoints module
"""

from . import analytics, auth, events, health, payment

__all__ = ["analytics", "auth", "events", "health", "payment"]
