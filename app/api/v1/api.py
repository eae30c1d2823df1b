"""
Main API Router
Aggregates all API endpoints for v1
"""

from fastapi import APIRouter

from app.schemas.response import ERROR_RESPONSES
from app.api.v1.endpoints import (
    analytics,
    auth,
    events,
    health,
    payment,
)

api_router = APIRouter(responses=ERROR_RESPONSES)

# Include all routers
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(events.router, prefix="/events", tags=["Events"])
api_router.include_router(payment.router, prefix="/payments", tags=["Payments"])
api_router.include_router(analytics.router, prefix="/analytics", tags=["Analytics"])
api_router.include_router(health.router, prefix="/health", tags=["Health"])
