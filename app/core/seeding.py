"""
Sample events for the in-memory backend
"""
from datetime import date, timedelta
from typing import Any, Dict, List, Optional
import logging

from app.storage.base import EventRepository

logger = logging.getLogger(__name__)

DEMO_ORGANIZER_ID = "demo-organizer"


def sample_events(today: Optional[date] = None) -> List[Dict[str, Any]]:
    """Three upcoming events dated relative to today"""
    today = today or date.today()
    return [
        {
            "title": "Tech Conference 2024",
            "description": "Annual technology conference featuring the latest innovations in AI, "
                           "blockchain, and cloud computing.",
            "date": today + timedelta(days=7),
            "time": "09:00",
            "location": "Nairobi Convention Center",
            "price": 1500,
            "category": "conference",
            "capacity": 500,
            "organizer": DEMO_ORGANIZER_ID,
            "image": "https://images.unsplash.com/photo-1540575467063-178a50c2df87?w=800&q=80",
        },
        {
            "title": "Summer Music Festival",
            "description": "The biggest music festival of the year with top artists.",
            "date": today + timedelta(days=14),
            "time": "16:00",
            "location": "Kasarani Stadium",
            "price": 2000,
            "category": "concert",
            "capacity": 10000,
            "organizer": DEMO_ORGANIZER_ID,
            "image": "https://images.unsplash.com/photo-1459749411175-04bf5292ceea?w=800&q=80",
        },
        {
            "title": "Business Workshop",
            "description": "Learn essential business skills from industry experts.",
            "date": today + timedelta(days=3),
            "time": "10:00",
            "location": "Sarit Centre",
            "price": 500,
            "category": "workshop",
            "capacity": 100,
            "organizer": DEMO_ORGANIZER_ID,
            "image": "https://images.unsplash.com/photo-1515187029135-18ee286d815b?w=800&q=80",
        },
    ]


async def seed_if_empty(events: EventRepository) -> int:
    """Seed sample events only if the repository holds no events"""
    if await events.find():
        logger.info("Event store already contains data, skipping seeding")
        return 0

    created = 0
    for data in sample_events():
        await events.create(data)
        created += 1

    logger.info(f"Seeded {created} sample events")
    return created
