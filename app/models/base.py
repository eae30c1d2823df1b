"""
Base model class with common fields
"""

from datetime import datetime, timezone
import uuid

from sqlalchemy import Column, DateTime, String

from app.core.database import Base


def generate_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseModel(Base):
    """
    Abstract base model with common fields
    """
    __abstract__ = True

    id = Column(
        String(36),
        primary_key=True,
        default=generate_id,
        nullable=False
    )
    created_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False
    )
