"""
Storage backends and the repositories they expose
"""

from app.storage.base import (
    BackendKind,
    EventFilter,
    EventRepository,
    StorageBackend,
    UserFilter,
    UserRepository,
)

__all__ = [
    "BackendKind",
    "EventFilter",
    "EventRepository",
    "StorageBackend",
    "UserFilter",
    "UserRepository",
]
