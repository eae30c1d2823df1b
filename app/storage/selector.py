"""
Startup choice of storage backend: database, then Redis, then memory
"""

from typing import Optional
import logging

from fastapi import Request

from app.config import Settings
from app.core.database import close_db, create_engine, create_session_factory, init_db
from app.core.redis import close_redis, create_redis_client
from app.core.seeding import seed_if_empty
from app.storage.base import BackendKind, StorageBackend
from app.storage.document import DocumentEventRepository, DocumentUserRepository, RedisDocumentStore
from app.storage.memory import MemoryStore, MockEventRepository, MockUserRepository
from app.storage.memory import memory_store as default_memory_store
from app.storage.sql import SqlEventRepository, SqlUserRepository

logger = logging.getLogger(__name__)


async def _connect_primary(database_url: str) -> StorageBackend:
    engine = create_engine(database_url)
    try:
        await init_db(engine)
    except Exception:
        await engine.dispose()
        raise

    session_factory = create_session_factory(engine)
    return StorageBackend(
        kind=BackendKind.PRIMARY,
        events=SqlEventRepository(session_factory),
        users=SqlUserRepository(session_factory),
        closer=lambda: close_db(engine),
    )


async def _connect_secondary(redis_url: str, prefix: str) -> StorageBackend:
    client = create_redis_client(redis_url)
    store = RedisDocumentStore(client, prefix)
    try:
        await store.probe()
    except Exception:
        await client.aclose()
        raise

    return StorageBackend(
        kind=BackendKind.SECONDARY,
        events=DocumentEventRepository(store),
        users=DocumentUserRepository(store),
        closer=lambda: close_redis(client),
    )


async def select_backend(settings: Settings, memory_store: Optional[MemoryStore] = None) -> StorageBackend:
    """
    Return the first backend that answers its probe; memory always does
    """
    backend = None

    if settings.DATABASE_URL:
        try:
            backend = await _connect_primary(settings.DATABASE_URL)
        except Exception as e:
            logger.warning(f"Primary database unavailable, falling back: {e}")

    if backend is None and settings.REDIS_URL:
        try:
            backend = await _connect_secondary(settings.REDIS_URL, settings.REDIS_KEY_PREFIX)
        except Exception as e:
            logger.warning(f"Redis document store unavailable, falling back: {e}")

    if backend is None:
        store = memory_store if memory_store is not None else default_memory_store
        backend = StorageBackend(
            kind=BackendKind.MOCK,
            events=MockEventRepository(store),
            users=MockUserRepository(store),
        )
        await seed_if_empty(backend.events)

    logger.info(f"Using {backend.kind.value} storage backend")
    return backend


def get_storage(request: Request) -> StorageBackend:
    """
    Dependency returning the backend chosen at startup
    """
    return request.app.state.storage
