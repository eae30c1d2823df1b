"""
Secondary backend: events and users as JSON documents in Redis

Each document lives at ``{prefix}:{collection}:{id}``; a set per collection
holds the ids and a hash maps lower-cased emails to user ids.
"""

from typing import Any, Callable, Dict, List, Optional
import json
import logging
import uuid

import redis.asyncio as redis
from redis.exceptions import WatchError

from app.core.exceptions import ConflictError
from app.schemas.event import EventRecord
from app.schemas.payment import AttendeeRecord, TicketRecord
from app.schemas.user import UserRecord
from app.storage.base import (
    BackendUnavailableError,
    EventFilter,
    EventRepository,
    UserFilter,
    UserRepository,
    apply_event_changes,
    apply_user_changes,
    build_event,
    build_user,
    sort_by_date,
)

logger = logging.getLogger(__name__)

EVENTS = "events"
USERS = "users"
MAX_UPDATE_ATTEMPTS = 5


class RedisDocumentStore:
    """
    Minimal document API over a Redis client
    """

    def __init__(self, client: redis.Redis, prefix: str):
        self.client = client
        self.prefix = prefix

    def key(self, collection: str, doc_id: str) -> str:
        return f"{self.prefix}:{collection}:{doc_id}"

    def ids_key(self, collection: str) -> str:
        return f"{self.prefix}:{collection}:_ids"

    @property
    def email_index_key(self) -> str:
        return f"{self.prefix}:{USERS}:_email"

    async def probe(self):
        """
        Write, read back and delete a sentinel key
        """
        key = f"{self.prefix}:_probe:{uuid.uuid4().hex}"
        token = uuid.uuid4().hex
        await self.client.set(key, token, ex=60)
        try:
            if await self.client.get(key) != token:
                raise BackendUnavailableError("Redis returned a different value for the probe key")
        finally:
            await self.client.delete(key)

    async def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        raw = await self.client.get(self.key(collection, doc_id))
        return json.loads(raw) if raw is not None else None

    async def all(self, collection: str) -> List[Dict[str, Any]]:
        ids = await self.client.smembers(self.ids_key(collection))
        if not ids:
            return []
        values = await self.client.mget([self.key(collection, doc_id) for doc_id in ids])
        # Ids whose document was deleted between the two reads come back as None
        return [json.loads(raw) for raw in values if raw is not None]

    async def count(self, collection: str) -> int:
        return await self.client.scard(self.ids_key(collection))

    async def insert(self, collection: str, doc_id: str, document: Dict[str, Any]):
        async with self.client.pipeline(transaction=True) as pipe:
            pipe.set(self.key(collection, doc_id), json.dumps(document))
            pipe.sadd(self.ids_key(collection), doc_id)
            await pipe.execute()

    async def delete(self, collection: str, doc_id: str) -> bool:
        async with self.client.pipeline(transaction=True) as pipe:
            pipe.delete(self.key(collection, doc_id))
            pipe.srem(self.ids_key(collection), doc_id)
            deleted, _ = await pipe.execute()
        return bool(deleted)

    async def mutate(
        self,
        collection: str,
        doc_id: str,
        change: Callable[[Dict[str, Any]], Dict[str, Any]]
    ) -> Optional[Dict[str, Any]]:
        """
        Read-modify-write a document under WATCH; returns None if it is missing
        """
        key = self.key(collection, doc_id)
        async with self.client.pipeline(transaction=True) as pipe:
            for _ in range(MAX_UPDATE_ATTEMPTS):
                try:
                    await pipe.watch(key)
                    raw = await pipe.get(key)
                    if raw is None:
                        return None

                    document = change(json.loads(raw))
                    pipe.multi()
                    pipe.set(key, json.dumps(document))
                    await pipe.execute()
                    return document
                except WatchError:
                    logger.debug(f"Concurrent write on {key}, retrying")

        raise ConflictError(
            "The record was modified concurrently, please retry",
            details={"collection": collection, "id": doc_id}
        )


class DocumentEventRepository(EventRepository):

    def __init__(self, store: RedisDocumentStore):
        self.store = store

    async def find(self, query: Optional[EventFilter] = None) -> List[EventRecord]:
        query = query or EventFilter()
        events = [EventRecord.model_validate(doc) for doc in await self.store.all(EVENTS)]
        return sort_by_date([event for event in events if query.matches(event)])

    async def find_by_id(self, event_id: str) -> Optional[EventRecord]:
        document = await self.store.get(EVENTS, str(event_id))
        return EventRecord.model_validate(document) if document else None

    async def create(self, data: Dict[str, Any]) -> EventRecord:
        event = build_event(uuid.uuid4().hex, data)
        await self.store.insert(EVENTS, event.id, event.to_document())
        return event

    async def update(self, event_id: str, changes: Dict[str, Any]) -> Optional[EventRecord]:
        def change(document):
            return apply_event_changes(EventRecord.model_validate(document), changes).to_document()

        document = await self.store.mutate(EVENTS, str(event_id), change)
        return EventRecord.model_validate(document) if document else None

    async def delete_one(self, query: EventFilter) -> bool:
        event = await self.find_one(query)
        if event is None:
            return False
        return await self.store.delete(EVENTS, event.id)

    async def add_attendee(self, event_id: str, attendee: AttendeeRecord) -> Optional[EventRecord]:
        def change(document):
            document.setdefault("attendees", []).append(attendee.model_dump(mode="json"))
            return document

        document = await self.store.mutate(EVENTS, str(event_id), change)
        return EventRecord.model_validate(document) if document else None


class DocumentUserRepository(UserRepository):

    def __init__(self, store: RedisDocumentStore):
        self.store = store

    async def find_one(self, query: UserFilter) -> Optional[UserRecord]:
        user_id = query.id
        if user_id is None:
            user_id = await self.store.client.hget(self.store.email_index_key, query.email.lower())
            if user_id is None:
                return None

        user = await self.find_by_id(user_id)
        return user if user is not None and query.matches(user) else None

    async def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        document = await self.store.get(USERS, str(user_id))
        return UserRecord.model_validate(document) if document else None

    async def create(self, data: Dict[str, Any]) -> UserRecord:
        user = build_user(uuid.uuid4().hex, data)
        email = user.email.lower()

        claimed = await self.store.client.hsetnx(self.store.email_index_key, email, user.id)
        if not claimed:
            raise ConflictError("User already exists", details={"field": "email"})

        try:
            await self.store.insert(USERS, user.id, user.to_document())
        except Exception:
            await self.store.client.hdel(self.store.email_index_key, email)
            raise
        return user

    async def update(self, user_id: str, changes: Dict[str, Any]) -> Optional[UserRecord]:
        def change(document):
            return apply_user_changes(UserRecord.model_validate(document), changes).to_document()

        document = await self.store.mutate(USERS, str(user_id), change)
        return UserRecord.model_validate(document) if document else None

    async def add_ticket(self, user_id: str, ticket: TicketRecord) -> Optional[UserRecord]:
        def change(document):
            document.setdefault("tickets", []).append(ticket.model_dump(mode="json"))
            return document

        document = await self.store.mutate(USERS, str(user_id), change)
        return UserRecord.model_validate(document) if document else None
