"""Database connectivity layer for coursedocs."""

from __future__ import annotations

import logging
from typing import Optional

import redis.asyncio as redis
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, IndexModel

from coursedocs.core.config import settings
from coursedocs.models.topic import TopicKind

logger = logging.getLogger(__name__)


def topic_collection_name(kind: TopicKind) -> str:
    return f"{kind.value}_topics"


def document_collection_name(kind: TopicKind) -> str:
    return f"{kind.value}_documents"


TOPIC_INDEXES = [
    IndexModel([("name_key", ASCENDING)], name="topic_name_key_uq", unique=True),
    IndexModel([("slug", ASCENDING)], name="topic_slug_idx"),
    IndexModel([("is_active", ASCENDING), ("display_order", ASCENDING)], name="topic_active_order_idx"),
]

DOCUMENT_INDEXES = [
    IndexModel([("topic_id", ASCENDING), ("title_key", ASCENDING)], name="doc_topic_title_key_uq", unique=True),
    IndexModel([("topic_id", ASCENDING), ("display_order", ASCENDING)], name="doc_topic_order_idx"),
    IndexModel([("topic_id", ASCENDING), ("is_active", ASCENDING)], name="doc_topic_active_idx"),
    IndexModel([("topic_id", ASCENDING), ("slug", ASCENDING)], name="doc_topic_slug_idx"),
]


class DatabaseManager:
    """Lazily establishes connections to required datastores."""

    def __init__(self) -> None:
        self.mongodb: Optional[AsyncIOMotorClient] = None
        self.redis: Optional[redis.Redis] = None

    async def initialize(self) -> None:
        """Connect to all backing services."""

        logger.info("Initializing coursedocs database manager")

        self.mongodb = AsyncIOMotorClient(str(settings.MONGODB_URL), tz_aware=True)

        if settings.CACHE_BACKEND == "redis":
            if settings.REDIS_URL is None:
                logger.warning("CACHE_BACKEND=redis but REDIS_URL is unset; read cache stays in-process")
            else:
                self.redis = redis.from_url(str(settings.REDIS_URL), decode_responses=True)

        logger.info("Database manager initialized")

    @property
    def database(self) -> AsyncIOMotorDatabase:
        if self.mongodb is None:
            raise RuntimeError("MongoDB client is not initialized")
        return self.mongodb[settings.MONGODB_DATABASE]

    async def ensure_indexes(self) -> None:
        """Create the unique and lookup indexes every kind relies on."""

        database = self.database
        for kind in TopicKind:
            topics = await database[topic_collection_name(kind)].create_indexes(TOPIC_INDEXES)
            documents = await database[document_collection_name(kind)].create_indexes(DOCUMENT_INDEXES)
            logger.info("Ensured indexes for %s: %s", kind.value, topics + documents)

    async def close(self) -> None:
        """Tear down connections gracefully."""

        logger.info("Closing database connections")

        if self.redis is not None:
            await self.redis.aclose()
            self.redis = None

        if self.mongodb is not None:
            self.mongodb.close()
            self.mongodb = None


# Singleton instance used by the service container
database_manager = DatabaseManager()
