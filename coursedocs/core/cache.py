"""Namespaced read cache sitting in front of listing and detail reads.

Entries never expire on their own. Writers evict whole namespaces, so an
entry is either current or gone.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Protocol

import redis.asyncio as redis
from redis.exceptions import RedisError

from coursedocs.models.topic import TopicKind
from coursedocs.utils.monitoring import record_cache_lookup

logger = logging.getLogger(__name__)

TOPIC_LIST = "topicList"
TOPIC_BY_ID = "topicById"
DOC_LIST = "docList"
DOC_BY_ID = "docById"

TOPIC_NAMESPACES = (TOPIC_LIST, TOPIC_BY_ID)
DOCUMENT_NAMESPACES = (DOC_LIST, DOC_BY_ID)


class CacheBackend(Protocol):
    async def get(self, namespace: str, key: str) -> Optional[str]:
        ...

    async def set(self, namespace: str, key: str, value: str) -> None:
        ...

    async def evict_namespace(self, namespace: str) -> None:
        ...


class MemoryCacheBackend:
    """Process-local dictionary backend."""

    def __init__(self) -> None:
        self._entries: Dict[str, Dict[str, str]] = {}

    async def get(self, namespace: str, key: str) -> Optional[str]:
        return self._entries.get(namespace, {}).get(key)

    async def set(self, namespace: str, key: str, value: str) -> None:
        self._entries.setdefault(namespace, {})[key] = value

    async def evict_namespace(self, namespace: str) -> None:
        self._entries.pop(namespace, None)


class RedisCacheBackend:
    """Redis backend; each namespace keeps a set of its keys for bulk eviction."""

    def __init__(self, client: redis.Redis, prefix: str = "readcache") -> None:
        self._redis = client
        self._prefix = prefix

    def _key(self, namespace: str, key: str) -> str:
        return f"{self._prefix}:{namespace}:{key}"

    def _index(self, namespace: str) -> str:
        return f"{self._prefix}:{namespace}:__keys__"

    async def get(self, namespace: str, key: str) -> Optional[str]:
        return await self._redis.get(self._key(namespace, key))

    async def set(self, namespace: str, key: str, value: str) -> None:
        full_key = self._key(namespace, key)
        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.set(full_key, value)
            pipe.sadd(self._index(namespace), full_key)
            await pipe.execute()

    async def evict_namespace(self, namespace: str) -> None:
        index = self._index(namespace)
        keys = await self._redis.smembers(index)
        await self._redis.delete(index, *keys)


class ReadCache:
    """JSON cache partitioned into per-kind namespaces."""

    def __init__(self, backend: Optional[CacheBackend] = None) -> None:
        self.backend: CacheBackend = backend or MemoryCacheBackend()

    @staticmethod
    def namespace(kind: TopicKind, name: str) -> str:
        return f"{kind.value}:{name}"

    async def get(self, namespace: str, key: str) -> Optional[Any]:
        try:
            value = await self.backend.get(namespace, key)
        except RedisError as exc:
            logger.warning("Read cache lookup failed for %s/%s: %s", namespace, key, exc)
            value = None
        record_cache_lookup(namespace, hit=value is not None)
        return json.loads(value) if value is not None else None

    async def set(self, namespace: str, key: str, value: Any) -> None:
        try:
            await self.backend.set(namespace, key, json.dumps(value))
        except RedisError as exc:
            logger.warning("Read cache store failed for %s/%s: %s", namespace, key, exc)

    async def evict(self, *namespaces: str) -> None:
        for namespace in namespaces:
            try:
                await self.backend.evict_namespace(namespace)
            except RedisError as exc:
                logger.error("Read cache eviction failed for %s: %s", namespace, exc)
            else:
                logger.debug("Evicted read cache namespace %s", namespace)

    async def evict_topics(self, kind: TopicKind) -> None:
        await self.evict(*(self.namespace(kind, name) for name in TOPIC_NAMESPACES))

    async def evict_documents(self, kind: TopicKind) -> None:
        # Document writes also change cached topic document counts.
        names = DOCUMENT_NAMESPACES + TOPIC_NAMESPACES
        await self.evict(*(self.namespace(kind, name) for name in names))


__all__ = [
    "DOC_BY_ID",
    "DOC_LIST",
    "MemoryCacheBackend",
    "ReadCache",
    "RedisCacheBackend",
    "TOPIC_BY_ID",
    "TOPIC_LIST",
]
