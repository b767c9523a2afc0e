"""Topic registry: uniqueness, slugs, ordering, cached document counts and deletion policy."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from coursedocs.core.cache import TOPIC_BY_ID, TOPIC_LIST, ReadCache
from coursedocs.core.exceptions import ConflictError, NotFoundError
from coursedocs.models.topic import KindStats, Topic, TopicCreate, TopicKind, TopicUpdate
from coursedocs.repositories.base import DocumentRepository, TopicRepository
from coursedocs.services.media import MediaReconciler
from coursedocs.services.policy import DeletePolicy, KindPolicy
from coursedocs.utils.audit import audit_logger
from coursedocs.utils.validators import is_uuid, slugify

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class TopicRegistry:
    """Owns the topics of one kind."""

    def __init__(
        self,
        policy: KindPolicy,
        topics: TopicRepository,
        documents: DocumentRepository,
        reconciler: MediaReconciler,
        cache: ReadCache,
    ) -> None:
        self.policy = policy
        self.topics = topics
        self.documents = documents
        self.reconciler = reconciler
        self.cache = cache

    @property
    def kind(self) -> TopicKind:
        return self.policy.kind

    async def list(self, *, active_only: bool = True) -> List[Topic]:
        namespace = self.cache.namespace(self.kind, TOPIC_LIST)
        key = "active" if active_only else "all"
        cached = await self.cache.get(namespace, key)
        if cached is not None:
            return [Topic.model_validate(item) for item in cached]

        topics = await self.topics.list(active_only=active_only)
        await self.cache.set(namespace, key, [topic.model_dump(mode="json") for topic in topics])
        return topics

    async def get(self, topic_id: str) -> Topic:
        namespace = self.cache.namespace(self.kind, TOPIC_BY_ID)
        cached = await self.cache.get(namespace, topic_id)
        if cached is not None:
            return Topic.model_validate(cached)

        topic = await self.require(topic_id)
        await self.cache.set(namespace, topic_id, topic.model_dump(mode="json"))
        return topic

    async def get_by_slug(self, slug: str) -> Topic:
        topic = await self.topics.get_by_slug(slug)
        if topic is None:
            raise NotFoundError(f"Topic not found with slug: {slug}")
        return topic

    async def resolve(self, identifier: str) -> Topic:
        """Look a topic up by id when ``identifier`` is UUID-shaped, otherwise by slug."""

        if is_uuid(identifier):
            return await self.get(identifier)
        return await self.get_by_slug(identifier)

    async def require(self, topic_id: str) -> Topic:
        """Uncached lookup used by writers."""

        topic = await self.topics.get(topic_id)
        if topic is None:
            raise NotFoundError(f"Topic not found with id: {topic_id}")
        return topic

    async def create(self, payload: TopicCreate, actor: str) -> Topic:
        timestamp = _now()
        topic = Topic(
            id=str(uuid.uuid4()),
            kind=self.kind,
            name=payload.name,
            slug=slugify(payload.name),
            description=payload.description,
            icon=payload.icon,
            color=payload.color,
            display_order=payload.display_order,
            is_active=payload.is_active,
            document_count=0,
            created_by=actor,
            updated_by=actor,
            created_at=timestamp,
            updated_at=timestamp,
        )
        await self.topics.insert(topic)
        await self.cache.evict_topics(self.kind)

        audit_logger.record("topic.create", actor, {"kind": self.kind.value, "topic_id": topic.id, "name": topic.name})
        return topic

    async def update(self, topic_id: str, payload: TopicUpdate, actor: str) -> Topic:
        topic = await self.require(topic_id)
        changes = payload.model_dump(exclude_unset=True)
        for field in ("name", "display_order", "is_active"):
            if changes.get(field, ...) is None:
                changes.pop(field)

        previous_icon = topic.icon
        updated = topic.model_copy(update=changes)
        if "name" in changes:
            updated.slug = slugify(updated.name)
        updated.updated_by = actor
        updated.updated_at = _now()

        await self.topics.save(updated)

        if previous_icon and previous_icon != updated.icon:
            await self.reconciler.release([previous_icon])

        await self.cache.evict_topics(self.kind)
        audit_logger.record(
            "topic.update", actor, {"kind": self.kind.value, "topic_id": topic_id, "fields": sorted(changes)}
        )
        return updated

    async def delete(self, topic_id: str, actor: str) -> None:
        topic = await self.require(topic_id)

        if self.policy.delete_policy is DeletePolicy.REFUSE:
            owned = await self.documents.count_by_topic(topic_id)
            if owned > 0:
                raise ConflictError("Cannot delete topic with existing documents. Delete all documents first.")
            removed = 0
        else:
            removed = await self._cascade_documents(topic)

        await self.topics.delete(topic_id)
        if topic.icon:
            await self.reconciler.release([topic.icon])

        await self.cache.evict_documents(self.kind)
        audit_logger.record(
            "topic.delete",
            actor,
            {"kind": self.kind.value, "topic_id": topic_id, "name": topic.name, "documents_removed": removed},
        )

    async def _cascade_documents(self, topic: Topic) -> int:
        documents = await self.documents.list_full(topic.id)
        logger.info("Deleting topic '%s' with %d documents", topic.name, len(documents))

        for document in documents:
            urls = self.reconciler.tracked_urls(document)
            await self.documents.delete(document.id)
            released = await self.reconciler.release(urls)
            logger.info(
                "Deleted document '%s' (%d of %d media objects released)", document.title, released, len(urls)
            )
        return len(documents)

    async def update_document_count(self, topic_id: str) -> Optional[int]:
        """Recompute the cached count of active documents under ``topic_id``."""

        count = await self.documents.count_by_topic(topic_id, active_only=True)
        if not await self.topics.set_document_count(topic_id, count):
            logger.warning("Topic %s vanished before its document count could be stored", topic_id)
            return None
        return count

    async def stats(self) -> KindStats:
        return KindStats(
            kind=self.kind,
            total_topics=await self.topics.count(),
            total_documents=await self.documents.count(),
        )


__all__ = ["TopicRegistry"]
