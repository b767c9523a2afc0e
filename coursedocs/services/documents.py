"""Document store: per-topic uniqueness, size limits and media reconciliation.

Writes follow one choreography: resolve, validate, persist, then release
media the persisted record no longer references. Anything rejected before
persistence leaves both the store and the media untouched.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from coursedocs.content.size import validate_size
from coursedocs.core.cache import DOC_BY_ID, DOC_LIST, ReadCache
from coursedocs.core.exceptions import ForbiddenError, NotFoundError
from coursedocs.models.document import Document, DocumentCreate, DocumentPage, DocumentSummary, DocumentUpdate
from coursedocs.models.topic import TopicKind
from coursedocs.repositories.base import DocumentRepository
from coursedocs.services.media import MediaReconciler
from coursedocs.services.policy import KindPolicy
from coursedocs.services.topics import TopicRegistry
from coursedocs.utils.audit import audit_logger
from coursedocs.utils.validators import slugify

logger = logging.getLogger(__name__)

CHARS_PER_MINUTE = 1000
NULLABLE_FIELDS = {"description"}


def _now() -> datetime:
    return datetime.now(timezone.utc)


def estimate_read_time(content: str) -> int:
    return max(1, len(content) // CHARS_PER_MINUTE)


class DocumentStore:
    """Owns the documents of one kind."""

    def __init__(
        self,
        policy: KindPolicy,
        documents: DocumentRepository,
        topics: TopicRegistry,
        reconciler: MediaReconciler,
        cache: ReadCache,
    ) -> None:
        self.policy = policy
        self.documents = documents
        self.topics = topics
        self.reconciler = reconciler
        self.cache = cache

    @property
    def kind(self) -> TopicKind:
        return self.policy.kind

    # Reads

    async def list_by_topic(self, topic_id: str, *, include_inactive: bool = False) -> List[DocumentSummary]:
        """Every document of an existing topic, ordered, without content."""

        namespace = self.cache.namespace(self.kind, DOC_LIST)
        key = f"{topic_id}:all:{int(include_inactive)}"
        cached = await self.cache.get(namespace, key)
        if cached is not None:
            return [DocumentSummary.model_validate(item) for item in cached]

        await self.topics.require(topic_id)
        summaries = await self.documents.list_summaries(topic_id, active_only=not include_inactive)
        await self.cache.set(namespace, key, [summary.model_dump(mode="json") for summary in summaries])
        return summaries

    async def list_page(
        self,
        topic_id: str,
        page: int = 0,
        size: Optional[int] = None,
        *,
        include_inactive: bool = False,
    ) -> DocumentPage:
        """One page of a topic's documents; an unknown topic yields an empty page."""

        size = size or self.policy.default_page_size
        namespace = self.cache.namespace(self.kind, DOC_LIST)
        key = f"{topic_id}:page:{page}:{size}:{int(include_inactive)}"
        cached = await self.cache.get(namespace, key)
        if cached is not None:
            return DocumentPage.model_validate(cached)

        active_only = not include_inactive
        items = await self.documents.list_summaries(topic_id, active_only=active_only, skip=page * size, limit=size)
        total = await self.documents.count_by_topic(topic_id, active_only=active_only)
        result = DocumentPage.build(items, page=page, size=size, total=total)
        await self.cache.set(namespace, key, result.model_dump(mode="json"))
        return result

    async def get(self, document_id: str, *, include_hidden: bool = False) -> Document:
        namespace = self.cache.namespace(self.kind, DOC_BY_ID)
        cached = await self.cache.get(namespace, document_id)
        if cached is not None:
            document = Document.model_validate(cached)
        else:
            document = await self._require(document_id)
            await self.cache.set(namespace, document_id, document.model_dump(mode="json"))
        return self._visible(document, include_hidden)

    async def get_by_slug(self, topic_id: str, slug: str, *, include_hidden: bool = False) -> Document:
        document = await self.documents.get_by_slug(topic_id, slug)
        if document is None:
            raise NotFoundError("Document not found")
        return self._visible(document, include_hidden)

    # Writes

    async def create(self, payload: DocumentCreate, actor: str) -> Document:
        await self.topics.require(payload.topic_id)

        image_urls = self._persisted_urls(payload.image_urls)
        total_size = self._validate_size(payload.content, payload.title, image_urls)

        timestamp = _now()
        document = Document(
            id=str(uuid.uuid4()),
            topic_id=payload.topic_id,
            title=payload.title,
            slug=slugify(payload.title),
            description=payload.description,
            content=payload.content,
            image_urls=image_urls,
            display_order=payload.display_order,
            is_active=payload.is_active,
            is_draft=payload.is_draft,
            estimated_read_time=estimate_read_time(payload.content),
            total_size=total_size,
            created_by=actor,
            updated_by=actor,
            created_at=timestamp,
            updated_at=timestamp,
        )
        if not document.is_draft:
            document.publish(timestamp)

        await self.documents.insert(document)
        await self.topics.update_document_count(document.topic_id)
        await self.cache.evict_documents(self.kind)

        audit_logger.record(
            "document.create",
            actor,
            {"kind": self.kind.value, "document_id": document.id, "topic_id": document.topic_id, "size": total_size},
        )
        return document

    async def update(self, document_id: str, payload: DocumentUpdate, actor: str) -> Document:
        existing = await self._require(document_id)
        changes = self._changes(payload)

        if "topic_id" in changes and changes["topic_id"] != existing.topic_id:
            await self.topics.require(changes["topic_id"])

        title = changes.get("title", existing.title)
        content = changes.get("content", existing.content)
        if "image_urls" in changes:
            changes["image_urls"] = self._persisted_urls(changes["image_urls"])
        image_urls = changes.get("image_urls", existing.image_urls)
        total_size = self._validate_size(content, title, image_urls)

        publish_now = changes.get("is_draft") is False and existing.published_at is None
        updated = existing.model_copy(update=changes)
        updated.slug = slugify(updated.title)
        updated.estimated_read_time = estimate_read_time(updated.content)
        updated.total_size = total_size
        updated.updated_by = actor
        updated.updated_at = _now()
        if publish_now:
            updated.publish(updated.updated_at)

        orphaned = self.reconciler.orphaned(existing, updated)
        await self.documents.save(updated)
        if orphaned:
            released = await self.reconciler.release(orphaned)
            logger.info("Released %d of %d media objects dropped by document %s", released, len(orphaned), document_id)

        if updated.topic_id != existing.topic_id or updated.is_active != existing.is_active:
            await self.topics.update_document_count(existing.topic_id)
            if updated.topic_id != existing.topic_id:
                await self.topics.update_document_count(updated.topic_id)
        await self.cache.evict_documents(self.kind)

        audit_logger.record(
            "document.update",
            actor,
            {
                "kind": self.kind.value,
                "document_id": document_id,
                "fields": sorted(changes),
                "media_released": sorted(orphaned),
            },
        )
        return updated

    async def delete(self, document_id: str, actor: str) -> None:
        document = await self._require(document_id)
        urls = self.reconciler.tracked_urls(document)

        await self.documents.delete(document_id)
        released = await self.reconciler.release(urls)

        await self.topics.update_document_count(document.topic_id)
        await self.cache.evict_documents(self.kind)

        audit_logger.record(
            "document.delete",
            actor,
            {
                "kind": self.kind.value,
                "document_id": document_id,
                "topic_id": document.topic_id,
                "media_released": released,
                "media_tracked": len(urls),
            },
        )

    # Helpers

    async def _require(self, document_id: str) -> Document:
        document = await self.documents.get(document_id)
        if document is None:
            raise NotFoundError(f"Document not found with id: {document_id}")
        return document

    @staticmethod
    def _visible(document: Document, include_hidden: bool) -> Document:
        if not include_hidden and not document.is_accessible:
            raise ForbiddenError("Document is not accessible")
        return document

    @staticmethod
    def _changes(payload: DocumentUpdate) -> Dict[str, Any]:
        changes = payload.model_dump(exclude_unset=True)
        return {key: value for key, value in changes.items() if value is not None or key in NULLABLE_FIELDS}

    def _persisted_urls(self, image_urls: Optional[List[str]]) -> List[str]:
        if not self.reconciler.tracker.persists_urls:
            return []
        # Preserve caller order while dropping blanks and duplicates.
        return list(dict.fromkeys(url for url in image_urls or [] if url))

    def _validate_size(self, content: str, title: str, image_urls: List[str]) -> int:
        if self.reconciler.tracker.persists_urls:
            return validate_size(content, limit=self.policy.max_document_bytes, title=title, image_urls=image_urls)
        return validate_size(content, limit=self.policy.max_document_bytes)


__all__ = ["DocumentStore", "estimate_read_time"]
