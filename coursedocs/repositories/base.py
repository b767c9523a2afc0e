"""Storage contracts consumed by the topic and document services.

Implementations must enforce name/title uniqueness themselves (unique
index or equivalent) and raise `ConflictError` on violation, so that the
services never rely on a check-then-write sequence.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from coursedocs.models.document import Document, DocumentSummary
from coursedocs.models.topic import Topic


class TopicRepository(Protocol):
    async def list(self, *, active_only: bool = False) -> List[Topic]:
        """Topics ordered by ``display_order`` ascending."""

    async def get(self, topic_id: str) -> Optional[Topic]:
        ...

    async def get_by_slug(self, slug: str) -> Optional[Topic]:
        ...

    async def insert(self, topic: Topic) -> Topic:
        ...

    async def save(self, topic: Topic) -> Topic:
        ...

    async def delete(self, topic_id: str) -> bool:
        ...

    async def set_document_count(self, topic_id: str, count: int) -> bool:
        ...

    async def count(self) -> int:
        ...


class DocumentRepository(Protocol):
    async def get(self, document_id: str) -> Optional[Document]:
        ...

    async def get_by_slug(self, topic_id: str, slug: str) -> Optional[Document]:
        ...

    async def list_summaries(
        self,
        topic_id: str,
        *,
        active_only: bool = False,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[DocumentSummary]:
        """Content-free projection ordered by ``display_order`` ascending."""

    async def list_full(self, topic_id: str) -> List[Document]:
        ...

    async def insert(self, document: Document) -> Document:
        ...

    async def save(self, document: Document) -> Document:
        ...

    async def delete(self, document_id: str) -> bool:
        ...

    async def count_by_topic(self, topic_id: str, *, active_only: bool = False) -> int:
        ...

    async def count(self) -> int:
        ...


__all__ = ["DocumentRepository", "TopicRepository"]
