"""MongoDB repositories backed by motor."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError

from coursedocs.core.exceptions import ConflictError
from coursedocs.models.document import Document, DocumentSummary
from coursedocs.models.topic import Topic
from coursedocs.utils.validators import unique_key

logger = logging.getLogger(__name__)

SUMMARY_PROJECTION = {"content": 0, "image_urls": 0, "title_key": 0}


def _to_record(model: Topic | Document, **extra: Any) -> Dict[str, Any]:
    record = model.model_dump(mode="python")
    record["_id"] = record.pop("id")
    record.update(extra)
    return record


def _from_record(record: Dict[str, Any]) -> Dict[str, Any]:
    payload = dict(record)
    payload["id"] = str(payload.pop("_id"))
    payload.pop("name_key", None)
    payload.pop("title_key", None)
    return payload


class MongoTopicRepository:
    def __init__(self, collection: AsyncIOMotorCollection) -> None:
        self.collection = collection

    async def list(self, *, active_only: bool = False) -> List[Topic]:
        query: Dict[str, Any] = {"is_active": True} if active_only else {}
        cursor = self.collection.find(query).sort("display_order", ASCENDING)
        return [Topic.model_validate(_from_record(record)) async for record in cursor]

    async def get(self, topic_id: str) -> Optional[Topic]:
        record = await self.collection.find_one({"_id": topic_id})
        return Topic.model_validate(_from_record(record)) if record else None

    async def get_by_slug(self, slug: str) -> Optional[Topic]:
        record = await self.collection.find_one({"slug": slug})
        return Topic.model_validate(_from_record(record)) if record else None

    async def insert(self, topic: Topic) -> Topic:
        try:
            await self.collection.insert_one(_to_record(topic, name_key=unique_key(topic.name)))
        except DuplicateKeyError as exc:
            raise ConflictError(f"Topic with name '{topic.name}' already exists") from exc
        return topic

    async def save(self, topic: Topic) -> Topic:
        try:
            await self.collection.replace_one(
                {"_id": topic.id}, _to_record(topic, name_key=unique_key(topic.name))
            )
        except DuplicateKeyError as exc:
            raise ConflictError(f"Another topic already exists with name '{topic.name}'") from exc
        return topic

    async def delete(self, topic_id: str) -> bool:
        result = await self.collection.delete_one({"_id": topic_id})
        return result.deleted_count > 0

    async def set_document_count(self, topic_id: str, count: int) -> bool:
        result = await self.collection.update_one({"_id": topic_id}, {"$set": {"document_count": count}})
        return result.matched_count > 0

    async def count(self) -> int:
        return await self.collection.count_documents({})


class MongoDocumentRepository:
    def __init__(self, collection: AsyncIOMotorCollection) -> None:
        self.collection = collection

    def _record(self, document: Document) -> Dict[str, Any]:
        return _to_record(document, title_key=unique_key(document.title))

    async def get(self, document_id: str) -> Optional[Document]:
        record = await self.collection.find_one({"_id": document_id})
        return Document.model_validate(_from_record(record)) if record else None

    async def get_by_slug(self, topic_id: str, slug: str) -> Optional[Document]:
        record = await self.collection.find_one(
            {"topic_id": topic_id, "slug": slug}, sort=[("display_order", ASCENDING)]
        )
        return Document.model_validate(_from_record(record)) if record else None

    async def list_summaries(
        self,
        topic_id: str,
        *,
        active_only: bool = False,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[DocumentSummary]:
        query: Dict[str, Any] = {"topic_id": topic_id}
        if active_only:
            query["is_active"] = True
        cursor = self.collection.find(query, SUMMARY_PROJECTION).sort("display_order", ASCENDING).skip(skip)
        if limit is not None:
            cursor = cursor.limit(limit)
        return [DocumentSummary.model_validate(_from_record(record)) async for record in cursor]

    async def list_full(self, topic_id: str) -> List[Document]:
        cursor = self.collection.find({"topic_id": topic_id}).sort("display_order", ASCENDING)
        return [Document.model_validate(_from_record(record)) async for record in cursor]

    async def insert(self, document: Document) -> Document:
        try:
            await self.collection.insert_one(self._record(document))
        except DuplicateKeyError as exc:
            raise ConflictError(f"Document with title '{document.title}' already exists in this topic") from exc
        return document

    async def save(self, document: Document) -> Document:
        try:
            await self.collection.replace_one({"_id": document.id}, self._record(document))
        except DuplicateKeyError as exc:
            raise ConflictError(
                f"Another document already exists with title '{document.title}' in this topic"
            ) from exc
        return document

    async def delete(self, document_id: str) -> bool:
        result = await self.collection.delete_one({"_id": document_id})
        return result.deleted_count > 0

    async def count_by_topic(self, topic_id: str, *, active_only: bool = False) -> int:
        query: Dict[str, Any] = {"topic_id": topic_id}
        if active_only:
            query["is_active"] = True
        return await self.collection.count_documents(query)

    async def count(self) -> int:
        return await self.collection.count_documents({})


__all__ = ["MongoDocumentRepository", "MongoTopicRepository"]
