from datetime import datetime, timezone

import pytest
from pymongo.errors import DuplicateKeyError

from coursedocs.core.exceptions import ConflictError
from coursedocs.models import Document, Topic, TopicKind
from coursedocs.repositories.mongo import MongoDocumentRepository, MongoTopicRepository

NOW = datetime(2024, 4, 5, tzinfo=timezone.utc)


class FakeCollection:
    """Records writes and optionally raises like a unique index violation."""

    def __init__(self, duplicate=False, record=None):
        self.duplicate = duplicate
        self.record = record
        self.inserted = []

    async def insert_one(self, record):
        if self.duplicate:
            raise DuplicateKeyError("E11000 duplicate key error")
        self.inserted.append(record)

    async def replace_one(self, query, record):
        if self.duplicate:
            raise DuplicateKeyError("E11000 duplicate key error")
        self.inserted.append(record)

    async def find_one(self, query, **kwargs):
        return self.record


def make_topic(name="Intro") -> Topic:
    return Topic(id="t1", kind=TopicKind.COURSE, name=name, slug="intro", created_at=NOW, updated_at=NOW)


def make_document(title="Hooks") -> Document:
    return Document(id="d1", topic_id="t1", title=title, slug="hooks", content="{}", created_at=NOW, updated_at=NOW)


@pytest.mark.asyncio
async def test_topic_insert_stores_case_folded_name_key():
    collection = FakeCollection()
    await MongoTopicRepository(collection).insert(make_topic(" INTRO "))

    record = collection.inserted[0]
    assert record["_id"] == "t1"
    assert record["name_key"] == "intro"
    assert "id" not in record


@pytest.mark.asyncio
async def test_duplicate_topic_name_becomes_conflict():
    repository = MongoTopicRepository(FakeCollection(duplicate=True))

    with pytest.raises(ConflictError):
        await repository.insert(make_topic())
    with pytest.raises(ConflictError):
        await repository.save(make_topic())


@pytest.mark.asyncio
async def test_duplicate_document_title_becomes_conflict():
    repository = MongoDocumentRepository(FakeCollection(duplicate=True))

    with pytest.raises(ConflictError):
        await repository.insert(make_document())
    with pytest.raises(ConflictError):
        await repository.save(make_document())


@pytest.mark.asyncio
async def test_records_are_mapped_back_without_index_keys():
    stored = {
        "_id": "d1",
        "topic_id": "t1",
        "title": "Hooks",
        "title_key": "hooks",
        "slug": "hooks",
        "content": "{}",
        "image_urls": [],
        "created_at": NOW,
        "updated_at": NOW,
    }
    document = await MongoDocumentRepository(FakeCollection(record=stored)).get("d1")

    assert document.id == "d1"
    assert document.title == "Hooks"
    assert await MongoDocumentRepository(FakeCollection()).get("missing") is None
