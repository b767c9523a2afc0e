import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from coursedocs.api.main import create_app
from coursedocs.core.database import database_manager
from coursedocs.core.security import create_access_token

HEADERS = {"Authorization": f"Bearer {create_access_token('admin@example.com', claims={'role': 'admin'})}"}


@pytest.fixture
def served(monkeypatch):
    """The app with its real lifespan, backed by an in-process Mongo double."""

    async def initialize():
        database_manager.mongodb = AsyncMongoMockClient()

    async def close():
        database_manager.mongodb = None

    monkeypatch.setattr(database_manager, "initialize", initialize)
    monkeypatch.setattr(database_manager, "close", close)
    with TestClient(create_app()) as client:
        yield client


def test_startup_creates_unique_indexes(served):
    topic = served.post("/api/courses/admin/topics", json={"name": "React"}, headers=HEADERS)
    assert topic.status_code == 201
    topic_id = topic.json()["id"]

    first = served.post(
        "/api/courses/admin/documents", json={"topic_id": topic_id, "title": "Intro", "content": "{}"}, headers=HEADERS
    )
    second = served.post(
        "/api/courses/admin/documents", json={"topic_id": topic_id, "title": "intro", "content": "{}"}, headers=HEADERS
    )
    duplicate_topic = served.post("/api/courses/admin/topics", json={"name": "react"}, headers=HEADERS)

    assert first.status_code == 201
    assert second.status_code == 409
    assert second.json()["code"] == "conflict"
    assert duplicate_topic.status_code == 409
    assert [doc["title"] for doc in served.get(f"/api/courses/topics/{topic_id}/documents").json()] == ["Intro"]
