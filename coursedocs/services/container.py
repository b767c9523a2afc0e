"""Wires the per-kind services together."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from coursedocs.core.cache import ReadCache
from coursedocs.core.config import Settings
from coursedocs.core.database import DatabaseManager, document_collection_name, topic_collection_name
from coursedocs.media.client import MediaStoreClient
from coursedocs.models.topic import TopicKind
from coursedocs.repositories.base import DocumentRepository, TopicRepository
from coursedocs.repositories.mongo import MongoDocumentRepository, MongoTopicRepository
from coursedocs.services.documents import DocumentStore
from coursedocs.services.media import MediaReconciler, MediaRemover
from coursedocs.services.policy import KindPolicy
from coursedocs.services.topics import TopicRegistry


@dataclass
class KindServices:
    policy: KindPolicy
    topics: TopicRegistry
    documents: DocumentStore


def build_kind_services(
    policy: KindPolicy,
    topic_repository: TopicRepository,
    document_repository: DocumentRepository,
    media: MediaRemover,
    cache: ReadCache,
) -> KindServices:
    reconciler = MediaReconciler(media, policy.tracker)
    topics = TopicRegistry(policy, topic_repository, document_repository, reconciler, cache)
    documents = DocumentStore(policy, document_repository, topics, reconciler, cache)
    return KindServices(policy=policy, topics=topics, documents=documents)


def build_mongo_services(
    database_manager: DatabaseManager,
    settings: Settings,
    media: MediaStoreClient,
    cache: ReadCache,
) -> Dict[TopicKind, KindServices]:
    database = database_manager.database
    services: Dict[TopicKind, KindServices] = {}
    for kind in TopicKind:
        services[kind] = build_kind_services(
            KindPolicy.from_settings(kind, settings),
            MongoTopicRepository(database[topic_collection_name(kind)]),
            MongoDocumentRepository(database[document_collection_name(kind)]),
            media,
            cache,
        )
    return services


__all__ = ["KindServices", "build_kind_services", "build_mongo_services"]
