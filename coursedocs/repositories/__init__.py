from .base import DocumentRepository, TopicRepository
from .mongo import MongoDocumentRepository, MongoTopicRepository

__all__ = [
    "DocumentRepository",
    "MongoDocumentRepository",
    "MongoTopicRepository",
    "TopicRepository",
]
