from .document import Document, DocumentCreate, DocumentPage, DocumentSummary, DocumentUpdate
from .media import UploadedMedia
from .topic import KindStats, Topic, TopicCreate, TopicKind, TopicUpdate
from .user import User

__all__ = [
    "Document",
    "DocumentCreate",
    "DocumentPage",
    "DocumentSummary",
    "DocumentUpdate",
    "KindStats",
    "Topic",
    "TopicCreate",
    "TopicKind",
    "TopicUpdate",
    "UploadedMedia",
    "User",
]
