from .container import KindServices, build_kind_services
from .documents import DocumentStore
from .media import MediaReconciler
from .policy import DeletePolicy, KindPolicy, MediaTracking
from .topics import TopicRegistry

__all__ = [
    "DeletePolicy",
    "DocumentStore",
    "KindPolicy",
    "KindServices",
    "MediaReconciler",
    "MediaTracking",
    "TopicRegistry",
    "build_kind_services",
]
