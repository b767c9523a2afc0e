"""Per-kind behaviour switches."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from coursedocs.content.extractor import ContentReferenceTracker, ExplicitListTracker, MediaTracker
from coursedocs.core.config import Settings
from coursedocs.models.topic import TopicKind


class DeletePolicy(str, Enum):
    CASCADE = "cascade"
    REFUSE = "refuse"


class MediaTracking(str, Enum):
    EXPLICIT = "explicit"
    CONTENT = "content"


@dataclass(frozen=True)
class KindPolicy:
    """How one topic kind deletes topics, tracks media and pages listings."""

    kind: TopicKind
    delete_policy: DeletePolicy
    media_tracking: MediaTracking
    paginated_listing: bool
    max_document_bytes: int
    default_page_size: int = 20

    @property
    def tracker(self) -> MediaTracker:
        if self.media_tracking is MediaTracking.EXPLICIT:
            return ExplicitListTracker()
        return ContentReferenceTracker()

    @classmethod
    def from_settings(cls, kind: TopicKind, settings: Settings) -> "KindPolicy":
        if kind is TopicKind.COURSE:
            delete_policy, tracking = settings.COURSE_DELETE_POLICY, settings.COURSE_MEDIA_TRACKING
        else:
            delete_policy, tracking = settings.INTERVIEW_DELETE_POLICY, settings.INTERVIEW_MEDIA_TRACKING
        return cls(
            kind=kind,
            delete_policy=DeletePolicy(delete_policy),
            media_tracking=MediaTracking(tracking),
            paginated_listing=kind is TopicKind.INTERVIEW,
            max_document_bytes=settings.MAX_DOCUMENT_BYTES,
            default_page_size=settings.DEFAULT_PAGE_SIZE,
        )
