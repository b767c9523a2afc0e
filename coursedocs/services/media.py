"""Best-effort reconciliation between documents and the media they own."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Protocol, Set

from coursedocs.content.extractor import MediaTracker
from coursedocs.models.document import Document

logger = logging.getLogger(__name__)


class MediaRemover(Protocol):
    async def delete_by_url(self, url: Optional[str]) -> bool:
        ...


class MediaReconciler:
    """Works out which media a document owns and releases the ones it dropped."""

    def __init__(self, media: MediaRemover, tracker: MediaTracker) -> None:
        self.media = media
        self.tracker = tracker

    def tracked_urls(self, document: Document) -> Set[str]:
        return self.tracker.urls_in(document.content, document.image_urls)

    def orphaned(self, before: Document, after: Document) -> Set[str]:
        """URLs referenced by ``before`` that ``after`` no longer references."""

        return self.tracked_urls(before) - self.tracked_urls(after)

    async def release(self, urls: Iterable[str]) -> int:
        """Delete each URL in turn; a failing deletion never stops the others."""

        released = 0
        for url in sorted(set(urls)):
            try:
                if await self.media.delete_by_url(url):
                    released += 1
            except Exception:
                logger.exception("Failed to release media %s", url)
        return released


__all__ = ["MediaReconciler", "MediaRemover"]
