"""Locate media references inside serialized document content.

Document content is an opaque JSON tree produced by the editor. The only
structure this module relies on is the image block convention::

    {"type": "image", "url": "https://..."}
    {"type": "image", "imageMeta": {"url": "https://..."}}

Image blocks may appear at any depth, inside arrays or as values of any
object field. Everything else is walked and ignored.
"""

from __future__ import annotations

import json
import logging
from typing import Dict, Iterable, List, Optional, Protocol, Set, Union

logger = logging.getLogger(__name__)

Scalar = Union[str, int, float, bool, None]
ContentNode = Union[Scalar, List["ContentNode"], Dict[str, "ContentNode"]]

IMAGE_BLOCK_TYPE = "image"


def parse_content(content: Optional[str]) -> Optional[ContentNode]:
    """Decode serialized content, returning ``None`` when it is not a JSON tree."""

    if not content:
        return None
    try:
        return json.loads(content)
    except (TypeError, ValueError, RecursionError) as exc:
        logger.debug("Content is not a JSON tree; skipping media extraction: %s", exc)
        return None


def _image_url(node: Dict[str, ContentNode]) -> Optional[str]:
    url = node.get("url")
    if url is None:
        meta = node.get("imageMeta")
        if isinstance(meta, dict):
            url = meta.get("url")
    return url if isinstance(url, str) else None


def collect_image_urls(node: ContentNode, found: Set[str]) -> Set[str]:
    """Depth-first walk adding every image block URL under ``node`` to ``found``."""

    if isinstance(node, list):
        for item in node:
            collect_image_urls(item, found)
    elif isinstance(node, dict):
        if node.get("type") == IMAGE_BLOCK_TYPE:
            url = _image_url(node)
            if url:
                found.add(url)
        for value in node.values():
            collect_image_urls(value, found)
    return found


def extract_image_urls(content: Optional[str]) -> Set[str]:
    """Return the set of image URLs referenced by serialized ``content``.

    Extraction is advisory: malformed or non-JSON content yields an empty set
    rather than an error.
    """

    tree = parse_content(content)
    if tree is None:
        return set()
    try:
        return collect_image_urls(tree, set())
    except RecursionError:
        logger.warning("Content tree too deep for media extraction; treating as media-free")
        return set()


class MediaTracker(Protocol):
    """Strategy deciding which media URLs a document owns."""

    persists_urls: bool

    def urls_in(self, content: Optional[str], image_urls: Optional[Iterable[str]] = None) -> Set[str]:
        ...


class ExplicitListTracker:
    """Trust the caller-supplied ``image_urls`` list and persist it with the document."""

    persists_urls = True

    def urls_in(self, content: Optional[str], image_urls: Optional[Iterable[str]] = None) -> Set[str]:
        return {url for url in image_urls or () if url}


class ContentReferenceTracker:
    """Derive tracked media from the image blocks inside the content tree."""

    persists_urls = False

    def urls_in(self, content: Optional[str], image_urls: Optional[Iterable[str]] = None) -> Set[str]:
        return extract_image_urls(content)


__all__ = [
    "ContentNode",
    "ContentReferenceTracker",
    "ExplicitListTracker",
    "MediaTracker",
    "collect_image_urls",
    "extract_image_urls",
    "parse_content",
]
