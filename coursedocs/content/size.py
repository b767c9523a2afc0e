"""Byte-size accounting for document payloads."""

from __future__ import annotations

from typing import Iterable, Optional

from coursedocs.core.exceptions import ContentTooLargeError


def _utf8_len(value: Optional[str]) -> int:
    return len(value.encode("utf-8")) if value else 0


def measure_size(content: str, title: Optional[str] = None, image_urls: Optional[Iterable[str]] = None) -> int:
    """Return the UTF-8 byte length of content plus the optional title and image URLs."""

    total = _utf8_len(content) + _utf8_len(title)
    for url in image_urls or ():
        total += _utf8_len(url)
    return total


def validate_size(
    content: str,
    *,
    limit: int,
    title: Optional[str] = None,
    image_urls: Optional[Iterable[str]] = None,
) -> int:
    """Return the measured size, raising `ContentTooLargeError` when it exceeds ``limit``.

    A payload of exactly ``limit`` bytes is accepted.
    """

    total = measure_size(content, title, image_urls)
    if total > limit:
        raise ContentTooLargeError(actual=total, limit=limit)
    return total


__all__ = ["measure_size", "validate_size"]
