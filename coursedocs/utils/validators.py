"""Input normalisation helpers."""

from __future__ import annotations

import re


UUID_PATTERN = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)
_SLUG_SEPARATORS = re.compile(r"[^a-z0-9]+")


def is_uuid(value: str) -> bool:
    return bool(UUID_PATTERN.match(value))


def slugify(value: str) -> str:
    """Lowercase, collapse every non-alphanumeric run to ``-`` and trim the ends."""

    return _SLUG_SEPARATORS.sub("-", value.lower()).strip("-")


def unique_key(value: str) -> str:
    """Key stored under unique indexes so names compare case-insensitively."""

    return value.strip().casefold()


def require_non_empty(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("Value must not be empty")
    return value.strip()


_FOLDER_UNSAFE = re.compile(r"[^A-Za-z0-9_-]")


def clean_folder(value: str, default: str = "documents") -> str:
    """Reduce a caller-supplied folder to ``/``-joined ``[A-Za-z0-9_-]`` segments."""

    segments = (_FOLDER_UNSAFE.sub("", segment) for segment in value.split("/"))
    return "/".join(segment for segment in segments if segment) or default
