"""Custom exception hierarchy for coursedocs."""

from __future__ import annotations

from fastapi import status


class ApplicationError(Exception):
    """Base application error with HTTP semantics."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "application_error"

    def __init__(self, message: str, *, status_code: int | None = None, code: str | None = None) -> None:
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        self.message = message


class NotFoundError(ApplicationError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class ConflictError(ApplicationError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"


class ForbiddenError(ApplicationError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"


class UnauthorizedError(ApplicationError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"


class ContentTooLargeError(ApplicationError):
    """Raised when a document payload exceeds the configured ceiling."""

    status_code = status.HTTP_413_CONTENT_TOO_LARGE
    code = "content_too_large"

    def __init__(self, actual: int, limit: int) -> None:
        super().__init__(
            f"Document size ({format_size(actual)}) exceeds maximum allowed size of {format_size(limit)}"
        )
        self.actual = actual
        self.limit = limit


class MediaTooLargeError(ApplicationError):
    status_code = status.HTTP_413_CONTENT_TOO_LARGE
    code = "media_too_large"

    def __init__(self, actual: int, limit: int) -> None:
        super().__init__(
            f"Image size ({format_size(actual)}) exceeds maximum allowed size of {format_size(limit)}"
        )
        self.actual = actual
        self.limit = limit


class UnsupportedMediaTypeError(ApplicationError):
    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
    code = "unsupported_media_type"


class InvalidMediaReferenceError(ApplicationError):
    """Raised when a URL cannot be mapped to a media store object id."""

    code = "invalid_media_reference"


class MediaStoreError(ApplicationError):
    status_code = status.HTTP_502_BAD_GATEWAY
    code = "media_store_error"


def format_size(size_bytes: int) -> str:
    """Render a byte count in binary units (``5.00 MB``)."""

    if size_bytes < 1024:
        return f"{size_bytes} B"
    value = float(size_bytes)
    for unit in ("KB", "MB", "GB", "TB"):
        value /= 1024
        if value < 1024:
            return f"{value:.2f} {unit}"
    return f"{value:.2f} PB"
