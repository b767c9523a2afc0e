"""Media store payloads."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class UploadedMedia(BaseModel):
    url: str = Field(..., description="Delivery URL issued by the media store")
    object_id: str = Field(..., description="Opaque store identifier (public id)")
    format: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    size_bytes: int = 0
    size_kb: float = 0.0

