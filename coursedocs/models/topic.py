"""Topic data models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from coursedocs.utils.validators import require_non_empty


class TopicKind(str, Enum):
    """Families of topics that share one implementation but keep separate stores."""

    COURSE = "course"
    INTERVIEW = "interview"


class Topic(BaseModel):
    id: str
    kind: TopicKind
    name: str
    slug: str
    description: Optional[str] = None
    icon: Optional[str] = Field(None, description="Icon URL, usually hosted by the media store")
    color: Optional[str] = Field(None, description="Hex colour used by the UI")
    display_order: int = 0
    is_active: bool = True
    document_count: int = Field(0, description="Cached count of active documents")
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class TopicCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    icon: Optional[str] = None
    color: Optional[str] = None
    display_order: int = 0
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        return require_non_empty(value)


class TopicUpdate(BaseModel):
    """Partial topic update; only fields present in the request are applied."""

    name: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    icon: Optional[str] = None
    color: Optional[str] = None
    display_order: Optional[int] = None
    is_active: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: Optional[str]) -> Optional[str]:
        return require_non_empty(value) if value is not None else value


class KindStats(BaseModel):
    kind: TopicKind
    total_topics: int
    total_documents: int
