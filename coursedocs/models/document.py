"""Document data models."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from coursedocs.utils.validators import require_non_empty


class DocumentSummary(BaseModel):
    """Listing projection of a document; never carries the content blob."""

    id: str
    topic_id: str
    title: str
    slug: str
    description: Optional[str] = None
    display_order: int = 0
    is_active: bool = True
    is_draft: bool = False
    estimated_read_time: int = Field(1, description="Minutes, one per 1000 characters of content")
    total_size: int = Field(0, description="Bytes counted against the document ceiling")
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    published_at: Optional[datetime] = None


class Document(DocumentSummary):
    content: str
    image_urls: List[str] = Field(default_factory=list)

    def publish(self, at: datetime) -> None:
        self.is_draft = False
        self.published_at = at
        self.is_active = True

    @property
    def is_accessible(self) -> bool:
        # Inactive published documents are hidden; drafts stay reachable for editors.
        return self.is_active or self.is_draft


class DocumentCreate(BaseModel):
    topic_id: str
    title: str = Field(..., min_length=2, max_length=200)
    description: Optional[str] = Field(None, max_length=500)
    content: str
    image_urls: Optional[List[str]] = None
    display_order: int = 0
    is_active: bool = True
    is_draft: bool = False

    @field_validator("title")
    @classmethod
    def strip_title(cls, value: str) -> str:
        return require_non_empty(value)


class DocumentUpdate(BaseModel):
    """Partial document update; omitted fields keep their persisted values."""

    topic_id: Optional[str] = None
    title: Optional[str] = Field(None, min_length=2, max_length=200)
    description: Optional[str] = Field(None, max_length=500)
    content: Optional[str] = None
    image_urls: Optional[List[str]] = None
    display_order: Optional[int] = None
    is_active: Optional[bool] = None
    is_draft: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, value: Optional[str]) -> Optional[str]:
        return require_non_empty(value) if value is not None else value


class DocumentPage(BaseModel):
    items: List[DocumentSummary]
    page: int
    size: int
    total_elements: int
    total_pages: int
    has_next: bool
    has_previous: bool

    @classmethod
    def build(cls, items: List[DocumentSummary], page: int, size: int, total: int) -> "DocumentPage":
        total_pages = (total + size - 1) // size if size else 0
        return cls(
            items=items,
            page=page,
            size=size,
            total_elements=total,
            total_pages=total_pages,
            has_next=page + 1 < total_pages,
            has_previous=page > 0,
        )
