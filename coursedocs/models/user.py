from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class User(BaseModel):
    id: str
    email: Optional[str] = None
    name: str
    role: str
    attributes: Dict[str, Any] = Field(default_factory=dict)
