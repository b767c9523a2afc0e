"""Operational endpoints."""

from __future__ import annotations

from typing import Dict, List

from fastapi import APIRouter, Depends, Request

from coursedocs.api.security import require_admin
from coursedocs.core.config import settings
from coursedocs.models import KindStats, User

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/health")
async def healthcheck() -> Dict[str, str]:
    """Liveness probe."""

    return {"status": "ok", "environment": settings.ENVIRONMENT}


@router.get("/stats", response_model=List[KindStats])
async def content_stats(request: Request, _: User = Depends(require_admin)) -> List[KindStats]:
    """Topic and document totals for every kind."""

    return [await services.topics.stats() for services in request.app.state.services.values()]
