from __future__ import annotations

from typing import Callable

from fastapi import Request

from coursedocs.media.client import MediaStoreClient
from coursedocs.models.topic import TopicKind
from coursedocs.services.container import KindServices


def kind_services(kind: TopicKind) -> Callable[[Request], KindServices]:
    def _resolve(request: Request) -> KindServices:
        return request.app.state.services[kind]

    return _resolve


def get_media_client(request: Request) -> MediaStoreClient:
    return request.app.state.media
