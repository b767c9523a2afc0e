"""Topic, document and media endpoints, mounted once per topic kind."""

from __future__ import annotations

from typing import Dict, List, Optional, Union

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from coursedocs.api.dependencies import get_media_client, kind_services
from coursedocs.api.security import require_admin
from coursedocs.media.client import MediaStoreClient
from coursedocs.models import (
    Document,
    DocumentCreate,
    DocumentPage,
    DocumentSummary,
    DocumentUpdate,
    Topic,
    TopicCreate,
    TopicKind,
    TopicUpdate,
    UploadedMedia,
    User,
)
from coursedocs.services.container import KindServices
from coursedocs.utils.audit import audit_logger
from coursedocs.utils.validators import clean_folder

DocumentListing = Union[DocumentPage, List[DocumentSummary]]


def build_router(kind: TopicKind, prefix: str) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[kind.value])
    services_dependency = kind_services(kind)

    async def _listing(
        services: KindServices,
        topic_id: str,
        page: Optional[int],
        size: Optional[int],
        include_inactive: bool,
    ) -> DocumentListing:
        if page is None and not services.policy.paginated_listing:
            return await services.documents.list_by_topic(topic_id, include_inactive=include_inactive)
        return await services.documents.list_page(
            topic_id, page or 0, size, include_inactive=include_inactive
        )

    # Public reads

    @router.get("/topics", response_model=List[Topic])
    async def list_topics(services: KindServices = Depends(services_dependency)) -> List[Topic]:
        """Active topics ordered for display."""

        return await services.topics.list(active_only=True)

    @router.get("/topics/{identifier}", response_model=Topic)
    async def get_topic(identifier: str, services: KindServices = Depends(services_dependency)) -> Topic:
        return await services.topics.resolve(identifier)

    @router.get("/topics/{topic_id}/documents", response_model=DocumentListing)
    async def list_documents(
        topic_id: str,
        page: Optional[int] = Query(None, ge=0),
        size: Optional[int] = Query(None, ge=1, le=100),
        services: KindServices = Depends(services_dependency),
    ) -> DocumentListing:
        return await _listing(services, topic_id, page, size, include_inactive=False)

    @router.get("/topics/{topic_id}/documents/slug/{slug}", response_model=Document)
    async def get_document_by_slug(
        topic_id: str, slug: str, services: KindServices = Depends(services_dependency)
    ) -> Document:
        return await services.documents.get_by_slug(topic_id, slug)

    @router.get("/documents/{document_id}", response_model=Document)
    async def get_document(document_id: str, services: KindServices = Depends(services_dependency)) -> Document:
        return await services.documents.get(document_id)

    # Admin

    @router.get("/admin/topics", response_model=List[Topic])
    async def list_all_topics(
        services: KindServices = Depends(services_dependency),
        _: User = Depends(require_admin),
    ) -> List[Topic]:
        return await services.topics.list(active_only=False)

    @router.post("/admin/topics", response_model=Topic, status_code=status.HTTP_201_CREATED)
    async def create_topic(
        payload: TopicCreate,
        services: KindServices = Depends(services_dependency),
        user: User = Depends(require_admin),
    ) -> Topic:
        return await services.topics.create(payload, actor=user.id)

    @router.put("/admin/topics/{topic_id}", response_model=Topic)
    async def update_topic(
        topic_id: str,
        payload: TopicUpdate,
        services: KindServices = Depends(services_dependency),
        user: User = Depends(require_admin),
    ) -> Topic:
        return await services.topics.update(topic_id, payload, actor=user.id)

    @router.delete("/admin/topics/{topic_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_topic(
        topic_id: str,
        services: KindServices = Depends(services_dependency),
        user: User = Depends(require_admin),
    ) -> None:
        await services.topics.delete(topic_id, actor=user.id)

    @router.get("/admin/topics/{topic_id}/documents", response_model=DocumentListing)
    async def list_all_documents(
        topic_id: str,
        page: Optional[int] = Query(None, ge=0),
        size: Optional[int] = Query(None, ge=1, le=100),
        services: KindServices = Depends(services_dependency),
        _: User = Depends(require_admin),
    ) -> DocumentListing:
        return await _listing(services, topic_id, page, size, include_inactive=True)

    @router.get("/admin/documents/{document_id}", response_model=Document)
    async def get_any_document(
        document_id: str,
        services: KindServices = Depends(services_dependency),
        _: User = Depends(require_admin),
    ) -> Document:
        return await services.documents.get(document_id, include_hidden=True)

    @router.post("/admin/documents", response_model=Document, status_code=status.HTTP_201_CREATED)
    async def create_document(
        payload: DocumentCreate,
        services: KindServices = Depends(services_dependency),
        user: User = Depends(require_admin),
    ) -> Document:
        return await services.documents.create(payload, actor=user.id)

    @router.put("/admin/documents/{document_id}", response_model=Document)
    async def update_document(
        document_id: str,
        payload: DocumentUpdate,
        services: KindServices = Depends(services_dependency),
        user: User = Depends(require_admin),
    ) -> Document:
        return await services.documents.update(document_id, payload, actor=user.id)

    @router.delete("/admin/documents/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_document(
        document_id: str,
        services: KindServices = Depends(services_dependency),
        user: User = Depends(require_admin),
    ) -> None:
        await services.documents.delete(document_id, actor=user.id)

    @router.post("/admin/upload-image", response_model=UploadedMedia, status_code=status.HTTP_201_CREATED)
    async def upload_image(
        file: UploadFile = File(...),
        folder: str = Form("documents"),
        media: MediaStoreClient = Depends(get_media_client),
        user: User = Depends(require_admin),
    ) -> UploadedMedia:
        data = await file.read()
        uploaded = await media.upload(
            data,
            folder=f"{kind.value}/{clean_folder(folder)}",
            content_type=file.content_type,
            filename=file.filename or "upload",
        )
        audit_logger.record(
            "media.upload", user.id, {"kind": kind.value, "object_id": uploaded.object_id, "bytes": uploaded.size_bytes}
        )
        return uploaded

    @router.delete("/admin/images")
    async def delete_image(
        url: str = Query(..., min_length=1),
        media: MediaStoreClient = Depends(get_media_client),
        user: User = Depends(require_admin),
    ) -> Dict[str, bool]:
        """Delete a media object by delivery URL; foreign URLs are ignored."""

        deleted = await media.delete_by_url(url)
        audit_logger.record("media.delete", user.id, {"kind": kind.value, "url": url, "deleted": deleted})
        return {"deleted": deleted}

    @router.delete("/admin/images/{object_id:path}")
    async def delete_image_by_id(
        object_id: str,
        media: MediaStoreClient = Depends(get_media_client),
        user: User = Depends(require_admin),
    ) -> Dict[str, bool]:
        deleted = await media.delete(object_id)
        audit_logger.record(
            "media.delete", user.id, {"kind": kind.value, "object_id": object_id, "deleted": deleted}
        )
        return {"deleted": deleted}

    return router


courses_router = build_router(TopicKind.COURSE, "/courses")
interview_router = build_router(TopicKind.INTERVIEW, "/interview")
