"""Client for the external CDN-style media store.

The store speaks the Cloudinary upload API: objects are addressed by an
opaque public id and delivered from URLs shaped like::

    https://res.cloudinary.com/<cloud>/image/upload/v1712345678/<folder>/<name>.png
"""

from __future__ import annotations

import hashlib
import logging
import re
import time
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import urlparse

import httpx

from coursedocs.core.config import Settings
from coursedocs.core.exceptions import (
    InvalidMediaReferenceError,
    MediaStoreError,
    MediaTooLargeError,
    UnsupportedMediaTypeError,
)
from coursedocs.models.media import UploadedMedia
from coursedocs.utils.monitoring import record_media_deletion

logger = logging.getLogger(__name__)

_VERSIONED_PATH = re.compile(r"/v\d+/(.+?)\.[^.]+$")
_UPLOAD_PATH = re.compile(r"/upload/(.+?)\.[^.]+$")

ALLOWED_FORMATS = "jpg,jpeg,png,gif,webp"
DELIVERY_TRANSFORMATION = "q_auto:good,f_auto"


class MediaStoreClient:
    """Upload and delete image objects held by the remote media store."""

    def __init__(
        self,
        *,
        cloud_name: str,
        api_key: Optional[str],
        api_secret: Optional[str],
        api_base_url: str,
        media_host: str,
        root_folder: str,
        max_image_bytes: int,
        allowed_types: Iterable[str],
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.api_base_url = api_base_url.rstrip("/")
        self.media_host = media_host.lower()
        self.root_folder = root_folder.strip("/")
        self.max_image_bytes = max_image_bytes
        self.allowed_types: List[str] = list(allowed_types)
        self.timeout = timeout
        self._http_client = http_client

    @classmethod
    def from_settings(cls, settings: Settings, http_client: Optional[httpx.AsyncClient] = None) -> "MediaStoreClient":
        return cls(
            cloud_name=settings.MEDIA_CLOUD_NAME,
            api_key=settings.MEDIA_API_KEY,
            api_secret=settings.MEDIA_API_SECRET,
            api_base_url=settings.MEDIA_API_BASE_URL,
            media_host=settings.MEDIA_HOST,
            root_folder=settings.MEDIA_ROOT_FOLDER,
            max_image_bytes=settings.MAX_IMAGE_BYTES,
            allowed_types=settings.ALLOWED_IMAGE_TYPES,
            timeout=settings.MEDIA_TIMEOUT_SECONDS,
            http_client=http_client,
        )

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.api_secret)

    async def upload(
        self,
        data: bytes,
        folder: str,
        content_type: Optional[str],
        filename: str = "upload",
    ) -> UploadedMedia:
        """Validate and store an image, returning its delivery metadata.

        Raises:
            MediaTooLargeError: ``data`` is larger than the per-image ceiling.
            UnsupportedMediaTypeError: ``content_type`` is not an allowed raster type.
            MediaStoreError: credentials are missing or the store rejected the upload.
        """

        if len(data) > self.max_image_bytes:
            raise MediaTooLargeError(actual=len(data), limit=self.max_image_bytes)
        if content_type not in self.allowed_types:
            raise UnsupportedMediaTypeError(
                f"Invalid image type {content_type!r}. Allowed types: {', '.join(self.allowed_types)}"
            )
        if not self.configured:
            raise MediaStoreError("Media store credentials are not configured")

        params = {
            "folder": self._folder_path(folder),
            "allowed_formats": ALLOWED_FORMATS,
            "transformation": DELIVERY_TRANSFORMATION,
            "timestamp": str(int(time.time())),
        }
        try:
            response = await self._post(
                "upload",
                data=self._signed(params),
                files={"file": (filename, data, content_type)},
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Media upload to folder %s failed: %s", params["folder"], exc)
            raise MediaStoreError(f"Media upload failed: {exc}") from exc

        payload = response.json()
        size_bytes = int(payload.get("bytes") or 0)
        uploaded = UploadedMedia(
            url=payload["secure_url"],
            object_id=payload["public_id"],
            format=payload.get("format"),
            width=payload.get("width"),
            height=payload.get("height"),
            size_bytes=size_bytes,
            size_kb=round(size_bytes / 1024.0, 2),
        )
        logger.info("Uploaded media object %s (%d bytes)", uploaded.object_id, size_bytes)
        return uploaded

    async def delete(self, object_id: str) -> bool:
        """Best-effort removal of a stored object; failures are logged, never raised."""

        if not self.configured:
            logger.warning("Media store credentials missing; skipping deletion of %s", object_id)
            record_media_deletion("skipped")
            return False

        params = {"public_id": object_id, "timestamp": str(int(time.time()))}
        try:
            response = await self._post("destroy", data=self._signed(params))
            response.raise_for_status()
            result = response.json().get("result")
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Failed to delete media object %s: %s", object_id, exc)
            record_media_deletion("failed")
            return False

        if result != "ok":
            logger.info("Media store reported %r deleting %s", result, object_id)
            record_media_deletion("not_found")
            return False

        logger.info("Deleted media object %s", object_id)
        record_media_deletion("deleted")
        return True

    async def delete_by_url(self, url: Optional[str]) -> bool:
        """Delete the object behind ``url``; foreign or unparseable URLs are a silent no-op."""

        try:
            object_id = self.object_id_from_url(url)
        except InvalidMediaReferenceError as exc:
            logger.debug("Skipping media deletion: %s", exc.message)
            record_media_deletion("skipped")
            return False
        return await self.delete(object_id)

    def owns_url(self, url: Optional[str]) -> bool:
        if not url:
            return False
        host = (urlparse(url).hostname or "").lower()
        return host == self.media_host or host.endswith("." + self.media_host)

    def object_id_from_url(self, url: Optional[str]) -> str:
        """Derive the store's public id from a delivery URL.

        The version segment (``v<digits>/``) anchors the id when present;
        otherwise everything after ``/upload/`` up to the extension is used.
        """

        if not self.owns_url(url):
            raise InvalidMediaReferenceError(f"Not a media store URL: {url!r}")
        path = urlparse(url).path
        match = _VERSIONED_PATH.search(path) or _UPLOAD_PATH.search(path)
        if match is None:
            raise InvalidMediaReferenceError(f"Cannot derive object id from {url!r}")
        return match.group(1)

    def _folder_path(self, folder: str) -> str:
        parts = [self.root_folder, folder.strip("/")]
        return "/".join(part for part in parts if part)

    def _signed(self, params: Dict[str, str]) -> Dict[str, str]:
        to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
        signature = hashlib.sha1(f"{to_sign}{self.api_secret}".encode("utf-8")).hexdigest()
        return {**params, "api_key": self.api_key or "", "signature": signature}

    async def _post(self, action: str, **kwargs: Any) -> httpx.Response:
        url = f"{self.api_base_url}/{self.cloud_name}/image/{action}"
        if self._http_client is not None:
            return await self._http_client.post(url, timeout=self.timeout, **kwargs)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(url, **kwargs)


__all__ = ["MediaStoreClient"]
