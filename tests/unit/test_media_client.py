import hashlib
from urllib.parse import parse_qs

import httpx
import pytest

from coursedocs.core.exceptions import (
    InvalidMediaReferenceError,
    MediaStoreError,
    MediaTooLargeError,
    UnsupportedMediaTypeError,
)
from coursedocs.media.client import MediaStoreClient

PNG = "image/png"


def build_client(handler=None, **overrides):
    transport = httpx.MockTransport(handler or (lambda request: httpx.Response(500)))
    options = dict(
        cloud_name="demo",
        api_key="key",
        api_secret="secret",
        api_base_url="https://api.cloudinary.com/v1_1/",
        media_host="res.cloudinary.com",
        root_folder="coursedocs",
        max_image_bytes=1024,
        allowed_types=["image/jpeg", "image/png", "image/gif", "image/webp"],
        http_client=httpx.AsyncClient(transport=transport),
    )
    options.update(overrides)
    return MediaStoreClient(**options)


@pytest.mark.asyncio
async def test_upload_posts_signed_request_and_maps_response():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["body"] = request.content
        return httpx.Response(
            200,
            json={
                "secure_url": "https://res.cloudinary.com/demo/image/upload/v1/coursedocs/course/documents/a.png",
                "public_id": "coursedocs/course/documents/a",
                "format": "png",
                "width": 640,
                "height": 480,
                "bytes": 2048,
            },
        )

    client = build_client(handler)
    uploaded = await client.upload(b"\x89PNG" * 10, folder="course/documents", content_type=PNG, filename="a.png")

    assert captured["url"] == "https://api.cloudinary.com/v1_1/demo/image/upload"
    body = captured["body"]
    assert b'name="folder"' in body
    assert b"coursedocs/course/documents" in body
    assert b'name="signature"' in body
    assert b'name="api_key"' in body
    assert b'filename="a.png"' in body
    assert uploaded.object_id == "coursedocs/course/documents/a"
    assert uploaded.width == 640
    assert uploaded.size_bytes == 2048
    assert uploaded.size_kb == 2.0


@pytest.mark.asyncio
async def test_upload_rejects_oversized_images_before_any_request():
    calls = []
    client = build_client(lambda request: calls.append(request) or httpx.Response(200))

    with pytest.raises(MediaTooLargeError) as excinfo:
        await client.upload(b"x" * 1025, folder="docs", content_type=PNG)

    assert excinfo.value.status_code == 413
    assert calls == []


@pytest.mark.asyncio
async def test_upload_accepts_image_exactly_at_the_ceiling():
    def handler(request):
        return httpx.Response(200, json={"secure_url": "https://res.cloudinary.com/x.png", "public_id": "x", "bytes": 1024})

    uploaded = await build_client(handler).upload(b"x" * 1024, folder="docs", content_type=PNG)
    assert uploaded.size_bytes == 1024


@pytest.mark.asyncio
@pytest.mark.parametrize("content_type", ["image/svg+xml", "application/pdf", None])
async def test_upload_rejects_unsupported_types(content_type):
    with pytest.raises(UnsupportedMediaTypeError):
        await build_client().upload(b"data", folder="docs", content_type=content_type)


@pytest.mark.asyncio
async def test_upload_without_credentials_fails_cleanly():
    client = build_client(api_key=None, api_secret=None)
    with pytest.raises(MediaStoreError):
        await client.upload(b"data", folder="docs", content_type=PNG)


@pytest.mark.asyncio
async def test_upload_store_error_is_translated():
    client = build_client(lambda request: httpx.Response(400, json={"error": {"message": "bad"}}))
    with pytest.raises(MediaStoreError) as excinfo:
        await client.upload(b"data", folder="docs", content_type=PNG)
    assert excinfo.value.status_code == 502


@pytest.mark.asyncio
async def test_delete_by_url_destroys_the_derived_object():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["form"] = parse_qs(request.content.decode())
        return httpx.Response(200, json={"result": "ok"})

    client = build_client(handler)
    deleted = await client.delete_by_url(
        "https://res.cloudinary.com/demo/image/upload/v1712345678/coursedocs/interview/documents/hooks.png"
    )

    assert deleted is True
    assert seen["url"].endswith("/demo/image/destroy")
    assert seen["form"]["public_id"] == ["coursedocs/interview/documents/hooks"]
    assert seen["form"]["api_key"] == ["key"]


@pytest.mark.asyncio
async def test_delete_reports_not_found_without_raising():
    client = build_client(lambda request: httpx.Response(200, json={"result": "not found"}))
    assert await client.delete("coursedocs/missing") is False


@pytest.mark.asyncio
async def test_delete_swallows_transport_failures():
    def handler(request):
        raise httpx.ConnectError("store unreachable", request=request)

    assert await build_client(handler).delete("coursedocs/a") is False


@pytest.mark.asyncio
async def test_delete_swallows_garbled_responses():
    client = build_client(lambda request: httpx.Response(200, content=b"<html>"))
    assert await client.delete("coursedocs/a") is False


@pytest.mark.asyncio
async def test_delete_by_url_ignores_foreign_urls():
    calls = []
    client = build_client(lambda request: calls.append(request) or httpx.Response(200, json={"result": "ok"}))

    assert await client.delete_by_url("https://images.example.org/v1/cat.png") is False
    assert await client.delete_by_url(None) is False
    assert calls == []


@pytest.mark.asyncio
async def test_delete_without_credentials_is_skipped():
    client = build_client(api_key=None, api_secret=None)
    assert await client.delete("coursedocs/a") is False


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://res.cloudinary.com/demo/image/upload/v1712345678/coursedocs/a/b/name.png", "coursedocs/a/b/name"),
        ("https://res.cloudinary.com/demo/image/upload/coursedocs/name.webp", "coursedocs/name"),
        ("https://res.cloudinary.com/demo/image/upload/q_auto/v42/folder/pic.v2.jpg", "folder/pic.v2"),
        ("https://res.cloudinary.com/demo/image/upload/v1/x.png?ignored=1", "x"),
        ("https://cdn.res.cloudinary.com/demo/image/upload/v9/y.gif", "y"),
    ],
)
def test_object_id_from_url(url, expected):
    assert build_client().object_id_from_url(url) == expected


@pytest.mark.parametrize(
    "url",
    [
        "https://evil-res.cloudinary.com.example/demo/image/upload/v1/x.png",
        "https://res.cloudinary.com/demo/image/fetch/no-extension",
        "not a url",
        "",
    ],
)
def test_object_id_from_url_rejects_unrecognised_urls(url):
    with pytest.raises(InvalidMediaReferenceError):
        build_client().object_id_from_url(url)


def test_signature_is_computed_over_sorted_params():
    client = build_client()
    signed = client._signed({"timestamp": "100", "folder": "coursedocs/x"})

    expected = hashlib.sha1(b"folder=coursedocs/x&timestamp=100secret").hexdigest()
    assert signed["signature"] == expected
    assert signed["api_key"] == "key"
