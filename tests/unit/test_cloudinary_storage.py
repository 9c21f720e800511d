import hashlib
from urllib.parse import parse_qs

import httpx
import pytest

from src.blog.infrastructure.adapters.cloudinary_storage import CloudinaryMediaStorage, sign_params
from src.config import Settings
from src.shared.exceptions import ExternalServiceError

NOW = 1700000000


def _settings() -> Settings:
    return Settings(
        _env_file=None,
        CLOUDINARY_CLOUD_NAME="demo",
        CLOUDINARY_API_KEY="key-123",
        CLOUDINARY_API_SECRET="shh",
    )


def _storage(handler) -> CloudinaryMediaStorage:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return CloudinaryMediaStorage(_settings(), client=client, clock=lambda: NOW)


def test_signature_sorts_params_and_skips_unsigned():
    params = {"timestamp": NOW, "public_id": "blogs/a", "api_key": "key-123", "file": "x", "folder": ""}
    expected = hashlib.sha1(f"public_id=blogs/a&timestamp={NOW}shh".encode()).hexdigest()
    assert sign_params(params, "shh") == expected


async def test_destroy_posts_signed_form():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["form"] = {k: v[0] for k, v in parse_qs(request.content.decode()).items()}
        return httpx.Response(200, json={"result": "ok"})

    storage = _storage(handler)
    result = await storage.destroy("blogs/a")
    await storage.aclose()

    assert result.ok
    assert seen["url"] == "https://api.cloudinary.com/v1_1/demo/image/destroy"
    assert seen["form"]["public_id"] == "blogs/a"
    assert seen["form"]["api_key"] == "key-123"
    assert seen["form"]["timestamp"] == str(NOW)
    assert seen["form"]["signature"] == sign_params({"public_id": "blogs/a", "timestamp": NOW}, "shh")


async def test_destroy_reports_not_found_without_raising():
    storage = _storage(lambda request: httpx.Response(200, json={"result": "not found"}))
    result = await storage.destroy("blogs/missing")
    assert not result.ok
    assert result.result == "not found"


async def test_upload_returns_secure_url_and_public_id():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path.endswith("/demo/image/upload")
        assert b"medicaps/blogs" in request.content
        return httpx.Response(200, json={"secure_url": "https://res.test/a.jpg", "public_id": "medicaps/blogs/a"})

    storage = _storage(handler)
    media = await storage.upload(b"\xff\xd8data", "a.jpg", "medicaps/blogs")

    assert media.url == "https://res.test/a.jpg"
    assert media.public_id == "medicaps/blogs/a"


async def test_rejected_request_raises_external_service_error():
    storage = _storage(lambda request: httpx.Response(401, json={"error": {"message": "Invalid Signature"}}))
    with pytest.raises(ExternalServiceError) as exc_info:
        await storage.destroy("blogs/a")
    assert exc_info.value.status_code == 502
    assert exc_info.value.details["error"] == "Invalid Signature"


async def test_unreachable_host_raises_external_service_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    storage = _storage(handler)
    with pytest.raises(ExternalServiceError):
        await storage.upload(b"data", "a.jpg", "medicaps/blogs")
