import pytest

from src.blog.application.services.media_service import MediaService
from src.config import Settings
from src.shared.exceptions import ExternalServiceError, ValidationError


@pytest.fixture
def storage(media):
    return media


@pytest.fixture
def service(storage) -> MediaService:
    return MediaService(storage, Settings(_env_file=None, UPLOAD_MAX_BYTES=16))


async def test_cleanup_reports_each_outcome(storage, service):
    storage.outcomes = {"b": "not found", "c": "error", "d": RuntimeError("timeout")}

    report = await service.cleanup(["a", "b", "c", "d"])

    assert storage.destroyed == ["a", "b", "c", "d"]
    assert report.to_dict() == {
        "attempted": 4,
        "failed": 2,
        "results": [
            {"public_id": "a", "status": "ok", "error": None},
            {"public_id": "b", "status": "not_found", "error": None},
            {"public_id": "c", "status": "failed", "error": "error"},
            {"public_id": "d", "status": "failed", "error": "timeout"},
        ],
    }


async def test_cleanup_of_nothing_calls_nothing(storage, service):
    report = await service.cleanup([])
    assert storage.destroyed == []
    assert report.to_dict() == {"attempted": 0, "failed": 0, "results": []}


async def test_destroy_refused_by_host_is_bad_gateway(storage, service):
    storage.outcomes = {"blogs/a": "not found"}
    with pytest.raises(ExternalServiceError) as exc_info:
        await service.destroy("blogs/a")
    assert exc_info.value.status_code == 502
    assert exc_info.value.details == {"result": {"result": "not found"}}


async def test_destroy_requires_public_id(service):
    with pytest.raises(ValidationError):
        await service.destroy("  ")


async def test_upload_goes_to_blog_folder(storage, service):
    body = await service.upload(b"jpeg-bytes", "cover.jpg", "image/jpeg")
    assert body["public_id"] == "medicaps/blogs/cover-1"
    assert storage.uploads[0]["folder"] == "medicaps/blogs"


@pytest.mark.parametrize(
    "data, content_type",
    [
        (b"", "image/jpeg"),
        (b"gif", "image/gif"),
        (b"x" * 17, "image/png"),
    ],
)
def test_invalid_uploads_rejected(service, data, content_type):
    with pytest.raises(ValidationError) as exc_info:
        service.validate_image(data, content_type)
    assert exc_info.value.code == "invalid_upload"
