"""
Media Service
Validates uploads and talks to the image host through the MediaStorage port
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

from src.blog.domain.media import CleanupEntry, MediaCleanupReport, MediaStorage, UploadedMedia
from src.config import Settings
from src.shared.exceptions import ExternalServiceError, ValidationError
from src.shared.logging import get_logger

logger = get_logger(__name__)


class MediaService:
    def __init__(self, storage: MediaStorage, settings: Settings) -> None:
        self.storage = storage
        self.settings = settings

    def validate_image(self, data: bytes, content_type: Optional[str]) -> None:
        if not data:
            raise ValidationError("No image provided", code="invalid_upload")
        if (content_type or "").lower() not in self.settings.ALLOWED_IMAGE_TYPES:
            raise ValidationError(
                "Only JPEG, PNG and WEBP images are allowed",
                code="invalid_upload",
                details={"content_type": content_type},
            )
        if len(data) > self.settings.UPLOAD_MAX_BYTES:
            raise ValidationError(
                "Image is too large",
                code="invalid_upload",
                details={"size": len(data), "max_bytes": self.settings.UPLOAD_MAX_BYTES},
            )

    async def store_image(self, data: bytes, filename: str, content_type: Optional[str]) -> UploadedMedia:
        self.validate_image(data, content_type)
        return await self.storage.upload(data, filename or "upload", self.settings.BLOG_MEDIA_FOLDER)

    async def upload(self, data: bytes, filename: str, content_type: Optional[str]) -> Dict[str, Any]:
        media = await self.store_image(data, filename, content_type)
        return {"message": "Image uploaded successfully", "url": media.url, "public_id": media.public_id}

    async def destroy(self, public_id: str) -> Dict[str, Any]:
        if not public_id or not public_id.strip():
            raise ValidationError("public_id is required")
        outcome = await self.storage.destroy(public_id)
        if not outcome.ok:
            logger.warning("media_destroy_refused", public_id=public_id, result=outcome.result)
            raise ExternalServiceError("Failed to delete image", details={"result": outcome.raw or {"result": outcome.result}})
        logger.info("media_destroyed", public_id=public_id)
        return {"message": "Image deleted successfully", "result": outcome.raw or {"result": outcome.result}}

    async def cleanup(self, public_ids: Iterable[str]) -> MediaCleanupReport:
        """
        Best-effort deletion of media whose rows are already gone.

        Every id is attempted; a failure is logged and recorded in the report and
        never raised, since the database change it follows has been committed.
        """
        report = MediaCleanupReport()
        for public_id in public_ids:
            try:
                outcome = await self.storage.destroy(public_id)
            except Exception as e:
                logger.warning("media_cleanup_failed", public_id=public_id, error_type=e.__class__.__name__, error=str(e))
                report = report.with_entry(CleanupEntry(public_id=public_id, status="failed", error=str(e)))
                continue

            if outcome.ok:
                report = report.with_entry(CleanupEntry(public_id=public_id, status="ok"))
            elif outcome.result == "not found":
                logger.info("media_cleanup_missing", public_id=public_id)
                report = report.with_entry(CleanupEntry(public_id=public_id, status="not_found"))
            else:
                logger.warning("media_cleanup_failed", public_id=public_id, result=outcome.result)
                report = report.with_entry(CleanupEntry(public_id=public_id, status="failed", error=outcome.result))
        return report
