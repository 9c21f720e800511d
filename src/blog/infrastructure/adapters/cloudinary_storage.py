"""Cloudinary REST adapter for blog media."""
from __future__ import annotations

import hashlib
import time
from typing import Any, Callable, Dict, Mapping, Optional

import httpx

from src.blog.domain.media import DestroyResult, UploadedMedia
from src.config import Settings
from src.shared.exceptions import ExternalServiceError
from src.shared.logging import get_logger

logger = get_logger(__name__)

# Parameters Cloudinary leaves out of the string to sign
_UNSIGNED = frozenset({"file", "api_key", "resource_type", "cloud_name"})


def sign_params(params: Mapping[str, Any], api_secret: str) -> str:
    """SHA-1 over `k=v` pairs sorted by key and joined with '&', followed by the secret."""
    to_sign = "&".join(
        f"{key}={params[key]}"
        for key in sorted(params)
        if key not in _UNSIGNED and params[key] not in (None, "")
    )
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


class CloudinaryMediaStorage:
    """Cloudinary image upload/destroy over the signed REST API."""

    def __init__(
        self,
        settings: Settings,
        client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.cloud_name = settings.CLOUDINARY_CLOUD_NAME
        self.api_key = settings.CLOUDINARY_API_KEY
        self.api_secret = settings.CLOUDINARY_API_SECRET
        self.base_url = f"{settings.CLOUDINARY_BASE_URL.rstrip('/')}/{self.cloud_name}/image"
        self.client = client or httpx.AsyncClient(timeout=settings.MEDIA_TIMEOUT_SECONDS)
        self._clock = clock

    def _signed(self, params: Dict[str, Any]) -> Dict[str, Any]:
        params = {**params, "timestamp": int(self._clock())}
        return {**params, "api_key": self.api_key, "signature": sign_params(params, self.api_secret)}

    async def _post(self, action: str, data: Dict[str, Any], files: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}/{action}"
        try:
            response = await self.client.post(url, data=data, files=files)
        except httpx.HTTPError as e:
            logger.error("media_host_unreachable", action=action, error=str(e))
            raise ExternalServiceError(f"Media host request failed: {action}", details={"reason": str(e)}) from e

        try:
            body = response.json()
        except ValueError:
            body = {}
        if response.status_code >= 400:
            error = body.get("error", {}) if isinstance(body, dict) else {}
            logger.error("media_host_rejected", action=action, status_code=response.status_code)
            raise ExternalServiceError(
                f"Media host rejected {action}",
                details={"status_code": response.status_code, "error": error.get("message", response.text)},
            )
        return body

    async def upload(self, data: bytes, filename: str, folder: str) -> UploadedMedia:
        body = await self._post("upload", self._signed({"folder": folder}), files={"file": (filename, data)})
        logger.info("media_uploaded", public_id=body.get("public_id"))
        return UploadedMedia(url=body["secure_url"], public_id=body["public_id"])

    async def destroy(self, public_id: str) -> DestroyResult:
        body = await self._post("destroy", self._signed({"public_id": public_id}))
        return DestroyResult(result=str(body.get("result", "unknown")), raw=body)

    async def aclose(self) -> None:
        await self.client.aclose()
