from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile

from src.blog.api.schemas import MediaDeleteIn, MediaDeleteResponse, UploadResponse
from src.blog.application.services.media_service import MediaService
from src.dependencies import get_media_service, require_admin

router = APIRouter(prefix="/api/blog-images", tags=["blogs:media"], dependencies=[Depends(require_admin)])


@router.post("/upload", response_model=UploadResponse)
async def upload_image(image: UploadFile = File(...), svc: MediaService = Depends(get_media_service)):
    data = await image.read()
    return await svc.upload(data, image.filename or "upload", image.content_type)


@router.delete("", response_model=MediaDeleteResponse)
async def delete_image(body: MediaDeleteIn, svc: MediaService = Depends(get_media_service)):
    return await svc.destroy(body.public_id or "")
