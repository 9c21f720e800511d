from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from src.blog.api.schemas import (
    BlogCreate,
    BlogUpdate,
    CommentIn,
    LikesResponse,
    LikeToggleResponse,
    ShareIn,
)
from src.blog.application.services.blog_service import BlogService
from src.blog.application.services.engagement_service import EngagementService
from src.dependencies import (
    get_blog_service,
    get_current_user_id,
    get_engagement_service,
    get_optional_user_id,
    require_admin,
)

router = APIRouter(prefix="/api/blogs", tags=["blogs"])


@router.get("")
async def list_blogs(svc: BlogService = Depends(get_blog_service)):
    return await svc.list_blogs()


@router.get("/id/{blog_id}")
async def get_blog(blog_id: int, svc: BlogService = Depends(get_blog_service)):
    return await svc.get_blog(blog_id)


@router.get("/{slug}")
async def get_blog_by_slug(slug: str, svc: BlogService = Depends(get_blog_service)):
    return await svc.get_blog_by_slug(slug)


@router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
async def create_blog(body: BlogCreate, svc: BlogService = Depends(get_blog_service)):
    values = body.model_dump(exclude={"images"})
    return await svc.create_blog(values, [image.model_dump() for image in body.images])


@router.put("/{blog_id}", dependencies=[Depends(require_admin)])
async def update_blog(blog_id: int, body: BlogUpdate, svc: BlogService = Depends(get_blog_service)):
    images = [image.model_dump() for image in body.images] if body.images is not None else None
    return await svc.update_blog(blog_id, body.model_dump(exclude={"images"}, exclude_unset=True), images)


@router.delete("/{blog_id}", dependencies=[Depends(require_admin)])
async def delete_blog(blog_id: int, svc: BlogService = Depends(get_blog_service)):
    return await svc.delete_blog(blog_id)


@router.post("/{blog_id}/images", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
async def add_blog_image(
    blog_id: int,
    image: UploadFile = File(...),
    alt_text: Optional[str] = Form(None),
    svc: BlogService = Depends(get_blog_service),
):
    data = await image.read()
    return await svc.add_image(blog_id, data, image.filename or "upload", image.content_type, alt_text)


@router.delete("/{blog_id}/images/{image_id}", dependencies=[Depends(require_admin)])
async def delete_blog_image(blog_id: int, image_id: int, svc: BlogService = Depends(get_blog_service)):
    return await svc.delete_image(blog_id, image_id)


# -------- Engagement ---------------------------------------------------------

@router.post("/{blog_id}/like", response_model=LikeToggleResponse)
async def toggle_like(
    blog_id: int,
    user_id: int = Depends(get_current_user_id),
    svc: EngagementService = Depends(get_engagement_service),
):
    return await svc.toggle_like(blog_id, user_id)


@router.get("/{blog_id}/likes", response_model=LikesResponse)
async def get_likes(
    blog_id: int,
    user_id: Optional[int] = Depends(get_optional_user_id),
    svc: EngagementService = Depends(get_engagement_service),
):
    return await svc.likes(blog_id, user_id)


@router.post("/{blog_id}/comments", status_code=status.HTTP_201_CREATED)
async def add_comment(
    blog_id: int,
    body: CommentIn,
    user_id: int = Depends(get_current_user_id),
    svc: EngagementService = Depends(get_engagement_service),
):
    return await svc.add_comment(blog_id, user_id, body.comment)


@router.get("/{blog_id}/comments")
async def list_comments(blog_id: int, svc: EngagementService = Depends(get_engagement_service)):
    return await svc.list_comments(blog_id)


@router.post("/{slug}/share", status_code=status.HTTP_201_CREATED)
async def share_blog(
    slug: str,
    body: ShareIn,
    user_id: int = Depends(get_current_user_id),
    svc: EngagementService = Depends(get_engagement_service),
):
    return await svc.share(slug, user_id, body.platform)


@router.get("/{slug}/shares")
async def get_shares(slug: str, svc: EngagementService = Depends(get_engagement_service)):
    return await svc.shares(slug)
