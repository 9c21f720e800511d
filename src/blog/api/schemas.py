from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BlogImageIn(BaseModel):
    image_url: str = Field(min_length=1)
    public_id: Optional[str] = None
    alt_text: Optional[str] = None


class _BlogFields(BaseModel):
    model_config = ConfigDict(extra="ignore")

    excerpt: Optional[str] = None
    published_at: Optional[datetime] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    featured_image_url: Optional[str] = None
    featured_image_public_id: Optional[str] = None

    @field_validator("published_at", mode="before")
    @classmethod
    def _blank_is_unset(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class BlogCreate(_BlogFields):
    title: str
    slug: str
    content: str
    images: List[BlogImageIn] = Field(default_factory=list)


class BlogUpdate(_BlogFields):
    """All fields optional; null or empty values keep the stored value."""

    title: Optional[str] = None
    slug: Optional[str] = None
    content: Optional[str] = None
    images: Optional[List[BlogImageIn]] = None


class CommentIn(BaseModel):
    comment: Optional[str] = None


class ShareIn(BaseModel):
    platform: Optional[str] = None


class MediaDeleteIn(BaseModel):
    public_id: Optional[str] = None


class LikeToggleResponse(BaseModel):
    message: str
    likes_count: int
    liked: bool


class LikesResponse(BaseModel):
    blog_id: int
    likes_count: int
    user_liked: bool


class UploadResponse(BaseModel):
    message: str
    url: str
    public_id: str


class MediaDeleteResponse(BaseModel):
    message: str
    result: Dict[str, Any]
