"""
Engagement Service
Likes, comments and shares on blogs
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from src.blog.infrastructure.repositories.engagement_repository import EngagementRepository
from src.shared.exceptions import NotFoundError, ValidationError
from src.shared.logging import get_logger

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class EngagementService:
    def __init__(self, repository: EngagementRepository) -> None:
        self.repository = repository

    async def _require_blog(self, blog_id: int) -> int:
        found = await self.repository.blog_id_by_id(blog_id)
        if found is None:
            raise NotFoundError("Blog not found", code="blog_not_found")
        return found

    async def _require_blog_slug(self, slug: str) -> int:
        found = await self.repository.blog_id_by_slug(slug)
        if found is None:
            raise NotFoundError("Blog not found", code="blog_not_found")
        return found

    # -------- Likes ----------------------------------------------------------

    async def toggle_like(self, blog_id: int, user_id: int) -> Dict[str, Any]:
        """
        Liked <-> not liked for (user, blog). The stored likes_count is recomputed
        from blog_likes on every toggle. Concurrent toggles by the same user are
        not serialized.
        """
        await self._require_blog(blog_id)

        async with self.repository.transaction() as tx:
            if await tx.has_liked(blog_id, user_id):
                await tx.remove_like(blog_id, user_id)
                liked, message = False, "Blog unliked successfully"
            else:
                await tx.add_like(blog_id, user_id, _utcnow())
                liked, message = True, "Blog liked successfully"
            likes_count = await tx.count_likes(blog_id)
            await tx.store_likes_count(blog_id, likes_count)

        logger.info("blog_like_toggled", blog_id=blog_id, user_id=user_id, liked=liked, likes_count=likes_count)
        return {"message": message, "likes_count": likes_count, "liked": liked}

    async def likes(self, blog_id: int, user_id: Optional[int] = None) -> Dict[str, Any]:
        await self._require_blog(blog_id)
        user_liked = False
        if user_id is not None:
            user_liked = await self.repository.has_liked(blog_id, user_id)
        return {
            "blog_id": blog_id,
            "likes_count": await self.repository.count_likes(blog_id),
            "user_liked": user_liked,
        }

    # -------- Comments -------------------------------------------------------

    async def add_comment(self, blog_id: int, user_id: int, comment: Optional[str]) -> Dict[str, Any]:
        if not comment or not comment.strip():
            raise ValidationError("Comment cannot be empty")
        await self._require_blog(blog_id)

        created_at = _utcnow()
        comment_id = await self.repository.add_comment(blog_id, user_id, comment.strip(), created_at)
        logger.info("blog_comment_added", blog_id=blog_id, comment_id=comment_id)
        return {
            "message": "Comment added successfully",
            "comment_id": comment_id,
            "created_at": created_at.isoformat(),
        }

    async def list_comments(self, blog_id: int) -> Dict[str, Any]:
        await self._require_blog(blog_id)
        comments = await self.repository.list_comments(blog_id)
        return {"totalComments": len(comments), "comments": comments}

    # -------- Shares ---------------------------------------------------------

    async def share(self, slug: str, user_id: int, platform: Optional[str]) -> Dict[str, Any]:
        if not platform or not platform.strip():
            raise ValidationError("Platform is required")
        platform = platform.strip()
        blog_id = await self._require_blog_slug(slug)

        share_id = await self.repository.add_share(blog_id, user_id, platform, _utcnow())
        total = await self.repository.count_shares(blog_id)
        logger.info("blog_shared", blog_id=blog_id, platform=platform)
        return {
            "message": f"Blog shared successfully on {platform}",
            "share_id": share_id,
            "total_shares": total,
        }

    async def shares(self, slug: str) -> Dict[str, Any]:
        blog_id = await self._require_blog_slug(slug)
        return {"blog_id": blog_id, "slug": slug, "total_shares": await self.repository.count_shares(blog_id)}
