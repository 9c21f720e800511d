# src/blog/infrastructure/repositories/engagement_repository.py
from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator, Dict, List, Optional, Union

from sqlalchemy import DateTime, bindparam, text

from src.shared.database import Database, Transaction

_INSERT_LIKE = text(
    "INSERT INTO blog_likes (blog_id, user_id, created_at) VALUES (:blog_id, :user_id, :created_at) RETURNING id"
).bindparams(bindparam("created_at", type_=DateTime()))

_INSERT_COMMENT = text(
    """
    INSERT INTO blog_comments (blog_id, user_id, comment, created_at)
    VALUES (:blog_id, :user_id, :comment, :created_at)
    RETURNING id
    """
).bindparams(bindparam("created_at", type_=DateTime()))

_INSERT_SHARE = text(
    """
    INSERT INTO blog_shares (blog_id, user_id, platform, created_at)
    VALUES (:blog_id, :user_id, :platform, :created_at)
    RETURNING id
    """
).bindparams(bindparam("created_at", type_=DateTime()))

_COMMENTS = """
    SELECT c.id, c.comment, c.created_at, u.id AS user_id, u.full_name AS user_name
    FROM blog_comments c
    JOIN users u ON c.user_id = u.id
    WHERE c.blog_id = :blog_id
    ORDER BY c.created_at DESC, c.id DESC
"""


class EngagementRepository:
    """Likes, comments and shares hanging off a blog."""

    def __init__(self, db: Union[Database, Transaction]) -> None:
        self._db = db

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["EngagementRepository"]:
        async with self._db.transaction() as tx:
            yield EngagementRepository(tx)

    async def blog_id_by_id(self, blog_id: int) -> Optional[int]:
        return await self._db.fetch_value("SELECT id FROM blogs WHERE id = :blog_id", {"blog_id": blog_id})

    async def blog_id_by_slug(self, slug: str) -> Optional[int]:
        return await self._db.fetch_value("SELECT id FROM blogs WHERE slug = :slug", {"slug": slug})

    # -------- Likes ----------------------------------------------------------

    async def has_liked(self, blog_id: int, user_id: int) -> bool:
        found = await self._db.fetch_value(
            "SELECT 1 FROM blog_likes WHERE blog_id = :blog_id AND user_id = :user_id",
            {"blog_id": blog_id, "user_id": user_id},
        )
        return found is not None

    async def add_like(self, blog_id: int, user_id: int, created_at: datetime) -> int:
        return await self._db.insert(_INSERT_LIKE, {"blog_id": blog_id, "user_id": user_id, "created_at": created_at})

    async def remove_like(self, blog_id: int, user_id: int) -> int:
        return await self._db.execute(
            "DELETE FROM blog_likes WHERE blog_id = :blog_id AND user_id = :user_id",
            {"blog_id": blog_id, "user_id": user_id},
        )

    async def count_likes(self, blog_id: int) -> int:
        return await self._db.fetch_value("SELECT COUNT(*) FROM blog_likes WHERE blog_id = :blog_id", {"blog_id": blog_id})

    async def store_likes_count(self, blog_id: int, likes_count: int) -> int:
        return await self._db.execute(
            "UPDATE blogs SET likes_count = :likes_count WHERE id = :blog_id",
            {"blog_id": blog_id, "likes_count": likes_count},
        )

    # -------- Comments -------------------------------------------------------

    async def add_comment(self, blog_id: int, user_id: int, comment: str, created_at: datetime) -> int:
        return await self._db.insert(
            _INSERT_COMMENT,
            {"blog_id": blog_id, "user_id": user_id, "comment": comment, "created_at": created_at},
        )

    async def list_comments(self, blog_id: int) -> List[Dict[str, Any]]:
        return await self._db.fetch_all(_COMMENTS, {"blog_id": blog_id})

    # -------- Shares ---------------------------------------------------------

    async def add_share(self, blog_id: int, user_id: int, platform: str, created_at: datetime) -> int:
        return await self._db.insert(
            _INSERT_SHARE,
            {"blog_id": blog_id, "user_id": user_id, "platform": platform, "created_at": created_at},
        )

    async def count_shares(self, blog_id: int) -> int:
        return await self._db.fetch_value("SELECT COUNT(*) FROM blog_shares WHERE blog_id = :blog_id", {"blog_id": blog_id})
