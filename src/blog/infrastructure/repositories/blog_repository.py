# src/blog/infrastructure/repositories/blog_repository.py
from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from sqlalchemy import DateTime, bindparam, text
from sqlalchemy.exc import IntegrityError

from src.blog.domain.blog import BLOG_FIELDS, NewImage
from src.shared.database import Database, Transaction
from src.shared.exceptions import ConflictError

# blogs without a publish time sort after published ones on every backend
_BLOG_WITH_IMAGES = """
    SELECT
        b.id,
        b.title,
        b.slug,
        b.content,
        b.excerpt,
        b.published_at,
        b.meta_title,
        b.meta_description,
        b.featured_image_url,
        b.featured_image_public_id,
        b.likes_count,
        b.created_at,
        bi.id AS image_id,
        bi.image_url,
        bi.public_id AS image_public_id,
        bi.position AS image_position,
        bi.alt_text AS image_alt_text
    FROM blogs b
    LEFT JOIN blog_images bi ON bi.blog_id = b.id
    {where}
    ORDER BY
        CASE WHEN b.published_at IS NULL THEN 1 ELSE 0 END,
        b.published_at DESC,
        b.id DESC,
        bi.position ASC,
        bi.id ASC
"""


def _dated(sql: str, *names: str):
    return text(sql).bindparams(*(bindparam(name, type_=DateTime()) for name in names))


class BlogRepository:
    """Blog rows and their images; write methods are meant to run on a transaction handle."""

    def __init__(self, db: Union[Database, Transaction]) -> None:
        self._db = db

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["BlogRepository"]:
        async with self._db.transaction() as tx:
            yield BlogRepository(tx)

    # -------- Reads ----------------------------------------------------------

    async def list_rows(self) -> List[Dict[str, Any]]:
        return await self._db.fetch_all(_BLOG_WITH_IMAGES.format(where=""))

    async def rows_by_id(self, blog_id: int) -> List[Dict[str, Any]]:
        return await self._db.fetch_all(_BLOG_WITH_IMAGES.format(where="WHERE b.id = :blog_id"), {"blog_id": blog_id})

    async def rows_by_slug(self, slug: str) -> List[Dict[str, Any]]:
        return await self._db.fetch_all(_BLOG_WITH_IMAGES.format(where="WHERE b.slug = :slug"), {"slug": slug})

    async def get_image(self, blog_id: int, image_id: int) -> Optional[Dict[str, Any]]:
        return await self._db.fetch_one(
            "SELECT id, blog_id, image_url, public_id, position, alt_text FROM blog_images WHERE id = :image_id AND blog_id = :blog_id",
            {"blog_id": blog_id, "image_id": image_id},
        )

    async def next_image_position(self, blog_id: int) -> int:
        return await self._db.fetch_value(
            "SELECT COALESCE(MAX(position), 0) + 1 FROM blog_images WHERE blog_id = :blog_id",
            {"blog_id": blog_id},
        )

    # -------- Writes ---------------------------------------------------------

    async def insert_blog(self, values: Mapping[str, Any], created_at: datetime) -> int:
        sql = _dated(
            """
            INSERT INTO blogs (
                title, slug, content, excerpt, published_at, meta_title, meta_description,
                featured_image_url, featured_image_public_id, likes_count, created_at
            )
            VALUES (
                :title, :slug, :content, :excerpt, :published_at, :meta_title, :meta_description,
                :featured_image_url, :featured_image_public_id, 0, :created_at
            )
            RETURNING id
            """,
            "published_at",
            "created_at",
        )
        params = {name: values.get(name) for name in BLOG_FIELDS}
        try:
            return await self._db.insert(sql, {**params, "created_at": created_at})
        except IntegrityError as e:
            raise ConflictError("A blog with this slug already exists", details={"slug": values.get("slug")}) from e

    async def update_blog(self, blog_id: int, values: Mapping[str, Any]) -> int:
        columns = [name for name in BLOG_FIELDS if name in values]
        if not columns:
            return 0
        assignments = ", ".join(f"{name} = :{name}" for name in columns)
        sql = _dated(f"UPDATE blogs SET {assignments} WHERE id = :blog_id", *(c for c in columns if c == "published_at"))
        try:
            return await self._db.execute(sql, {**{c: values[c] for c in columns}, "blog_id": blog_id})
        except IntegrityError as e:
            raise ConflictError("A blog with this slug already exists", details={"slug": values.get("slug")}) from e

    async def insert_images(
        self,
        blog_id: int,
        images: Sequence[Tuple[int, NewImage]],
        created_at: datetime,
    ) -> List[int]:
        sql = _dated(
            """
            INSERT INTO blog_images (blog_id, image_url, public_id, position, alt_text, created_at)
            VALUES (:blog_id, :image_url, :public_id, :position, :alt_text, :created_at)
            RETURNING id
            """,
            "created_at",
        )
        ids: List[int] = []
        for position, image in images:
            ids.append(
                await self._db.insert(
                    sql,
                    {
                        "blog_id": blog_id,
                        "image_url": image.image_url,
                        "public_id": image.public_id,
                        "position": position,
                        "alt_text": image.alt_text,
                        "created_at": created_at,
                    },
                )
            )
        return ids

    async def delete_images(self, blog_id: int) -> int:
        return await self._db.execute("DELETE FROM blog_images WHERE blog_id = :blog_id", {"blog_id": blog_id})

    async def delete_image(self, blog_id: int, image_id: int) -> int:
        return await self._db.execute(
            "DELETE FROM blog_images WHERE id = :image_id AND blog_id = :blog_id",
            {"blog_id": blog_id, "image_id": image_id},
        )

    async def delete_blog(self, blog_id: int) -> int:
        """Children first; no database-level cascade is assumed."""
        params = {"blog_id": blog_id}
        for table in ("blog_comments", "blog_likes", "blog_shares", "blog_images"):
            await self._db.execute(f"DELETE FROM {table} WHERE blog_id = :blog_id", params)
        return await self._db.execute("DELETE FROM blogs WHERE id = :blog_id", params)
