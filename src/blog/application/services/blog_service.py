"""
Blog Service
Blog CRUD with position-ordered images; media no longer referenced is removed after commit
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

from src.blog.application.services.media_service import MediaService
from src.blog.domain.blog import (
    BLOG_FIELDS,
    Blog,
    NewImage,
    fold_image_row,
    new_blog,
    orphaned_public_ids,
    positioned,
    referenced_public_ids,
    unique_images,
)
from src.blog.infrastructure.repositories.blog_repository import BlogRepository
from src.shared.aggregation import group_rows, shape, to_wire
from src.shared.exceptions import NotFoundError, ValidationError
from src.shared.logging import get_logger
from src.shared.partial_update import changed_fields, is_provided, merge, provided

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _naive_utc(value: Any) -> Any:
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _new_images(items: Iterable[Mapping[str, Any]]) -> List[NewImage]:
    return unique_images(
        NewImage(
            image_url=item["image_url"],
            public_id=item.get("public_id") or None,
            alt_text=item.get("alt_text"),
        )
        for item in items
    )


def _single(rows: List[Dict[str, Any]]) -> Optional[Blog]:
    grouped = group_rows(rows, "id", new_blog, fold_image_row)
    return next(iter(grouped.values()), None)


class BlogService:
    def __init__(self, repository: BlogRepository, media: MediaService) -> None:
        self.repository = repository
        self.media = media

    async def _require_blog(self, blog_id: int) -> Blog:
        blog = _single(await self.repository.rows_by_id(blog_id))
        if blog is None:
            raise NotFoundError("Blog not found", code="blog_not_found")
        return blog

    # -------- Reads ----------------------------------------------------------

    async def list_blogs(self) -> Dict[str, Any]:
        blogs = shape(group_rows(await self.repository.list_rows(), "id", new_blog, fold_image_row))
        if not blogs:
            return {"message": "No blogs available at the moment.", "blogs": []}
        return {"blogs": blogs}

    async def get_blog(self, blog_id: int) -> Dict[str, Any]:
        return to_wire(await self._require_blog(blog_id))

    async def get_blog_by_slug(self, slug: str) -> Dict[str, Any]:
        blog = _single(await self.repository.rows_by_slug(slug))
        if blog is None:
            raise NotFoundError("Blog not found", code="blog_not_found")
        return to_wire(blog)

    # -------- Writes ---------------------------------------------------------

    async def create_blog(self, values: Mapping[str, Any], images: Iterable[Mapping[str, Any]] = ()) -> Dict[str, Any]:
        if not all(is_provided(str(values.get(name) or "").strip()) for name in ("title", "slug", "content")):
            raise ValidationError("Title, slug, and content are required fields.")

        now = _utcnow()
        fields = {name: values.get(name) for name in BLOG_FIELDS}
        fields["published_at"] = _naive_utc(fields["published_at"]) or now
        new_images = _new_images(images)

        async with self.repository.transaction() as tx:
            blog_id = await tx.insert_blog(fields, created_at=now)
            await tx.insert_images(blog_id, positioned(new_images), created_at=now)

        blog = await self._require_blog(blog_id)
        logger.info("blog_created", blog_id=blog_id, slug=blog.slug, images=len(new_images))
        return {"message": "Blog created successfully", "blog_id": blog_id, "blog": to_wire(blog)}

    async def update_blog(
        self,
        blog_id: int,
        changes: Mapping[str, Any],
        images: Optional[Iterable[Mapping[str, Any]]] = None,
    ) -> Dict[str, Any]:
        """
        Partial update. Columns change only for provided values that differ from
        what is stored; `images`, when given, replaces the whole image set.
        """
        before = await self._require_blog(blog_id)
        current = {name: getattr(before, name) for name in BLOG_FIELDS}
        proposed = provided(changes, BLOG_FIELDS)
        if "published_at" in proposed:
            proposed["published_at"] = _naive_utc(proposed["published_at"])

        changed = changed_fields(current, merge(current, proposed, BLOG_FIELDS), BLOG_FIELDS)
        updates = {name: proposed[name] for name in changed}
        new_images = _new_images(images) if images is not None else None

        if not updates and new_images is None:
            return {"message": "No fields updated", "updated_fields": [], "blog": to_wire(before)}

        async with self.repository.transaction() as tx:
            await tx.update_blog(blog_id, updates)
            if new_images is not None:
                await tx.delete_images(blog_id)
                await tx.insert_images(blog_id, positioned(new_images), created_at=_utcnow())

        after = await self._require_blog(blog_id)
        report = await self.media.cleanup(orphaned_public_ids(before, after))

        updated_fields = list(updates) + (["images"] if new_images is not None else [])
        logger.info("blog_updated", blog_id=blog_id, fields=updated_fields, media_failures=len(report.failed))
        return {
            "message": "Blog updated successfully",
            "updated_fields": updated_fields,
            "blog": to_wire(after),
            "media_cleanup": report.to_dict(),
        }

    async def delete_blog(self, blog_id: int) -> Dict[str, Any]:
        blog = await self._require_blog(blog_id)

        async with self.repository.transaction() as tx:
            if not await tx.delete_blog(blog_id):
                raise NotFoundError("Blog not found", code="blog_not_found")

        report = await self.media.cleanup(referenced_public_ids(blog))
        logger.info("blog_deleted", blog_id=blog_id, media_failures=len(report.failed))
        return {"message": "Blog and related data deleted successfully", "media_cleanup": report.to_dict()}

    # -------- Images ---------------------------------------------------------

    async def add_image(
        self,
        blog_id: int,
        data: bytes,
        filename: str,
        content_type: Optional[str],
        alt_text: Optional[str] = None,
    ) -> Dict[str, Any]:
        await self._require_blog(blog_id)
        media = await self.media.store_image(data, filename, content_type)
        image = NewImage(image_url=media.url, public_id=media.public_id, alt_text=alt_text)

        try:
            async with self.repository.transaction() as tx:
                position = await tx.next_image_position(blog_id)
                [image_id] = await tx.insert_images(blog_id, [(position, image)], created_at=_utcnow())
        except Exception:
            # the upload already happened; do not leave it orphaned on the host
            await self.media.cleanup([media.public_id])
            raise

        logger.info("blog_image_added", blog_id=blog_id, image_id=image_id, position=position)
        return {
            "message": "Image added successfully",
            "image": {
                "id": image_id,
                "image_url": image.image_url,
                "public_id": image.public_id,
                "position": position,
                "alt_text": image.alt_text,
            },
        }

    async def delete_image(self, blog_id: int, image_id: int) -> Dict[str, Any]:
        image = await self.repository.get_image(blog_id, image_id)
        if image is None:
            raise NotFoundError("Image not found", code="image_not_found")

        await self.repository.delete_image(blog_id, image_id)

        public_id = image["public_id"]
        still_used = public_id in referenced_public_ids(await self._require_blog(blog_id))
        report = await self.media.cleanup([public_id] if public_id and not still_used else [])
        logger.info("blog_image_deleted", blog_id=blog_id, image_id=image_id)
        return {"message": "Image deleted successfully", "media_cleanup": report.to_dict()}
