"""
Blog aggregate: one blog row plus its position-ordered images.

A blog is read with a LEFT JOIN on blog_images ordered by (blog, position, image id),
so images arrive in display order and are folded onto the blog one row at a time.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from src.shared.aggregation import append_unique, by_id

Row = Mapping[str, Any]

# columns a create or partial update may write
BLOG_FIELDS: Tuple[str, ...] = (
    "title",
    "slug",
    "content",
    "excerpt",
    "published_at",
    "meta_title",
    "meta_description",
    "featured_image_url",
    "featured_image_public_id",
)


@dataclass(frozen=True, slots=True)
class BlogImage:
    id: int
    image_url: str
    public_id: Optional[str]
    position: int
    alt_text: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Blog:
    id: int
    title: str
    slug: str
    content: str
    excerpt: Optional[str] = None
    published_at: Optional[datetime] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    featured_image_url: Optional[str] = None
    featured_image_public_id: Optional[str] = None
    likes_count: int = 0
    created_at: Optional[datetime] = None
    images: Tuple[BlogImage, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class NewImage:
    """An already-uploaded image to attach to a blog."""
    image_url: str
    public_id: Optional[str] = None
    alt_text: Optional[str] = None


def new_blog(row: Row) -> Blog:
    return Blog(
        id=row["id"],
        title=row["title"],
        slug=row["slug"],
        content=row["content"],
        excerpt=row.get("excerpt"),
        published_at=row.get("published_at"),
        meta_title=row.get("meta_title"),
        meta_description=row.get("meta_description"),
        featured_image_url=row.get("featured_image_url"),
        featured_image_public_id=row.get("featured_image_public_id"),
        likes_count=row.get("likes_count") or 0,
        created_at=row.get("created_at"),
    )


def fold_image_row(blog: Blog, row: Row) -> Blog:
    if row.get("image_id") is None:
        return blog
    image = BlogImage(
        id=row["image_id"],
        image_url=row["image_url"],
        public_id=row.get("image_public_id"),
        position=row["image_position"],
        alt_text=row.get("image_alt_text"),
    )
    return replace(blog, images=append_unique(blog.images, image, by_id))


def unique_images(images: Iterable[NewImage]) -> List[NewImage]:
    """Drop repeated public ids from a submitted image set, keeping the first occurrence."""
    seen = set()
    kept: List[NewImage] = []
    for image in images:
        if image.public_id:
            if image.public_id in seen:
                continue
            seen.add(image.public_id)
        kept.append(image)
    return kept


def positioned(images: Sequence[NewImage], start: int = 1) -> List[Tuple[int, NewImage]]:
    return [(start + offset, image) for offset, image in enumerate(images)]


def referenced_public_ids(blog: Blog) -> Tuple[str, ...]:
    """Media ids the blog points at: the featured image first, then images by position."""
    ids = [blog.featured_image_public_id, *(image.public_id for image in blog.images)]
    ordered: List[str] = []
    for public_id in ids:
        if public_id and public_id not in ordered:
            ordered.append(public_id)
    return tuple(ordered)


def orphaned_public_ids(before: Blog, after: Blog) -> Tuple[str, ...]:
    still_used = set(referenced_public_ids(after))
    return tuple(public_id for public_id in referenced_public_ids(before) if public_id not in still_used)
