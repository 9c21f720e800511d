from src.blog.domain.blog import (
    NewImage,
    fold_image_row,
    new_blog,
    orphaned_public_ids,
    positioned,
    referenced_public_ids,
    unique_images,
)
from src.shared.aggregation import group_rows

BLOG_ROW = {
    "id": 1,
    "title": "Millets 101",
    "slug": "millets-101",
    "content": "body",
    "featured_image_public_id": "blogs/cover",
}


def _image_row(image_id, position, public_id):
    return {
        **BLOG_ROW,
        "image_id": image_id,
        "image_url": f"https://media.test/{public_id}.jpg",
        "image_public_id": public_id,
        "image_position": position,
        "image_alt_text": None,
    }


def test_images_fold_in_row_order_once_each():
    rows = [_image_row(10, 1, "blogs/a"), _image_row(11, 2, "blogs/b"), _image_row(10, 1, "blogs/a")]
    blog = group_rows(rows, "id", new_blog, fold_image_row)[1]
    assert [(i.id, i.position) for i in blog.images] == [(10, 1), (11, 2)]


def test_blog_without_images():
    row = {**BLOG_ROW, "image_id": None}
    blog = group_rows([row], "id", new_blog, fold_image_row)[1]
    assert blog.images == ()
    assert blog.likes_count == 0


def test_submitted_images_dedup_by_public_id():
    images = unique_images(
        [
            NewImage("https://m/a.jpg", "a"),
            NewImage("https://m/a2.jpg", "a"),
            NewImage("https://m/external.jpg"),
            NewImage("https://m/b.jpg", "b"),
        ]
    )
    assert [i.image_url for i in images] == ["https://m/a.jpg", "https://m/external.jpg", "https://m/b.jpg"]


def test_positions_are_dense_from_start():
    images = [NewImage("u1", "a"), NewImage("u2", "b")]
    assert [p for p, _ in positioned(images)] == [1, 2]
    assert [p for p, _ in positioned(images, start=4)] == [4, 5]


def test_referenced_ids_featured_first_without_duplicates():
    rows = [_image_row(10, 1, "blogs/a"), _image_row(11, 2, "blogs/cover")]
    blog = group_rows(rows, "id", new_blog, fold_image_row)[1]
    assert referenced_public_ids(blog) == ("blogs/cover", "blogs/a")


def test_orphaned_ids_are_those_no_longer_referenced():
    before = group_rows([_image_row(10, 1, "blogs/a"), _image_row(11, 2, "blogs/b")], "id", new_blog, fold_image_row)[1]
    after_rows = [{**_image_row(12, 1, "blogs/b"), "featured_image_public_id": "blogs/new-cover"}]
    after = group_rows(after_rows, "id", new_blog, fold_image_row)[1]

    assert orphaned_public_ids(before, after) == ("blogs/cover", "blogs/a")
