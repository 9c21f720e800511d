import pytest

NEW_BLOG = {
    "title": "Millets for Diabetics",
    "slug": "millets-for-diabetics",
    "content": "Low glycaemic grains.",
    "featured_image_url": "https://media.test/blogs/cover.jpg",
    "featured_image_public_id": "blogs/cover",
    "images": [
        {"image_url": "https://media.test/blogs/a.jpg", "public_id": "blogs/a"},
        {"image_url": "https://media.test/blogs/b.jpg", "public_id": "blogs/b", "alt_text": "Bowl"},
        {"image_url": "https://media.test/blogs/a-again.jpg", "public_id": "blogs/a"},
    ],
}


@pytest.fixture
def blog(sql):
    sql(
        "INSERT INTO blogs (id, title, slug, content, published_at, featured_image_url, featured_image_public_id, created_at) "
        "VALUES (1, 'Ragi Recipes', 'ragi-recipes', 'Five recipes.', '2025-05-01 08:00:00', "
        "'https://media.test/blogs/ragi.jpg', 'blogs/ragi', '2025-05-01 08:00:00')"
    )
    sql(
        "INSERT INTO blog_images (id, blog_id, image_url, public_id, position, created_at) VALUES "
        "(10, 1, 'https://media.test/blogs/step2.jpg', 'blogs/step2', 2, '2025-05-01 08:00:00'), "
        "(11, 1, 'https://media.test/blogs/step1.jpg', 'blogs/step1', 1, '2025-05-01 08:00:00'), "
        "(12, 1, 'https://media.test/blogs/ragi.jpg', 'blogs/ragi', 3, '2025-05-01 08:00:00')"
    )
    return 1


def test_empty_list_has_message(client):
    assert client.get("/api/blogs").json() == {"message": "No blogs available at the moment.", "blogs": []}


def test_images_listed_by_position(client, blog):
    body = client.get("/api/blogs/id/1").json()
    assert [i["id"] for i in body["images"]] == [11, 10, 12]
    assert [i["position"] for i in body["images"]] == [1, 2, 3]


def test_list_orders_published_before_drafts(client, sql, blog):
    sql("INSERT INTO blogs (id, title, slug, content, published_at) VALUES (2, 'Newer', 'newer', 'x', '2025-06-01 08:00:00')")
    sql("INSERT INTO blogs (id, title, slug, content, published_at) VALUES (3, 'Draft', 'draft', 'x', NULL)")

    blogs = client.get("/api/blogs").json()["blogs"]

    assert [b["slug"] for b in blogs] == ["newer", "ragi-recipes", "draft"]
    assert blogs[0]["images"] == []


def test_get_by_slug(client, blog):
    assert client.get("/api/blogs/ragi-recipes").json()["id"] == 1
    response = client.get("/api/blogs/no-such-post")
    assert response.status_code == 404
    assert response.json()["message"] == "Blog not found"


def test_create_blog_dedups_images_and_numbers_positions(client, auth, sql):
    response = client.post("/api/blogs", json=NEW_BLOG, headers=auth())

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Blog created successfully"
    images = body["blog"]["images"]
    assert [(i["public_id"], i["position"]) for i in images] == [("blogs/a", 1), ("blogs/b", 2)]
    assert images[1]["alt_text"] == "Bowl"
    assert body["blog"]["published_at"] is not None
    assert sql("SELECT COUNT(*) AS n FROM blog_images")[0]["n"] == 2


def test_create_requires_title_slug_content(client, auth):
    response = client.post("/api/blogs", json={**NEW_BLOG, "title": "  "}, headers=auth())
    assert response.status_code == 400
    assert response.json()["message"] == "Title, slug, and content are required fields."


def test_duplicate_slug_is_rejected_without_partial_rows(client, auth, sql, blog):
    response = client.post("/api/blogs", json={**NEW_BLOG, "slug": "ragi-recipes"}, headers=auth())

    assert response.status_code == 400
    assert response.json()["code"] == "conflict"
    assert sql("SELECT COUNT(*) AS n FROM blogs")[0]["n"] == 1
    assert sql("SELECT COUNT(*) AS n FROM blog_images")[0]["n"] == 3


def test_writes_require_admin(client, auth, blog):
    assert client.post("/api/blogs", json=NEW_BLOG).status_code == 401
    assert client.post("/api/blogs", json=NEW_BLOG, headers=auth(role="User")).status_code == 403
    assert client.delete("/api/blogs/1", headers=auth(role="User")).status_code == 403


def test_update_without_changes(client, auth, media, blog):
    response = client.put("/api/blogs/1", json={"title": "Ragi Recipes", "excerpt": ""}, headers=auth())

    assert response.status_code == 200
    assert response.json()["message"] == "No fields updated"
    assert response.json()["updated_fields"] == []
    assert media.destroyed == []


def test_update_fields(client, auth, media, sql, blog):
    response = client.put("/api/blogs/1", json={"title": "Ragi Recipes, Revised", "content": None}, headers=auth())

    body = response.json()
    assert response.status_code == 200
    assert body["updated_fields"] == ["title"]
    assert body["blog"]["title"] == "Ragi Recipes, Revised"
    assert body["blog"]["content"] == "Five recipes."
    assert body["media_cleanup"]["attempted"] == 0
    assert media.destroyed == []


def test_replacing_images_cleans_up_only_orphans(client, auth, media, sql, blog):
    response = client.put(
        "/api/blogs/1",
        json={
            "images": [
                {"image_url": "https://media.test/blogs/step1.jpg", "public_id": "blogs/step1"},
                {"image_url": "https://media.test/blogs/new.jpg", "public_id": "blogs/new"},
            ]
        },
        headers=auth(),
    )

    body = response.json()
    assert body["updated_fields"] == ["images"]
    assert [(i["public_id"], i["position"]) for i in body["blog"]["images"]] == [("blogs/step1", 1), ("blogs/new", 2)]
    # blogs/ragi is still the featured image
    assert media.destroyed == ["blogs/step2"]
    assert body["media_cleanup"]["results"] == [{"public_id": "blogs/step2", "status": "ok", "error": None}]


def test_update_missing_blog(client, auth, blog):
    assert client.put("/api/blogs/99", json={"title": "x"}, headers=auth()).status_code == 404


def test_delete_blog_removes_rows_then_media(client, auth, media, sql, blog):
    sql("INSERT INTO blog_likes (blog_id, user_id) VALUES (1, 5)")
    sql("INSERT INTO blog_comments (blog_id, user_id, comment) VALUES (1, 5, 'Nice')")
    sql("INSERT INTO blog_shares (blog_id, user_id, platform) VALUES (1, 5, 'whatsapp')")
    media.outcomes = {"blogs/step1": "not found", "blogs/step2": RuntimeError("host down")}

    response = client.delete("/api/blogs/1", headers=auth())

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Blog and related data deleted successfully"
    assert media.destroyed == ["blogs/ragi", "blogs/step1", "blogs/step2"]
    assert body["media_cleanup"]["attempted"] == 3
    assert body["media_cleanup"]["failed"] == 1
    assert [r["status"] for r in body["media_cleanup"]["results"]] == ["ok", "not_found", "failed"]
    for table in ("blogs", "blog_images", "blog_likes", "blog_comments", "blog_shares"):
        assert sql(f"SELECT COUNT(*) AS n FROM {table}")[0]["n"] == 0


def test_delete_missing_blog_touches_nothing(client, auth, media, sql, blog):
    response = client.delete("/api/blogs/99", headers=auth())

    assert response.status_code == 404
    assert media.destroyed == []
    assert sql("SELECT COUNT(*) AS n FROM blogs")[0]["n"] == 1


def test_add_image_appends_after_last_position(client, auth, media, blog):
    response = client.post(
        "/api/blogs/1/images",
        files={"image": ("plate.jpg", b"\xff\xd8jpeg", "image/jpeg")},
        data={"alt_text": "Plated"},
        headers=auth(),
    )

    assert response.status_code == 201
    image = response.json()["image"]
    assert image["position"] == 4
    assert image["alt_text"] == "Plated"
    assert image["public_id"] == "medicaps/blogs/plate-1"
    assert media.uploads[0]["folder"] == "medicaps/blogs"


def test_add_image_rejects_unsupported_type(client, auth, media, blog):
    response = client.post(
        "/api/blogs/1/images",
        files={"image": ("anim.gif", b"GIF89a", "image/gif")},
        headers=auth(),
    )
    assert response.status_code == 400
    assert response.json()["code"] == "invalid_upload"
    assert media.uploads == []


def test_add_image_to_missing_blog(client, auth, media):
    response = client.post(
        "/api/blogs/99/images",
        files={"image": ("plate.jpg", b"\xff\xd8jpeg", "image/jpeg")},
        headers=auth(),
    )
    assert response.status_code == 404
    assert media.uploads == []


def test_delete_image_keeps_media_still_in_use(client, auth, media, blog):
    # image 12 shares its public id with the featured image
    response = client.delete("/api/blogs/1/images/12", headers=auth())

    assert response.status_code == 200
    assert response.json()["message"] == "Image deleted successfully"
    assert media.destroyed == []


def test_delete_image_removes_media(client, auth, media, blog):
    response = client.delete("/api/blogs/1/images/10", headers=auth())

    assert response.json()["media_cleanup"]["results"][0]["public_id"] == "blogs/step2"
    assert media.destroyed == ["blogs/step2"]
    assert [i["id"] for i in client.get("/api/blogs/id/1").json()["images"]] == [11, 12]


def test_delete_missing_image(client, auth, blog):
    response = client.delete("/api/blogs/1/images/999", headers=auth())
    assert response.status_code == 404
    assert response.json()["code"] == "image_not_found"
