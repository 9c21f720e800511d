def test_upload_image(client, auth, media):
    response = client.post(
        "/api/blog-images/upload",
        files={"image": ("hero.png", b"\x89PNG....", "image/png")},
        headers=auth(),
    )

    assert response.status_code == 200
    assert response.json() == {
        "message": "Image uploaded successfully",
        "url": "https://media.test/medicaps/blogs/hero-1.jpg",
        "public_id": "medicaps/blogs/hero-1",
    }


def test_upload_requires_admin(client, auth, media):
    response = client.post(
        "/api/blog-images/upload",
        files={"image": ("hero.png", b"\x89PNG", "image/png")},
        headers=auth(role="User"),
    )
    assert response.status_code == 403
    assert media.uploads == []


def test_delete_image(client, auth, media):
    response = client.request("DELETE", "/api/blog-images", json={"public_id": "medicaps/blogs/hero-1"}, headers=auth())

    assert response.status_code == 200
    assert response.json() == {"message": "Image deleted successfully", "result": {"result": "ok"}}
    assert media.destroyed == ["medicaps/blogs/hero-1"]


def test_delete_refused_by_host(client, auth, media):
    media.outcomes = {"gone": "not found"}

    response = client.request("DELETE", "/api/blog-images", json={"public_id": "gone"}, headers=auth())

    assert response.status_code == 502
    assert response.json()["message"] == "Failed to delete image"


def test_delete_requires_public_id(client, auth, media):
    response = client.request("DELETE", "/api/blog-images", json={}, headers=auth())
    assert response.status_code == 400
    assert media.destroyed == []
