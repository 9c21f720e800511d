import pytest


@pytest.mark.parametrize(
    "method, path, headers_for, status, code",
    [
        ("GET", "/api/blogs/id/404", None, 404, "blog_not_found"),
        ("PATCH", "/api/admin/users/2/deactivate", None, 401, "unauthorized"),
        ("PATCH", "/api/admin/users/2/deactivate", "user", 403, "forbidden"),
        ("GET", "/api/admin/reviews?days=abc", None, 400, "validation_error"),
    ],
)
def test_error_body_shape(client, auth, method, path, headers_for, status, code):
    headers = auth(sub=7, role="User") if headers_for == "user" else None

    response = client.request(method, path, headers=headers)

    assert response.status_code == status
    body = response.json()
    assert body["code"] == code
    assert isinstance(body["message"], str) and body["message"]
    assert set(body) <= {"code", "message", "details", "correlation_id"}
    assert body["correlation_id"] == response.headers["X-Correlation-ID"]


def test_unknown_route_uses_same_shape(client):
    body = client.get("/api/nothing-here").json()
    assert body["code"] == "not_found"
    assert "message" in body
