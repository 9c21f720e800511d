def test_db_health(client):
    response = client.get("/_health/db")
    assert response.status_code == 200
    assert response.json()["ok"] is True


def test_root(client):
    assert client.get("/").json()["health"] == "/_health/db"


def test_correlation_id_is_echoed(client):
    response = client.get("/_health/db", headers={"X-Correlation-ID": "abc-123"})
    assert response.headers["X-Correlation-ID"] == "abc-123"
