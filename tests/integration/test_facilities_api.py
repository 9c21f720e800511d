from datetime import datetime, timedelta, timezone

import pytest


def _stamp(days_ago):
    return (datetime.now(timezone.utc) - timedelta(days=days_ago)).strftime("%Y-%m-%d %H:%M:%S")


@pytest.fixture
def reviews(sql):
    for statement in (
        "INSERT INTO cities (id, name) VALUES (1, 'Pune')",
        "INSERT INTO clinics (id, name, address_line, postal_code, city_id) VALUES (1, 'Wellness Clinic', '8 FC Road', '411004', 1)",
        "INSERT INTO users (id, full_name) VALUES (1, 'Dr. Kavya Nair'), (2, 'Suresh Patil')",
        "INSERT INTO doctors (id, user_id, is_verified) VALUES (1, 1, 1)",
        "INSERT INTO patient_profiles (id, user_id) VALUES (1, 2)",
    ):
        sql(statement)
    sql(
        "INSERT INTO reviews (id, doctor_id, patient_profile_id, rating, review_text, is_public, created_at) "
        "VALUES (1, 1, 1, 5, 'Great care', 1, :created_at)",
        {"created_at": _stamp(2)},
    )
    sql(
        "INSERT INTO reviews (id, doctor_id, patient_profile_id, rating, review_text, is_public, created_at) "
        "VALUES (2, 1, 1, 3, 'Long wait', 1, :created_at)",
        {"created_at": _stamp(40)},
    )
    sql(
        "INSERT INTO reviews (id, doctor_id, patient_profile_id, rating, review_text, is_public, created_at) "
        "VALUES (3, 1, 1, 1, 'Private note', 0, :created_at)",
        {"created_at": _stamp(1)},
    )


def test_clinic_by_id(client, reviews):
    response = client.get("/api/admin/clinics/1")
    assert response.status_code == 200
    assert response.json() == {
        "id": 1,
        "name": "Wellness Clinic",
        "address_line": "8 FC Road",
        "postal_code": "411004",
        "city": "Pune",
    }


def test_missing_clinic(client):
    response = client.get("/api/admin/clinics/404")
    assert response.status_code == 404
    assert response.json()["message"] == "Clinic not found"


def test_public_reviews_newest_first(client, reviews):
    body = client.get("/api/admin/reviews").json()
    assert [r["review_text"] for r in body] == ["Great care", "Long wait"]
    assert body[0]["doctor_name"] == "Dr. Kavya Nair"
    assert body[0]["patient_name"] == "Suresh Patil"


def test_reviews_within_days(client, reviews):
    body = client.get("/api/admin/reviews", params={"days": 30}).json()
    assert [r["review_text"] for r in body] == ["Great care"]


def test_non_positive_days_means_no_window(client, reviews):
    assert len(client.get("/api/admin/reviews", params={"days": 0}).json()) == 2


def test_days_must_be_integer(client, reviews):
    response = client.get("/api/admin/reviews", params={"days": "week"})
    assert response.status_code == 400
    assert response.json()["code"] == "validation_error"
