import pytest


@pytest.fixture
def patients(sql):
    for statement in (
        "INSERT INTO users (id, full_name, email, phone) VALUES (1, 'Anita Desai', 'anita@example.com', '9000000011')",
        "INSERT INTO users (id, full_name, email, phone) VALUES (2, 'Rahul Verma', 'rahul@example.com', '9000000012')",
        "INSERT INTO patient_profiles (id, user_id, relationship, gender, blood_group, created_at) VALUES (1, 1, 'self', 'female', 'O+', '2025-01-01 10:00:00')",
        "INSERT INTO patient_profiles (id, user_id, relationship, gender, blood_group, created_at) VALUES (2, 2, 'self', 'male', 'B+', '2025-03-01 10:00:00')",
        "INSERT INTO patient_profiles (id, user_id, relationship, gender, blood_group, created_at) VALUES (3, 1, 'child', 'male', 'A+', '2025-02-01 10:00:00')",
        "INSERT INTO patient_documents (id, patient_profile_id, document_name, document_type, document_url) VALUES (1, 1, 'Blood test', 'lab', 'https://docs/1.pdf'), (2, 1, 'X-ray', 'scan', 'https://docs/2.pdf')",
        "INSERT INTO patient_conditions (id, patient_profile_id, condition_name, condition_status) VALUES (1, 2, 'Asthma', 'active')",
        "INSERT INTO patient_allergies (id, patient_profile_id, allergen, severity) VALUES (1, 1, 'Peanuts', 'high')",
    ):
        sql(statement)


def test_patients_newest_first_with_health_records(client, patients):
    response = client.get("/api/admin/patients")

    assert response.status_code == 200
    body = response.json()
    assert [p["patient_id"] for p in body] == [2, 3, 1]

    anita = body[2]
    assert [d["document_name"] for d in anita["documents"]] == ["Blood test", "X-ray"]
    assert anita["allergies"] == [{"allergen": "Peanuts", "severity": "high", "reaction_notes": None}]
    assert anita["conditions"] == []

    child = body[1]
    assert child["documents"] == [] and child["conditions"] == [] and child["allergies"] == []


def test_gender_is_exact_match(client, patients):
    body = client.get("/api/admin/patients", params={"gender": "male"}).json()
    assert [p["patient_id"] for p in body] == [2, 3]

    assert client.get("/api/admin/patients", params={"gender": "mal"}).json() == []


def test_name_and_email_are_partial_matches(client, patients):
    body = client.get("/api/admin/patients", params={"full_name": "anita"}).json()
    assert [p["patient_id"] for p in body] == [3, 1]

    body = client.get("/api/admin/patients", params={"email": "RAHUL@"}).json()
    assert [p["patient_id"] for p in body] == [2]


def test_no_patients(client):
    assert client.get("/api/admin/patients").json() == []
