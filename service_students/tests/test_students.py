"""
Tests for Student service CRUD endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from service_students.app.main import create_app
from shared.test_helpers import StubTokenVerifier, create_student_payload, make_test_config


@pytest.fixture
def client():
    """Create test client."""
    app = create_app(make_test_config("students", 8020), verifier=StubTokenVerifier())
    return TestClient(app)


def test_root_endpoint(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["service"] == "students"


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_create_student(client):
    response = client.post("/api/students", json=create_student_payload())

    assert response.status_code == 201
    data = response.json()
    assert data["id"] == 1
    assert data["name"] == "Ada Lovelace"
    assert data["email"] == "ada@example.edu"
    assert data["course"] == "Mathematics"
    assert data["created_at"] == data["updated_at"]


@pytest.mark.parametrize("payload", [
    {"email": "ada@example.edu"},
    {"name": "", "email": "ada@example.edu"},
    {"name": "Ada", "email": "not-an-email"},
])
def test_create_student_validates_body(client, payload):
    response = client.post("/api/students", json=payload)

    assert response.status_code == 422


def test_list_students(client):
    client.post("/api/students", json=create_student_payload(name="Ada"))
    client.post("/api/students", json=create_student_payload(name="Grace", email="grace@example.edu"))

    response = client.get("/api/students")

    assert response.status_code == 200
    assert [s["name"] for s in response.json()] == ["Ada", "Grace"]


def test_get_student_by_id(client):
    client.post("/api/students", json=create_student_payload())

    response = client.get("/api/students/1")

    assert response.status_code == 200
    assert response.json()["id"] == 1


def test_get_missing_student_is_not_found(client):
    response = client.get("/api/students/404")

    assert response.status_code == 404
    data = response.json()
    assert data["code"] == "NOT_FOUND"
    assert data["details"] == {"entity": "Student", "id": 404}


def test_update_student_copies_fields(client):
    client.post("/api/students", json=create_student_payload())

    response = client.put(
        "/api/students/1",
        json=create_student_payload(name="Ada King", email="ada.king@example.edu", course=None)
    )

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Ada King"
    assert data["course"] is None
    assert client.get("/api/students/1").json()["email"] == "ada.king@example.edu"


def test_update_missing_student_is_not_found(client):
    response = client.put("/api/students/9", json=create_student_payload())

    assert response.status_code == 404


def test_delete_student(client):
    client.post("/api/students", json=create_student_payload())

    assert client.delete("/api/students/1").status_code == 204
    assert client.get("/api/students/1").status_code == 404
    assert client.delete("/api/students/1").status_code == 404


def test_request_metrics_are_labelled_by_route_template(client):
    client.post("/api/students", json=create_student_payload())
    for student_id in (1, 2, 3):
        client.get(f"/api/students/{student_id}")
    client.get("/no/such/path")

    body = client.get("/metrics").text

    assert 'endpoint="/api/students/{student_id}"' in body
    assert 'endpoint="/api/students/2"' not in body
    assert 'endpoint="unmatched"' in body
    assert "/no/such/path" not in body
