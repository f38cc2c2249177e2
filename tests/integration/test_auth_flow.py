"""
Integration tests for the cross-service token validation flow.

All four services run in-process; the gateway and the student service's
verification client reach their peers through ASGI transports, so every
hop is a real HTTP exchange against the real application.
"""

from collections import Counter

import httpx
import pytest
from fastapi.testclient import TestClient

from service_auth.app.main import create_app as create_auth_app
from service_gateway.app.main import create_app as create_gateway_app
from service_students.app.main import create_app as create_students_app
from service_todos.app.main import create_app as create_todos_app
from shared.auth import RemoteTokenVerifier
from shared.test_helpers import create_student_payload, make_test_config, mock_token_generator


class ServiceMesh(httpx.AsyncBaseTransport):
    """Dispatches requests to in-process apps by host name and counts them."""

    def __init__(self):
        self.transports = {}
        self.calls = Counter()

    def register(self, host: str, app) -> None:
        self.transports[host] = httpx.ASGITransport(app=app)

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.calls[(request.url.host, request.url.path)] += 1
        return await self.transports[request.url.host].handle_async_request(request)


@pytest.fixture
def mesh():
    mesh = ServiceMesh()
    mesh.register("auth.test", create_auth_app(make_test_config("auth", 8010)))
    verifier = RemoteTokenVerifier("http://auth.test", timeout=5.0, transport=mesh)
    mesh.register(
        "students.test",
        create_students_app(make_test_config("students", 8020, token_verification_mode="remote"), verifier=verifier)
    )
    mesh.register("todos.test", create_todos_app(make_test_config("todos", 8030)))
    return mesh


@pytest.fixture
def gateway(mesh):
    return TestClient(create_gateway_app(make_test_config("gateway", 8000), transport=mesh))


def register_and_login(gateway, username, password="pass-" + "word"):
    assert gateway.post("/auth/register", json={"username": username, "password": password}).status_code == 200
    response = gateway.post("/auth/login", params={"username": username, "password": password})
    assert response.status_code == 200
    return response.text


@pytest.fixture
def tokens(gateway):
    ada = register_and_login(gateway, "ada")
    grace = register_and_login(gateway, "grace")
    gateway.post("/api/students", json=create_student_payload(name="Ada"))
    gateway.post("/api/students", json=create_student_payload(name="Grace", email="grace@example.edu"))
    return {"ada": ada, "grace": grace}


VALIDATE = ("auth.test", "/auth/validate-token")


def test_login_token_validates_to_registered_principal(gateway, tokens):
    response = gateway.get("/auth/validate-token", params={"token": tokens["grace"]})

    assert response.status_code == 200
    assert response.json()["principal_id"] == 2


def test_owner_reads_profile_through_gateway(gateway, mesh, tokens):
    response = gateway.get("/students/profile/1", headers={"Authorization": f"Bearer {tokens['ada']}"})

    assert response.status_code == 200
    assert response.json()["name"] == "Ada"
    assert mesh.calls[VALIDATE] == 1


def test_each_guarded_request_verifies_once(gateway, mesh, tokens):
    for _ in range(3):
        gateway.get("/students/profile/2", headers={"Authorization": f"Bearer {tokens['grace']}"})

    assert mesh.calls[VALIDATE] == 3


def test_other_principals_profile_is_forbidden(gateway, tokens):
    response = gateway.get("/students/profile/2", headers={"Authorization": f"Bearer {tokens['ada']}"})

    assert response.status_code == 403


def test_missing_header_is_rejected_without_calling_auth(gateway, mesh, tokens):
    response = gateway.get("/students/profile/1")

    assert response.status_code == 401
    assert mesh.calls[VALIDATE] == 0


@pytest.mark.parametrize("token", ["garbage", mock_token_generator.generate_expired(1)])
def test_invalid_or_expired_token_is_unauthorized(gateway, mesh, tokens, token):
    response = gateway.get("/students/profile/1", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["code"] == "TOKEN_REJECTED"
    assert mesh.calls[VALIDATE] == 1


def test_bad_credentials_through_gateway(gateway, tokens):
    response = gateway.post("/auth/login", params={"username": "ada", "password": "wrong"})

    assert response.status_code == 401


def test_todo_lifecycle_through_gateway(gateway):
    created = gateway.post("/api/todo", json={"description": "Revise notes"})
    assert created.status_code == 201
    item_id = created.json()["id"]

    updated = gateway.put(f"/api/todo/{item_id}", json={"description": "Revise notes", "is_complete": True})
    assert updated.json()["is_complete"] is True
    assert [t["id"] for t in gateway.get("/api/todos").json()] == [item_id]

    assert gateway.delete(f"/api/todo/{item_id}").status_code == 204
    assert gateway.get(f"/api/todo/{item_id}").status_code == 404
    assert gateway.delete(f"/api/todo/{item_id}").status_code == 404
