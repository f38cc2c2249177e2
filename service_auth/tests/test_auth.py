"""
Tests for Auth service.
"""

import pytest
from fastapi.testclient import TestClient

from service_auth.app.main import AuthService
from shared.auth import TokenIssuer
from shared.test_helpers import TEST_ISSUER, TEST_SECRET, make_test_config, mock_token_generator


@pytest.fixture
def service():
    return AuthService(make_test_config("auth", 8010))


@pytest.fixture
def client(service):
    """Create test client."""
    return TestClient(service.app)


def register(client, username="ada", password="s3cret-pass"):
    return client.post("/auth/register", json={"username": username, "password": password})


def login(client, username="ada", password="s3cret-pass"):
    return client.post("/auth/login", params={"username": username, "password": password})


def test_root_endpoint(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["service"] == "auth"
    assert data["version"] == "1.0.0"


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["service"] == "auth"
    assert data["status"] == "ok"
    assert data["dependencies"] == {"database": "ok"}


def test_register_returns_plaintext_confirmation(client):
    response = register(client)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text == "User registered successfully"


def test_register_duplicate_username_conflicts(client):
    register(client)

    response = register(client, password="other-pass")

    assert response.status_code == 409
    assert response.json()["code"] == "CONFLICT"


def test_register_requires_username_and_password(client):
    response = client.post("/auth/register", json={"username": "ada"})

    assert response.status_code == 422


def test_password_is_stored_hashed(client, service):
    register(client)

    stored = service.principals.table._rows[1]

    assert stored["password_hash"] != "s3cret-pass"
    assert stored["password_hash"].startswith("$2")
    assert stored["role"] == "student"


def test_login_returns_token_for_registered_principal(client):
    register(client, username="ada")
    register(client, username="grace")

    response = login(client, username="grace")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    principal = TokenIssuer(TEST_SECRET, issuer=TEST_ISSUER).verify(response.text)
    assert principal.principal_id == 2
    assert principal.username == "grace"
    assert principal.role == "student"


@pytest.mark.parametrize("username,password", [
    ("ada", "wrong-password"),
    ("nobody", "s3cret-pass"),
])
def test_login_with_bad_credentials_is_unauthorized(client, username, password):
    register(client)

    response = login(client, username=username, password=password)

    assert response.status_code == 401
    assert response.json()["code"] == "AUTHENTICATION_ERROR"


def test_validate_token_returns_principal_id(client):
    register(client)
    token = login(client).text

    response = client.get("/auth/validate-token", params={"token": token})

    assert response.status_code == 200
    data = response.json()
    assert data["valid"] is True
    assert data["principal_id"] == 1
    assert data["username"] == "ada"
    assert data["expires_at"] is not None


def test_validate_token_accepts_bearer_prefix(client):
    token = mock_token_generator.generate(4)

    response = client.get("/auth/validate-token", params={"token": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["principal_id"] == 4


@pytest.mark.parametrize("token", [
    "garbage",
    mock_token_generator.generate_expired(1),
    mock_token_generator.generate(1, secret="wrong-secret-but-long-enough-0123456789"),
])
def test_validate_token_rejects_invalid_tokens(client, token):
    response = client.get("/auth/validate-token", params={"token": token})

    assert response.status_code == 401
    assert response.json()["code"] == "TOKEN_REJECTED"


def test_validate_token_requires_token_param(client):
    response = client.get("/auth/validate-token")

    assert response.status_code == 422


def test_metrics_track_logins_and_validations(client):
    register(client)
    token = login(client).text
    login(client, password="nope")
    client.get("/auth/validate-token", params={"token": token})
    client.get("/auth/validate-token", params={"token": "garbage"})

    body = client.get("/metrics").text

    assert 'logins_total{status="success"} 1.0' in body
    assert 'logins_total{status="failure"} 1.0' in body
    assert 'token_validations_total{status="valid"} 1.0' in body
    assert 'token_validations_total{status="invalid"} 1.0' in body


def test_responses_carry_request_id(client):
    response = client.get("/", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"
