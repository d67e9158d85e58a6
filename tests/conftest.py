"""Test fixtures: app on in-memory SQLite, TestClient, registered users."""

import pytest
from fastapi.testclient import TestClient

from config import Settings
from main import create_app

PASSWORD = "secret123"


def register(client: TestClient, email: str, password: str = PASSWORD) -> str:
    resp = client.post("/api/auth/register", json={"email": email, "password": password})
    assert resp.status_code == 201, resp.text
    return resp.json()["token"]


@pytest.fixture(name="settings")
def fixture_settings():
    return Settings(
        database_url="sqlite:///:memory:",
        jwt_secret="test-secret",
        jwt_expires_minutes=60,
    )


@pytest.fixture(name="app")
def fixture_app(settings):
    return create_app(settings)


@pytest.fixture(name="client")
def fixture_client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture(name="db")
def fixture_db(app, client):
    session = app.state.session_factory()
    yield session
    session.close()


@pytest.fixture(name="auth_headers")
def fixture_auth_headers(client):
    return {"x-auth-token": register(client, "alice@example.com")}


@pytest.fixture(name="other_headers")
def fixture_other_headers(client):
    return {"x-auth-token": register(client, "bob@example.com")}
