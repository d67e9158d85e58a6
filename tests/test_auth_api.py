"""Tests for /api/auth routes and the token dependency."""

from fastapi.testclient import TestClient

from conftest import PASSWORD, register
from models.user import User


def test_register_returns_token(client: TestClient, db):
    resp = client.post("/api/auth/register", json={"email": " Carol@Example.com ", "password": PASSWORD})

    assert resp.status_code == 201
    assert resp.json()["token"]

    user = db.query(User).one()
    assert user.email == "carol@example.com"
    assert user.password_hash != PASSWORD


def test_register_duplicate_email(client: TestClient):
    register(client, "carol@example.com")
    resp = client.post("/api/auth/register", json={"email": "CAROL@example.com", "password": PASSWORD})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "User already exists"


def test_register_validates_input(client: TestClient):
    assert client.post("/api/auth/register", json={"email": "nope", "password": PASSWORD}).status_code == 422
    assert client.post("/api/auth/register", json={"email": "a@b.com", "password": "123"}).status_code == 422
    assert client.post("/api/auth/register", json={"email": "a@b.com"}).status_code == 422


def test_login(client: TestClient):
    register(client, "dave@example.com")

    ok = client.post("/api/auth/login", json={"email": "dave@example.com", "password": PASSWORD})
    wrong = client.post("/api/auth/login", json={"email": "dave@example.com", "password": "wrong-pass"})
    unknown = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": PASSWORD})

    assert ok.status_code == 200
    assert ok.json()["token"]
    assert wrong.status_code == 400
    assert wrong.json()["detail"] == "Invalid credentials"
    assert unknown.status_code == 400


def test_me_with_custom_header(client: TestClient, auth_headers):
    resp = client.get("/api/auth/me", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["email"] == "alice@example.com"


def test_me_with_bearer_header(client: TestClient, auth_headers):
    token = auth_headers["x-auth-token"]
    resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200


def test_missing_or_bad_token(client: TestClient):
    missing = client.get("/api/tasks")
    bad = client.get("/api/tasks", headers={"x-auth-token": "not-a-jwt"})

    assert missing.status_code == 401
    assert missing.json()["detail"] == "Missing auth token"
    assert bad.status_code == 401
    assert bad.json()["detail"] == "Invalid or expired token"


def test_token_for_deleted_user(client: TestClient, db, auth_headers):
    db.query(User).delete()
    db.commit()

    resp = client.get("/api/auth/me", headers=auth_headers)
    assert resp.status_code == 401


def test_ping_needs_no_auth(client: TestClient):
    resp = client.get("/ping")
    assert resp.status_code == 200
    assert resp.json()["ok"] is True
