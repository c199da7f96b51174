"""Signup, login, logout and identity routes."""
from fastapi.testclient import TestClient
from sqlmodel import Session, select

from app.core.security import verify_token
from app.main import create_app
from app.models.user import User
from tests.helpers import cookie_attributes, signup


def test_signup_creates_user_and_sets_cookie(client, settings):
    response = client.post(
        "/api/auth/signup",
        json={"email": "a@b.com", "password": "secret123", "name": "Ada"},
    )

    assert response.status_code == 201
    user = response.json()["user"]
    assert user["id"] > 0
    assert user["email"] == "a@b.com"
    assert user["name"] == "Ada"

    assert response.headers["set-cookie"].startswith("auth-token=")
    attributes = cookie_attributes(response)
    assert "httponly" in attributes
    assert "samesite=lax" in attributes
    assert "max-age=604800" in attributes
    assert "secure" not in attributes

    claims = verify_token(client.cookies.get("auth-token"), settings)
    assert claims.id == user["id"]
    assert claims.email == "a@b.com"


def test_signup_duplicate_email_conflicts_without_second_row(client, engine):
    signup(client, "a@b.com", "secret123")

    response = client.post("/api/auth/signup", json={"email": "a@b.com", "password": "other-pass"})

    assert response.status_code == 409
    with Session(engine) as session:
        users = session.exec(select(User).where(User.email == "a@b.com")).all()
    assert len(users) == 1


def test_signup_missing_fields_is_bad_request(client):
    assert client.post("/api/auth/signup", json={"email": "a@b.com"}).status_code == 400
    assert client.post("/api/auth/signup", json={"password": "secret123"}).status_code == 400
    assert client.post("/api/auth/signup", json={"email": "  ", "password": "x"}).status_code == 400


def test_signup_malformed_body_is_bad_request(client):
    response = client.post(
        "/api/auth/signup",
        content="not json",
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 400


def test_signup_password_over_72_bytes_is_bad_request(client, engine):
    response = client.post("/api/auth/signup", json={"email": "long@b.com", "password": "p" * 80})

    assert response.status_code == 400
    assert "72 bytes" in response.json()["detail"]

    # 37 two-byte characters: 37 chars, 74 bytes
    response = client.post("/api/auth/signup", json={"email": "long@b.com", "password": "é" * 37})
    assert response.status_code == 400
    with Session(engine) as session:
        assert session.exec(select(User).where(User.email == "long@b.com")).all() == []


def test_signup_password_of_exactly_72_bytes_can_log_in(client):
    password = "p" * 72
    signup(client, "edge@b.com", password)
    client.cookies.clear()

    response = client.post("/api/auth/login", json={"email": "edge@b.com", "password": password})

    assert response.status_code == 200


def test_signed_up_user_can_log_in(client, settings):
    user = signup(client, "a@b.com", "secret123")
    client.cookies.clear()

    response = client.post("/api/auth/login", json={"email": "a@b.com", "password": "secret123"})

    assert response.status_code == 200
    assert response.json()["user"]["id"] == user["id"]
    assert verify_token(client.cookies.get("auth-token"), settings).id == user["id"]


def test_login_wrong_password_unauthorized(client):
    signup(client, "a@b.com", "secret123")
    client.cookies.clear()

    response = client.post("/api/auth/login", json={"email": "a@b.com", "password": "wrong"})

    assert response.status_code == 401
    assert "auth-token" not in client.cookies


def test_login_missing_fields_is_bad_request(client):
    assert client.post("/api/auth/login", json={"email": "a@b.com"}).status_code == 400


def test_me_and_logout(client):
    user = signup(client, "a@b.com", "secret123", name="Ada")

    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json() == {"id": user["id"], "email": "a@b.com", "name": "Ada"}

    response = client.post("/api/auth/logout")
    assert response.status_code == 200
    assert "auth-token" not in client.cookies
    assert client.get("/api/auth/me").status_code == 401


def test_secure_cookie_in_production(settings, engine, chat_service):
    prod = settings.model_copy(update={"ENVIRONMENT": "production"})
    app = create_app(prod, engine=engine, chat_service=chat_service)
    with TestClient(app) as client:
        response = client.post("/api/auth/signup", json={"email": "a@b.com", "password": "secret123"})

    assert "secure" in cookie_attributes(response)
