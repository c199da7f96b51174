"""Access guard behaviour for public, UI and API paths."""
import pytest

from app.core.security import AuthUser, create_access_token
from tests.helpers import cookie_attributes, signup


@pytest.fixture
def expired_token(settings):
    expired = settings.model_copy(update={"TOKEN_EXPIRE_DAYS": -1})
    return create_access_token(AuthUser(id=1, email="a@b.com"), expired)


@pytest.mark.parametrize("path", ["/", "/login", "/signup"])
def test_public_paths_bypass_guard(client, path):
    response = client.get(path, follow_redirects=False)

    assert response.status_code == 200


def test_ui_without_cookie_redirects_to_login(client):
    response = client.get("/playground", follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"] == "/login"
    assert "set-cookie" not in response.headers


def test_api_without_cookie_is_unauthorized(client):
    response = client.get("/api/protected/sessions")

    assert response.status_code == 401


def test_expired_token_on_ui_redirects_and_clears_cookie(client, expired_token):
    client.cookies.set("auth-token", expired_token)

    response = client.get("/playground", follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"] == "/login"
    assert response.headers["set-cookie"].startswith("auth-token=")
    assert "max-age=0" in cookie_attributes(response)


def test_expired_token_on_api_is_unauthorized_and_cookie_untouched(client, expired_token):
    client.cookies.set("auth-token", expired_token)

    response = client.post("/api/protected/chat", json={"sessionId": 1, "message": "hi"})

    assert response.status_code == 401
    assert "set-cookie" not in response.headers


def test_tampered_token_on_api_is_unauthorized(client):
    client.cookies.set("auth-token", "garbage.token.value")

    assert client.get("/api/protected/sessions").status_code == 401


def test_valid_token_reaches_protected_routes(client):
    signup(client, "a@b.com", "secret123")

    assert client.get("/playground", follow_redirects=False).status_code == 200
    assert client.get("/api/protected/sessions").status_code == 200


def test_unguarded_paths_pass_through(client):
    assert client.get("/health").json() == {"status": "ok"}
