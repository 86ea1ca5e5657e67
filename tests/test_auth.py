from datetime import timedelta

import pytest

from mindjournal import security
from mindjournal.errors import AuthenticationError

PASSWORD = "Str0ngPassword"


class TestSecurity:
    def test_password_hash_round_trip(self):
        hashed = security.hash_password("Secret123")
        assert hashed != "Secret123"
        assert security.verify_password("Secret123", hashed)
        assert not security.verify_password("secret123", hashed)

    def test_verify_against_garbage_hash_is_false(self):
        assert security.verify_password("Secret123", "not-a-hash") is False

    def test_token_round_trip(self):
        token = security.create_access_token("user-123")
        assert security.decode_access_token(token)["sub"] == "user-123"

    def test_expired_token_rejected(self):
        token = security.create_access_token("user-123", expires_delta=timedelta(seconds=-5))
        with pytest.raises(AuthenticationError):
            security.decode_access_token(token)

    def test_tampered_token_rejected(self):
        token = security.create_access_token("user-123")
        with pytest.raises(AuthenticationError):
            security.decode_access_token(token[:-2] + "xx")


def test_register_returns_token_and_sets_cookie(client, register):
    body = register("new_writer")

    assert body["status"] == "success"
    assert body["token"]
    assert body["user"]["username"] == "new_writer"
    assert body["user"]["email"] == "new_writer@example.com"
    assert "createdAt" in body["user"]
    assert "password" not in body["user"] and "passwordHash" not in body["user"]
    assert client.cookies.get("jwt") == body["token"]


def test_register_duplicate_is_conflict(client, register):
    register("dupe_writer")
    resp = client.post(
        "/api/auth/register",
        json={"username": "dupe_writer", "email": "another@example.com", "password": PASSWORD, "confirmPassword": PASSWORD},
    )
    assert resp.status_code == 409
    assert resp.json()["error"] == "User with this email or username already exists"


@pytest.mark.parametrize(
    "overrides",
    [
        {"username": "ab"},
        {"username": "bad name!"},
        {"email": "not-an-email"},
        {"password": "short1A", "confirmPassword": "short1A"},
        {"password": "alllowercase1", "confirmPassword": "alllowercase1"},
        {"confirmPassword": "Different123"},
    ],
)
def test_register_validation_errors(client, overrides):
    payload = {"username": "valid_name", "email": "valid@example.com", "password": PASSWORD, "confirmPassword": PASSWORD}
    payload.update(overrides)
    resp = client.post("/api/auth/register", json=payload)
    assert resp.status_code == 400
    assert resp.json()["error"] == "Validation failed"


def test_login_success_and_failures(client, register):
    user = register()
    email = user["user"]["email"]

    ok = client.post("/api/auth/login", json={"email": email, "password": PASSWORD})
    assert ok.status_code == 200
    assert ok.json()["user"]["id"] == user["user"]["id"]

    wrong = client.post("/api/auth/login", json={"email": email, "password": "Wrong12345"})
    unknown = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": PASSWORD})
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json()["error"] == unknown.json()["error"] == "Incorrect email or password"


def test_me_requires_valid_token(client, register):
    user = register()
    client.cookies.clear()

    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/auth/me", headers={"Authorization": "Bearer nope"}).status_code == 401

    resp = client.get("/api/auth/me", headers=user["headers"])
    assert resp.status_code == 200
    assert resp.json()["user"]["id"] == user["user"]["id"]


def test_cookie_authenticates_and_logout_clears_it(client, register):
    user = register()

    assert client.get("/api/auth/me").json()["user"]["id"] == user["user"]["id"]

    resp = client.post("/api/auth/logout")
    assert resp.status_code == 200
    assert resp.json()["status"] == "success"
    assert client.get("/api/auth/me").status_code == 401
