"""Tests for sign-up, sign-in, sessions and credentials."""
import re

from quorumboard.services import notifications
from tests.conftest import create_test_user, auth_headers


class TestSignUpAndLogin:

    def test_signup_returns_token_and_profile(self, client):
        data = create_test_user(client, name="Alice", email="Alice@Mahjong.jp")
        assert data["token_type"] == "bearer"
        assert data["user"]["email"] == "alice@mahjong.jp"
        assert data["user"]["display_name"] == "Alice"

    def test_signup_duplicate_email(self, client):
        create_test_user(client, name="Alice", email="alice@mahjong.jp")
        resp = client.post("/api/auth/signup", json={
            "email": "alice@mahjong.jp", "password": "another1", "display_name": "Alice 2",
        })
        assert resp.status_code == 409

    def test_signup_validation(self, client):
        resp = client.post("/api/auth/signup", json={
            "email": "bob@mahjong.jp", "password": "123", "display_name": "Bob",
        })
        assert resp.status_code == 422
        resp = client.post("/api/auth/signup", json={
            "email": "bob@mahjong.jp", "password": "secret123", "display_name": "   ",
        })
        assert resp.status_code == 422
        assert "Display name is required" in resp.text

    def test_login(self, client):
        create_test_user(client, name="Alice", email="alice@mahjong.jp", password="secret123")
        resp = client.post("/api/auth/login", json={"email": "alice@mahjong.jp", "password": "secret123"})
        assert resp.status_code == 200
        assert resp.json()["access_token"]

    def test_login_wrong_password(self, client):
        create_test_user(client, name="Alice", email="alice@mahjong.jp", password="secret123")
        resp = client.post("/api/auth/login", json={"email": "alice@mahjong.jp", "password": "wrong-one"})
        assert resp.status_code == 401


class TestSession:

    def test_session_requires_token(self, client):
        assert client.get("/api/auth/session").status_code == 401
        resp = client.get("/api/auth/session", headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 401

    def test_get_session(self, client):
        user = create_test_user(client, name="Alice")
        resp = client.get("/api/auth/session", headers=auth_headers(user))
        assert resp.status_code == 200
        assert resp.json()["user"]["user_id"] == user["user_id"]

    def test_logout_revokes_token(self, client):
        user = create_test_user(client, name="Alice")
        resp = client.post("/api/auth/logout", headers=auth_headers(user))
        assert resp.status_code == 204
        assert client.get("/api/auth/session", headers=auth_headers(user)).status_code == 401

    def test_logout_keeps_other_sessions(self, client):
        user = create_test_user(client, name="Alice", email="alice@mahjong.jp")
        second = client.post("/api/auth/login", json={"email": "alice@mahjong.jp", "password": "secret123"}).json()
        client.post("/api/auth/logout", headers=auth_headers(user))
        assert client.get("/api/auth/session", headers=auth_headers(second)).status_code == 200


class TestCredentials:

    def test_change_password(self, client):
        user = create_test_user(client, name="Alice", email="alice@mahjong.jp")
        other = client.post("/api/auth/login", json={"email": "alice@mahjong.jp", "password": "secret123"}).json()

        resp = client.put("/api/auth/password", json={
            "current_password": "secret123", "new_password": "newsecret",
        }, headers=auth_headers(user))
        assert resp.status_code == 204

        # Caller stays signed in, the other session is revoked
        assert client.get("/api/auth/session", headers=auth_headers(user)).status_code == 200
        assert client.get("/api/auth/session", headers=auth_headers(other)).status_code == 401

        old = client.post("/api/auth/login", json={"email": "alice@mahjong.jp", "password": "secret123"})
        assert old.status_code == 401
        new = client.post("/api/auth/login", json={"email": "alice@mahjong.jp", "password": "newsecret"})
        assert new.status_code == 200

    def test_change_password_wrong_current(self, client):
        user = create_test_user(client, name="Alice")
        resp = client.put("/api/auth/password", json={
            "current_password": "nope-nope", "new_password": "newsecret",
        }, headers=auth_headers(user))
        assert resp.status_code == 401


class TestPasswordReset:

    def test_reset_flow(self, client, monkeypatch):
        sent = []
        monkeypatch.setattr(notifications, "send_email", lambda to, subject, text: sent.append((to, text)) or True)
        user = create_test_user(client, name="Alice", email="alice@mahjong.jp")

        resp = client.post("/api/auth/password-reset", json={"email": "alice@mahjong.jp"})
        assert resp.status_code == 202
        assert len(sent) == 1
        assert sent[0][0] == "alice@mahjong.jp"
        token = re.search(r"token=(\S+)", sent[0][1]).group(1)

        resp = client.post("/api/auth/password-reset/confirm", json={"token": token, "new_password": "fresh-pass"})
        assert resp.status_code == 204

        # Every existing session is signed out
        assert client.get("/api/auth/session", headers=auth_headers(user)).status_code == 401
        login = client.post("/api/auth/login", json={"email": "alice@mahjong.jp", "password": "fresh-pass"})
        assert login.status_code == 200

        # One-time use
        again = client.post("/api/auth/password-reset/confirm", json={"token": token, "new_password": "other-pass"})
        assert again.status_code == 400

    def test_reset_unknown_email_is_silent(self, client, monkeypatch):
        sent = []
        monkeypatch.setattr(notifications, "send_email", lambda to, subject, text: sent.append(to) or True)
        resp = client.post("/api/auth/password-reset", json={"email": "nobody@mahjong.jp"})
        assert resp.status_code == 202
        assert sent == []

    def test_reset_bad_token(self, client):
        resp = client.post("/api/auth/password-reset/confirm", json={"token": "garbage", "new_password": "fresh-pass"})
        assert resp.status_code == 400

    def test_unconfigured_mailgun_skips_send(self):
        assert notifications.send_email("alice@mahjong.jp", "Hello", "body") is False
