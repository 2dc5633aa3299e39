# =============================================================================
# tests/test_users.py - Account and Session Endpoint Tests
# =============================================================================
# This module contains tests for:
# - Registration (validation, conflicts, no secrets in responses)
# - Login / refresh / logout and the refresh-token rotation rules
# - The request guard on protected routes
# - Account update, password change and deletion
#
# Run with: pytest tests/test_users.py -v
# =============================================================================

from datetime import datetime, timedelta, timezone

from jose import jwt

from app.config import settings
from tests.conftest import bearer, login, register


# =============================================================================
# Registration
# =============================================================================

class TestRegister:
    """Tests for POST /api/v1/users/register."""

    def test_register_success(self, client):
        """A fresh, complete payload creates the user."""
        response = register(client)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["statusCode"] == 201
        assert body["data"]["username"] == "alice"
        assert body["data"]["fullName"] == "Alice Reader"
        assert "password" not in body["data"]
        assert "refreshToken" not in body["data"]

    def test_register_stores_hash_not_password(self, client, db):
        register(client)

        stored = db.rows("users")[0]
        assert stored["password"] != "correct-horse"
        assert stored["refresh_token"] is None

    def test_register_lowercases_username(self, client):
        response = register(client, username="AliceR")

        assert response.json()["data"]["username"] == "alicer"

    def test_register_duplicate_email(self, client):
        register(client)

        response = register(client, username="someone-else")

        assert response.status_code == 409
        body = response.json()
        assert body["success"] is False
        assert body["error"][0]["field"] == "email"

    def test_register_duplicate_username(self, client):
        register(client)

        response = register(client, email="other@example.com")

        assert response.status_code == 409
        assert response.json()["error"][0]["field"] == "username"

    def test_register_lists_every_missing_field(self, client):
        """Validation reports all missing fields, not just the first."""
        response = client.post("/api/v1/users/register", json={"email": "x@example.com"})

        assert response.status_code == 400
        fields = {entry["field"] for entry in response.json()["error"]}
        assert {"fullName", "username", "password"} <= fields

    def test_register_invalid_email(self, client):
        response = register(client, email="not-an-email")

        assert response.status_code == 400
        assert response.json()["error"][0]["field"] == "email"

    def test_register_blank_field_rejected(self, client):
        response = register(client, fullName="   ")

        assert response.status_code == 400


# =============================================================================
# Login
# =============================================================================

class TestLogin:
    """Tests for POST /api/v1/users/login."""

    def test_login_success_returns_both_tokens(self, client):
        register(client)

        response = client.post(
            "/api/v1/users/login",
            json={"username": "alice", "password": "correct-horse"},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["accessToken"]
        assert data["refreshToken"]
        assert data["user"]["username"] == "alice"
        assert "password" not in data["user"]

    def test_login_sets_http_only_cookies(self, client):
        register(client)

        response = client.post(
            "/api/v1/users/login",
            json={"email": "alice@example.com", "password": "correct-horse"},
        )

        cookies = response.headers.get_list("set-cookie")
        assert any(c.startswith("accessToken=") and "HttpOnly" in c for c in cookies)
        assert any(c.startswith("refreshToken=") and "HttpOnly" in c for c in cookies)

    def test_login_stores_refresh_token(self, client, db):
        register(client)
        data = login(client)

        assert db.rows("users")[0]["refresh_token"] == data["refreshToken"]

    def test_login_with_mixed_case_email(self, client):
        """The exact address used at registration logs the user in."""
        register(client, email="Alice@Example.COM")

        response = client.post(
            "/api/v1/users/login",
            json={"email": "Alice@Example.COM", "password": "correct-horse"},
        )

        assert response.status_code == 200
        assert response.json()["data"]["user"]["username"] == "alice"

    def test_login_wrong_password(self, client):
        register(client)

        response = client.post(
            "/api/v1/users/login",
            json={"username": "alice", "password": "wrong"},
        )

        assert response.status_code == 401

    def test_login_unknown_user(self, client):
        response = client.post(
            "/api/v1/users/login",
            json={"username": "nobody", "password": "whatever"},
        )

        assert response.status_code == 404

    def test_login_requires_identifier(self, client):
        response = client.post("/api/v1/users/login", json={"password": "whatever"})

        assert response.status_code == 400


# =============================================================================
# Request Guard
# =============================================================================

class TestRequestGuard:
    """Tests for access-token checks on protected routes."""

    def test_no_token(self, client):
        response = client.get("/api/v1/users/current-user")

        assert response.status_code == 401
        assert response.json()["message"] == "Authentication required"

    def test_garbage_token(self, client):
        response = client.get("/api/v1/users/current-user", headers=bearer("not.a.jwt"))

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token"

    def test_token_signed_with_wrong_secret(self, client, alice):
        forged = jwt.encode(
            {"sub": alice["user"]["id"], "type": "access", "exp": 4102444800, "iat": 0, "jti": "x"},
            "some-other-secret-entirely",
            algorithm="HS256",
        )

        response = client.get("/api/v1/users/current-user", headers=bearer(forged))

        assert response.status_code == 401

    def test_expired_token(self, client, alice):
        past = datetime.now(timezone.utc) - timedelta(hours=1)
        expired = jwt.encode(
            {"sub": alice["user"]["id"], "type": "access", "exp": past, "iat": past, "jti": "x"},
            settings.ACCESS_TOKEN_SECRET,
            algorithm=settings.JWT_ALGORITHM,
        )

        response = client.get("/api/v1/users/current-user", headers=bearer(expired))

        assert response.status_code == 401
        assert response.json()["message"] == "Token expired"

    def test_refresh_token_not_accepted_as_access_token(self, client, alice):
        response = client.get(
            "/api/v1/users/current-user",
            headers=bearer(alice["refreshToken"]),
        )

        assert response.status_code == 401

    def test_bearer_token(self, client, alice):
        response = client.get(
            "/api/v1/users/current-user",
            headers=bearer(alice["accessToken"]),
        )

        assert response.status_code == 200
        assert response.json()["data"]["username"] == "alice"
        assert "password" not in response.json()["data"]

    def test_cookie_takes_precedence_over_header(self, client, alice, bob):
        response = client.get(
            "/api/v1/users/current-user",
            headers={
                **bearer(bob["accessToken"]),
                "Cookie": f"accessToken={alice['accessToken']}",
            },
        )

        assert response.status_code == 200
        assert response.json()["data"]["username"] == "alice"

    def test_deleted_user_token(self, client, alice, db):
        db.tables["users"].clear()

        response = client.get(
            "/api/v1/users/current-user",
            headers=bearer(alice["accessToken"]),
        )

        assert response.status_code == 401


# =============================================================================
# Refresh and Logout
# =============================================================================

class TestSession:
    """Tests for refresh-token rotation and logout."""

    def test_refresh_rotates_tokens(self, client, alice, db):
        response = client.post(
            "/api/v1/users/refresh-token",
            json={"refreshToken": alice["refreshToken"]},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["refreshToken"] != alice["refreshToken"]
        assert db.rows("users")[0]["refresh_token"] == data["refreshToken"]

    def test_reused_refresh_token_rejected(self, client, alice):
        """After rotation the old refresh token no longer works."""
        first = client.post(
            "/api/v1/users/refresh-token",
            json={"refreshToken": alice["refreshToken"]},
        )
        assert first.status_code == 200

        second = client.post(
            "/api/v1/users/refresh-token",
            json={"refreshToken": alice["refreshToken"]},
        )

        assert second.status_code == 401
        assert second.json()["message"] == "Invalid refresh token"

    def test_refresh_missing_token(self, client):
        response = client.post("/api/v1/users/refresh-token")

        assert response.status_code == 401
        assert response.json()["message"] == "Refresh token required"

    def test_refresh_malformed_token(self, client):
        response = client.post(
            "/api/v1/users/refresh-token",
            json={"refreshToken": "garbage"},
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid refresh token"

    def test_refresh_expired_token(self, client, alice):
        past = datetime.now(timezone.utc) - timedelta(days=1)
        expired = jwt.encode(
            {"sub": alice["user"]["id"], "type": "refresh", "exp": past, "iat": past, "jti": "x"},
            settings.REFRESH_TOKEN_SECRET,
            algorithm=settings.JWT_ALGORITHM,
        )

        response = client.post("/api/v1/users/refresh-token", json={"refreshToken": expired})

        assert response.status_code == 401
        assert response.json()["message"] == "Refresh token expired"

    def test_logout_clears_session(self, client, alice, db):
        response = client.post("/api/v1/users/logout", headers=bearer(alice["accessToken"]))

        assert response.status_code == 200
        cookies = response.headers.get_list("set-cookie")
        assert any(c.startswith("accessToken=") and "Max-Age=0" in c for c in cookies)
        assert any(c.startswith("refreshToken=") and "Max-Age=0" in c for c in cookies)
        assert db.rows("users")[0]["refresh_token"] is None

    def test_refresh_after_logout_rejected(self, client, alice):
        client.post("/api/v1/users/logout", headers=bearer(alice["accessToken"]))

        response = client.post(
            "/api/v1/users/refresh-token",
            json={"refreshToken": alice["refreshToken"]},
        )

        assert response.status_code == 401

    def test_logout_requires_auth(self, client):
        response = client.post("/api/v1/users/logout")

        assert response.status_code == 401


# =============================================================================
# Account Management
# =============================================================================

class TestAccount:
    """Tests for update-account, change-password and delete."""

    def test_update_full_name(self, client, alice):
        response = client.patch(
            "/api/v1/users/update-account",
            json={"fullName": "Alice Q. Reader"},
            headers=bearer(alice["accessToken"]),
        )

        assert response.status_code == 200
        assert response.json()["data"]["fullName"] == "Alice Q. Reader"

    def test_update_requires_a_field(self, client, alice):
        response = client.patch(
            "/api/v1/users/update-account",
            json={},
            headers=bearer(alice["accessToken"]),
        )

        assert response.status_code == 400

    def test_update_short_name_rejected(self, client, alice):
        response = client.patch(
            "/api/v1/users/update-account",
            json={"fullName": "A"},
            headers=bearer(alice["accessToken"]),
        )

        assert response.status_code == 400

    def test_update_email_taken_by_other_user(self, client, alice, bob):
        response = client.patch(
            "/api/v1/users/update-account",
            json={"email": "bob@example.com"},
            headers=bearer(alice["accessToken"]),
        )

        assert response.status_code == 409

    def test_update_username_taken_by_other_user(self, client, alice, bob):
        response = client.patch(
            "/api/v1/users/update-account",
            json={"username": "bob"},
            headers=bearer(alice["accessToken"]),
        )

        assert response.status_code == 409
        assert response.json()["error"][0]["field"] == "username"

    def test_update_to_own_email_allowed(self, client, alice):
        response = client.patch(
            "/api/v1/users/update-account",
            json={"email": "alice@example.com"},
            headers=bearer(alice["accessToken"]),
        )

        assert response.status_code == 200

    def test_change_password(self, client, alice):
        response = client.post(
            "/api/v1/users/change-password",
            json={
                "oldPassword": "correct-horse",
                "newPassword": "battery-staple",
                "confirmNewPassword": "battery-staple",
            },
            headers=bearer(alice["accessToken"]),
        )

        assert response.status_code == 200
        assert login(client, password="battery-staple")["accessToken"]

    def test_change_password_wrong_old_password(self, client, alice):
        response = client.post(
            "/api/v1/users/change-password",
            json={
                "oldPassword": "wrong",
                "newPassword": "battery-staple",
                "confirmNewPassword": "battery-staple",
            },
            headers=bearer(alice["accessToken"]),
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid password"

    def test_change_password_mismatch(self, client, alice):
        response = client.post(
            "/api/v1/users/change-password",
            json={
                "oldPassword": "correct-horse",
                "newPassword": "battery-staple",
                "confirmNewPassword": "battery-stable",
            },
            headers=bearer(alice["accessToken"]),
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Password mismatch"

    def test_change_password_missing_fields(self, client, alice):
        response = client.post(
            "/api/v1/users/change-password",
            json={},
            headers=bearer(alice["accessToken"]),
        )

        assert response.status_code == 400
        assert len(response.json()["error"]) == 3

    def test_delete_account(self, client, alice, db):
        response = client.delete("/api/v1/users/delete", headers=bearer(alice["accessToken"]))

        assert response.status_code == 200
        assert response.json()["data"]["deletedUser"]["username"] == "alice"
        assert db.rows("users") == []
        cookies = response.headers.get_list("set-cookie")
        assert any(c.startswith("accessToken=") and "Max-Age=0" in c for c in cookies)

    def test_delete_account_recomputes_book_ratings(self, client, alice, bob, book, db):
        for user, rating in ((alice, 5), (bob, 1)):
            client.post(
                f"/api/v1/books/{book['id']}/reviews",
                json={"rating": rating},
                headers=bearer(user["accessToken"]),
            )

        client.delete("/api/v1/users/delete", headers=bearer(bob["accessToken"]))

        assert db.rows("books")[0]["average_rating"] == 5.0
        assert len(db.rows("reviews")) == 1
