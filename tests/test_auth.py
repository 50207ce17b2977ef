"""
Tests for the authentication endpoints.

These tests verify:
- Registration (201, duplicate 409, body validation 422)
- Login (200, uniform 401)
- /auth/me with valid, missing, bad and orphaned tokens
- The shared error body and the WWW-Authenticate header
"""

from fastapi.testclient import TestClient

from starter_api.core.security import TokenClaims, TokenIssuer
from starter_api.models.user import User


class TestRegister:
    """Tests for POST /api/auth/register."""

    def test_register_success(self, client: TestClient):
        response = client.post(
            "/api/auth/register",
            json={"fullname": "John Doe", "username": "JohnDoe", "password": "secret1"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["access_token"]
        assert data["user"]["username"] == "johndoe"
        assert data["user"]["fullname"] == "John Doe"
        assert "password" not in data["user"]
        assert "hashed_password" not in data["user"]

    def test_register_duplicate_username(self, client: TestClient, test_user: User):
        response = client.post(
            "/api/auth/register",
            json={"fullname": "Other User", "username": "TESTUSER", "password": "secret1"},
        )

        assert response.status_code == 409
        assert response.json()["message"] == "Username already exists"

    def test_register_short_password(self, client: TestClient):
        response = client.post(
            "/api/auth/register",
            json={"fullname": "John Doe", "username": "johndoe", "password": "12345"},
        )

        assert response.status_code == 422

    def test_register_password_with_nul(self, client: TestClient, db):
        response = client.post(
            "/api/auth/register",
            json={"fullname": "John Doe", "username": "johndoe", "password": "secret\u0000one"},
        )

        assert response.status_code == 422
        assert db.query(User).count() == 0

    def test_register_password_over_72_bytes(self, client: TestClient):
        response = client.post(
            "/api/auth/register",
            json={"fullname": "John Doe", "username": "johndoe", "password": "a" * 73},
        )

        assert response.status_code == 422

    def test_register_invalid_username(self, client: TestClient):
        response = client.post(
            "/api/auth/register",
            json={"fullname": "John Doe", "username": "john doe!", "password": "secret1"},
        )

        assert response.status_code == 422

    def test_register_missing_fields(self, client: TestClient):
        response = client.post("/api/auth/register", json={"username": "johndoe"})

        assert response.status_code == 422

    def test_registered_token_works_on_me(self, client: TestClient):
        register = client.post(
            "/api/auth/register",
            json={"fullname": "John Doe", "username": "johndoe", "password": "secret1"},
        )
        token = register.json()["access_token"]

        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json()["username"] == "johndoe"


class TestLogin:
    """Tests for POST /api/auth/login."""

    def test_login_success(self, client: TestClient, test_user: User):
        response = client.post(
            "/api/auth/login",
            json={"username": "testuser", "password": "testpassword"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["access_token"]
        assert data["user"]["id"] == str(test_user.id)

    def test_login_is_case_insensitive(self, client: TestClient, test_user: User):
        response = client.post(
            "/api/auth/login",
            json={"username": "TestUser", "password": "testpassword"},
        )

        assert response.status_code == 200

    def test_login_wrong_password(self, client: TestClient, test_user: User):
        response = client.post(
            "/api/auth/login",
            json={"username": "testuser", "password": "wrongpassword"},
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"

    def test_login_unknown_user_same_response(self, client: TestClient, test_user: User):
        """Unknown user and wrong password are indistinguishable."""
        unknown = client.post(
            "/api/auth/login",
            json={"username": "nobody", "password": "wrongpassword"},
        )
        wrong = client.post(
            "/api/auth/login",
            json={"username": "testuser", "password": "wrongpassword"},
        )

        assert unknown.status_code == wrong.status_code == 401
        assert unknown.json()["message"] == wrong.json()["message"]

    def test_login_google_only_account(self, client: TestClient, google_user: User):
        response = client.post(
            "/api/auth/login",
            json={"username": google_user.username, "password": "anything123"},
        )

        assert response.status_code == 401


class TestMe:
    """Tests for GET /api/auth/me."""

    def test_me_with_valid_token(self, client: TestClient, test_user: User, auth_headers: dict):
        response = client.get("/api/auth/me", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data == {
            "id": str(test_user.id),
            "username": "testuser",
            "fullname": "Test User",
            "avatar": None,
        }

    def test_me_without_token(self, client: TestClient):
        response = client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    def test_me_with_garbage_token(self, client: TestClient):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer not.a.jwt"})

        assert response.status_code == 401

    def test_me_with_foreign_signature(self, client: TestClient, test_user: User):
        other = TokenIssuer(secret_key="a-completely-different-secret")
        token = other.issue(TokenClaims(subject=str(test_user.id), username=test_user.username))

        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    def test_me_with_deleted_user(self, client: TestClient, db, test_user: User, auth_headers: dict):
        """A valid signature is not enough once the user is gone."""
        db.delete(test_user)
        db.commit()

        response = client.get("/api/auth/me", headers=auth_headers)

        assert response.status_code == 401


class TestErrorBody:
    """AppErrors share one JSON shape."""

    def test_error_body_shape(self, client: TestClient):
        response = client.post(
            "/api/auth/login",
            json={"username": "nobody", "password": "whatever"},
        )

        body = response.json()
        assert body["statusCode"] == 401
        assert body["error"] == "Unauthorized"
        assert body["path"] == "/api/auth/login"
        assert body["method"] == "POST"
        assert body["message"] == "Invalid credentials"
        assert "timestamp" in body

    def test_process_time_header(self, client: TestClient):
        response = client.get("/health")

        assert "x-process-time" in response.headers
