"""
Component tests for signup, login and bearer-token authentication.
"""
from datetime import timedelta

from fastapi.testclient import TestClient

from app.data.models.user import UserModel
from app.utils.security import TokenSigner, verify_password
from tests.conftest import DEFAULT_PASSWORD, TEST_KEY_ID, TEST_SECRET


class TestSignup:
    def test_signup_returns_token(self, client: TestClient, signer):
        response = client.post(
            "/auth/signup",
            json={"name": "Ada", "email": "ada@example.com", "password": "s3cret-pass"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "User created successfully"
        assert signer.verify(body["token"]) > 0

    def test_password_is_stored_hashed(self, client: TestClient, db_session):
        client.post(
            "/auth/signup",
            json={"name": "Ada", "email": "Ada@Example.com", "password": "s3cret-pass"},
        )

        user = db_session.query(UserModel).one()
        assert user.email == "ada@example.com"
        assert user.password_hash != "s3cret-pass"
        assert verify_password("s3cret-pass", user.password_hash)

    def test_duplicate_email_is_case_insensitive(self, client: TestClient):
        payload = {"name": "Ada", "email": "ada@example.com", "password": "s3cret-pass"}
        assert client.post("/auth/signup", json=payload).status_code == 201

        response = client.post("/auth/signup", json={**payload, "email": "ADA@example.COM"})

        assert response.status_code == 409
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "CONFLICT"
        assert body["message"] == "User already exists"

    def test_missing_fields_are_bad_request(self, client: TestClient):
        response = client.post("/auth/signup", json={"email": "ada@example.com"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "BAD_REQUEST"
        assert body["details"]


class TestLogin:
    def test_login_with_valid_credentials(self, client: TestClient, register, signer):
        user_id, _ = register(email="bob@example.com")

        response = client.post(
            "/auth/login",
            json={"email": "bob@example.com", "password": DEFAULT_PASSWORD},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Login successful"
        assert signer.verify(body["token"]) == user_id

    def test_login_email_is_case_insensitive(self, client: TestClient, register):
        register(email="bob@example.com")

        response = client.post(
            "/auth/login",
            json={"email": "BOB@example.com", "password": DEFAULT_PASSWORD},
        )

        assert response.status_code == 200

    def test_wrong_password_is_unauthorized(self, client: TestClient, register):
        register(email="bob@example.com")

        response = client.post(
            "/auth/login",
            json={"email": "bob@example.com", "password": "nope"},
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid Credentials"

    def test_unknown_user_is_unauthorized(self, client: TestClient):
        response = client.post(
            "/auth/login",
            json={"email": "ghost@example.com", "password": "whatever"},
        )

        assert response.status_code == 401
        assert response.json()["error"] == "UNAUTHORIZED"


class TestAuthenticate:
    """GET /auth/me is guarded by the bearer-token dependency."""

    def test_valid_token(self, client: TestClient, auth_user):
        user_id, headers = auth_user

        response = client.get("/auth/me", headers=headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == user_id
        assert data["email"] == "test@example.com"
        assert "password" not in data and "passwordHash" not in data

    def test_missing_token_is_unauthorized(self, client: TestClient):
        response = client.get("/auth/me")

        assert response.status_code == 401
        assert response.json()["message"] == "Token not found. Unauthorized request"

    def test_malformed_token_is_forbidden(self, client: TestClient):
        response = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 403
        assert response.json()["message"] == "Invalid or expired token"

    def test_expired_token_is_forbidden(self, client: TestClient, auth_user):
        user_id, _ = auth_user
        expired = TokenSigner(
            secret=TEST_SECRET,
            key_id=TEST_KEY_ID,
            expires_in=timedelta(minutes=-5),
        ).sign(user_id)

        response = client.get("/auth/me", headers={"Authorization": f"Bearer {expired}"})

        assert response.status_code == 403

    def test_token_signed_with_other_key_is_forbidden(self, client: TestClient, auth_user):
        user_id, _ = auth_user
        forged = TokenSigner(
            secret="some-other-secret-0000000000000000",
            key_id=TEST_KEY_ID,
        ).sign(user_id)

        response = client.get("/auth/me", headers={"Authorization": f"Bearer {forged}"})

        assert response.status_code == 403
