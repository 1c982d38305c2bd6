"""Tests for the admin auth HTTP endpoints."""

import pytest
from fastapi.testclient import TestClient

from ebbb_admin.main import create_app
from ebbb_admin.services.admin_auth import AdminAuth
from ebbb_admin.services.admin_store import AdminStore
from ebbb_admin.utils.rate_limiter import limiter

PREFIX = "/api/v1/admin/auth"


@pytest.fixture(autouse=True)
def reset_rate_limits():
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture
def client(auth):
    return TestClient(create_app(admin_auth=auth))


@pytest.fixture
def token(client, admin_row):
    response = client.post(f"{PREFIX}/login", json={"username": "admin", "password": "admin123"})
    return response.json()["session_token"]


@pytest.fixture
def super_token(client, seed_admin):
    seed_admin(username="owner", role="super_admin")
    response = client.post(f"{PREFIX}/login", json={"username": "owner", "password": "admin123"})
    return response.json()["session_token"]


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


class TestLoginEndpoint:

    def test_success(self, client, admin_row, supabase):
        response = client.post(
            f"{PREFIX}/login",
            json={"username": "admin", "password": "admin123"},
            headers={"User-Agent": "pytest-browser"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["user"]["username"] == "admin"
        assert "password_hash" not in body["user"]
        assert supabase.tables["admin_sessions"][0]["user_agent"] == "pytest-browser"

    def test_invalid_credentials_are_generic(self, client, admin_row):
        wrong = client.post(f"{PREFIX}/login", json={"username": "admin", "password": "wrong"})
        ghost = client.post(f"{PREFIX}/login", json={"username": "ghost", "password": "x"})

        assert wrong.status_code == ghost.status_code == 401
        assert wrong.json() == ghost.json() == {"detail": "Invalid credentials"}

    def test_rate_limited(self, client, admin_row):
        statuses = [
            client.post(f"{PREFIX}/login", json={"username": "admin", "password": "wrong"}).status_code
            for _ in range(6)
        ]

        assert statuses[:5] == [401] * 5
        assert statuses[5] == 429

    def test_unconfigured_store(self, password_context):
        client = TestClient(create_app(admin_auth=AdminAuth(AdminStore(None), password_context=password_context)))

        response = client.post(f"{PREFIX}/login", json={"username": "admin", "password": "admin123"})

        assert response.status_code == 503
        assert response.json()["detail"] == "Supabase configuration is missing"


class TestSessionEndpoints:

    def test_current_admin(self, client, token):
        response = client.get(f"{PREFIX}/session", headers=bearer(token))

        assert response.status_code == 200
        assert response.json()["username"] == "admin"

    def test_session_header_is_accepted(self, client, token):
        response = client.get(f"{PREFIX}/session", headers={"X-Admin-Session": token})

        assert response.status_code == 200

    def test_missing_or_bad_token(self, client, admin_row):
        assert client.get(f"{PREFIX}/session").status_code == 401
        assert client.get(f"{PREFIX}/session", headers=bearer("nope")).status_code == 401

    def test_logout_then_session_is_rejected(self, client, token):
        assert client.post(f"{PREFIX}/logout", headers=bearer(token)).json() == {"success": True}

        assert client.get(f"{PREFIX}/session", headers=bearer(token)).status_code == 401

    def test_logout_always_reports_success(self, client, supabase):
        supabase.fail("admin_sessions", "delete")

        response = client.post(f"{PREFIX}/logout", headers=bearer("whatever"))

        assert response.status_code == 200
        assert response.json() == {"success": True}

    def test_list_sessions_hides_tokens(self, client, token):
        response = client.get(f"{PREFIX}/sessions", headers=bearer(token))

        assert response.status_code == 200
        sessions = response.json()
        assert len(sessions) == 1
        assert "session_token" not in sessions[0]

    def test_change_password_keeps_calling_session(self, client, token):
        response = client.post(
            f"{PREFIX}/change-password",
            json={"current_password": "admin123", "new_password": "newpass123"},
            headers=bearer(token),
        )

        assert response.status_code == 200
        assert client.get(f"{PREFIX}/session", headers=bearer(token)).status_code == 200

    def test_change_password_wrong_current(self, client, token):
        response = client.post(
            f"{PREFIX}/change-password",
            json={"current_password": "nope", "new_password": "newpass123"},
            headers=bearer(token),
        )

        assert response.status_code == 401


class TestSuperAdminEndpoints:

    def test_regular_admin_cannot_create_users(self, client, token):
        response = client.post(
            f"{PREFIX}/users",
            json={"username": "waiter", "email": "waiter@ebbb.test", "password": "s3cretpass"},
            headers=bearer(token),
        )

        assert response.status_code == 403

    def test_super_admin_creates_user(self, client, super_token):
        response = client.post(
            f"{PREFIX}/users",
            json={"username": "waiter", "email": "waiter@ebbb.test", "password": "s3cretpass"},
            headers=bearer(super_token),
        )

        assert response.status_code == 201
        assert response.json()["role"] == "admin"

    def test_duplicate_user_conflict(self, client, super_token, admin_row):
        response = client.post(
            f"{PREFIX}/users",
            json={"username": "admin", "email": "new@ebbb.test", "password": "s3cretpass"},
            headers=bearer(super_token),
        )

        assert response.status_code == 409

    def test_deactivate_user(self, client, super_token, token, admin_row):
        response = client.patch(
            f"{PREFIX}/users/{admin_row['id']}/active",
            json={"is_active": False},
            headers=bearer(super_token),
        )

        assert response.status_code == 200
        assert response.json()["is_active"] is False
        assert client.get(f"{PREFIX}/session", headers=bearer(token)).status_code == 401

    def test_cleanup(self, client, super_token):
        response = client.post(f"{PREFIX}/sessions/cleanup", headers=bearer(super_token))

        assert response.status_code == 200
        assert response.json() == {"success": True, "deleted": 0}


class TestAppWiring:

    def test_security_headers_and_request_id(self, client):
        response = client.get("/health")

        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-DNS-Prefetch-Control"] == "off"
        assert "X-Request-ID" in response.headers

    def test_health(self, client):
        body = client.get("/health").json()

        assert body["status"] == "healthy"
        assert body["services"]["database"] == "ok"

    def test_debug_follows_settings(self, client):
        from ebbb_admin.core.config import settings

        assert client.app.debug is settings.DEBUG


class TestPasswordBounds:

    def test_oversized_new_password_is_rejected_by_schema(self, client, token):
        response = client.post(
            f"{PREFIX}/change-password",
            json={"current_password": "admin123", "new_password": "a" * 5000},
            headers=bearer(token),
        )

        assert response.status_code == 422

    def test_nul_byte_password_does_not_crash(self, client, super_token):
        response = client.post(
            f"{PREFIX}/users",
            json={"username": "waiter", "email": "waiter@ebbb.test", "password": "abc\u0000defgh"},
            headers=bearer(super_token),
        )

        assert response.status_code == 409
        assert "NULL" in response.json()["detail"]
