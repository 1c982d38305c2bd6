"""Tests for the Supabase-backed credential store adapter."""

from datetime import timedelta

import pytest

from ebbb_admin.core.exceptions import StoreError, StoreNotConfiguredError
from ebbb_admin.services.admin_store import AdminStore


class TestQueries:
    """AdminStore issues the right PostgREST queries."""

    def test_active_lookup_ignores_inactive_accounts(self, store, seed_admin):
        seed_admin(is_active=False)

        assert store.get_active_admin_by_username("admin") is None

    def test_active_lookup_returns_account(self, store, admin_row):
        account = store.get_active_admin_by_username("admin")

        assert account.id == admin_row["id"]
        assert account.email == "admin@ebbb.test"

    def test_get_valid_session_joins_owner(self, store, admin_row, clock):
        store.insert_session({
            "user_id": admin_row["id"],
            "session_token": "tok-1",
            "expires_at": (clock.now + timedelta(hours=1)).isoformat(),
        })

        session, owner = store.get_valid_session("tok-1", clock.now)

        assert session.session_token == "tok-1"
        assert owner.username == "admin"

    def test_delete_sessions_for_user_keeps_excluded_token(self, store, admin_row, clock, supabase):
        for token in ("a", "b", "c"):
            store.insert_session({
                "user_id": admin_row["id"],
                "session_token": token,
                "expires_at": (clock.now + timedelta(hours=1)).isoformat(),
            })

        removed = store.delete_sessions_for_user(admin_row["id"], except_token="b")

        assert removed == 2
        assert [r["session_token"] for r in supabase.tables["admin_sessions"]] == ["b"]

    def test_custom_table_names(self, supabase, password_context):
        store = AdminStore(supabase, users_table="staff", sessions_table="staff_sessions")
        supabase.insert_row("staff", {
            "username": "host", "email": "host@ebbb.test", "password_hash": password_context.hash("x"),
            "is_active": True,
        })

        assert store.get_active_admin_by_username("host").username == "host"


class TestErrors:
    """Failures are wrapped in StoreError."""

    def test_api_error_is_wrapped_with_details(self, store, supabase):
        supabase.fail("admin_users", "select", message="permission denied", code="42501")

        with pytest.raises(StoreError) as exc_info:
            store.get_active_admin_by_username("admin")

        assert exc_info.value.message == "permission denied"
        assert exc_info.value.details["code"] == "42501"

    def test_transport_error_is_wrapped(self, store, supabase):
        supabase.failures[("admin_sessions", "delete")] = ConnectionError("network is unreachable")

        with pytest.raises(StoreError, match="network is unreachable"):
            store.delete_session("tok")

    def test_malformed_row_is_store_error(self, store, supabase):
        supabase.tables["admin_users"].append({"id": "x", "username": "broken", "is_active": True})

        with pytest.raises(StoreError, match="Malformed"):
            store.get_active_admin_by_username("broken")

    def test_missing_client(self):
        store = AdminStore(None)

        assert store.is_configured is False
        with pytest.raises(StoreNotConfiguredError):
            store.get_admin_by_id("x")
