"""Shared fixtures: fake Supabase client, frozen clock and a low-cost bcrypt context."""

import os

# Nunca usar um projeto Supabase real nos testes
os.environ["SUPABASE_URL"] = ""
os.environ["SUPABASE_KEY"] = ""

import pytest

from ebbb_admin.auth.password_handler import build_password_context
from ebbb_admin.services.admin_auth import AdminAuth
from ebbb_admin.services.admin_store import AdminStore
from tests.fakes import FakeSupabaseClient, FrozenClock

TEST_BCRYPT_ROUNDS = 4


@pytest.fixture(scope="session")
def password_context():
    return build_password_context(rounds=TEST_BCRYPT_ROUNDS)


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def supabase(clock):
    return FakeSupabaseClient(clock=clock)


@pytest.fixture
def store(supabase):
    return AdminStore(supabase)


@pytest.fixture
def auth(store, password_context, clock):
    return AdminAuth(store, password_context=password_context, clock=clock)


@pytest.fixture
def seed_admin(supabase, password_context):
    """Inserts an admin row directly into the fake store and returns it."""

    def _seed(username="admin", password="admin123", role="admin", is_active=True, email=None):
        return supabase.insert_row("admin_users", {
            "username": username,
            "email": email or f"{username}@ebbb.test",
            "password_hash": password_context.hash(password),
            "full_name": username.title(),
            "role": role,
            "is_active": is_active,
        })

    return _seed


@pytest.fixture
def admin_row(seed_admin):
    return seed_admin()
