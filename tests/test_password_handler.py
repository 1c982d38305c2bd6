"""Tests for password hashing helpers."""

from ebbb_admin.auth.password_handler import (
    BCRYPT_ROUNDS,
    build_password_context,
    generate_session_token,
    get_password_hash,
    pwd_context,
    verify_password,
)


class TestPasswordHashing:

    def test_default_cost_factor_is_12(self):
        password_hash = get_password_hash("admin123")

        assert BCRYPT_ROUNDS == 12
        assert password_hash.startswith("$2b$12$")
        assert verify_password("admin123", password_hash) is True

    def test_hash_is_salted(self, password_context):
        first = get_password_hash("admin123", password_context)
        second = get_password_hash("admin123", password_context)

        assert first != second
        assert verify_password("admin123", first, password_context)
        assert verify_password("admin123", second, password_context)

    def test_wrong_password(self, password_context):
        password_hash = get_password_hash("admin123", password_context)

        assert verify_password("admin124", password_hash, password_context) is False

    def test_malformed_hash_does_not_raise(self):
        assert verify_password("admin123", "not-a-bcrypt-hash") is False
        assert verify_password("admin123", "") is False
        assert verify_password("", "$2b$12$abcdefghijklmnopqrstuu") is False

    def test_context_rounds_are_configurable(self):
        context = build_password_context(rounds=5)

        assert context.hash("x").startswith("$2b$05$")
        assert pwd_context is not context


class TestSessionToken:

    def test_tokens_are_url_safe_and_distinct(self):
        tokens = {generate_session_token() for _ in range(100)}

        assert len(tokens) == 100
        assert all(len(t) == 43 for t in tokens)
        assert all(set(t) <= set("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_") for t in tokens)
