# ebbb_admin/services/__init__.py
from datetime import timedelta
from typing import Optional

from ebbb_admin.auth.password_handler import build_password_context
from ebbb_admin.core.config import Settings, settings as default_settings
from .admin_auth import AdminAuth
from .admin_store import AdminStore
from .supabase_service import create_supabase_client


def build_admin_auth(config: Optional[Settings] = None) -> AdminAuth:
    """Wires AdminAuth to a Supabase-backed store built from settings."""
    config = config or default_settings
    store = AdminStore(
        create_supabase_client(config),
        users_table=config.ADMIN_USERS_TABLE,
        sessions_table=config.ADMIN_SESSIONS_TABLE,
    )
    return AdminAuth(
        store,
        password_context=build_password_context(config.PASSWORD_BCRYPT_ROUNDS),
        session_duration=timedelta(hours=config.SESSION_DURATION_HOURS),
        revoke_on_password_change=config.REVOKE_SESSIONS_ON_PASSWORD_CHANGE,
        revoke_on_deactivation=config.REVOKE_SESSIONS_ON_DEACTIVATION,
    )


__all__ = ["AdminAuth", "AdminStore", "build_admin_auth", "create_supabase_client"]
