# ebbb_admin/services/admin_store.py
from supabase import Client
from postgrest.exceptions import APIError
from pydantic import ValidationError
from typing import Any, Dict, List, Optional, Tuple
from datetime import datetime

from ebbb_admin.core.config import settings
from ebbb_admin.core.exceptions import StoreError, StoreNotConfiguredError
from ebbb_admin.core.logging_config import get_logger, mask_token
from ebbb_admin.models.admin import AdminAccount, AdminSession

logger = get_logger(__name__)


class AdminStore:
    """
    Acesso às tabelas de administradores e sessões no Supabase.

    Cada método executa uma única chamada ao PostgREST; falhas viram
    StoreError com a mensagem de diagnóstico do Supabase.
    """

    def __init__(
        self,
        supabase_client: Optional[Client],
        users_table: str = settings.ADMIN_USERS_TABLE,
        sessions_table: str = settings.ADMIN_SESSIONS_TABLE,
    ):
        self.db: Optional[Client] = supabase_client
        self.users_table = users_table
        self.sessions_table = sessions_table
        if not self.db:
            logger.error("AdminStore created without a Supabase client")

    @property
    def is_configured(self) -> bool:
        return self.db is not None

    def _client(self) -> Client:
        if self.db is None:
            raise StoreNotConfiguredError()
        return self.db

    def _execute(self, query, action: str) -> List[Dict[str, Any]]:
        try:
            response = query.execute()
        except APIError as e:
            details = {"code": e.code, "hint": e.hint, "details": e.details}
            logger.error("Supabase error during %s: %s %s", action, e.message, details)
            raise StoreError(e.message or f"{action} failed", details) from e
        except Exception as e:
            logger.error("Store unreachable during %s: %s", action, e)
            raise StoreError(str(e) or f"{action} failed") from e
        if response is None or response.data is None:
            return []
        return response.data

    def _account(self, row: Dict[str, Any]) -> AdminAccount:
        try:
            return AdminAccount(**row)
        except ValidationError as e:
            raise StoreError(f"Malformed {self.users_table} row: {e.error_count()} invalid field(s)") from e

    def _session(self, row: Dict[str, Any]) -> AdminSession:
        try:
            return AdminSession(**row)
        except ValidationError as e:
            raise StoreError(f"Malformed {self.sessions_table} row: {e.error_count()} invalid field(s)") from e

    # --- admin_users ---

    def get_active_admin_by_username(self, username: str) -> Optional[AdminAccount]:
        query = (
            self._client().table(self.users_table).select("*")
            .eq("username", username)
            .eq("is_active", True)
            .limit(1)
        )
        rows = self._execute(query, "get_active_admin_by_username")
        return self._account(rows[0]) if rows else None

    def get_admin_by_id(self, user_id: str) -> Optional[AdminAccount]:
        query = self._client().table(self.users_table).select("*").eq("id", str(user_id)).limit(1)
        rows = self._execute(query, "get_admin_by_id")
        return self._account(rows[0]) if rows else None

    def insert_admin(self, payload: Dict[str, Any]) -> AdminAccount:
        query = self._client().table(self.users_table).insert(payload)
        rows = self._execute(query, "insert_admin")
        if not rows:
            raise StoreError("Insert returned no rows")
        return self._account(rows[0])

    def update_admin(self, user_id: str, fields: Dict[str, Any]) -> Optional[AdminAccount]:
        query = self._client().table(self.users_table).update(fields).eq("id", str(user_id))
        rows = self._execute(query, "update_admin")
        return self._account(rows[0]) if rows else None

    # --- admin_sessions ---

    def insert_session(self, payload: Dict[str, Any]) -> AdminSession:
        logger.debug("Creating session %s for user %s", mask_token(payload.get("session_token")), payload.get("user_id"))
        query = self._client().table(self.sessions_table).insert(payload)
        rows = self._execute(query, "insert_session")
        if not rows:
            raise StoreError("Insert returned no rows")
        return self._session(rows[0])

    def get_valid_session(self, session_token: str, now: datetime) -> Optional[Tuple[AdminSession, AdminAccount]]:
        query = (
            self._client().table(self.sessions_table)
            .select(f"*, {self.users_table}(*)")
            .eq("session_token", session_token)
            .gt("expires_at", now.isoformat())
            .limit(1)
        )
        rows = self._execute(query, "get_valid_session")
        if not rows:
            return None
        row = dict(rows[0])
        owner = row.pop(self.users_table, None)
        # Relação embutida pode vir como objeto ou lista
        if isinstance(owner, list):
            owner = owner[0] if owner else None
        if not owner:
            return None
        return self._session(row), self._account(owner)

    def delete_session(self, session_token: str) -> int:
        query = self._client().table(self.sessions_table).delete().eq("session_token", session_token)
        return len(self._execute(query, "delete_session"))

    def delete_expired_sessions(self, now: datetime) -> int:
        query = self._client().table(self.sessions_table).delete().lt("expires_at", now.isoformat())
        return len(self._execute(query, "delete_expired_sessions"))

    def delete_sessions_for_user(self, user_id: str, except_token: Optional[str] = None) -> int:
        query = self._client().table(self.sessions_table).delete().eq("user_id", str(user_id))
        if except_token:
            query = query.neq("session_token", except_token)
        return len(self._execute(query, "delete_sessions_for_user"))

    def list_active_sessions(self, user_id: str, now: datetime) -> List[AdminSession]:
        query = (
            self._client().table(self.sessions_table).select("*")
            .eq("user_id", str(user_id))
            .gt("expires_at", now.isoformat())
            .order("created_at", desc=True)
        )
        return [self._session(row) for row in self._execute(query, "list_active_sessions")]
