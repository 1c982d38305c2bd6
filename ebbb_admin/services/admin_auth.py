# ebbb_admin/services/admin_auth.py
from passlib.context import CryptContext
from typing import Any, Callable, Dict, Optional
from datetime import datetime, timedelta, timezone

from ebbb_admin.auth.password_handler import (
    generate_session_token,
    get_password_hash,
    pwd_context,
    verify_password,
)
from ebbb_admin.core.config import settings
from ebbb_admin.core.exceptions import StoreError
from ebbb_admin.core.logging_config import get_logger, mask_token
from ebbb_admin.schemas.admin_schemas import (
    ActiveSessionsResult,
    AdminCreateSchema,
    AuthErrorCode,
    AuthResult,
    CleanupResult,
    CONFIGURATION_ERROR_MESSAGE,
    INVALID_CREDENTIALS_MESSAGE,
    INVALID_SESSION_MESSAGE,
    LoginResult,
    SessionVerification,
    UserResult,
)
from ebbb_admin.services.admin_store import AdminStore

logger = get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AdminAuth:
    """
    Autenticação do painel administrativo.

    Nenhum método lança exceção para o chamador: toda falha vira um
    objeto de resultado com `error` e `error_code`.
    """

    def __init__(
        self,
        store: AdminStore,
        password_context: CryptContext = pwd_context,
        session_duration: timedelta = timedelta(hours=settings.SESSION_DURATION_HOURS),
        revoke_on_password_change: bool = settings.REVOKE_SESSIONS_ON_PASSWORD_CHANGE,
        revoke_on_deactivation: bool = settings.REVOKE_SESSIONS_ON_DEACTIVATION,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.password_context = password_context
        self.session_duration = session_duration
        self.revoke_on_password_change = revoke_on_password_change
        self.revoke_on_deactivation = revoke_on_deactivation
        self.clock = clock

    def _invalid_credentials(self) -> LoginResult:
        return LoginResult(
            success=False,
            error=INVALID_CREDENTIALS_MESSAGE,
            error_code=AuthErrorCode.INVALID_CREDENTIALS,
        )

    def login(
        self,
        username: str,
        password: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> LoginResult:
        if not self.store.is_configured:
            return LoginResult(success=False, error=CONFIGURATION_ERROR_MESSAGE, error_code=AuthErrorCode.CONFIGURATION_ERROR)
        if not username or not password:
            return self._invalid_credentials()

        try:
            user = self.store.get_active_admin_by_username(username)
        except StoreError as e:
            logger.error("Login lookup failed for '%s': %s", username, e.message)
            return LoginResult(success=False, error="Login failed", error_code=AuthErrorCode.FETCH_FAILED)

        # Mesma resposta para usuário inexistente, inativo ou senha errada
        if user is None:
            logger.info("Login rejected for '%s'", username)
            return self._invalid_credentials()
        if not verify_password(password, user.password_hash, self.password_context):
            logger.info("Login rejected for '%s'", username)
            return self._invalid_credentials()

        now = self.clock()
        session_data: Dict[str, Any] = {
            "user_id": user.id,
            "session_token": generate_session_token(),
            "expires_at": (now + self.session_duration).isoformat(),
        }
        # Só inclui metadados quando existem
        if ip_address:
            session_data["ip_address"] = ip_address
        if user_agent:
            session_data["user_agent"] = user_agent

        try:
            session = self.store.insert_session(session_data)
        except StoreError as e:
            logger.error("Session creation failed for '%s': %s", username, e.message)
            return LoginResult(
                success=False,
                error=f"Failed to create session: {e.message}",
                error_code=AuthErrorCode.SESSION_CREATION_FAILED,
            )

        try:
            updated = self.store.update_admin(user.id, {"last_login": now.isoformat()})
            if updated is not None:
                user = updated
        except StoreError as e:
            logger.warning("Could not update last_login for admin %s: %s", user.id, e.message)

        logger.info("Admin '%s' logged in (session %s)", username, mask_token(session.session_token))
        return LoginResult(success=True, user=user, session=session)

    def verify_session(self, session_token: Optional[str]) -> SessionVerification:
        if not self.store.is_configured:
            return SessionVerification(valid=False, error=CONFIGURATION_ERROR_MESSAGE, error_code=AuthErrorCode.CONFIGURATION_ERROR)
        if not session_token or not isinstance(session_token, str):
            return SessionVerification(valid=False, error=INVALID_SESSION_MESSAGE, error_code=AuthErrorCode.INVALID_OR_EXPIRED_SESSION)

        try:
            found = self.store.get_valid_session(session_token, self.clock())
        except StoreError as e:
            logger.error("Session verification failed for %s: %s", mask_token(session_token), e.message)
            return SessionVerification(valid=False, error="Session verification failed", error_code=AuthErrorCode.FETCH_FAILED)

        if found is None:
            return SessionVerification(valid=False, error=INVALID_SESSION_MESSAGE, error_code=AuthErrorCode.INVALID_OR_EXPIRED_SESSION)
        _, user = found
        return SessionVerification(valid=True, user=user)

    def logout(self, session_token: Optional[str]) -> AuthResult:
        if not self.store.is_configured:
            return AuthResult(success=False, error=CONFIGURATION_ERROR_MESSAGE, error_code=AuthErrorCode.CONFIGURATION_ERROR)
        if not session_token:
            return AuthResult(success=True)
        try:
            deleted = self.store.delete_session(session_token)
        except StoreError as e:
            logger.error("Logout failed for %s: %s", mask_token(session_token), e.message)
            return AuthResult(success=False, error="Logout failed", error_code=AuthErrorCode.LOGOUT_FAILED)
        logger.info("Session %s closed (%d row(s) removed)", mask_token(session_token), deleted)
        return AuthResult(success=True)

    def create_admin_user(self, admin_data: AdminCreateSchema) -> UserResult:
        if not self.store.is_configured:
            return UserResult(success=False, error=CONFIGURATION_ERROR_MESSAGE, error_code=AuthErrorCode.CONFIGURATION_ERROR)
        try:
            password_hash = get_password_hash(admin_data.password, self.password_context)
        except ValueError as e:
            # passlib recusa bytes NUL e senhas acima do tamanho máximo
            logger.warning("Rejected password for new admin '%s': %s", admin_data.username, e)
            return UserResult(success=False, error=f"Failed to create user: {e}", error_code=AuthErrorCode.CREATION_FAILED)
        db_data = {
            "username": admin_data.username,
            "email": admin_data.email,
            "password_hash": password_hash,
            "full_name": admin_data.full_name,
            "role": admin_data.role.value,
        }
        try:
            user = self.store.insert_admin(db_data)
        except StoreError as e:
            logger.error("Failed to create admin '%s': %s", admin_data.username, e.message)
            return UserResult(success=False, error=f"Failed to create user: {e.message}", error_code=AuthErrorCode.CREATION_FAILED)
        logger.info("Admin '%s' created with role %s", user.username, user.role.value)
        return UserResult(success=True, user=user)

    def change_password(
        self,
        user_id: str,
        current_password: str,
        new_password: str,
        keep_session_token: Optional[str] = None,
    ) -> AuthResult:
        if not self.store.is_configured:
            return AuthResult(success=False, error=CONFIGURATION_ERROR_MESSAGE, error_code=AuthErrorCode.CONFIGURATION_ERROR)
        try:
            user = self.store.get_admin_by_id(user_id)
        except StoreError as e:
            logger.error("Could not load admin %s: %s", user_id, e.message)
            return AuthResult(success=False, error="Failed to fetch user", error_code=AuthErrorCode.FETCH_FAILED)
        if user is None:
            return AuthResult(success=False, error="User not found", error_code=AuthErrorCode.USER_NOT_FOUND)

        if not verify_password(current_password, user.password_hash, self.password_context):
            return AuthResult(success=False, error="Current password is incorrect", error_code=AuthErrorCode.INVALID_CREDENTIALS)

        try:
            new_hash = get_password_hash(new_password, self.password_context)
        except ValueError as e:
            logger.warning("Rejected new password for admin %s: %s", user.id, e)
            return AuthResult(success=False, error=f"Failed to update password: {e}", error_code=AuthErrorCode.UPDATE_FAILED)
        try:
            updated = self.store.update_admin(user.id, {"password_hash": new_hash})
        except StoreError as e:
            logger.error("Password update failed for admin %s: %s", user.id, e.message)
            return AuthResult(success=False, error=f"Failed to update password: {e.message}", error_code=AuthErrorCode.UPDATE_FAILED)
        if updated is None:
            return AuthResult(success=False, error="Failed to update password", error_code=AuthErrorCode.UPDATE_FAILED)

        logger.info("Password changed for admin %s", user.id)
        if self.revoke_on_password_change:
            self._revoke_sessions(user.id, except_token=keep_session_token)
        return AuthResult(success=True)

    def set_admin_active(self, user_id: str, is_active: bool) -> UserResult:
        if not self.store.is_configured:
            return UserResult(success=False, error=CONFIGURATION_ERROR_MESSAGE, error_code=AuthErrorCode.CONFIGURATION_ERROR)
        try:
            updated = self.store.update_admin(user_id, {"is_active": is_active})
        except StoreError as e:
            logger.error("Could not change is_active for admin %s: %s", user_id, e.message)
            return UserResult(success=False, error=f"Failed to update user: {e.message}", error_code=AuthErrorCode.UPDATE_FAILED)
        if updated is None:
            return UserResult(success=False, error="User not found", error_code=AuthErrorCode.USER_NOT_FOUND)

        logger.info("Admin %s %s", user_id, "reactivated" if is_active else "deactivated")
        if not is_active and self.revoke_on_deactivation:
            self._revoke_sessions(user_id)
        return UserResult(success=True, user=updated)

    def _revoke_sessions(self, user_id: str, except_token: Optional[str] = None) -> None:
        # A alteração já foi gravada; falha aqui só é registrada
        try:
            removed = self.store.delete_sessions_for_user(user_id, except_token=except_token)
            logger.info("Revoked %d session(s) for admin %s", removed, user_id)
        except StoreError as e:
            logger.warning("Could not revoke sessions for admin %s: %s", user_id, e.message)

    def cleanup_expired_sessions(self) -> CleanupResult:
        if not self.store.is_configured:
            return CleanupResult(success=False, error=CONFIGURATION_ERROR_MESSAGE, error_code=AuthErrorCode.CONFIGURATION_ERROR)
        try:
            deleted = self.store.delete_expired_sessions(self.clock())
        except StoreError as e:
            logger.warning("Expired session cleanup failed: %s", e.message)
            return CleanupResult(success=False, error="Cleanup failed", error_code=AuthErrorCode.CLEANUP_FAILED)
        if deleted:
            logger.info("Removed %d expired session(s)", deleted)
        return CleanupResult(success=True, deleted=deleted)

    def get_active_sessions(self, user_id: str) -> ActiveSessionsResult:
        if not self.store.is_configured:
            return ActiveSessionsResult(success=False, error=CONFIGURATION_ERROR_MESSAGE, error_code=AuthErrorCode.CONFIGURATION_ERROR)
        try:
            sessions = self.store.list_active_sessions(user_id, self.clock())
        except StoreError as e:
            logger.error("Could not list sessions for admin %s: %s", user_id, e.message)
            return ActiveSessionsResult(success=False, error="Failed to fetch sessions", error_code=AuthErrorCode.FETCH_FAILED)
        return ActiveSessionsResult(success=True, sessions=sessions)
