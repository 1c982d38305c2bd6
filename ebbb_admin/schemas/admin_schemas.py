# ebbb_admin/schemas/admin_schemas.py
from enum import Enum
from pydantic import BaseModel, ConfigDict, constr
from typing import List, Optional
from datetime import datetime

from ebbb_admin.core.config import settings
from ebbb_admin.models.admin import AdminAccount, AdminRole, AdminSession


class AuthErrorCode(str, Enum):
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_OR_EXPIRED_SESSION = "invalid_or_expired_session"
    SESSION_CREATION_FAILED = "session_creation_failed"
    CREATION_FAILED = "creation_failed"
    UPDATE_FAILED = "update_failed"
    USER_NOT_FOUND = "user_not_found"
    LOGOUT_FAILED = "logout_failed"
    FETCH_FAILED = "fetch_failed"
    CLEANUP_FAILED = "cleanup_failed"
    CONFIGURATION_ERROR = "configuration_error"


# Mensagens exibidas ao chamador
INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"
INVALID_SESSION_MESSAGE = "Invalid or expired session"
CONFIGURATION_ERROR_MESSAGE = "Supabase configuration is missing"


# --- Requests ---

class AdminCreateSchema(BaseModel):
    username: constr(min_length=3, max_length=50)
    email: constr(min_length=3, max_length=254)
    password: constr(min_length=settings.PASSWORD_MIN_LENGTH, max_length=settings.PASSWORD_MAX_LENGTH)
    full_name: str = ""
    role: AdminRole = AdminRole.ADMIN


class AdminLoginSchema(BaseModel):
    username: str
    password: str


class ChangePasswordSchema(BaseModel):
    current_password: str
    new_password: constr(min_length=settings.PASSWORD_MIN_LENGTH, max_length=settings.PASSWORD_MAX_LENGTH)


class SetActiveSchema(BaseModel):
    is_active: bool


# --- Results returned by AdminAuth ---

class AuthResult(BaseModel):
    success: bool
    error: Optional[str] = None
    error_code: Optional[AuthErrorCode] = None


class LoginResult(AuthResult):
    user: Optional[AdminAccount] = None
    session: Optional[AdminSession] = None


class SessionVerification(BaseModel):
    valid: bool
    user: Optional[AdminAccount] = None
    error: Optional[str] = None
    error_code: Optional[AuthErrorCode] = None


class UserResult(AuthResult):
    user: Optional[AdminAccount] = None


class CleanupResult(AuthResult):
    deleted: int = 0


class ActiveSessionsResult(AuthResult):
    sessions: List[AdminSession] = []


# --- HTTP responses ---

class AdminResponseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    email: str
    full_name: str
    role: AdminRole
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class SessionResponseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    expires_at: datetime
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime


class LoginResponseSchema(BaseModel):
    session_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: AdminResponseSchema
