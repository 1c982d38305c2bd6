# ebbb_admin/auth/dependencies.py
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from typing import Optional

from ebbb_admin.core.config import settings
from ebbb_admin.models.admin import AdminAccount
from ebbb_admin.schemas.admin_schemas import AuthErrorCode
from ebbb_admin.services.admin_auth import AdminAuth

bearer_scheme = HTTPBearer(auto_error=False)


def get_admin_auth(request: Request) -> AdminAuth:
    admin_auth: Optional[AdminAuth] = getattr(request.app.state, "admin_auth", None)
    if admin_auth is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication service is not available",
        )
    return admin_auth


def get_session_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """Token do header Authorization (Bearer) ou do header de sessão."""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.headers.get(settings.SESSION_HEADER_NAME) or None


def get_current_admin_user(
    request: Request,
    session_token: Optional[str] = Depends(get_session_token),
    admin_auth: AdminAuth = Depends(get_admin_auth),
) -> AdminAccount:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired session",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if not session_token:
        raise credentials_exception

    verification = admin_auth.verify_session(session_token)
    if verification.error_code == AuthErrorCode.CONFIGURATION_ERROR:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=verification.error)
    if not verification.valid or verification.user is None:
        raise credentials_exception

    request.state.admin_id = verification.user.id
    return verification.user


def get_current_super_admin_user(
    current_admin: AdminAccount = Depends(get_current_admin_user),
) -> AdminAccount:
    if not current_admin.is_super_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Super admin privileges required",
        )
    return current_admin
