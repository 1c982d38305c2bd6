from fastapi import APIRouter, Depends, HTTPException, Request, status
from typing import List, NoReturn, Optional

from ebbb_admin.auth.dependencies import (
    get_admin_auth,
    get_current_admin_user,
    get_current_super_admin_user,
    get_session_token,
)
from ebbb_admin.core.config import settings
from ebbb_admin.core.logging_config import get_logger
from ebbb_admin.models.admin import AdminAccount
from ebbb_admin.schemas.admin_schemas import (
    AdminCreateSchema,
    AdminLoginSchema,
    AdminResponseSchema,
    AuthErrorCode,
    ChangePasswordSchema,
    LoginResponseSchema,
    SessionResponseSchema,
    SetActiveSchema,
)
from ebbb_admin.services.admin_auth import AdminAuth
from ebbb_admin.utils.rate_limiter import limiter

logger = get_logger(__name__)

router = APIRouter(prefix="/admin/auth", tags=["Admin Auth"])

# Código de erro -> status HTTP
ERROR_STATUS = {
    AuthErrorCode.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    AuthErrorCode.INVALID_OR_EXPIRED_SESSION: status.HTTP_401_UNAUTHORIZED,
    AuthErrorCode.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    AuthErrorCode.CREATION_FAILED: status.HTTP_409_CONFLICT,
    AuthErrorCode.CONFIGURATION_ERROR: status.HTTP_503_SERVICE_UNAVAILABLE,
    AuthErrorCode.FETCH_FAILED: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def raise_for_result(error_code: Optional[AuthErrorCode], error: Optional[str]) -> NoReturn:
    raise HTTPException(
        status_code=ERROR_STATUS.get(error_code, status.HTTP_500_INTERNAL_SERVER_ERROR),
        detail=error or "Request failed",
    )


@router.post("/login", response_model=LoginResponseSchema, summary="Admin login")
@limiter.limit(settings.RATE_LIMIT_LOGIN)
def login(
    request: Request,
    credentials: AdminLoginSchema,
    admin_auth: AdminAuth = Depends(get_admin_auth),
):
    result = admin_auth.login(
        credentials.username,
        credentials.password,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    if not result.success or result.session is None or result.user is None:
        raise_for_result(result.error_code, result.error)
    return LoginResponseSchema(
        session_token=result.session.session_token,
        expires_at=result.session.expires_at,
        user=AdminResponseSchema.model_validate(result.user),
    )


@router.post("/logout", summary="Admin logout")
def logout(
    session_token: Optional[str] = Depends(get_session_token),
    admin_auth: AdminAuth = Depends(get_admin_auth),
):
    result = admin_auth.logout(session_token)
    if not result.success:
        # O usuário sempre vê o logout como concluído
        logger.warning("Server-side logout did not complete: %s", result.error)
    return {"success": True}


@router.get("/session", response_model=AdminResponseSchema, summary="Current admin")
def read_current_admin(current_admin: AdminAccount = Depends(get_current_admin_user)):
    return AdminResponseSchema.model_validate(current_admin)


@router.get("/sessions", response_model=List[SessionResponseSchema], summary="Active sessions of the current admin")
def list_active_sessions(
    current_admin: AdminAccount = Depends(get_current_admin_user),
    admin_auth: AdminAuth = Depends(get_admin_auth),
):
    result = admin_auth.get_active_sessions(current_admin.id)
    if not result.success:
        raise_for_result(result.error_code, result.error)
    return [SessionResponseSchema.model_validate(session) for session in result.sessions]


@router.post("/change-password", summary="Change the current admin's password")
def change_password(
    payload: ChangePasswordSchema,
    session_token: Optional[str] = Depends(get_session_token),
    current_admin: AdminAccount = Depends(get_current_admin_user),
    admin_auth: AdminAuth = Depends(get_admin_auth),
):
    result = admin_auth.change_password(
        current_admin.id,
        payload.current_password,
        payload.new_password,
        keep_session_token=session_token,
    )
    if not result.success:
        raise_for_result(result.error_code, result.error)
    return {"success": True}


@router.post(
    "/users",
    response_model=AdminResponseSchema,
    status_code=status.HTTP_201_CREATED,
    summary="Create an admin account",
)
def create_admin_user(
    payload: AdminCreateSchema,
    current_admin: AdminAccount = Depends(get_current_super_admin_user),
    admin_auth: AdminAuth = Depends(get_admin_auth),
):
    result = admin_auth.create_admin_user(payload)
    if not result.success or result.user is None:
        raise_for_result(result.error_code, result.error)
    logger.info("Admin '%s' created by '%s'", result.user.username, current_admin.username)
    return AdminResponseSchema.model_validate(result.user)


@router.patch("/users/{user_id}/active", response_model=AdminResponseSchema, summary="Activate or deactivate an admin")
def set_admin_active(
    user_id: str,
    payload: SetActiveSchema,
    current_admin: AdminAccount = Depends(get_current_super_admin_user),
    admin_auth: AdminAuth = Depends(get_admin_auth),
):
    if user_id == current_admin.id and not payload.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot deactivate your own account")
    result = admin_auth.set_admin_active(user_id, payload.is_active)
    if not result.success or result.user is None:
        raise_for_result(result.error_code, result.error)
    return AdminResponseSchema.model_validate(result.user)


@router.post("/sessions/cleanup", summary="Delete expired sessions")
def cleanup_expired_sessions(
    current_admin: AdminAccount = Depends(get_current_super_admin_user),
    admin_auth: AdminAuth = Depends(get_admin_auth),
):
    result = admin_auth.cleanup_expired_sessions()
    if not result.success:
        raise_for_result(result.error_code, result.error)
    return {"success": True, "deleted": result.deleted}
