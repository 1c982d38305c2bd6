from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import Optional
import time

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from ebbb_admin.core.config import settings
from ebbb_admin.core.logging_config import get_logger, setup_logging
from ebbb_admin.core.logging_middleware import ApiLoggingMiddleware
from ebbb_admin.core.security_headers import SecurityHeadersMiddleware
from ebbb_admin.routers import admin_auth_router
from ebbb_admin.services import AdminAuth, build_admin_auth
from ebbb_admin.utils.rate_limiter import limiter

logger = get_logger(__name__)


def create_app(admin_auth: Optional[AdminAuth] = None) -> FastAPI:
    setup_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Application '%s' starting...", settings.APP_NAME)
        if app.state.admin_auth is None:
            app.state.admin_auth = build_admin_auth()
        if not app.state.admin_auth.store.is_configured:
            logger.error("Supabase is not configured; admin authentication will report configuration errors")
        else:
            # Limpeza oportunista na subida
            app.state.admin_auth.cleanup_expired_sessions()
        yield
        logger.info("Application '%s' shutting down...", settings.APP_NAME)

    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        lifespan=lifespan,
        docs_url=None if settings.ENVIRONMENT == "production" else "/docs",
        redoc_url=None,
    )
    app.state.admin_auth = admin_auth

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.CORS_ORIGINS != "*",
        allow_methods=["GET", "POST", "PATCH"],
        allow_headers=["Authorization", "Content-Type", settings.SESSION_HEADER_NAME],
    )
    app.add_middleware(ApiLoggingMiddleware)

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.include_router(admin_auth_router, prefix=settings.API_V1_STR)

    @app.get("/health", tags=["Health"], status_code=status.HTTP_200_OK)
    def health_check(request: Request):
        current: Optional[AdminAuth] = request.app.state.admin_auth
        database = "ok" if current is not None and current.store.is_configured else "not configured"
        return {
            "status": "healthy" if database == "ok" else "degraded",
            "services": {"api": "ok", "database": database},
            "timestamp": time.time(),
        }

    return app


app = create_app()
