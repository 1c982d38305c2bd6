# ebbb_admin/core/logging_middleware.py
import time
import uuid
from typing import Awaitable, Callable, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from ebbb_admin.core.config import settings
from ebbb_admin.core.logging_config import get_logger

CALL_NEXT_TYPE = Callable[[Request], Awaitable[Response]]

logger = get_logger("api")

SENSITIVE_HEADERS = [
    "authorization", "cookie", "set-cookie", "x-csrf-token", "x-api-key",
    settings.SESSION_HEADER_NAME.lower(),
]


def sanitize_headers(headers: Dict[str, str]) -> Dict[str, str]:
    return {
        name: "[REDACTED]" if name.lower() in SENSITIVE_HEADERS else value
        for name, value in headers.items()
    }


class ApiLoggingMiddleware(BaseHTTPMiddleware):
    """
    Registra cada requisição (início, fim e falhas) com um request id,
    sem expor cabeçalhos sensíveis.
    """

    def __init__(self, app: ASGIApp, enabled: bool = settings.API_LOGGING_ENABLED):
        super().__init__(app)
        self.enabled = enabled

    async def dispatch(self, request: Request, call_next: CALL_NEXT_TYPE) -> Response:
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        client_ip: Optional[str] = request.client.host if request.client else None
        extra = {
            "request_id": request_id,
            "client_ip": client_ip,
            "method": request.method,
            "path": request.url.path,
        }
        if self.enabled:
            logger.debug("Request started %s %s headers=%s", request.method, request.url.path,
                         sanitize_headers(dict(request.headers)), extra=extra)

        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed %s %s", request.method, request.url.path,
                extra={**extra, "status_code": 500, "response_time": time.time() - start_time, "error": str(e)},
                exc_info=True,
            )
            raise

        response_time = time.time() - start_time
        if self.enabled:
            logger.info(
                "%s %s -> %d (%.1f ms)", request.method, request.url.path, response.status_code, response_time * 1000,
                extra={
                    **extra,
                    "status_code": response.status_code,
                    "response_time": response_time,
                    "admin_id": getattr(request.state, "admin_id", None),
                },
            )
        response.headers["X-Request-ID"] = request_id
        return response
