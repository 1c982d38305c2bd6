# ebbb_admin/core/logging_config.py
import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Optional

from ebbb_admin.core.config import settings

LOG_FORMAT_TEXT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
ROOT_LOGGER_NAME = "ebbb_admin"

_configured = False


class JsonFormatter(logging.Formatter):
    def format(self, record):
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
            "client_ip": getattr(record, "client_ip", None),
            "method": getattr(record, "method", None),
            "path": getattr(record, "path", None),
            "status_code": getattr(record, "status_code", None),
            "response_time": getattr(record, "response_time", None),
            "error": getattr(record, "error", None),
        }
        if record.exc_info:
            log_data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


def _build_formatter() -> logging.Formatter:
    if settings.LOG_FORMAT == "json":
        return JsonFormatter()
    return logging.Formatter(LOG_FORMAT_TEXT)


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Configura o logger raiz do pacote: console sempre, arquivo rotativo
    apenas quando LOG_TO_FILE estiver ativo.
    """
    global _configured
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO))
    if _configured:
        return logger

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(_build_formatter())
    logger.addHandler(console_handler)

    if settings.LOG_TO_FILE:
        log_dir = "logs"
        try:
            os.makedirs(log_dir, exist_ok=True)
            file_handler = RotatingFileHandler(
                os.path.join(log_dir, settings.LOG_FILE),
                maxBytes=settings.LOG_MAX_SIZE,
                backupCount=settings.LOG_BACKUP_COUNT,
            )
            file_handler.setFormatter(_build_formatter())
            logger.addHandler(file_handler)
        except OSError as e:
            logger.warning("Could not configure file logging: %s", e)

    _configured = True
    return logger


def get_logger(name: str) -> logging.Logger:
    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def mask_token(token: Optional[str]) -> str:
    """Shortens a session token for log lines."""
    if not token:
        return "<none>"
    return f"{token[:8]}..."
