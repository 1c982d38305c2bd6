# ebbb_admin/auth/session_manager.py
import json
import os
import threading
from pathlib import Path
from typing import Dict, Optional, Protocol

from ebbb_admin.core.config import settings
from ebbb_admin.core.logging_config import get_logger
from ebbb_admin.models.admin import AdminAccount
from ebbb_admin.services.admin_auth import AdminAuth

logger = get_logger(__name__)


class TokenStorage(Protocol):
    """Key/value storage persisting the session token between runs."""

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryTokenStorage:
    """Per-instance storage; lost when the object is discarded."""

    def __init__(self):
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class FileTokenStorage:
    """
    Armazena os valores em um arquivo JSON (equivalente ao localStorage
    de um perfil do navegador). Arquivo ausente ou corrompido é lido como vazio.
    """

    def __init__(self, path: os.PathLike):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, str]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable token storage %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f)
        os.chmod(tmp_path, 0o600)
        os.replace(tmp_path, self.path)

    def get_item(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def remove_item(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if key in data:
                del data[key]
                self._write(data)


def default_token_storage() -> Optional[TokenStorage]:
    if settings.SESSION_STORAGE_PATH:
        return FileTokenStorage(settings.SESSION_STORAGE_PATH)
    return None


class SessionManager:
    """
    Guarda o token da sessão atual e consulta o AdminAuth.

    Nada é renovado ou apagado automaticamente: depois da expiração,
    is_authenticated() devolve False e o token continua guardado até
    clear_session().
    """

    def __init__(
        self,
        auth: AdminAuth,
        storage: Optional[TokenStorage] = None,
        storage_key: str = settings.SESSION_STORAGE_KEY,
    ):
        self.auth = auth
        self.storage = storage
        self.storage_key = storage_key

    def set_session(self, session_token: str) -> None:
        if self.storage is None:
            return
        try:
            self.storage.set_item(self.storage_key, session_token)
        except OSError as e:
            logger.warning("Could not persist session token: %s", e)

    def get_session(self) -> Optional[str]:
        if self.storage is None:
            return None
        try:
            return self.storage.get_item(self.storage_key)
        except (OSError, ValueError) as e:
            logger.warning("Could not read session token: %s", e)
            return None

    def clear_session(self) -> None:
        if self.storage is None:
            return
        try:
            self.storage.remove_item(self.storage_key)
        except OSError as e:
            logger.warning("Could not clear session token: %s", e)

    def is_authenticated(self) -> bool:
        session_token = self.get_session()
        if not session_token:
            return False
        return self.auth.verify_session(session_token).valid

    def get_current_user(self) -> Optional[AdminAccount]:
        session_token = self.get_session()
        if not session_token:
            return None
        verification = self.auth.verify_session(session_token)
        return verification.user if verification.valid else None
