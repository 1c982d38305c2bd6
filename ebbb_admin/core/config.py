from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Configurações básicas da aplicação
    APP_NAME: str = "EBBB Admin API"
    APP_DESCRIPTION: str = "Back-office authentication for the EBBB restaurant site"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    API_V1_STR: str = "/api/v1"

    # Supabase
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""
    ADMIN_USERS_TABLE: str = "admin_users"
    ADMIN_SESSIONS_TABLE: str = "admin_sessions"

    # Sessões de administrador
    SESSION_DURATION_HOURS: int = 24
    SESSION_STORAGE_KEY: str = "ebbb_admin_session"
    SESSION_STORAGE_PATH: Optional[str] = None  # JSON file used by the CLI token holder
    SESSION_HEADER_NAME: str = "X-Admin-Session"
    REVOKE_SESSIONS_ON_PASSWORD_CHANGE: bool = True
    REVOKE_SESSIONS_ON_DEACTIVATION: bool = True

    # Hash de senhas
    PASSWORD_BCRYPT_ROUNDS: int = 12
    PASSWORD_MIN_LENGTH: int = 8
    PASSWORD_MAX_LENGTH: int = 128

    # CORS
    CORS_ORIGINS: str = "*"

    # Rate Limiting
    RATE_LIMIT_DEFAULT: str = "60/minute"
    RATE_LIMIT_LOGIN: str = "5/minute"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "ebbb_admin.log"
    LOG_MAX_SIZE: int = 10 * 1024 * 1024  # 10 MB
    LOG_BACKUP_COUNT: int = 5
    LOG_FORMAT: str = "text"  # "text" ou "json"
    LOG_TO_FILE: bool = False
    API_LOGGING_ENABLED: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def supabase_configured(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_KEY)

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Cria a instância de configurações
settings = Settings()

# Configurações para diferentes ambientes
if settings.ENVIRONMENT == "production":
    settings.DEBUG = False
    settings.CORS_ORIGINS = "https://ebbb.restaurant"
elif settings.ENVIRONMENT == "development":
    settings.DEBUG = True
