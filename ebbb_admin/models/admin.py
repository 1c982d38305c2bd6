# ebbb_admin/models/admin.py
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime, timezone


class AdminRole(str, Enum):
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


class AdminAccount(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    username: str
    email: str
    password_hash: str  # Hash bcrypt, nunca a senha em texto plano
    full_name: str = ""
    role: AdminRole = AdminRole.ADMIN
    is_active: bool = True
    last_login: Optional[datetime] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_super_admin(self) -> bool:
        return self.role == AdminRole.SUPER_ADMIN


class AdminSession(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: str
    session_token: str
    expires_at: datetime
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at
