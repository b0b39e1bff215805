from __future__ import annotations
from typing import List, Literal
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MIN_SECRET_LENGTH = 32


class AccountSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    APP_NAME: str = Field(default="user-management-api")
    APP_VERSION: str = Field(default="0.1.0")
    LOG_LEVEL: str = Field(default="INFO")

    # Token signing
    AUTH_SECRET: str = Field(default="change-me-dev-secret-0123456789abcdef")
    AUTH_ISSUER: str = Field(default="user-management-api")
    AUTH_AUDIENCE: str = Field(default="user-management-client")
    ACCESS_TTL_SECONDS: int = Field(default=86400, gt=0)  # 24 hours

    # Cookie transport
    AUTH_COOKIE_NAME: str = Field(default="auth-token")
    AUTH_COOKIE_PATH: str = Field(default="/")
    AUTH_COOKIE_SECURE: bool = False
    AUTH_COOKIE_SAMESITE: Literal["lax", "strict", "none"] = "lax"

    # Hashing
    BCRYPT_ROUNDS: int = Field(default=12, ge=4, le=31)

    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["http://localhost:4200"])

    @field_validator("AUTH_SECRET")
    @classmethod
    def secret_long_enough(cls, v: str) -> str:
        if len(v) < MIN_SECRET_LENGTH:
            raise ValueError(f"AUTH_SECRET must be at least {MIN_SECRET_LENGTH} characters")
        return v
