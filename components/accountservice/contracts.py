from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol
from pydantic import BaseModel, ConfigDict, EmailStr, Field, constr, field_validator

PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_BYTES = 72  # bcrypt ignores/rejects anything past this


def _check_password(v: str) -> str:
    if len(v) < PASSWORD_MIN_LENGTH:
        raise ValueError(f"password must be at least {PASSWORD_MIN_LENGTH} characters")
    if len(v.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"password must be at most {PASSWORD_MAX_BYTES} bytes")
    return v


# ---------- Domain Models ----------
class User(BaseModel):
    """Stored user record. Never serialised to clients; see PublicUser."""
    id: str
    name: str
    email: str
    password_hash: str
    created_at: datetime

    def rename(self, name: str) -> "User":
        return self.model_copy(update={"name": name})

    def change_email(self, email: str) -> "User":
        return self.model_copy(update={"email": email})

    def change_password_hash(self, password_hash: str) -> "User":
        return self.model_copy(update={"password_hash": password_hash})

    def to_public(self) -> "PublicUser":
        return PublicUser(id=self.id, name=self.name, email=self.email, created_at=self.created_at)


class PublicUser(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    email: str
    created_at: datetime = Field(alias="createdAt")


class SessionClaims(BaseModel):
    sub: str
    name: str
    email: str
    iat: int
    exp: int
    iss: Optional[str] = None
    aud: Optional[str] = None
    jti: Optional[str] = None


# ---------- Ports (Contracts) ----------
class TokenSignerPort(Protocol):
    """
    Contract for compact JWS signing/verification.
    verify() must raise on any failure: signature, expiry, issuer, audience, format.
    """
    def sign(self, claims: Dict[str, Any]) -> str: ...
    def verify(self, token: str, *, required: Optional[List[str]] = None) -> Dict[str, Any]: ...


class PasswordHasherPort(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, encoded: str) -> bool: ...


class UserRepoPort(Protocol):
    """
    Contract for user storage. The store owns id/created_at assignment and
    email equality rules, and is the real guarantee of email uniqueness.
    """
    def find_by_email(self, email: str) -> Optional[User]: ...
    def find_by_id(self, user_id: str) -> Optional[User]: ...
    def list_all(self) -> List[User]: ...
    def add(self, user: User) -> User: ...
    def update(self, user: User) -> User: ...
    def exists_by_email(self, email: str) -> bool: ...


class ClockPort(Protocol):
    def now_utc_ts(self) -> int: ...


# ---------- Service I/O ----------
class LoginRequest(BaseModel):
    email: constr(strip_whitespace=True, min_length=1)
    password: constr(min_length=1)


class CreateUserRequest(BaseModel):
    name: constr(strip_whitespace=True, min_length=1, max_length=100)
    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        return _check_password(v)


class ChangePasswordRequest(BaseModel):
    current_password: constr(min_length=1)
    new_password: str

    @field_validator("new_password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        return _check_password(v)


class LoginResult(BaseModel):
    token: str
    user: PublicUser


class LoginResponse(BaseModel):
    user: PublicUser
    token: str
    message: str


class MessageResponse(BaseModel):
    message: str


# ---------- Errors ----------
class AccountErrorCodes:
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_TOKEN = "invalid_token"
    UNAUTHENTICATED = "unauthenticated"
    DUPLICATE_EMAIL = "duplicate_email"
    NOT_FOUND = "not_found"
    VALIDATION = "validation_error"
    CONFIG_ERROR = "config_error"
