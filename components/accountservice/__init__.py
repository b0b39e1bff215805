from .service import (
    AccountService, CredentialVerifier, RegistrationService, build_account_service,
)
from .tokens import TokenService, SystemClock
from .transport import AuthSessionTransport, extract_token
from .crypto import HS256TokenSigner, BcryptPasswordHasher
from .repository import InMemoryUserRepo
from .config import AccountSettings
from .deps import set_account_service, get_account_service, require_session
from .routes import auth_router, users_router
from .app import create_app

__all__ = [
    "AccountService",
    "CredentialVerifier",
    "RegistrationService",
    "build_account_service",
    "TokenService",
    "SystemClock",
    "AuthSessionTransport",
    "extract_token",
    "HS256TokenSigner",
    "BcryptPasswordHasher",
    "InMemoryUserRepo",
    "AccountSettings",
    "set_account_service",
    "get_account_service",
    "require_session",
    "auth_router",
    "users_router",
    "create_app",
]
