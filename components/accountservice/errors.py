from __future__ import annotations
from typing import Any, Dict, Optional
from .contracts import AccountErrorCodes


class AccountServiceError(Exception):
    type: str = "INTERNAL"
    code: str = "internal_error"
    message: str = "Internal server error"
    status_code: int = 500

    def __init__(self, message: Optional[str] = None, *, details: Optional[Dict[str, Any]] = None):
        if message:
            self.message = message
        self.details = details
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"message": self.message, "code": self.code}
        if self.details:
            payload["details"] = self.details
        return payload


class AuthenticationFailed(AccountServiceError):
    """Unknown email or wrong password. Both cases look identical to callers."""
    type = "AUTH_ERROR"
    code = AccountErrorCodes.INVALID_CREDENTIALS
    message = "Invalid credentials"
    status_code = 401


class TokenInvalid(AccountServiceError):
    type = "AUTH_ERROR"
    code = AccountErrorCodes.INVALID_TOKEN
    message = "Invalid or expired token"
    status_code = 401


class Unauthenticated(AccountServiceError):
    type = "AUTH_ERROR"
    code = AccountErrorCodes.UNAUTHENTICATED
    message = "Authentication required"
    status_code = 401


class DuplicateEmail(AccountServiceError):
    type = "CONFLICT"
    code = AccountErrorCodes.DUPLICATE_EMAIL
    message = "Email already registered"
    status_code = 400


class UserNotFound(AccountServiceError):
    type = "NOT_FOUND"
    code = AccountErrorCodes.NOT_FOUND
    message = "User not found"
    status_code = 404


class InvalidInput(AccountServiceError):
    type = "VALIDATION"
    code = AccountErrorCodes.VALIDATION
    message = "Validation error"
    status_code = 400


class ConfigError(AccountServiceError):
    """Startup misconfiguration. Raised while wiring, never per request."""
    type = "INTERNAL"
    code = AccountErrorCodes.CONFIG_ERROR
    message = "Invalid account service configuration"
