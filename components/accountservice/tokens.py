from __future__ import annotations
import logging
import time
import uuid
from typing import Optional
import jwt
from pydantic import ValidationError
from .contracts import ClockPort, SessionClaims, TokenSignerPort, User
from .errors import TokenInvalid

log = logging.getLogger("accountservice.tokens")

DEFAULT_TTL_SECONDS = 24 * 60 * 60
REQUIRED_CLAIMS = ["sub", "name", "email", "iat", "exp", "iss", "aud"]


class SystemClock(ClockPort):
    def now_utc_ts(self) -> int:
        return int(time.time())


class TokenService:
    """Issues and validates self-contained session tokens. Never touches storage."""

    def __init__(self, *, signer: TokenSignerPort, ttl_seconds: int = DEFAULT_TTL_SECONDS, clock: Optional[ClockPort] = None):
        self.signer = signer
        self.ttl_seconds = ttl_seconds
        self.clock = clock or SystemClock()

    def issue(self, user: User) -> str:
        now = self.clock.now_utc_ts()
        claims = SessionClaims(
            sub=user.id,
            name=user.name,
            email=user.email,
            iat=now,
            exp=now + self.ttl_seconds,
            jti=str(uuid.uuid4()),
        ).model_dump(exclude_none=True)
        return self.signer.sign(claims)

    def validate(self, token: str) -> SessionClaims:
        """Return the token's claims or raise TokenInvalid. All failures look the same."""
        if not token:
            raise TokenInvalid()
        try:
            payload = self.signer.verify(token, required=REQUIRED_CLAIMS)
            return SessionClaims(**payload)
        except (jwt.PyJWTError, ValidationError, ValueError, TypeError) as ex:
            log.info("token.invalid", extra={"reason": type(ex).__name__})
            raise TokenInvalid() from None
