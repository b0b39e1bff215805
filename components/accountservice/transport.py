from __future__ import annotations
from datetime import datetime, timedelta, timezone
from typing import Optional
from starlette.responses import Response
from .config import AccountSettings
from .contracts import SessionClaims
from .errors import Unauthenticated
from .tokens import TokenService

BEARER_PREFIX = "bearer "


def extract_token(authorization: Optional[str], cookie: Optional[str]) -> Optional[str]:
    """
    Pick the request's session token. `Authorization: Bearer <token>` wins;
    otherwise the cookie value. Other schemes and empty values count as absent.
    """
    if authorization and authorization[:len(BEARER_PREFIX)].lower() == BEARER_PREFIX:
        token = authorization[len(BEARER_PREFIX):].strip()
        if token:
            return token
    if cookie and cookie.strip():
        return cookie.strip()
    return None


class AuthSessionTransport:
    """Carries the session token over the wire: response body + cookie out, header/cookie in."""

    def __init__(self, *, tokens: TokenService, cfg: AccountSettings):
        self.tokens = tokens
        self.cfg = cfg

    @property
    def cookie_name(self) -> str:
        return self.cfg.AUTH_COOKIE_NAME

    def authenticate(self, authorization: Optional[str], cookie: Optional[str]) -> SessionClaims:
        token = extract_token(authorization, cookie)
        if token is None:
            raise Unauthenticated()
        return self.tokens.validate(token)

    def attach(self, response: Response, token: str) -> None:
        now = datetime.fromtimestamp(self.tokens.clock.now_utc_ts(), tz=timezone.utc)
        self._set_cookie(response, token, now + timedelta(seconds=self.tokens.ttl_seconds))

    def clear(self, response: Response) -> None:
        # Browser drops it; bearer copies stay valid until exp
        self._set_cookie(response, "", datetime.now(timezone.utc) - timedelta(days=1))

    def _set_cookie(self, response: Response, value: str, expires: datetime) -> None:
        response.set_cookie(
            key=self.cfg.AUTH_COOKIE_NAME,
            value=value,
            expires=expires,
            path=self.cfg.AUTH_COOKIE_PATH,
            secure=self.cfg.AUTH_COOKIE_SECURE,
            httponly=True,
            samesite=self.cfg.AUTH_COOKIE_SAMESITE,
        )
