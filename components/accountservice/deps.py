from typing import Optional

from fastapi import Depends, Header, Request

from .contracts import SessionClaims
from .service import AccountService

_service: Optional[AccountService] = None


def set_account_service(svc: AccountService) -> None:
    global _service
    _service = svc


def get_account_service() -> AccountService:
    if _service is None:
        raise RuntimeError("AccountService not configured; call set_account_service() at startup")
    return _service


def get_authorization_header(authorization: Optional[str] = Header(default=None, alias="Authorization")) -> Optional[str]:
    return authorization


def require_session(
    request: Request,
    svc: AccountService = Depends(get_account_service),
    authorization: Optional[str] = Depends(get_authorization_header),
) -> SessionClaims:
    """
    Resolve the caller's session from the bearer header, falling back to the
    auth cookie. Raises Unauthenticated / TokenInvalid (both 401).
    """
    cookie = request.cookies.get(svc.transport.cookie_name)
    return svc.authenticate(authorization, cookie)
