import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

import pytest
from starlette.responses import Response

from components.accountservice.contracts import CreateUserRequest, LoginRequest
from components.accountservice.errors import TokenInvalid, Unauthenticated
from components.accountservice.transport import extract_token


@pytest.mark.parametrize(
    "authorization, cookie, expected",
    [
        ("Bearer hdr", "ck", "hdr"),
        ("bearer hdr", None, "hdr"),
        ("BEARER   hdr  ", None, "hdr"),
        (None, "ck", "ck"),
        ("", "ck", "ck"),
        ("Bearer ", "ck", "ck"),
        ("Basic dXNlcjpwdw==", "ck", "ck"),
        ("Basic dXNlcjpwdw==", None, None),
        (None, "", None),
        (None, None, None),
    ],
)
def test_extract_token_prefers_header_then_cookie(authorization, cookie, expected):
    assert extract_token(authorization, cookie) == expected


def _expires(set_cookie: str) -> datetime:
    match = re.search(r"expires=([^;]+)", set_cookie, re.IGNORECASE)
    assert match, set_cookie
    return parsedate_to_datetime(match.group(1))


def _login(svc) -> str:
    svc.register(CreateUserRequest(name="Ana", email="ana@x.com", password="secret123"))
    return svc.login(LoginRequest(email="ana@x.com", password="secret123")).token


def test_authenticate_via_header_or_cookie(account_service):
    token = _login(account_service)
    transport = account_service.transport

    assert transport.authenticate(f"Bearer {token}", None).email == "ana@x.com"
    assert transport.authenticate(None, token).email == "ana@x.com"


def test_authenticate_without_token_is_unauthenticated(account_service):
    with pytest.raises(Unauthenticated):
        account_service.transport.authenticate(None, None)


def test_bad_header_token_does_not_fall_back_to_cookie(account_service):
    token = _login(account_service)
    with pytest.raises(TokenInvalid):
        account_service.transport.authenticate("Bearer garbage", token)


def test_attach_sets_http_only_cookie(account_service):
    response = Response()
    account_service.transport.attach(response, "tok-123")

    header = response.headers["set-cookie"]
    assert header.startswith("auth-token=tok-123")
    lowered = header.lower()
    assert "httponly" in lowered
    assert "path=/" in lowered
    assert "samesite=lax" in lowered
    assert _expires(header) > datetime.now(timezone.utc)
    assert "secure" not in lowered


def test_clear_overwrites_cookie_with_expired_empty_value(account_service):
    response = Response()
    account_service.transport.clear(response)

    header = response.headers["set-cookie"]
    assert re.match(r'auth-token=(""|);', header)
    assert "httponly" in header.lower()
    assert _expires(header) < datetime.now(timezone.utc)
