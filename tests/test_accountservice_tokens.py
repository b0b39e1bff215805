import time
from datetime import datetime, timezone

import pytest

from components.accountservice.contracts import User
from components.accountservice.crypto import HS256TokenSigner
from components.accountservice.errors import TokenInvalid
from components.accountservice.tokens import DEFAULT_TTL_SECONDS, TokenService

SECRET = "unit-secret-0123456789abcdef-0123456789"


class FixedClock:
    def __init__(self, ts: int):
        self.ts = ts

    def now_utc_ts(self) -> int:
        return self.ts


def make_user() -> User:
    return User(
        id="u-42",
        name="Ana",
        email="ana@x.com",
        password_hash="$2b$04$irrelevant",
        created_at=datetime.now(timezone.utc),
    )


def make_signer() -> HS256TokenSigner:
    return HS256TokenSigner(SECRET, issuer="user-management-api", audience="user-management-client")


def test_issue_then_validate_returns_user_claims():
    svc = TokenService(signer=make_signer())
    token = svc.issue(make_user())

    claims = svc.validate(token)
    assert claims.sub == "u-42"
    assert claims.name == "Ana"
    assert claims.email == "ana@x.com"
    assert claims.exp - claims.iat == DEFAULT_TTL_SECONDS
    assert claims.iss == "user-management-api"
    assert claims.aud == "user-management-client"
    assert claims.jti


def test_token_is_invalid_after_validity_window():
    issued_long_ago = int(time.time()) - DEFAULT_TTL_SECONDS - 60
    svc = TokenService(signer=make_signer(), clock=FixedClock(issued_long_ago))
    token = svc.issue(make_user())

    with pytest.raises(TokenInvalid):
        svc.validate(token)


def test_short_ttl_expires():
    svc = TokenService(signer=make_signer(), ttl_seconds=10, clock=FixedClock(int(time.time()) - 11))
    with pytest.raises(TokenInvalid):
        svc.validate(svc.issue(make_user()))


@pytest.mark.parametrize(
    "foreign_signer",
    [
        lambda: HS256TokenSigner("other-secret-0123456789abcdef-012345", issuer="user-management-api", audience="user-management-client"),
        lambda: HS256TokenSigner(SECRET, issuer="someone-else", audience="user-management-client"),
        lambda: HS256TokenSigner(SECRET, issuer="user-management-api", audience="another-client"),
    ],
    ids=["bad-signature", "wrong-issuer", "wrong-audience"],
)
def test_foreign_tokens_collapse_to_token_invalid(foreign_signer):
    token = TokenService(signer=foreign_signer()).issue(make_user())
    with pytest.raises(TokenInvalid):
        TokenService(signer=make_signer()).validate(token)


@pytest.mark.parametrize("garbage", ["", "abc", "a.b.c", "Bearer x.y.z"])
def test_malformed_tokens_are_invalid(garbage):
    with pytest.raises(TokenInvalid):
        TokenService(signer=make_signer()).validate(garbage)


def test_token_missing_identity_claims_is_invalid():
    signer = make_signer()
    now = int(time.time())
    token = signer.sign({"sub": "u-42", "iat": now, "exp": now + 60})  # no name/email
    with pytest.raises(TokenInvalid):
        TokenService(signer=signer).validate(token)


def test_tampered_payload_is_invalid():
    svc = TokenService(signer=make_signer())
    header, payload, sig = svc.issue(make_user()).split(".")
    tampered = ".".join([header, payload[:-2] + ("AA" if payload[-2:] != "AA" else "BB"), sig])
    with pytest.raises(TokenInvalid):
        svc.validate(tampered)
