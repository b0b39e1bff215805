from __future__ import annotations
import logging
from datetime import datetime, timezone
from typing import List, Optional
from .config import AccountSettings
from .contracts import (
    PasswordHasherPort, UserRepoPort, ClockPort, TokenSignerPort,
    LoginRequest, CreateUserRequest, ChangePasswordRequest, LoginResult,
    PublicUser, SessionClaims, User,
)
from .crypto import BcryptPasswordHasher, HS256TokenSigner
from .errors import AuthenticationFailed, DuplicateEmail, UserNotFound
from .repository import InMemoryUserRepo
from .tokens import TokenService
from .transport import AuthSessionTransport

log = logging.getLogger("accountservice.service")


class CredentialVerifier:
    """Login flow: lookup, hash check, token. Read-only."""

    def __init__(self, *, user_repo: UserRepoPort, hasher: PasswordHasherPort, tokens: TokenService):
        self.user_repo = user_repo
        self.hasher = hasher
        self.tokens = tokens

    def login(self, req: LoginRequest) -> LoginResult:
        user = self.user_repo.find_by_email(req.email)
        # Unknown email and wrong password must be indistinguishable
        if user is None or not self.hasher.verify(req.password, user.password_hash):
            log.info("auth.login.failed")
            raise AuthenticationFailed()
        token = self.tokens.issue(user)
        log.info("auth.login.ok", extra={"user_id": user.id})
        return LoginResult(token=token, user=user.to_public())


class RegistrationService:
    """Create-user flow. The duplicate check runs before hashing."""

    def __init__(self, *, user_repo: UserRepoPort, hasher: PasswordHasherPort):
        self.user_repo = user_repo
        self.hasher = hasher

    def register(self, req: CreateUserRequest) -> PublicUser:
        if self.user_repo.exists_by_email(req.email):
            log.info("users.register.duplicate")
            raise DuplicateEmail()

        password_hash = self.hasher.hash(req.password)
        # id and created_at are placeholders; the store assigns the real ones
        draft = User(
            id="",
            name=req.name,
            email=req.email,
            password_hash=password_hash,
            created_at=datetime.now(timezone.utc),
        )
        persisted = self.user_repo.add(draft)
        log.info("users.register.ok", extra={"user_id": persisted.id})
        return persisted.to_public()


class AccountService:
    def __init__(
        self,
        *,
        user_repo: UserRepoPort,
        hasher: PasswordHasherPort,
        signer: TokenSignerPort,
        cfg: Optional[AccountSettings] = None,
        clock: Optional[ClockPort] = None,
    ):
        self.cfg = cfg or AccountSettings()
        self.user_repo = user_repo
        self.hasher = hasher
        self.tokens = TokenService(signer=signer, ttl_seconds=self.cfg.ACCESS_TTL_SECONDS, clock=clock)
        self.verifier = CredentialVerifier(user_repo=user_repo, hasher=hasher, tokens=self.tokens)
        self.registration = RegistrationService(user_repo=user_repo, hasher=hasher)
        self.transport = AuthSessionTransport(tokens=self.tokens, cfg=self.cfg)

    # --------- Core operations ----------
    def login(self, req: LoginRequest) -> LoginResult:
        return self.verifier.login(req)

    def register(self, req: CreateUserRequest) -> PublicUser:
        return self.registration.register(req)

    def list_users(self) -> List[PublicUser]:
        return [u.to_public() for u in self.user_repo.list_all()]

    def get_user(self, user_id: str) -> PublicUser:
        user = self.user_repo.find_by_id(user_id)
        if user is None:
            raise UserNotFound()
        return user.to_public()

    def change_password(self, user_id: str, req: ChangePasswordRequest) -> None:
        user = self.user_repo.find_by_id(user_id)
        if user is None:
            raise UserNotFound()
        if not self.hasher.verify(req.current_password, user.password_hash):
            raise AuthenticationFailed()
        self.user_repo.update(user.change_password_hash(self.hasher.hash(req.new_password)))
        # Outstanding tokens are not revoked; they expire on their own
        log.info("users.password.changed", extra={"user_id": user_id})

    def authenticate(self, authorization: Optional[str], cookie: Optional[str]) -> SessionClaims:
        return self.transport.authenticate(authorization, cookie)


def build_account_service(cfg: Optional[AccountSettings] = None, *, user_repo: Optional[UserRepoPort] = None) -> AccountService:
    """Default wiring: in-memory store, bcrypt, HS256. Raises ConfigError on bad settings."""
    cfg = cfg or AccountSettings()
    signer = HS256TokenSigner(cfg.AUTH_SECRET, issuer=cfg.AUTH_ISSUER, audience=cfg.AUTH_AUDIENCE)
    return AccountService(
        user_repo=user_repo or InMemoryUserRepo(),
        hasher=BcryptPasswordHasher(rounds=cfg.BCRYPT_ROUNDS),
        signer=signer,
        cfg=cfg,
    )
