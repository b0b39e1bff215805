from __future__ import annotations
from typing import Any, Dict, List, Optional
import bcrypt
import jwt
from .config import MIN_SECRET_LENGTH
from .contracts import PasswordHasherPort, TokenSignerPort
from .errors import ConfigError


class HS256TokenSigner(TokenSignerPort):
    """
    HS256 JWS signer backed by PyJWT.
    Issuer and audience are pinned at construction and enforced on every verify.
    """
    algorithm = "HS256"

    def __init__(self, secret: str, *, issuer: str, audience: str, leeway_seconds: int = 0):
        if not secret or len(secret) < MIN_SECRET_LENGTH:
            raise ConfigError(f"HS256TokenSigner requires a secret of at least {MIN_SECRET_LENGTH} characters")
        if not issuer or not audience:
            raise ConfigError("HS256TokenSigner requires issuer and audience")
        self._secret = secret
        self._issuer = issuer
        self._audience = audience
        self._leeway = leeway_seconds

    @property
    def issuer(self) -> str:
        return self._issuer

    @property
    def audience(self) -> str:
        return self._audience

    def sign(self, claims: Dict[str, Any]) -> str:
        payload = dict(claims)
        payload.setdefault("iss", self._issuer)
        payload.setdefault("aud", self._audience)
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str, *, required: Optional[List[str]] = None) -> Dict[str, Any]:
        # Raises jwt.PyJWTError subclasses on any failure
        return jwt.decode(
            token,
            self._secret,
            algorithms=[self.algorithm],
            issuer=self._issuer,
            audience=self._audience,
            leeway=self._leeway,
            options={"require": required or ["exp", "iat", "iss", "aud", "sub"]},
        )


class BcryptPasswordHasher(PasswordHasherPort):
    """
    bcrypt with a fresh salt per hash. Cost factor and salt live inside the
    encoded string, so verify() needs nothing but the stored value.
    """
    def __init__(self, rounds: int = 12):
        if not 4 <= rounds <= 31:
            raise ConfigError("bcrypt rounds must be between 4 and 31")
        self.rounds = rounds

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=self.rounds)).decode("ascii")

    def verify(self, password: str, encoded: str) -> bool:
        if not encoded:
            return False
        try:
            return bcrypt.checkpw(password.encode("utf-8"), encoded.encode("utf-8"))
        except (ValueError, TypeError):
            return False
