"""
security helpers:
- Argon2 password hashing via argon2-cffi
- Signed, expiring tokens via PyJWT (AuthToken / AuthTokenProvider)
- JTI generation for token identifiers

Parsing a token only checks its signature and structure. Expiry is checked
separately by AuthToken.is_valid() so callers can still read the subject of an
expired access token (the refresh endpoint relies on this).
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import VerificationError, InvalidHashError

from utils.exceptions import MalformedTokenError

ph = PasswordHasher()

ACCESS = "access"
REFRESH = "refresh"


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    """ Verify a plaintext password using argon2.
    OAuth-only accounts have no hash and never verify.
    """
    if not password_hash:
        return False
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class AuthToken:
    """A signed token and the claims it carries."""

    token: str
    claims: Dict[str, Any] = field(default_factory=dict)

    @property
    def subject(self) -> str:
        return self.claims["sub"]

    @property
    def token_type(self) -> str:
        return self.claims.get("type", "")

    @property
    def expiry(self) -> datetime:
        return datetime.fromtimestamp(self.claims["exp"], tz=timezone.utc)

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        """True strictly before expiry; the expiry instant itself is invalid."""
        now = now or utcnow()
        return now < self.expiry


class AuthTokenProvider:
    """
    Issues and parses tokens signed with a single server secret.

    `clock` is read once per flow by the callers (provider.now()) so the access
    and refresh halves of a pair share the same issue instant.
    """

    def __init__(self, secret: str, algorithm: str = "HS256",
                 clock: Callable[[], datetime] = utcnow):
        if not secret:
            raise RuntimeError("JWT_SECRET is not configured")
        self.secret = secret
        self.algorithm = algorithm
        self.clock = clock

    @classmethod
    def from_config(cls, config) -> "AuthTokenProvider":
        return cls(config.get("JWT_SECRET"), config.get("JWT_ALGORITHM", "HS256"))

    def now(self) -> datetime:
        return self.clock()

    def _encode(self, payload: Dict[str, Any], expiry: datetime) -> AuthToken:
        payload = dict(payload)
        payload["iat"] = int(self.now().timestamp())
        payload["exp"] = int(expiry.timestamp())
        payload["jti"] = generate_jti()
        raw = jwt.encode(payload, self.secret, algorithm=self.algorithm)
        return AuthToken(token=raw, claims=payload)

    def create_auth_token(self, subject, nickname: str, role: str, expiry: datetime) -> AuthToken:
        """Access token bound to an account id."""
        return self._encode(
            {"sub": str(subject), "nickname": nickname, "role": role, "type": ACCESS},
            expiry,
        )

    def create_refresh_token(self, secret_subject: str, expiry: datetime) -> AuthToken:
        """
        Refresh token with no user claims. It only proves this server minted it;
        the link to an account is the copy stored on the account row.
        """
        return self._encode({"sub": secret_subject, "type": REFRESH}, expiry)

    def convert_auth_token(self, raw: Optional[str], expected_type: str | None = None) -> AuthToken:
        """
        Verify signature and structure. Raises MalformedTokenError on any
        tampering, bad encoding or wrong token type. Expiry is NOT checked here.
        """
        if not raw:
            raise MalformedTokenError("Token is missing")
        try:
            claims = jwt.decode(
                raw,
                self.secret,
                algorithms=[self.algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "require": ["sub", "exp"],
                },
            )
        except jwt.InvalidTokenError as exc:
            raise MalformedTokenError(f"Invalid token: {exc}")

        if expected_type and claims.get("type") != expected_type:
            raise MalformedTokenError("Wrong token type")
        return AuthToken(token=raw, claims=claims)
