"""
Security utilities - password hashing and JWT token issuing/verification.
These are the core security primitives used by the authentication flows.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt  # python-jose
from passlib.context import CryptContext  # Password hashing library

from starter_api.core.exceptions import (
    ConfigurationError,
    ExpiredTokenError,
    InvalidTokenError,
    MalformedTokenError,
    ValidationError,
)
from starter_api.core.validation import PASSWORD_MAX_BYTES, check_password

logger = logging.getLogger("starter.security")

# Secrets that ship in sample configs and must never sign a real token
PLACEHOLDER_SECRETS = frozenset({
    "change-me-in-production",
    "default-secret-key",
    "secret",
    "changeme",
})


# ---------------------------------------------------------------------------
# PASSWORD HASHING
# ---------------------------------------------------------------------------


class PasswordHasher:
    """
    bcrypt password hashing through passlib's CryptContext.

    - The salt is generated per call and embedded in the digest, so hashing
      the same password twice yields two different digests.
    - deprecated="auto" lets old digests keep verifying if schemes change.
    """

    def __init__(self, rounds: int = 10):
        self.rounds = rounds
        self._dummy_digest: Optional[str] = None
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        """
        Hash a plaintext password.

        Raises:
            ValidationError: Too short, over 72 bytes, or contains NUL
        """
        try:
            check_password(password)
        except ValueError as exc:
            raise ValidationError(str(exc))
        return self._context.hash(password)

    def verify(self, password: str, hashed_password: Optional[str]) -> bool:
        """
        Check a plaintext password against a stored digest.

        Never raises: empty input, a missing digest or a digest passlib
        cannot identify all count as a mismatch.
        """
        if not password or not hashed_password:
            return False
        if not _bcrypt_accepts(password):
            return False
        try:
            return self._context.verify(password, hashed_password)
        except (ValueError, TypeError):
            logger.warning("Stored password digest could not be parsed")
            return False

    def verify_dummy(self, password: str) -> bool:
        """
        Spend the same bcrypt work as verify() when there is no digest to
        check, so a missing account cannot be told apart by response time.
        Always returns False.
        """
        if self._dummy_digest is None:
            self._dummy_digest = self._context.hash("dummy-password-for-timing")
        candidate = password if password and _bcrypt_accepts(password) else "not-a-password"
        self._context.verify(candidate, self._dummy_digest)
        return False


def _bcrypt_accepts(password: str) -> bool:
    # bcrypt rejects NUL and would compare only the first 72 bytes
    return "\x00" not in password and len(password.encode("utf-8")) <= PASSWORD_MAX_BYTES


# ---------------------------------------------------------------------------
# JWT TOKENS
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TokenClaims:
    """Identity claims carried inside an access token."""

    subject: str  # "sub": the user's id
    username: str
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


class TokenIssuer:
    """
    Signs and verifies access tokens.

    JWT structure: {"sub": user id, "username": ..., "iat": ..., "exp": ...}
    signed with HMAC (HS256 by default). The payload is only base64 encoded,
    never put anything secret in it.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expire_minutes: int = 60 * 24,
    ):
        if not secret_key or not secret_key.strip():
            raise ConfigurationError("SECRET_KEY must be set to sign access tokens")
        if secret_key.strip().lower() in PLACEHOLDER_SECRETS:
            raise ConfigurationError(
                "SECRET_KEY is set to a well-known placeholder value; generate a real secret"
            )
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue(self, claims: TokenClaims, expires_delta: Optional[timedelta] = None) -> str:
        """
        Create a signed access token for the given claims.

        Args:
            claims: Subject and username to embed
            expires_delta: Custom lifetime; defaults to expire_minutes
        """
        now = datetime.now(timezone.utc)
        expire = now + (
            expires_delta if expires_delta is not None else timedelta(minutes=self.expire_minutes)
        )
        to_encode = {
            "sub": claims.subject,
            "username": claims.username,
            "iat": now,
            "exp": expire,
        }
        return jwt.encode(to_encode, self._secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Decode a token and return its claims.

        Raises:
            ExpiredTokenError: The exp claim is in the past
            InvalidTokenError: Bad signature or not a JWT at all
            MalformedTokenError: sub or username is missing
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise ExpiredTokenError()
        except JWTError:
            raise InvalidTokenError()

        subject = payload.get("sub")
        username = payload.get("username")
        if not subject or not username:
            raise MalformedTokenError()

        return TokenClaims(
            subject=subject,
            username=username,
            issued_at=_from_timestamp(payload.get("iat")),
            expires_at=_from_timestamp(payload.get("exp")),
        )


def _from_timestamp(value) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc)
