"""
Tests for the security primitives.

These tests verify:
- Password hashing is salted and verifies correctly
- verify() never raises on bad input
- Token issue/verify round trip
- Signature, expiry and payload failures map to distinct errors
- The issuer refuses to start without a real secret
"""

import os
from datetime import timedelta

import pytest
from jose import jwt

from starter_api.core.exceptions import (
    ConfigurationError,
    ExpiredTokenError,
    InvalidTokenError,
    MalformedTokenError,
    UnauthorizedError,
    ValidationError,
)
from starter_api.core.security import PasswordHasher, TokenClaims, TokenIssuer


class TestPasswordHasher:
    """Tests for PasswordHasher."""

    def test_hash_then_verify(self, hasher: PasswordHasher):
        """A digest should verify against the password it was made from."""
        digest = hasher.hash("secret1")

        assert digest != "secret1"
        assert hasher.verify("secret1", digest) is True

    def test_verify_wrong_password(self, hasher: PasswordHasher):
        digest = hasher.hash("secret1")

        assert hasher.verify("secret2", digest) is False

    def test_hash_is_salted(self, hasher: PasswordHasher):
        """Two hashes of the same password differ but both verify."""
        first = hasher.hash("samepassword")
        second = hasher.hash("samepassword")

        assert first != second
        assert hasher.verify("samepassword", first)
        assert hasher.verify("samepassword", second)

    def test_hash_rejects_short_password(self, hasher: PasswordHasher):
        with pytest.raises(ValidationError):
            hasher.hash("12345")

    def test_hash_rejects_empty_password(self, hasher: PasswordHasher):
        with pytest.raises(ValidationError):
            hasher.hash("")

    @pytest.mark.parametrize("digest", ["", None, "not-a-bcrypt-hash", "$2b$10$short"])
    def test_verify_malformed_digest_returns_false(self, hasher: PasswordHasher, digest):
        """Malformed or missing digests are a mismatch, not an exception."""
        assert hasher.verify("secret1", digest) is False

    def test_verify_empty_password_returns_false(self, hasher: PasswordHasher):
        digest = hasher.hash("secret1")

        assert hasher.verify("", digest) is False

    def test_hash_rejects_nul_character(self, hasher: PasswordHasher):
        with pytest.raises(ValidationError):
            hasher.hash("secret\x00one")

    @pytest.mark.parametrize("password", ["a" * 73, "\u00e9" * 37])
    def test_hash_rejects_over_72_bytes(self, hasher: PasswordHasher, password):
        """The limit counts UTF-8 bytes, so 37 accented characters are too many."""
        with pytest.raises(ValidationError):
            hasher.hash(password)

    def test_hash_accepts_exactly_72_bytes(self, hasher: PasswordHasher):
        digest = hasher.hash("a" * 72)

        assert hasher.verify("a" * 72, digest)

    def test_long_password_sharing_prefix_does_not_verify(self, hasher: PasswordHasher):
        """Only the first 72 bytes reach bcrypt, so longer input must not match."""
        digest = hasher.hash("a" * 72)

        assert hasher.verify("a" * 72 + "second", digest) is False

    def test_verify_nul_password_returns_false(self, hasher: PasswordHasher):
        digest = hasher.hash("secret1")

        assert hasher.verify("secret1\x00", digest) is False

    @pytest.mark.parametrize("password", ["secret1", "", "a" * 100])
    def test_verify_dummy_is_always_false(self, hasher: PasswordHasher, password):
        assert hasher.verify_dummy(password) is False

    def test_default_work_factor(self):
        """Production hasher uses bcrypt cost 10."""
        digest = PasswordHasher().hash("secret1")

        assert digest.startswith("$2b$10$")


class TestTokenIssuer:
    """Tests for TokenIssuer."""

    def test_round_trip(self, issuer: TokenIssuer):
        token = issuer.issue(TokenClaims(subject="user-1", username="johndoe"))

        claims = issuer.verify(token)

        assert claims.subject == "user-1"
        assert claims.username == "johndoe"
        assert claims.expires_at is not None
        assert claims.issued_at is not None

    def test_default_expiry_is_one_day(self, issuer: TokenIssuer):
        token = issuer.issue(TokenClaims(subject="user-1", username="johndoe"))

        claims = issuer.verify(token)

        lifetime = claims.expires_at - claims.issued_at
        assert lifetime == timedelta(days=1)

    def test_custom_expiry(self, issuer: TokenIssuer):
        token = issuer.issue(
            TokenClaims(subject="user-1", username="johndoe"),
            expires_delta=timedelta(minutes=10),
        )

        claims = issuer.verify(token)

        assert claims.expires_at - claims.issued_at == timedelta(minutes=10)

    def test_wrong_secret_is_invalid(self, issuer: TokenIssuer):
        other = TokenIssuer(secret_key="a-completely-different-secret")
        token = other.issue(TokenClaims(subject="user-1", username="johndoe"))

        with pytest.raises(InvalidTokenError):
            issuer.verify(token)

    def test_expired_token(self, issuer: TokenIssuer):
        token = issuer.issue(
            TokenClaims(subject="user-1", username="johndoe"),
            expires_delta=timedelta(seconds=-30),
        )

        with pytest.raises(ExpiredTokenError):
            issuer.verify(token)

    def test_garbage_token_is_invalid(self, issuer: TokenIssuer):
        with pytest.raises(InvalidTokenError):
            issuer.verify("not.a.jwt")

    def test_missing_username_is_malformed(self, issuer: TokenIssuer):
        token = jwt.encode({"sub": "user-1"}, os.environ["SECRET_KEY"], algorithm="HS256")

        with pytest.raises(MalformedTokenError):
            issuer.verify(token)

    def test_missing_subject_is_malformed(self, issuer: TokenIssuer):
        token = jwt.encode({"username": "johndoe"}, os.environ["SECRET_KEY"], algorithm="HS256")

        with pytest.raises(MalformedTokenError):
            issuer.verify(token)

    def test_token_errors_are_unauthorized(self):
        """Every token failure surfaces as a 401."""
        for error in (InvalidTokenError, ExpiredTokenError, MalformedTokenError):
            assert issubclass(error, UnauthorizedError)
            assert error().status_code == 401


class TestIssuerConfiguration:
    """The issuer must fail closed without a usable secret."""

    @pytest.mark.parametrize("secret", ["", "   ", "change-me-in-production", "default-secret-key"])
    def test_rejects_missing_or_placeholder_secret(self, secret):
        with pytest.raises(ConfigurationError):
            TokenIssuer(secret_key=secret)
