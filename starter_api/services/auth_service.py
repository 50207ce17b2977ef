"""
Auth service - register, local login, OAuth login and "me".

Each call walks one attempt through the stages

    RECEIVED -> RESOLVING -> (RESOLVED | REJECTED) -> TOKEN_ISSUED

and ends with a signed token plus the public user view, or an AppError.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Optional
from urllib.parse import urlencode

from starter_api.core.exceptions import (
    ConflictError,
    DuplicateKeyError,
    InvalidProfileError,
    NotFoundError,
    UnauthorizedError,
)
from starter_api.core.security import PasswordHasher, TokenClaims, TokenIssuer
from starter_api.db.user_store import UserStore
from starter_api.models.user import User
from starter_api.schemas.auth import AuthResponse, OAuthProfile, RegisterRequest
from starter_api.schemas.user import UserOut
from starter_api.services.identity import IdentityResolver

logger = logging.getLogger("starter.auth")


class AuthStage(str, Enum):
    RECEIVED = "received"
    RESOLVING = "resolving"
    RESOLVED = "resolved"
    REJECTED = "rejected"
    TOKEN_ISSUED = "token_issued"


_TRANSITIONS = {
    AuthStage.RECEIVED: {AuthStage.RESOLVING},
    AuthStage.RESOLVING: {AuthStage.RESOLVED, AuthStage.REJECTED},
    AuthStage.RESOLVED: {AuthStage.TOKEN_ISSUED},
    AuthStage.REJECTED: set(),
    AuthStage.TOKEN_ISSUED: set(),
}


@dataclass
class AuthAttempt:
    """Tracks one login/registration request through its stages."""

    flow: str
    stage: AuthStage = AuthStage.RECEIVED

    def advance(self, stage: AuthStage) -> None:
        if stage not in _TRANSITIONS[self.stage]:
            raise RuntimeError(f"{self.flow}: cannot move from {self.stage.value} to {stage.value}")
        logger.debug("%s: %s -> %s", self.flow, self.stage.value, stage.value)
        self.stage = stage


class AuthService:
    """
    Composes the credential store, password hasher, token issuer and
    identity resolver into the authentication flows.
    """

    def __init__(
        self,
        store: UserStore,
        hasher: PasswordHasher,
        issuer: TokenIssuer,
        resolver: Optional[IdentityResolver] = None,
        oauth_redirect_expire_minutes: int = 10,
    ):
        self.store = store
        self.hasher = hasher
        self.issuer = issuer
        self.resolver = resolver or IdentityResolver(store, hasher)
        self.oauth_redirect_expire_minutes = oauth_redirect_expire_minutes

    # -------------------------------------------------------------------------
    # REGISTER
    # -------------------------------------------------------------------------

    def register(self, payload: RegisterRequest) -> AuthResponse:
        """
        Create a local account and log it in.

        Raises:
            ConflictError: The username is taken
            ValidationError: The password is too short
        """
        attempt = AuthAttempt("register")
        attempt.advance(AuthStage.RESOLVING)

        if self.store.find_by_username(payload.username) is not None:
            attempt.advance(AuthStage.REJECTED)
            logger.warning("Attempt to register duplicate username: %s", payload.username)
            raise ConflictError()

        # Hash before the record exists anywhere
        hashed_password = self.hasher.hash(payload.password)
        user = User(
            username=payload.username,
            fullname=payload.fullname,
            hashed_password=hashed_password,
        )

        try:
            user = self.store.insert(user)
        except DuplicateKeyError:
            # Lost the race against a concurrent registration
            attempt.advance(AuthStage.REJECTED)
            raise ConflictError()

        attempt.advance(AuthStage.RESOLVED)
        logger.info("Registered user %s (%s)", user.username, user.id)
        return self._issue(attempt, user)

    # -------------------------------------------------------------------------
    # LOCAL LOGIN
    # -------------------------------------------------------------------------

    def login(self, username: str, password: str) -> AuthResponse:
        """
        Raises:
            UnauthorizedError: Same message whatever the reason
        """
        attempt = AuthAttempt("login")
        attempt.advance(AuthStage.RESOLVING)

        user = self.resolver.resolve_local(username, password)
        if user is None:
            attempt.advance(AuthStage.REJECTED)
            logger.warning("Failed login attempt for username: %s", username)
            raise UnauthorizedError("Invalid credentials")

        attempt.advance(AuthStage.RESOLVED)
        logger.info("Login: %s (%s)", user.username, user.id)
        return self._issue(attempt, user)

    # -------------------------------------------------------------------------
    # OAUTH LOGIN
    # -------------------------------------------------------------------------

    def oauth_login(
        self,
        profile: OAuthProfile,
        expires_delta: Optional[timedelta] = None,
    ) -> AuthResponse:
        """
        Log in (or sign up) a user the OAuth provider already authenticated.

        Raises:
            InvalidProfileError: The profile cannot be mapped to a user (401)
        """
        attempt = AuthAttempt("oauth_login")
        attempt.advance(AuthStage.RESOLVING)

        try:
            user = self.resolver.resolve_or_create_oauth(profile)
        except InvalidProfileError:
            attempt.advance(AuthStage.REJECTED)
            logger.warning("Rejected OAuth profile without a provider id")
            raise

        attempt.advance(AuthStage.RESOLVED)
        logger.info("OAuth login: %s (%s)", user.username, user.id)
        return self._issue(attempt, user, expires_delta)

    def oauth_redirect_url(self, profile: OAuthProfile, frontend_url: str) -> str:
        """
        Run the OAuth login and build the frontend redirect carrying the token.

        The token travels in the browser URL, so it gets the short
        oauth_redirect_expire_minutes lifetime instead of the default one.
        """
        response = self.oauth_login(
            profile,
            expires_delta=timedelta(minutes=self.oauth_redirect_expire_minutes),
        )
        query = urlencode({"token": response.access_token})
        return f"{frontend_url.rstrip('/')}/auth/callback?{query}"

    # -------------------------------------------------------------------------
    # CURRENT USER
    # -------------------------------------------------------------------------

    def me(self, claims: TokenClaims) -> User:
        """
        Load the user a verified token refers to.

        Raises:
            UnauthorizedError: The token is valid but its subject is gone
        """
        try:
            return self.resolver.find_by_id(claims.subject)
        except NotFoundError:
            logger.warning("Token subject no longer exists: %s", claims.subject)
            raise UnauthorizedError("Invalid or expired token")

    # -------------------------------------------------------------------------
    # INTERNALS
    # -------------------------------------------------------------------------

    def _issue(
        self,
        attempt: AuthAttempt,
        user: User,
        expires_delta: Optional[timedelta] = None,
    ) -> AuthResponse:
        token = self.issuer.issue(
            TokenClaims(subject=str(user.id), username=user.username),
            expires_delta=expires_delta,
        )
        attempt.advance(AuthStage.TOKEN_ISSUED)
        return AuthResponse(access_token=token, user=UserOut.model_validate(user))
