"""
Dependencies module - reusable FastAPI dependencies for route handlers.

The long-lived components (password hasher, token issuer, Google client,
OAuth state store) are built once in create_app() and stored on app.state.
The functions below hand them to routes and assemble the per-request
services around a database session.
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from starter_api.core.config import Settings
from starter_api.core.exceptions import FeatureDisabledError, UnauthorizedError
from starter_api.core.security import PasswordHasher, TokenClaims, TokenIssuer
from starter_api.db.session import get_db
from starter_api.db.user_store import UserStore
from starter_api.models.user import User
from starter_api.oauth.google import GoogleAuthClient
from starter_api.services.auth_service import AuthService
from starter_api.services.oauth_state import OAuthStateStore
from starter_api.services.user_service import UserService

# ---------------------------------------------------------------------------
# SECURITY SCHEME
# ---------------------------------------------------------------------------
# auto_error=False: a missing header is reported as our own 401 rather than
# FastAPI's default response
security = HTTPBearer(auto_error=False)


# ---------------------------------------------------------------------------
# APPLICATION COMPONENTS
# ---------------------------------------------------------------------------


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_oauth_states(request: Request) -> OAuthStateStore:
    return request.app.state.oauth_states


def get_google_client(request: Request) -> GoogleAuthClient:
    """
    Raises:
        503 Service Unavailable: Google login is disabled in settings
    """
    client: Optional[GoogleAuthClient] = request.app.state.google_client
    if client is None:
        raise FeatureDisabledError("Google login is not enabled")
    return client


# ---------------------------------------------------------------------------
# PER-REQUEST SERVICES
# ---------------------------------------------------------------------------


def get_user_store(db: Session = Depends(get_db)) -> UserStore:
    return UserStore(db)


def get_auth_service(
    store: UserStore = Depends(get_user_store),
    hasher: PasswordHasher = Depends(get_password_hasher),
    issuer: TokenIssuer = Depends(get_token_issuer),
    app_settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(
        store,
        hasher,
        issuer,
        oauth_redirect_expire_minutes=app_settings.OAUTH_REDIRECT_TOKEN_EXPIRE_MINUTES,
    )


def get_user_service(
    store: UserStore = Depends(get_user_store),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> UserService:
    return UserService(store, hasher)


# ---------------------------------------------------------------------------
# AUTHENTICATION
# ---------------------------------------------------------------------------


def get_current_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> TokenClaims:
    """
    Verify the "Authorization: Bearer <token>" header and return its claims.

    Raises:
        401 Unauthorized: Header missing, token invalid, expired or malformed
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Not authenticated")
    return issuer.verify(credentials.credentials)


def get_current_user(
    claims: TokenClaims = Depends(get_current_claims),
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """
    Resolve the authenticated user from the verified claims.

    Raises:
        401 Unauthorized: The token's subject no longer exists
    """
    return auth_service.me(claims)
