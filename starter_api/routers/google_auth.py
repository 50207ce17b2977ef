"""
Google Auth Router - "Sign in with Google".

Endpoints:
==========
- GET /auth/google          -> Redirect to Google's consent screen
- GET /auth/google/callback -> Resolve the Google account, redirect to the
                               frontend with a token

The callback hands the token to the frontend as a query parameter:
    {FRONTEND_URL}/auth/callback?token=<jwt>
That token passes through the URL bar and redirect chain, so it is issued
with the short OAUTH_REDIRECT_TOKEN_EXPIRE_MINUTES lifetime.

Both endpoints answer 503 when GOOGLE_OAUTH_ENABLED is false.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import RedirectResponse

from starter_api.core.config import Settings
from starter_api.core.exceptions import UnauthorizedError, ValidationError
from starter_api.deps import get_auth_service, get_google_client, get_oauth_states, get_settings
from starter_api.oauth.google import GoogleAuthClient
from starter_api.services.auth_service import AuthService
from starter_api.services.oauth_state import OAuthStateStore

logger = logging.getLogger("starter.routers.google_auth")

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/google")
async def google_login(
    google_client: GoogleAuthClient = Depends(get_google_client),
    oauth_states: OAuthStateStore = Depends(get_oauth_states),
):
    """Start the Google login: redirect to the consent screen."""
    state = oauth_states.issue()
    return RedirectResponse(url=google_client.get_authorization_url(state), status_code=302)


@router.get("/google/callback")
async def google_callback(
    code: Optional[str] = Query(None, description="Authorization code from Google"),
    state: Optional[str] = Query(None, description="CSRF state token"),
    error: Optional[str] = Query(None, description="Error from Google"),
    error_description: Optional[str] = Query(None, description="Error details"),
    google_client: GoogleAuthClient = Depends(get_google_client),
    oauth_states: OAuthStateStore = Depends(get_oauth_states),
    auth_service: AuthService = Depends(get_auth_service),
    app_settings: Settings = Depends(get_settings),
):
    """
    Handle Google's redirect back to us.

    Flow:
        1. Reject provider errors and missing parameters
        2. Consume the state token (CSRF protection, one-time)
        3. Exchange the code for an access token
        4. Fetch the Google profile
        5. Find or create the user, issue a token
        6. Redirect to the frontend with the token
    """
    if error:
        logger.warning("Google OAuth error: %s - %s", error, error_description)
        raise UnauthorizedError("Google authentication failed")

    if not code or not state:
        raise ValidationError("Missing authorization code or state parameter")

    if not oauth_states.consume(state):
        logger.warning("Invalid or expired OAuth state")
        raise ValidationError("Invalid or expired state. Please try again.")

    tokens = await google_client.exchange_code_for_tokens(code)
    google_user = await google_client.get_user_info(tokens.access_token)

    redirect_url = auth_service.oauth_redirect_url(
        google_user.to_profile(),
        app_settings.FRONTEND_URL,
    )
    return RedirectResponse(url=redirect_url, status_code=302)
