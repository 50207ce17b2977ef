"""
Google OAuth Client - the authorization code flow used for "Sign in with Google".

Flow:
=====
1. get_authorization_url() -> browser is redirected to Google's consent screen
2. Google redirects back to /auth/google/callback with ?code=...&state=...
3. exchange_code_for_tokens() -> access token for the userinfo endpoint
4. get_user_info() -> Google profile, mapped to an OAuthProfile

References:
===========
- OAuth 2.0: https://developers.google.com/identity/protocols/oauth2
- Token endpoint: https://oauth2.googleapis.com/token
- Userinfo: https://www.googleapis.com/oauth2/v3/userinfo
"""

import logging
from typing import Optional
from urllib.parse import urlencode

import httpx

from starter_api.core.config import Settings
from starter_api.core.exceptions import ConfigurationError, OAuthProviderError
from starter_api.oauth.schemas import PROFILE_SCOPES, GoogleTokenResponse, GoogleUserInfo

logger = logging.getLogger("starter.oauth.google")


class GoogleAuthClient:
    """
    Google OAuth 2.0 client.

    Example Usage:
        client = GoogleAuthClient(client_id, client_secret, redirect_uri)
        auth_url = client.get_authorization_url(state="random-csrf-token")
        # ... user consents, Google calls back with ?code=...
        tokens = await client.exchange_code_for_tokens(code="abc123")
        user_info = await client.get_user_info(tokens.access_token)
    """

    provider_name = "google"

    AUTHORIZATION_URL = "https://accounts.google.com/o/oauth2/v2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"
    USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"

    REQUEST_TIMEOUT = 30.0

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not client_id or not client_secret:
            raise ConfigurationError(
                "Google OAuth requires GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET"
            )
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        # transport: lets tests plug in httpx.MockTransport
        self._transport = transport

    # -------------------------------------------------------------------------
    # AUTHORIZATION URL
    # -------------------------------------------------------------------------

    def get_authorization_url(self, state: str) -> str:
        """
        Build the consent-screen URL.

        Args:
            state: CSRF token; Google echoes it back on the callback
        """
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",  # Authorization code flow
            "scope": " ".join(PROFILE_SCOPES),
            "state": state,
            "access_type": "online",  # Login only, no refresh token needed
            "prompt": "select_account",
        }
        return f"{self.AUTHORIZATION_URL}?{urlencode(params)}"

    # -------------------------------------------------------------------------
    # TOKEN EXCHANGE
    # -------------------------------------------------------------------------

    async def exchange_code_for_tokens(self, code: str) -> GoogleTokenResponse:
        """
        Exchange the authorization code from the callback for tokens.

        Raises:
            OAuthProviderError: Google rejected the code or was unreachable
        """
        token_data = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": code,
            "grant_type": "authorization_code",
            "redirect_uri": self.redirect_uri,
        }

        logger.info("Exchanging authorization code for tokens")

        async with self._http() as client:
            try:
                response = await client.post(self.TOKEN_URL, data=token_data)
            except httpx.RequestError as e:
                logger.error("Network error during token exchange: %s", e)
                raise OAuthProviderError(f"Network error: {e}")

        if response.status_code != 200:
            error_data = response.json() if response.content else {}
            error_msg = error_data.get("error_description", response.text)
            logger.error("Token exchange failed: %s", error_msg)
            raise OAuthProviderError(f"Token exchange failed: {error_msg}")

        return GoogleTokenResponse(**response.json())

    # -------------------------------------------------------------------------
    # USER INFO
    # -------------------------------------------------------------------------

    async def get_user_info(self, access_token: str) -> GoogleUserInfo:
        """
        Fetch the signed-in user's Google profile.

        Raises:
            OAuthProviderError: The userinfo request failed
        """
        async with self._http() as client:
            try:
                response = await client.get(
                    self.USERINFO_URL,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
            except httpx.RequestError as e:
                logger.error("Network error fetching user info: %s", e)
                raise OAuthProviderError(f"Network error: {e}")

        if response.status_code != 200:
            logger.error("Failed to fetch user info: %s", response.text)
            raise OAuthProviderError("Failed to fetch user info")

        return GoogleUserInfo(**response.json())

    def _http(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.REQUEST_TIMEOUT, transport=self._transport)


def build_google_client(app_settings: Settings) -> Optional[GoogleAuthClient]:
    """
    Build the Google client from settings.

    Returns None when GOOGLE_OAUTH_ENABLED is false. When it is true, missing
    credentials raise ConfigurationError instead of silently disabling login.
    """
    if not app_settings.GOOGLE_OAUTH_ENABLED:
        logger.info("Google OAuth disabled (GOOGLE_OAUTH_ENABLED=false)")
        return None
    return GoogleAuthClient(
        client_id=app_settings.GOOGLE_CLIENT_ID,
        client_secret=app_settings.GOOGLE_CLIENT_SECRET,
        redirect_uri=app_settings.GOOGLE_REDIRECT_URI,
    )
