"""
Google OAuth Schemas - Data structures for the Google login flow.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from pydantic import BaseModel, Field

from starter_api.schemas.auth import OAuthProfile, ProfileValue

# ---------------------------------------------------------------------------
# OAUTH SCOPE CONSTANTS
# ---------------------------------------------------------------------------
# Login only needs the identity scopes: subject id, email, name and picture.
# Reference: https://developers.google.com/identity/protocols/oauth2/scopes
PROFILE_SCOPES = [
    "openid",
    "email",
    "profile",
]


class GoogleTokenResponse(BaseModel):
    """
    Response from Google's token endpoint.

    Example response from Google:
    {
        "access_token": "ya29.a0AfB_byC...",
        "expires_in": 3599,
        "scope": "openid https://www.googleapis.com/auth/userinfo.email ...",
        "token_type": "Bearer",
        "id_token": "eyJhbGciOiJSUzI1NiIs..."
    }
    """
    access_token: str = Field(..., description="OAuth access token")
    token_type: str = Field(default="Bearer", description="Token type (usually Bearer)")
    expires_in: Optional[int] = Field(None, description="Seconds until expiration")
    refresh_token: Optional[str] = Field(None, description="Refresh token for renewal")
    scope: Optional[str] = Field(None, description="Space-separated scopes granted")
    id_token: Optional[str] = Field(None, description="JWT with user info (OpenID)")

    def get_expires_at(self) -> Optional[datetime]:
        if self.expires_in:
            return datetime.now(timezone.utc) + timedelta(seconds=self.expires_in)
        return None


class GoogleUserInfo(BaseModel):
    """
    User information from Google's userinfo endpoint.

    Example:
    {
        "sub": "123456789",
        "email": "user@gmail.com",
        "email_verified": true,
        "name": "John Doe",
        "picture": "https://lh3.googleusercontent.com/a/..."
    }
    """
    sub: str = Field(..., description="Unique Google user ID")
    email: Optional[str] = Field(None, description="User's email address")
    email_verified: Optional[bool] = Field(None, description="Is email verified?")
    name: Optional[str] = Field(None, description="User's display name")
    picture: Optional[str] = Field(None, description="Profile picture URL")

    def to_profile(self) -> OAuthProfile:
        """Convert to the provider-neutral profile the identity resolver consumes."""
        return OAuthProfile(
            id=self.sub,
            emails=[ProfileValue(value=self.email)] if self.email else [],
            display_name=self.name,
            photos=[ProfileValue(value=self.picture)] if self.picture else [],
        )
