"""
OAuth Module - external identity providers.

Only Google is supported. The client produces an OAuthProfile; the identity
resolver turns that profile into a user.
"""

from starter_api.oauth.google import GoogleAuthClient, build_google_client
from starter_api.oauth.schemas import PROFILE_SCOPES, GoogleTokenResponse, GoogleUserInfo

__all__ = [
    "GoogleAuthClient",
    "GoogleTokenResponse",
    "GoogleUserInfo",
    "PROFILE_SCOPES",
    "build_google_client",
]
