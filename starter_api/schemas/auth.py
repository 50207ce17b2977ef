"""
Auth schemas - Pydantic models for authentication request/response validation.
Input normalization (trim, lowercase) happens here so services receive
canonical values.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from starter_api.core.validation import (
    PASSWORD_MIN_LENGTH,
    check_fullname,
    check_password,
    check_username,
    normalize_username,
)
from starter_api.schemas.user import UserOut


class RegisterRequest(BaseModel):
    """
    Schema for POST /auth/register request body.

    Example request body:
    {
        "fullname": "John Doe",
        "username": "JohnDoe",
        "password": "secret1"
    }
    The username is stored as "johndoe".
    """

    fullname: str
    username: str
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH)

    @field_validator("username")
    @classmethod
    def _username(cls, value: str) -> str:
        return check_username(value)

    @field_validator("fullname")
    @classmethod
    def _fullname(cls, value: str) -> str:
        return check_fullname(value)

    @field_validator("password")
    @classmethod
    def _password(cls, value: str) -> str:
        return check_password(value)


class LoginRequest(BaseModel):
    """Schema for POST /auth/login request body."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("username")
    @classmethod
    def _username(cls, value: str) -> str:
        return normalize_username(value)


class AuthResponse(BaseModel):
    """
    Returned by register and login.

    Example response:
    {
        "access_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
        "token_type": "bearer",
        "user": {"id": "...", "username": "johndoe", "fullname": "John Doe", "avatar": null}
    }
    """

    access_token: str
    token_type: str = "bearer"
    user: UserOut


# ---------------------------------------------------------------------------
# OAUTH PROFILE
# ---------------------------------------------------------------------------
# The shape an OAuth provider handshake produces, e.g.
# {"id": "g123", "emails": [{"value": "a@b.com"}], "displayName": "A B",
#  "photos": [{"value": "https://..."}]}


class ProfileValue(BaseModel):
    value: str


class OAuthProfile(BaseModel):
    """An already-authenticated external profile."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    emails: list[ProfileValue] = Field(default_factory=list)
    display_name: Optional[str] = Field(None, alias="displayName")
    photos: list[ProfileValue] = Field(default_factory=list)

    @property
    def primary_email(self) -> Optional[str]:
        for email in self.emails:
            if email.value and email.value.strip():
                return email.value.strip()
        return None

    @property
    def primary_photo(self) -> Optional[str]:
        return self.photos[0].value if self.photos else None
