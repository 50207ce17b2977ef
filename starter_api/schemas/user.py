"""
User schemas - Pydantic models for user-related API input and output.
The output models control what user data is exposed (never the password hash).
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from starter_api.core.validation import (
    PASSWORD_MIN_LENGTH,
    check_fullname,
    check_password,
    check_username,
)


class UserOut(BaseModel):
    """
    Public user view, embedded in auth responses and returned by /auth/me.

    Built straight from the ORM object (from_attributes). hashed_password and
    google_id are not fields here, so they can never be serialized.
    """

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    fullname: str
    avatar: Optional[str] = None


class UserDetail(UserOut):
    """User view for the /users endpoints, with timestamps."""

    created_at: datetime
    updated_at: datetime


class UserCreate(BaseModel):
    """Schema for POST /users. Same rules as registration plus an avatar."""

    fullname: str
    username: str
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH)
    avatar: Optional[str] = None

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


class UserUpdate(BaseModel):
    """
    Schema for PATCH /users/{id}. Every field is optional; only the fields
    present in the request body are applied.
    """

    fullname: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = Field(None, min_length=PASSWORD_MIN_LENGTH)
    avatar: Optional[str] = None

    @field_validator("username")
    @classmethod
    def _username(cls, value: Optional[str]) -> Optional[str]:
        return check_username(value) if value is not None else None

    @field_validator("fullname")
    @classmethod
    def _fullname(cls, value: Optional[str]) -> Optional[str]:
        return check_fullname(value) if value is not None else None

    @field_validator("password")
    @classmethod
    def _password(cls, value: Optional[str]) -> Optional[str]:
        return check_password(value) if value is not None else None
