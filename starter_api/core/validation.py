"""
Field rules shared by the request schemas and the services.
"""

import re
from typing import Optional

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
USERNAME_PATTERN = re.compile(r"^[a-z0-9_-]+$")

PASSWORD_MIN_LENGTH = 6
# bcrypt ignores everything past the first 72 bytes
PASSWORD_MAX_BYTES = 72

FULLNAME_MIN_LENGTH = 2
FULLNAME_MAX_LENGTH = 100


def normalize_username(username: Optional[str]) -> str:
    """Trim and lowercase a username. None becomes an empty string."""
    if not username:
        return ""
    return username.strip().lower()


def check_username(username: str) -> str:
    """
    Normalize a username chosen by a user and enforce the registration rules.

    Raises ValueError so it can be used directly inside Pydantic validators.
    """
    value = normalize_username(username)
    if len(value) < USERNAME_MIN_LENGTH:
        raise ValueError(f"Username must be at least {USERNAME_MIN_LENGTH} characters")
    if len(value) > USERNAME_MAX_LENGTH:
        raise ValueError(f"Username cannot exceed {USERNAME_MAX_LENGTH} characters")
    if not USERNAME_PATTERN.match(value):
        raise ValueError(
            "Username can only contain lowercase letters, numbers, hyphens, and underscores"
        )
    return value


def check_fullname(fullname: str) -> str:
    value = (fullname or "").strip()
    if len(value) < FULLNAME_MIN_LENGTH:
        raise ValueError(f"Full name must be at least {FULLNAME_MIN_LENGTH} characters")
    if len(value) > FULLNAME_MAX_LENGTH:
        raise ValueError(f"Full name cannot exceed {FULLNAME_MAX_LENGTH} characters")
    return value


def check_password(password: str) -> str:
    """
    Enforce the password rules bcrypt can honour.

    The limit is in UTF-8 bytes, not characters. Raises ValueError.
    """
    if not password or len(password) < PASSWORD_MIN_LENGTH:
        raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    if "\x00" in password:
        raise ValueError("Password cannot contain NUL characters")
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password cannot exceed {PASSWORD_MAX_BYTES} bytes")
    return password
