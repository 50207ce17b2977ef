"""
Application exceptions.

Every error the auth core and the profile service raise derives from
AppError, which carries the HTTP status the exception handler in
starter_api.middleware renders it with. ConfigurationError is the one
exception meant to stop the process: it is raised while the application
is being built.
"""

from typing import Any, Optional


class ConfigurationError(RuntimeError):
    """Raised at startup when required configuration is missing or unsafe."""
    pass


class DuplicateKeyError(Exception):
    """Raised by the credential store when a unique index rejects a write."""
    pass


# ---------------------------------------------------------------------------
# HTTP-FACING ERRORS
# ---------------------------------------------------------------------------


class AppError(Exception):
    """Base exception for errors reported back to the API caller."""

    status_code: int = 500
    error: str = "Internal Server Error"
    default_message: str = "An error occurred"

    def __init__(self, message: Optional[str] = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed input, e.g. a password below the minimum length."""

    status_code = 400
    error = "Bad Request"
    default_message = "Validation failed"


class UnauthorizedError(AppError):
    """Bad credentials or an unusable token. Messages stay generic."""

    status_code = 401
    error = "Unauthorized"
    default_message = "Unauthorized"


class InvalidTokenError(UnauthorizedError):
    default_message = "Invalid token"


class ExpiredTokenError(UnauthorizedError):
    default_message = "Token has expired"


class MalformedTokenError(UnauthorizedError):
    default_message = "Invalid token payload"


class InvalidProfileError(UnauthorizedError):
    """The OAuth provider returned a profile we cannot map to a user."""

    default_message = "OAuth profile is missing a usable identifier"


class NotFoundError(AppError):
    status_code = 404
    error = "Not Found"
    default_message = "Resource not found"


class ConflictError(AppError):
    status_code = 409
    error = "Conflict"
    default_message = "Username already exists"


class OAuthProviderError(AppError):
    """Talking to the OAuth provider failed (token exchange, userinfo)."""

    status_code = 502
    error = "Bad Gateway"
    default_message = "OAuth provider request failed"


class FeatureDisabledError(AppError):
    status_code = 503
    error = "Service Unavailable"
    default_message = "This feature is disabled"
