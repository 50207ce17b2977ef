"""
Auth router - registration, local login and the current-user profile.
"""

from fastapi import APIRouter, Depends, status

from starter_api.deps import get_auth_service, get_current_user
from starter_api.models.user import User
from starter_api.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from starter_api.schemas.user import UserOut
from starter_api.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


# ---------------------------------------------------------------------------
# POST /auth/register - Create a new account and log it in
# ---------------------------------------------------------------------------
@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, auth_service: AuthService = Depends(get_auth_service)):
    """
    Register a new user.

    Returns:
        AuthResponse: access token plus the public user view

    Raises:
        409 Conflict: Username already exists
        422 Unprocessable Entity: Body failed validation
    """
    return auth_service.register(payload)


# ---------------------------------------------------------------------------
# POST /auth/login - Authenticate with username and password
# ---------------------------------------------------------------------------
@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, auth_service: AuthService = Depends(get_auth_service)):
    """
    Raises:
        401 Unauthorized: "Invalid credentials", whatever went wrong
    """
    return auth_service.login(payload.username, payload.password)


# ---------------------------------------------------------------------------
# GET /auth/me - Profile of the token's owner
# ---------------------------------------------------------------------------
@router.get("/me", response_model=UserOut)
def read_current_user(current_user: User = Depends(get_current_user)):
    """Protected: requires "Authorization: Bearer <token>"."""
    return current_user
