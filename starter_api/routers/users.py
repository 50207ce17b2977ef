"""
Users router - CRUD over user profiles.
Creating a user is public; every other endpoint requires a bearer token.
"""

from fastapi import APIRouter, Depends, Response, status

from starter_api.deps import get_current_user, get_user_service
from starter_api.schemas.user import UserCreate, UserDetail, UserUpdate
from starter_api.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserDetail, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, user_service: UserService = Depends(get_user_service)):
    """
    Raises:
        409 Conflict: Username already exists
    """
    return user_service.create(payload)


@router.get("", response_model=list[UserDetail], dependencies=[Depends(get_current_user)])
def list_users(user_service: UserService = Depends(get_user_service)):
    """All users, newest first, without password hashes."""
    return user_service.list_users()


@router.get("/{user_id}", response_model=UserDetail, dependencies=[Depends(get_current_user)])
def get_user(user_id: str, user_service: UserService = Depends(get_user_service)):
    """
    Raises:
        404 Not Found: Malformed id or no such user
    """
    return user_service.get(user_id)


@router.patch("/{user_id}", response_model=UserDetail, dependencies=[Depends(get_current_user)])
def update_user(
    user_id: str,
    payload: UserUpdate,
    user_service: UserService = Depends(get_user_service),
):
    """
    Raises:
        404 Not Found: No such user
        409 Conflict: New username belongs to someone else
    """
    return user_service.update(user_id, payload)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(get_current_user)],
)
def delete_user(user_id: str, user_service: UserService = Depends(get_user_service)):
    user_service.delete(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
