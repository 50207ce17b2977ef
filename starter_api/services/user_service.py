"""
User service - CRUD over user profiles for the /users endpoints.
"""

import logging
import uuid
from typing import Union

from starter_api.core.exceptions import ConflictError, DuplicateKeyError, NotFoundError
from starter_api.core.security import PasswordHasher
from starter_api.db.user_store import UserStore
from starter_api.models.user import User
from starter_api.schemas.user import UserCreate, UserUpdate
from starter_api.services.identity import IdentityResolver

logger = logging.getLogger("starter.users")


class UserService:
    def __init__(self, store: UserStore, hasher: PasswordHasher):
        self.store = store
        self.hasher = hasher
        self.resolver = IdentityResolver(store, hasher)

    def create(self, payload: UserCreate) -> User:
        if self.store.find_by_username(payload.username) is not None:
            logger.warning("Attempt to create duplicate username: %s", payload.username)
            raise ConflictError()

        user = User(
            username=payload.username,
            fullname=payload.fullname,
            hashed_password=self.hasher.hash(payload.password),
            avatar=payload.avatar,
        )
        try:
            user = self.store.insert(user)
        except DuplicateKeyError:
            raise ConflictError()

        logger.info("User created successfully: %s", user.username)
        return user

    def list_users(self) -> list[User]:
        users = self.store.list_all()
        logger.info("Retrieved %d users", len(users))
        return users

    def get(self, user_id: Union[str, uuid.UUID]) -> User:
        return self.resolver.find_by_id(user_id)

    def update(self, user_id: Union[str, uuid.UUID], payload: UserUpdate) -> User:
        """
        Apply the fields present in the request.

        A new password is hashed here; a new username must not belong to
        anyone else.
        """
        user = self.resolver.find_by_id(user_id)
        patch = payload.model_dump(exclude_unset=True)

        # Explicit nulls for required fields are ignored
        for field in ("username", "fullname", "password"):
            if field in patch and patch[field] is None:
                del patch[field]

        if "username" in patch:
            existing = self.store.find_by_username(patch["username"])
            if existing is not None and existing.id != user.id:
                logger.warning("Attempt to update to duplicate username: %s", patch["username"])
                raise ConflictError()

        if "password" in patch:
            patch["hashed_password"] = self.hasher.hash(patch.pop("password"))

        try:
            updated = self.store.update_by_id(user.id, patch)
        except DuplicateKeyError:
            raise ConflictError()

        if updated is None:
            raise NotFoundError(f"User with ID {user.id} not found")

        logger.info("User updated successfully: %s", updated.username)
        return updated

    def delete(self, user_id: Union[str, uuid.UUID]) -> None:
        user = self.resolver.find_by_id(user_id)
        username = user.username
        if not self.store.delete_by_id(user.id):
            raise NotFoundError(f"User with ID {user.id} not found")
        logger.info("User deleted successfully: %s", username)
