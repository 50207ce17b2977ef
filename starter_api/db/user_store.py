"""
Credential store - persistence operations for User records.

Wraps a SQLAlchemy session so the services never touch queries directly.
Uniqueness of username and google_id is enforced by the database's unique
indexes; a violation is reported as DuplicateKeyError after the session is
rolled back.
"""

import logging
import uuid
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from starter_api.core.exceptions import DuplicateKeyError
from starter_api.models.user import User

logger = logging.getLogger("starter.db.users")


class UserStore:
    """Create / find / update / delete operations over the users table."""

    def __init__(self, db: Session):
        self.db = db

    # -------------------------------------------------------------------------
    # WRITES
    # -------------------------------------------------------------------------

    def insert(self, user: User) -> User:
        """
        Persist a new user.

        Raises:
            DuplicateKeyError: username or google_id is already taken
        """
        self.db.add(user)
        self._commit()
        self.db.refresh(user)
        return user

    def update_by_id(self, user_id: uuid.UUID, patch: dict[str, Any]) -> Optional[User]:
        """
        Apply a field patch to a user. Returns None if the user does not exist.

        Raises:
            DuplicateKeyError: the patch collides with another user's unique field
        """
        user = self.find_by_id(user_id)
        if user is None:
            return None

        for field, value in patch.items():
            setattr(user, field, value)

        self._commit()
        self.db.refresh(user)
        return user

    def delete_by_id(self, user_id: uuid.UUID) -> bool:
        user = self.find_by_id(user_id)
        if user is None:
            return False
        self.db.delete(user)
        self.db.commit()
        return True

    # -------------------------------------------------------------------------
    # READS
    # -------------------------------------------------------------------------

    def find_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        return self.db.get(User, user_id)

    def find_by_username(self, username: str) -> Optional[User]:
        """Look up by username. The caller passes the normalized form."""
        return self.db.scalars(
            select(User).where(User.username == username)
        ).first()

    def find_by_google_id(self, google_id: str) -> Optional[User]:
        return self.db.scalars(
            select(User).where(User.google_id == google_id)
        ).first()

    def list_all(self) -> list[User]:
        """All users, newest first."""
        return list(self.db.scalars(select(User).order_by(User.created_at.desc())))

    # -------------------------------------------------------------------------
    # INTERNALS
    # -------------------------------------------------------------------------

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            logger.warning("Unique constraint rejected user write: %s", exc.orig)
            raise DuplicateKeyError(str(exc.orig)) from exc
