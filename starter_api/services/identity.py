"""
Identity resolver - maps a login attempt or an OAuth profile to a User.

resolve_local() is deliberately uniform: unknown username, Google-only
account and wrong password all come back as None, so the login endpoint
cannot be used to discover which usernames exist.
"""

import logging
import uuid
from typing import Optional, Union

from starter_api.core.exceptions import DuplicateKeyError, InvalidProfileError, NotFoundError
from starter_api.core.security import PasswordHasher
from starter_api.core.validation import FULLNAME_MAX_LENGTH, FULLNAME_MIN_LENGTH, normalize_username
from starter_api.db.user_store import UserStore
from starter_api.models.user import User
from starter_api.schemas.auth import OAuthProfile

logger = logging.getLogger("starter.auth.identity")


class IdentityResolver:
    """Resolves credentials and external profiles to canonical user records."""

    def __init__(self, store: UserStore, hasher: PasswordHasher):
        self.store = store
        self.hasher = hasher

    # -------------------------------------------------------------------------
    # LOCAL LOGIN
    # -------------------------------------------------------------------------

    def resolve_local(self, username: str, password: str) -> Optional[User]:
        """
        Return the user if the username/password pair is valid, else None.
        """
        normalized = normalize_username(username)
        if not normalized or not password:
            return None

        user = self.store.find_by_username(normalized)
        if user is None or not user.can_login_locally:
            self.hasher.verify_dummy(password)
            return None

        if not self.hasher.verify(password, user.hashed_password):
            return None

        return user

    # -------------------------------------------------------------------------
    # OAUTH LOGIN
    # -------------------------------------------------------------------------

    def resolve_or_create_oauth(self, profile: OAuthProfile) -> User:
        """
        Find the canonical user for an external profile, creating it if needed.

        The email is the username surrogate (the provider id when there is no
        email). An existing record matches on provider id first, then on
        username, so a user who registered locally with the same email lands
        on their existing account.

        Raises:
            InvalidProfileError: The profile carries no provider id
        """
        provider_id = (profile.id or "").strip()
        if not provider_id:
            raise InvalidProfileError()

        username = normalize_username(profile.primary_email or provider_id)

        user = self.store.find_by_google_id(provider_id)
        if user is not None:
            return user

        user = self.store.find_by_username(username)
        if user is not None:
            return self._link_provider(user, provider_id)

        fullname = (profile.display_name or "").strip()
        if len(fullname) < FULLNAME_MIN_LENGTH:
            fullname = username
        new_user = User(
            username=username,
            fullname=fullname[:FULLNAME_MAX_LENGTH],
            avatar=profile.primary_photo,
            google_id=provider_id,
            hashed_password=None,
        )

        try:
            created = self.store.insert(new_user)
        except DuplicateKeyError:
            # Another request created the same account between lookup and insert
            existing = self.store.find_by_google_id(provider_id) or self.store.find_by_username(username)
            if existing is None:
                raise
            return existing

        logger.info("Created user %s from OAuth profile", created.username)
        return created

    def _link_provider(self, user: User, provider_id: str) -> User:
        if user.google_id:
            return user
        try:
            linked = self.store.update_by_id(user.id, {"google_id": provider_id})
        except DuplicateKeyError:
            logger.warning("Provider id already linked to another user; keeping %s unlinked", user.username)
            return self.store.find_by_id(user.id) or user
        logger.info("Linked Google account to existing user %s", user.username)
        return linked or user

    # -------------------------------------------------------------------------
    # LOOKUP
    # -------------------------------------------------------------------------

    def find_by_id(self, user_id: Union[str, uuid.UUID]) -> User:
        """
        Raises:
            NotFoundError: user_id is not a valid UUID or no such user exists
        """
        try:
            uid = user_id if isinstance(user_id, uuid.UUID) else uuid.UUID(str(user_id))
        except ValueError:
            raise NotFoundError("Invalid user ID format")

        user = self.store.find_by_id(uid)
        if user is None:
            raise NotFoundError(f"User with ID {uid} not found")
        return user
