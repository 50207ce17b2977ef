"""
User model - a registered account.
Accounts authenticate with a username/password, through Google, or both.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from starter_api.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """
    SQLAlchemy ORM model for the 'users' table.

    Invariants kept by the services writing to it:
    - username is stored trimmed and lowercased
    - at least one of hashed_password / google_id is set
    - hashed_password never leaves the service layer (see UserOut)
    """

    __tablename__ = "users"

    # ---------------------------------------------------------------------------
    # PRIMARY KEY
    # ---------------------------------------------------------------------------
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # ---------------------------------------------------------------------------
    # IDENTITY
    # ---------------------------------------------------------------------------
    # username: unique index is the concurrency backstop for registration.
    # 255 chars because Google accounts use their email as username.
    username: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)

    fullname: Mapped[str] = mapped_column(String(100), nullable=False)

    # hashed_password: bcrypt digest, NULL for Google-only accounts
    hashed_password: Mapped[str | None] = mapped_column(String(255), nullable=True)

    avatar: Mapped[str | None] = mapped_column(String(2048), nullable=True)

    # google_id: Google "sub" claim. Unique, NULLs allowed (sparse).
    google_id: Mapped[str | None] = mapped_column(
        String(255), unique=True, index=True, nullable=True
    )

    # ---------------------------------------------------------------------------
    # TIMESTAMPS
    # ---------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )

    @property
    def can_login_locally(self) -> bool:
        return bool(self.hashed_password)

    def __repr__(self) -> str:
        return f"<User {self.username} ({self.id})>"
