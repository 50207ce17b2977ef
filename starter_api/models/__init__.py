"""ORM models. Importing this package registers every table on Base.metadata."""

from starter_api.models.user import User

__all__ = ["User"]
