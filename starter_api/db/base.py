"""
Declarative base shared by every ORM model.
Alembic reads Base.metadata to know which tables exist.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
