"""
Starter API - user registration, local and Google login, JWT auth and
user profile CRUD on FastAPI + SQLAlchemy.
"""

__version__ = "0.1.0"
