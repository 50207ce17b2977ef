#!/usr/bin/env python3
"""
Create the database tables for local development.

Production databases are managed with Alembic (alembic upgrade head); this
script is a shortcut for a fresh local database, e.g. a throwaway Postgres
container or a SQLite file:

    DATABASE_URL=sqlite:///./dev.db python scripts/init_db.py
"""
import logging
import sys
from pathlib import Path

# Adjust path so imports resolve when running from project root
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from starter_api.db.base import Base
from starter_api.db.session import engine
import starter_api.models  # noqa: F401  registers the tables on Base.metadata

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("init_db")


def main() -> None:
    logger.info("Creating tables on %s", engine.url.render_as_string(hide_password=True))
    Base.metadata.create_all(bind=engine)
    logger.info("Tables: %s", ", ".join(sorted(Base.metadata.tables)))


if __name__ == "__main__":
    main()
