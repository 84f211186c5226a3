"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from ledgerline.database.sqlalchemy_db import SQLAlchemyDatabase

DEFAULT_DB_DIR = Path.home() / ".ledgerline"


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a database instance, SQLite unless given a full URL.

    Args:
        database_path: SQLite file path, or any SQLAlchemy URL
            (``postgresql://...``). If None, LEDGERLINE_DB_PATH is used, then
            ``~/.ledgerline/ledgerline.db``.

    Returns:
        SQLAlchemyDatabase instance
    """
    location = database_path or os.environ.get("LEDGERLINE_DB_PATH")

    if location and "://" in location:
        return SQLAlchemyDatabase(location)

    if location:
        path = Path(location).expanduser()
    else:
        DEFAULT_DB_DIR.mkdir(exist_ok=True)
        path = DEFAULT_DB_DIR / "ledgerline.db"

    return SQLAlchemyDatabase(f"sqlite:///{path}")
