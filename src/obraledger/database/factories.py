"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from obraledger.database.sqlalchemy_db import SQLAlchemyDatabase

DB_PATH_ENV_VAR = "OBRALEDGER_DB_PATH"


def default_database_path() -> str:
    """Return the database path from the environment or ~/.obraledger/obraledger.db."""
    database_path = os.environ.get(DB_PATH_ENV_VAR)
    if database_path:
        return database_path

    db_dir = Path.home() / ".obraledger"
    db_dir.mkdir(exist_ok=True)
    return str(db_dir / "obraledger.db")


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks OBRALEDGER_DB_PATH
            environment variable, then defaults to ~/.obraledger/obraledger.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = default_database_path()

    return SQLAlchemyDatabase(f"sqlite:///{database_path}")


def create_database(database_url: str) -> SQLAlchemyDatabase:
    """Create a database instance for any SQLAlchemy URL (e.g. PostgreSQL)."""
    return SQLAlchemyDatabase(database_url)
