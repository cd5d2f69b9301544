"""Database layer for obraledger application."""

from obraledger.database.base import Database
from obraledger.database.factories import create_database, create_sqlite_database

__all__ = ["Database", "create_database", "create_sqlite_database"]
