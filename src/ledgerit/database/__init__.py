"""Store layer for ledgerit."""

from ledgerit.database.base import Database
from ledgerit.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
