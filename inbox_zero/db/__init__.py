"""Database layer — SQLite repositories over an ordered set of SQL migrations."""

from inbox_zero.db.connection import Database, get_db, init_db

__all__ = ["Database", "get_db", "init_db"]
