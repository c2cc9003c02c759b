"""Database connection management — SQLite with numbered SQL migrations."""

from __future__ import annotations

import logging
import sqlite3
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator

from inbox_zero.config import AppConfig

logger = logging.getLogger(__name__)

MIGRATIONS = [
    "001_schema.sql",
    "002_llm_calls.sql",
    "003_calendar_events.sql",
]


class Database:
    """SQLite database with per-call connections."""

    def __init__(self, config: AppConfig):
        self.config = config.database
        self._ensure_db()

    def _ensure_db(self) -> None:
        """Ensure the database directory exists."""
        Path(self.config.sqlite_path).parent.mkdir(parents=True, exist_ok=True)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.config.sqlite_path))
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA foreign_keys=ON")
        return conn

    @contextmanager
    def connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection (context manager)."""
        conn = self._connect()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def connect_with_retry(self, retries: int | None = None) -> None:
        """Verify the database is reachable, retrying a few times on failure.

        Raises the last error once all attempts are used up.
        """
        if retries is None:
            retries = self.config.connect_retries
        delay = self.config.connect_retry_delay_ms / 1000

        while True:
            try:
                with self.connection() as conn:
                    conn.execute("SELECT 1")
                logger.info("Connected to database at %s", self.config.sqlite_path)
                return
            except sqlite3.Error as e:
                if retries <= 0:
                    logger.error("Failed to connect to database after all retries: %s", e)
                    raise
                logger.warning(
                    "Failed to connect to database, retrying... (%d attempts left): %s",
                    retries,
                    e,
                )
                retries -= 1
                time.sleep(delay)

    def execute(self, sql: str, params: tuple = ()) -> list[dict[str, Any]]:
        """Execute a query and return results as list of dicts."""
        with self.connection() as conn:
            cursor = conn.execute(sql, params)
            if cursor.description:
                columns = [d[0] for d in cursor.description]
                return [dict(zip(columns, row)) for row in cursor.fetchall()]
            return []

    def execute_one(self, sql: str, params: tuple = ()) -> dict[str, Any] | None:
        """Execute a query and return the first row as a dict, or None."""
        results = self.execute(sql, params)
        return results[0] if results else None

    def execute_write(self, sql: str, params: tuple = ()) -> int:
        """Execute an INSERT/UPDATE/DELETE and return lastrowid or rowcount."""
        with self.connection() as conn:
            cursor = conn.execute(sql, params)
            return cursor.lastrowid or cursor.rowcount

    def execute_update(self, sql: str, params: tuple = ()) -> int:
        """Execute an UPDATE/DELETE and return the number of affected rows."""
        with self.connection() as conn:
            return conn.execute(sql, params).rowcount

    def run_migration(self, sql: str) -> None:
        """Run a migration SQL script."""
        with self.connection() as conn:
            conn.executescript(sql)

    def initialize_schema(self) -> None:
        """Create the schema if tables don't exist."""
        migrations_dir = Path(__file__).parent / "migrations"
        for migration_file in MIGRATIONS:
            migration_path = migrations_dir / migration_file
            if migration_path.exists():
                self.run_migration(migration_path.read_text())
                logger.info("Applied migration: %s", migration_file)
            else:
                logger.warning("Migration file not found: %s", migration_path)


def is_duplicate_error(error: BaseException, key: str | None = None) -> bool:
    """True when ``error`` is a unique-constraint violation (optionally on ``key``)."""
    if not isinstance(error, sqlite3.IntegrityError):
        return False
    message = str(error)
    if "UNIQUE constraint failed" not in message:
        return False
    if key:
        return key in message
    return True


def is_not_found_error(error: BaseException) -> bool:
    """True when ``error`` signals a missing row."""
    return isinstance(error, RecordNotFoundError)


class RecordNotFoundError(LookupError):
    """Raised by repositories when an update or lookup targets no row."""


# Module-level singleton
_db: Database | None = None


def get_db() -> Database:
    """Get the global database instance."""
    if _db is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _db


def init_db(config: AppConfig) -> Database:
    """Initialize the global database instance."""
    global _db
    _db = Database(config)
    _db.connect_with_retry()
    _db.initialize_schema()
    return _db
