"""
Database connection management for sealvault
"""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Optional, TypeVar

from . import migrations
from ..config.settings import get_db_path

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DatabaseConnection:
    """SQLite database connection manager for sealvault"""

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = db_path if db_path is not None else get_db_path()

    @contextmanager
    def get_connection(self) -> Iterator[sqlite3.Connection]:
        """Get a database connection with context manager.

        Connections run in autocommit mode; transactions are opened
        explicitly by `deferred_transaction`.
        """
        conn = sqlite3.connect(self.db_path, isolation_level=None)
        conn.row_factory = sqlite3.Row  # Enable column access by name
        conn.execute("PRAGMA foreign_keys = ON")

        try:
            yield conn
        finally:
            conn.close()

    def deferred_transaction(self, callback: Callable[[sqlite3.Connection], T]) -> T:
        """Run `callback` inside a deferred transaction and return its result.

        SQLite acquires the lock lazily on the first statement, so concurrent
        writers are not blocked until the callback actually touches the
        database. Commits on success, rolls back and re-raises on error.
        """
        with self.get_connection() as conn:
            conn.execute("BEGIN DEFERRED")
            try:
                result = callback(conn)
            except BaseException:
                # SQLite may already have rolled back on its own (e.g. SQLITE_FULL)
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")
            return result

    def ensure_schema(self) -> None:
        """Run any pending migrations."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with self.get_connection() as conn:
            migrations.run_migrations(conn)
        logger.debug("Schema ready at %s", self.db_path)
