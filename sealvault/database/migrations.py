"""Database migration system for sealvault."""

import logging
import sqlite3
from typing import Callable

from ..device import DeviceIdentifier

logger = logging.getLogger(__name__)


def get_schema_version(conn: sqlite3.Connection) -> int:
    """Get the current schema version."""
    cursor = conn.cursor()
    cursor.execute(
        """
        CREATE TABLE IF NOT EXISTS schema_version (
            version INTEGER PRIMARY KEY,
            applied_at DATETIME DEFAULT CURRENT_TIMESTAMP
        )
    """
    )

    cursor.execute("SELECT MAX(version) FROM schema_version")
    result = cursor.fetchone()
    # -1 for fresh databases so migration 0 runs
    return result[0] if result[0] is not None else -1


def set_schema_version(conn: sqlite3.Connection, version: int):
    """Set the schema version."""
    conn.execute("INSERT INTO schema_version (version) VALUES (?)", (version,))


def migration_000_create_local_settings(conn: sqlite3.Connection):
    """Create the single-row local settings table and seed the device id."""
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS local_settings (
            id INTEGER PRIMARY KEY CHECK (id = 1),
            device_id TEXT NOT NULL,
            backup_version INTEGER NOT NULL DEFAULT 0 CHECK (backup_version >= 0),
            backup_completed_at TEXT,
            created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TEXT
        )
        """
    )
    conn.execute(
        "INSERT OR IGNORE INTO local_settings (id, device_id) VALUES (1, ?)",
        (str(DeviceIdentifier.generate()),),
    )


def migration_001_create_dapps(conn: sqlite3.Connection):
    """Create the dapps table keyed by deterministic id."""
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS dapps (
            deterministic_id TEXT PRIMARY KEY NOT NULL,
            identifier TEXT NOT NULL,
            url TEXT NOT NULL,
            created_at TEXT NOT NULL,
            updated_at TEXT
        )
        """
    )
    conn.execute(
        "CREATE INDEX IF NOT EXISTS idx_dapps_updated ON dapps(updated_at DESC, created_at DESC)"
    )


def migration_002_create_profile_pictures(conn: sqlite3.Connection):
    """Create the profile pictures table keyed by deterministic id."""
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS profile_pictures (
            deterministic_id TEXT PRIMARY KEY NOT NULL,
            image_name TEXT,
            image_hash BLOB NOT NULL,
            image BLOB NOT NULL,
            created_at TEXT NOT NULL,
            updated_at TEXT
        )
        """
    )


# List of all migrations in order
MIGRATIONS: list[tuple[int, str, Callable]] = [
    (0, "Create local settings", migration_000_create_local_settings),
    (1, "Create dapps", migration_001_create_dapps),
    (2, "Create profile pictures", migration_002_create_profile_pictures),
]


def run_migrations(conn: sqlite3.Connection):
    """Run all pending migrations on an open connection."""
    current_version = get_schema_version(conn)

    for version, description, migration_func in MIGRATIONS:
        if version > current_version:
            logger.info("Running migration %d: %s", version, description)
            conn.execute("BEGIN IMMEDIATE")
            try:
                migration_func(conn)
                set_schema_version(conn, version)
            except sqlite3.Error:
                conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")
            logger.debug("Migration %d completed", version)
