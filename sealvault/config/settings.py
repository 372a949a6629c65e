"""Configuration utilities for sealvault."""

import os
from pathlib import Path

from .constants import (
    ENV_BACKUP_DIR,
    ENV_DB_PATH,
    ENV_TEST_DB,
    SEALVAULT_BACKUP_DIR,
    SEALVAULT_CONFIG_DIR,
    SEALVAULT_DB_FILENAME,
)


def get_db_path() -> Path:
    """Get the database path, respecting SEALVAULT_TEST_DB and SEALVAULT_DB_PATH.

    When running tests, set SEALVAULT_TEST_DB to a temp file path to prevent
    tests from polluting the real database.
    """
    test_db = os.environ.get(ENV_TEST_DB)
    if test_db:
        return Path(test_db)

    db_path = os.environ.get(ENV_DB_PATH)
    if db_path:
        return Path(db_path).expanduser()

    SEALVAULT_CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    return SEALVAULT_CONFIG_DIR / SEALVAULT_DB_FILENAME


def get_backup_dir() -> Path:
    """Get the directory used as backup storage."""
    backup_dir = os.environ.get(ENV_BACKUP_DIR)
    if backup_dir:
        return Path(backup_dir).expanduser()
    return SEALVAULT_BACKUP_DIR
