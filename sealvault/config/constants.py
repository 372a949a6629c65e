"""
Centralized constants for SealVault.

Backup file naming, storage locations and environment variable names live
here so the codec and the storage adapters agree on them.
"""

from pathlib import Path

# =============================================================================
# PATHS
# =============================================================================

SEALVAULT_CONFIG_DIR = Path.home() / ".config" / "sealvault"
SEALVAULT_DB_FILENAME = "sealvault.db"
SEALVAULT_BACKUP_DIR = SEALVAULT_CONFIG_DIR / "backups"

# =============================================================================
# ENVIRONMENT VARIABLES
# =============================================================================

ENV_TEST_DB = "SEALVAULT_TEST_DB"
ENV_DB_PATH = "SEALVAULT_DB_PATH"
ENV_BACKUP_DIR = "SEALVAULT_BACKUP_DIR"

# =============================================================================
# BACKUP FILES
# =============================================================================

BACKUP_FILE_PREFIX = "sealvault_backup"
BACKUP_FILE_EXTENSION = "zip"
BACKUP_METADATA_SUFFIX = ".metadata.json"

# Versions are stored in a signed 64-bit SQLite column
MAX_BACKUP_VERSION = 2**63 - 1

# Default number of backups kept per device by `backup prune`
DEFAULT_BACKUPS_TO_KEEP = 1
