"""
Local settings of this device: device id and the last backup version/time.

All functions take an open connection so callers can group reads and
writes into one transaction.
"""

import logging
import sqlite3
from typing import Optional

from ..backup.version import BackupVersion
from ..device import DeviceIdentifier
from ..exceptions import NotFoundError
from ..utils.datetime_utils import rfc3339_from_unix, rfc3339_timestamp

logger = logging.getLogger(__name__)


def _fetch_row(conn: sqlite3.Connection) -> sqlite3.Row:
    row = conn.execute(
        "SELECT device_id, backup_version, backup_completed_at FROM local_settings WHERE id = 1"
    ).fetchone()
    if row is None:
        raise NotFoundError("Local settings are not initialised", table="local_settings")
    return row


class LocalSettings:
    """Accessors for the single-row local_settings table."""

    @staticmethod
    def fetch_device_id(conn: sqlite3.Connection) -> DeviceIdentifier:
        return DeviceIdentifier.parse(_fetch_row(conn)["device_id"])

    @staticmethod
    def fetch_backup_version(conn: sqlite3.Connection) -> BackupVersion:
        return BackupVersion.from_validated_integer(_fetch_row(conn)["backup_version"])

    @staticmethod
    def fetch_backup_timestamp(conn: sqlite3.Connection) -> Optional[str]:
        """RFC 3339 time of the last completed backup, if any."""
        return _fetch_row(conn)["backup_completed_at"]

    @staticmethod
    def increment_backup_version(conn: sqlite3.Connection) -> BackupVersion:
        """Advance the backup version and return the new value."""
        next_version = LocalSettings.fetch_backup_version(conn).next()
        conn.execute(
            "UPDATE local_settings SET backup_version = ?, updated_at = ? WHERE id = 1",
            (next_version.value, rfc3339_timestamp()),
        )
        logger.debug("Backup version advanced to %s", next_version)
        return next_version

    @staticmethod
    def set_backup_completed(
        conn: sqlite3.Connection, backup_version: BackupVersion, timestamp: int
    ) -> None:
        """Record the version and unix time of the most recent backup."""
        conn.execute(
            """
            UPDATE local_settings
            SET backup_version = ?, backup_completed_at = ?, updated_at = ?
            WHERE id = 1
            """,
            (backup_version.value, rfc3339_from_unix(timestamp), rfc3339_timestamp()),
        )
