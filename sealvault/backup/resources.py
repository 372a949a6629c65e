"""Collaborators shared by the backup status resolver and backup service."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Protocol, TypeVar

from ..config.settings import get_backup_dir
from ..database.connection import DatabaseConnection
from ..device import DeviceIdentifier
from ..models.local_settings import LocalSettings
from .storage import BackupStorage, LocalBackupStorage

T = TypeVar("T")


class TransactionRunner(Protocol):
    def deferred_transaction(self, callback: Callable[[sqlite3.Connection], T]) -> T:
        ...


class Resources(Protocol):
    """What backup code needs from its environment."""

    @property
    def connection(self) -> TransactionRunner:
        ...

    @property
    def device_id(self) -> DeviceIdentifier:
        ...

    @property
    def backup_storage(self) -> BackupStorage:
        ...


@dataclass
class CoreResources:
    """Resources backed by the local database and a storage directory."""

    connection: DatabaseConnection
    device_id: DeviceIdentifier
    backup_storage: BackupStorage

    @classmethod
    def from_config(
        cls,
        db_path: Optional[Path] = None,
        backup_dir: Optional[Path] = None,
    ) -> CoreResources:
        """Open the configured database and storage directory."""
        connection = DatabaseConnection(db_path)
        connection.ensure_schema()
        device_id = connection.deferred_transaction(LocalSettings.fetch_device_id)
        storage = LocalBackupStorage(backup_dir or get_backup_dir())
        return cls(connection=connection, device_id=device_id, backup_storage=storage)
