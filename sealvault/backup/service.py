"""Backup service for SealVault.

Creates backups, lists the ones in storage for this device and prunes old
ones. Encryption and archive layout are done by the caller; this service
names the archive, records it locally and hands it to storage.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..config.constants import DEFAULT_BACKUPS_TO_KEEP
from ..device import DeviceName
from ..exceptions import FatalError
from ..models.local_settings import LocalSettings
from .metadata import BackupMetadata, MetadataFromFileName
from .resources import Resources
from .scheme import BackupScheme

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredBackup:
    """A backup archive found in storage."""

    file_name: str
    info: MetadataFromFileName


class BackupService:
    """Manages this device's backups."""

    def __init__(self, resources: Resources) -> None:
        self.resources = resources

    def prepare_metadata(
        self,
        device_name: DeviceName,
        kdf_nonce: str,
        timestamp: Optional[int] = None,
    ) -> BackupMetadata:
        """Advance the backup version and build metadata for the new backup."""
        version = self.resources.connection.deferred_transaction(
            LocalSettings.increment_backup_version
        )
        builder = (
            BackupMetadata.builder()
            .backup_scheme(BackupScheme.current())
            .backup_version(version)
            .device_id(self.resources.device_id)
            .device_name(device_name)
            .kdf_nonce(kdf_nonce)
        )
        if timestamp is not None:
            builder.timestamp(timestamp)
        return builder.build()

    def create_backup(self, archive_path: Path, metadata: BackupMetadata) -> bool:
        """Record the backup locally, then upload the archive.

        The local record is written first. If the upload fails or the process
        dies before it finishes, `last_uploaded_backup` reports no backup and
        the next cycle uploads again.
        """
        self.resources.connection.deferred_transaction(
            lambda conn: LocalSettings.set_backup_completed(
                conn, metadata.backup_version, metadata.timestamp
            )
        )

        file_name = metadata.backup_file_name()
        uploaded = self.resources.backup_storage.copy_to_storage(archive_path, file_name)
        if uploaded:
            logger.info("Backup uploaded: %s", file_name)
        else:
            logger.warning("Backup upload failed: %s", file_name)
        return uploaded

    def list_backups(self) -> list[StoredBackup]:
        """List this device's backups in storage, newest version first.

        Names that are not backup file names are skipped.
        """
        backups = []
        for file_name in self.resources.backup_storage.list_backup_file_names():
            try:
                info = MetadataFromFileName.parse(file_name)
            except FatalError as e:
                logger.warning("Skipping unrecognized backup file: %s", e)
                continue
            if info.device_id == self.resources.device_id:
                backups.append(StoredBackup(file_name=file_name, info=info))

        backups.sort(key=lambda b: (b.info.backup_version, b.info.timestamp), reverse=True)
        return backups

    def latest_backup(self) -> Optional[StoredBackup]:
        backups = self.list_backups()
        return backups[0] if backups else None

    def prune_backups(self, keep: int = DEFAULT_BACKUPS_TO_KEEP) -> int:
        """Delete all but the newest `keep` backups. Returns the number deleted."""
        if keep < 1:
            raise FatalError("Must keep at least one backup", keep=keep)

        pruned = 0
        for backup in self.list_backups()[keep:]:
            if self.resources.backup_storage.delete_backup(backup.file_name):
                pruned += 1
                logger.info("Pruned old backup: %s", backup.file_name)
            else:
                logger.warning("Failed to prune %s", backup.file_name)
        return pruned

    def download_backup(self, file_name: str, dest_path: Path) -> bool:
        """Copy a backup archive from storage to `dest_path`."""
        MetadataFromFileName.parse(file_name)
        downloaded = self.resources.backup_storage.copy_from_storage(file_name, dest_path)
        if not downloaded:
            logger.warning("Backup download failed: %s", file_name)
        return downloaded
