"""Tests for the backup service."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from sealvault.backup.metadata import get_backup_file_name, last_uploaded_backup
from sealvault.backup.resources import CoreResources
from sealvault.backup.scheme import BackupScheme
from sealvault.backup.service import BackupService
from sealvault.backup.version import BackupVersion
from sealvault.device import DeviceIdentifier, OperatingSystem
from sealvault.exceptions import FatalError
from sealvault.models.local_settings import LocalSettings

# ── Fixtures ────────────────────────────────────────────────────────


@pytest.fixture
def svc(resources: CoreResources) -> BackupService:
    return BackupService(resources)


@pytest.fixture
def archive(tmp_path: Path) -> Path:
    path = tmp_path / "archive.zip"
    path.write_bytes(b"encrypted payload")
    return path


def _name(device_id: DeviceIdentifier, version: int, timestamp: int = 1700000000) -> str:
    return get_backup_file_name(
        BackupScheme.V1, OperatingSystem.IOS, timestamp, device_id, BackupVersion(version)
    )


# ── Metadata and creation ──────────────────────────────────────────


class TestCreateBackup:
    def test_prepare_metadata_advances_version(self, svc: BackupService) -> None:
        first = svc.prepare_metadata("My Mac", "bm9uY2U=", timestamp=100)
        second = svc.prepare_metadata("My Mac", "bm9uY2U=", timestamp=200)

        assert first.backup_version == BackupVersion(1)
        assert second.backup_version == BackupVersion(2)
        assert first.device_id == svc.resources.device_id
        assert first.backup_scheme == BackupScheme.V1
        assert first.timestamp == 100

    def test_create_backup_uploads_and_resolves(
        self, svc: BackupService, archive: Path, backup_dir: Path
    ) -> None:
        metadata = svc.prepare_metadata("My Mac", "bm9uY2U=", timestamp=1700000000)

        assert svc.create_backup(archive, metadata) is True
        assert (backup_dir / metadata.backup_file_name()).read_bytes() == b"encrypted payload"
        assert last_uploaded_backup(svc.resources) == 1700000000

    def test_failed_upload_is_recorded_but_not_resolved(
        self, svc: BackupService, archive: Path
    ) -> None:
        storage = MagicMock()
        storage.copy_to_storage.return_value = False
        storage.is_uploaded.return_value = False
        svc.resources.backup_storage = storage
        metadata = svc.prepare_metadata("My Mac", "bm9uY2U=", timestamp=1700000000)

        assert svc.create_backup(archive, metadata) is False

        recorded = svc.resources.connection.deferred_transaction(
            lambda conn: (
                LocalSettings.fetch_backup_version(conn),
                LocalSettings.fetch_backup_timestamp(conn),
            )
        )
        assert recorded == (metadata.backup_version, "2023-11-14T22:13:20Z")
        assert last_uploaded_backup(svc.resources) is None


# ── Listing and pruning ────────────────────────────────────────────


class TestListBackups:
    def test_empty(self, svc: BackupService) -> None:
        assert svc.list_backups() == []
        assert svc.latest_backup() is None

    def test_newest_version_first_and_other_devices_ignored(
        self, svc: BackupService, backup_dir: Path
    ) -> None:
        device_id = svc.resources.device_id
        for version in (1, 3, 2):
            (backup_dir / _name(device_id, version)).touch()
        (backup_dir / _name(DeviceIdentifier("other-device"), 9)).touch()
        (backup_dir / "sealvault_backup_v1_ios_garbage.zip").touch()

        backups = svc.list_backups()

        assert [b.info.backup_version.value for b in backups] == [3, 2, 1]
        assert svc.latest_backup() == backups[0]
        assert backups[0].file_name == _name(device_id, 3)


class TestPruneBackups:
    def test_keeps_newest(self, svc: BackupService, backup_dir: Path) -> None:
        device_id = svc.resources.device_id
        for version in (1, 2, 3, 4):
            (backup_dir / _name(device_id, version)).touch()
        other = backup_dir / _name(DeviceIdentifier("other-device"), 1)
        other.touch()

        assert svc.prune_backups(keep=2) == 2

        remaining = sorted(p.name for p in backup_dir.iterdir())
        assert remaining == sorted([_name(device_id, 3), _name(device_id, 4), other.name])

    def test_keep_must_be_positive(self, svc: BackupService) -> None:
        with pytest.raises(FatalError):
            svc.prune_backups(keep=0)

    def test_failed_delete_not_counted(self, svc: BackupService) -> None:
        device_id = svc.resources.device_id
        storage = MagicMock()
        storage.list_backup_file_names.return_value = [
            _name(device_id, 1),
            _name(device_id, 2),
        ]
        storage.delete_backup.return_value = False
        svc.resources.backup_storage = storage

        assert svc.prune_backups(keep=1) == 0
        storage.delete_backup.assert_called_once_with(_name(device_id, 1))


class TestDownloadBackup:
    def test_download(self, svc: BackupService, backup_dir: Path, tmp_path: Path) -> None:
        name = _name(svc.resources.device_id, 1)
        (backup_dir / name).write_bytes(b"payload")
        dest = tmp_path / "restore" / "backup.zip"

        assert svc.download_backup(name, dest) is True
        assert dest.read_bytes() == b"payload"

    def test_missing_backup(self, svc: BackupService, tmp_path: Path) -> None:
        name = _name(svc.resources.device_id, 1)
        assert svc.download_backup(name, tmp_path / "backup.zip") is False

    def test_rejects_non_backup_name(self, svc: BackupService, tmp_path: Path) -> None:
        with pytest.raises(FatalError):
            svc.download_backup("notes.txt", tmp_path / "notes.txt")
