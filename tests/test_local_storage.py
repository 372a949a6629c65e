"""Tests for the directory-backed backup storage."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from sealvault.backup.storage import BackupStorage, LocalBackupStorage

NAME = "sealvault_backup_v1_ios_1700000000_dev123_3.zip"


def test_implements_protocol(storage: LocalBackupStorage) -> None:
    assert isinstance(storage, BackupStorage)


class TestLocalBackupStorage:
    def test_copy_to_storage(self, storage: LocalBackupStorage, tmp_path: Path) -> None:
        src = tmp_path / "archive.zip"
        src.write_bytes(b"data")

        assert storage.is_uploaded(NAME) is False
        assert storage.copy_to_storage(src, NAME) is True
        assert storage.is_uploaded(NAME) is True
        assert storage.list_backup_file_names() == [NAME]

    def test_copy_creates_directory(self, tmp_path: Path) -> None:
        storage = LocalBackupStorage(tmp_path / "new" / "dir")
        src = tmp_path / "archive.zip"
        src.write_bytes(b"data")
        assert storage.copy_to_storage(src, NAME) is True

    def test_copy_missing_source_returns_false(
        self, storage: LocalBackupStorage, tmp_path: Path
    ) -> None:
        assert storage.copy_to_storage(tmp_path / "missing.zip", NAME) is False
        assert storage.is_uploaded(NAME) is False
        assert list(storage.directory.iterdir()) == []

    def test_copy_os_error_returns_false(
        self, storage: LocalBackupStorage, tmp_path: Path
    ) -> None:
        src = tmp_path / "archive.zip"
        src.write_bytes(b"data")
        with patch("sealvault.backup.storage.shutil.copy2", side_effect=OSError("disk full")):
            assert storage.copy_to_storage(src, NAME) is False
        assert storage.is_uploaded(NAME) is False

    def test_rejects_path_names(self, storage: LocalBackupStorage, tmp_path: Path) -> None:
        src = tmp_path / "archive.zip"
        src.write_bytes(b"data")
        assert storage.copy_to_storage(src, "../escape.zip") is False
        assert storage.is_uploaded("../escape.zip") is False
        assert storage.delete_backup("") is False

    def test_list_ignores_other_files(self, storage: LocalBackupStorage, backup_dir: Path) -> None:
        (backup_dir / NAME).touch()
        (backup_dir / "notes.txt").touch()
        (backup_dir / f".{NAME}.partial").touch()
        assert storage.list_backup_file_names() == [NAME]

    def test_list_missing_directory(self, tmp_path: Path) -> None:
        assert LocalBackupStorage(tmp_path / "nope").list_backup_file_names() == []

    def test_copy_from_storage(self, storage: LocalBackupStorage, backup_dir: Path, tmp_path: Path) -> None:
        (backup_dir / NAME).write_bytes(b"data")
        dest = tmp_path / "out" / "restored.zip"
        assert storage.copy_from_storage(NAME, dest) is True
        assert dest.read_bytes() == b"data"

    def test_copy_from_storage_missing(self, storage: LocalBackupStorage, tmp_path: Path) -> None:
        assert storage.copy_from_storage(NAME, tmp_path / "restored.zip") is False

    def test_delete_backup(self, storage: LocalBackupStorage, backup_dir: Path) -> None:
        (backup_dir / NAME).touch()
        assert storage.delete_backup(NAME) is True
        assert storage.delete_backup(NAME) is False
        assert storage.is_uploaded(NAME) is False
