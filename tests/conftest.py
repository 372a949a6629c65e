"""Shared pytest fixtures for sealvault tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from sealvault.backup.resources import CoreResources
from sealvault.backup.storage import LocalBackupStorage
from sealvault.database.connection import DatabaseConnection


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests away from the real database and backup directory."""
    monkeypatch.setenv("SEALVAULT_TEST_DB", str(tmp_path / "env.db"))
    monkeypatch.setenv("SEALVAULT_BACKUP_DIR", str(tmp_path / "env-backups"))


@pytest.fixture
def db(tmp_path: Path) -> DatabaseConnection:
    """A migrated database in a temp file."""
    connection = DatabaseConnection(tmp_path / "test.db")
    connection.ensure_schema()
    return connection


@pytest.fixture
def backup_dir(tmp_path: Path) -> Path:
    d = tmp_path / "backups"
    d.mkdir()
    return d


@pytest.fixture
def storage(backup_dir: Path) -> LocalBackupStorage:
    return LocalBackupStorage(backup_dir)


@pytest.fixture
def resources(tmp_path: Path, backup_dir: Path) -> CoreResources:
    return CoreResources.from_config(db_path=tmp_path / "test.db", backup_dir=backup_dir)
