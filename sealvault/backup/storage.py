"""Backup storage protocol and the directory-backed implementation.

Every storage operation reports success as a bool. `False` means the
operation did not happen; it is never raised as an exception.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Protocol, runtime_checkable

from ..config.constants import BACKUP_FILE_EXTENSION, BACKUP_FILE_PREFIX

logger = logging.getLogger(__name__)


@runtime_checkable
class BackupStorage(Protocol):
    """Protocol that all backup storage backends must implement."""

    def is_uploaded(self, name: str) -> bool:
        """Whether a backup file with this exact name is in storage."""
        ...

    def list_backup_file_names(self) -> list[str]:
        ...

    def copy_to_storage(self, local_path: Path, name: str) -> bool:
        ...

    def copy_from_storage(self, name: str, local_path: Path) -> bool:
        ...

    def delete_backup(self, name: str) -> bool:
        ...


class LocalBackupStorage:
    """Backup storage on a local (or synced) directory."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def _path(self, name: str) -> Path | None:
        # Names are plain file names, never paths
        if not name or Path(name).name != name:
            logger.warning("Rejected backup file name: %r", name)
            return None
        return self.directory / name

    def is_uploaded(self, name: str) -> bool:
        path = self._path(name)
        return path is not None and path.is_file()

    def list_backup_file_names(self) -> list[str]:
        """List backup archive names, sorted by name."""
        if not self.directory.exists():
            return []
        pattern = f"{BACKUP_FILE_PREFIX}_*.{BACKUP_FILE_EXTENSION}"
        return sorted(p.name for p in self.directory.glob(pattern) if p.is_file())

    def copy_to_storage(self, local_path: Path, name: str) -> bool:
        dest = self._path(name)
        if dest is None:
            return False
        # Copy under a temporary name so a partial copy is never visible as uploaded
        partial = dest.with_name(f".{name}.partial")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            shutil.copy2(local_path, partial)
            partial.replace(dest)
        except OSError as e:
            logger.warning("Failed to copy %s to storage: %s", local_path, e)
            partial.unlink(missing_ok=True)
            return False
        logger.info("Copied backup to storage: %s", name)
        return True

    def copy_from_storage(self, name: str, local_path: Path) -> bool:
        src = self._path(name)
        if src is None or not src.is_file():
            return False
        try:
            local_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(src, local_path)
        except OSError as e:
            logger.warning("Failed to copy %s from storage: %s", name, e)
            return False
        return True

    def delete_backup(self, name: str) -> bool:
        path = self._path(name)
        if path is None or not path.is_file():
            return False
        try:
            path.unlink()
        except OSError as e:
            logger.warning("Failed to delete backup %s: %s", name, e)
            return False
        logger.info("Deleted backup: %s", name)
        return True
