"""Backup format tags."""

from __future__ import annotations

from enum import Enum

from ..exceptions import FatalError


class BackupScheme(str, Enum):
    """Which version of the backup protocol produced an archive."""

    V1 = "v1"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, token: str) -> BackupScheme:
        try:
            return cls(token)
        except ValueError:
            raise FatalError("Unknown backup scheme", value=token) from None

    @classmethod
    def current(cls) -> BackupScheme:
        return cls.V1
