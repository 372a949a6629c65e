"""Monotonic backup version of one device's backup lineage."""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..config.constants import MAX_BACKUP_VERSION
from ..exceptions import FatalError, RetriableError

_INTEGER_LITERAL = re.compile(r"[+-]?[0-9]+")
_MIN_I64 = -(2**63)


@dataclass(frozen=True, order=True)
class BackupVersion:
    """Non-negative backup version.

    Stored in a signed 64-bit column, so the range is [0, 2**63 - 1]. The
    range is checked on construction only; downstream code can rely on it.
    """

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise FatalError("Backup version must be an integer", value=self.value)
        if self.value < 0:
            raise FatalError("Negative backup version", value=self.value)
        if self.value > MAX_BACKUP_VERSION:
            raise FatalError("Backup version out of range", value=self.value)

    @classmethod
    def from_validated_integer(cls, value: int) -> BackupVersion:
        return cls(value)

    @classmethod
    def from_string(cls, value: str) -> BackupVersion:
        """Parse a decimal string as a signed 64-bit integer.

        A string that is not a 64-bit integer literal is retriable; a valid
        literal that is negative is fatal.
        """
        if not isinstance(value, str) or not _INTEGER_LITERAL.fullmatch(value):
            raise RetriableError("Failed to parse backup version", value=value)
        parsed = int(value, 10)
        if not _MIN_I64 <= parsed <= MAX_BACKUP_VERSION:
            raise RetriableError("Backup version does not fit in 64 bits", value=value)
        return cls.from_validated_integer(parsed)

    def next(self) -> BackupVersion:
        return BackupVersion(self.value + 1)

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)
