"""Backup metadata record, backup file name codec and upload status.

The metadata is saved as a plaintext JSON sidecar next to the encrypted
archive. Its canonical serialization is the associated data of the AEAD that
protects the archive, so any edit to the sidecar makes decryption fail.

Backup file names carry (scheme, os, timestamp, device id, version):

    sealvault_backup_<scheme>_<os>_<timestamp>_<device_id>_<version>.zip

The device name and KDF nonce are only ever stored in the metadata record.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

from ..config.constants import (
    BACKUP_FILE_EXTENSION,
    BACKUP_FILE_PREFIX,
    MAX_BACKUP_VERSION,
)
from ..device import DeviceIdentifier, DeviceName, OperatingSystem
from ..exceptions import FatalError, SealvaultError
from ..models.local_settings import LocalSettings
from ..utils.datetime_utils import parse_rfc3339_timestamp, unix_timestamp
from .scheme import BackupScheme
from .version import BackupVersion

if TYPE_CHECKING:
    from .resources import Resources

logger = logging.getLogger(__name__)

BACKUP_FILE_NAME_REGEX = re.compile(
    rf"{BACKUP_FILE_PREFIX}_(?P<scheme>[A-Za-z0-9-]+)_(?P<os>[A-Za-z0-9-]+)"
    r"_(?P<timestamp>[0-9]+)_(?P<device_id>[A-Za-z0-9-]+)_(?P<version>[0-9]+)"
    rf"\.{BACKUP_FILE_EXTENSION}"
)

_REQUIRED_FIELDS = (
    "backup_scheme",
    "backup_version",
    "device_id",
    "device_name",
    "kdf_nonce",
)


def _parse_timestamp(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise FatalError("Backup timestamp must be an integer", value=value)
    if value < 0 or value > MAX_BACKUP_VERSION:
        raise FatalError("Backup timestamp out of range", value=value)
    return value


@dataclass(frozen=True)
class BackupMetadata:
    """Descriptor of one backup. Immutable once built."""

    backup_scheme: BackupScheme
    backup_version: BackupVersion
    device_id: DeviceIdentifier
    device_name: DeviceName
    kdf_nonce: str  # Base-64 encoded KDF nonce
    timestamp: int = field(default_factory=unix_timestamp)  # Unix seconds
    operating_system: OperatingSystem = field(default_factory=OperatingSystem.default)

    def __post_init__(self) -> None:
        if not isinstance(self.backup_scheme, BackupScheme):
            raise FatalError("Invalid backup scheme", value=self.backup_scheme)
        if not isinstance(self.backup_version, BackupVersion):
            raise FatalError("Invalid backup version", value=self.backup_version)
        if not isinstance(self.device_id, DeviceIdentifier):
            raise FatalError("Invalid device identifier", value=self.device_id)
        if not isinstance(self.operating_system, OperatingSystem):
            raise FatalError("Invalid operating system", value=self.operating_system)
        if not isinstance(self.device_name, str):
            raise FatalError("Device name must be a string", value=self.device_name)
        if not isinstance(self.kdf_nonce, str):
            raise FatalError("KDF nonce must be a base-64 string", value=self.kdf_nonce)
        _parse_timestamp(self.timestamp)

    @staticmethod
    def builder() -> BackupMetadataBuilder:
        return BackupMetadataBuilder()

    def backup_file_name(self) -> str:
        return get_backup_file_name(
            self.backup_scheme,
            self.operating_system,
            self.timestamp,
            self.device_id,
            self.backup_version,
        )

    # Plain serialization

    def to_dict(self) -> dict[str, Any]:
        return {
            "backup_scheme": self.backup_scheme.value,
            "backup_version": self.backup_version.value,
            "timestamp": self.timestamp,
            "device_id": self.device_id.value,
            "device_name": self.device_name,
            "operating_system": self.operating_system.value,
            "kdf_nonce": self.kdf_nonce,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BackupMetadata:
        """Build metadata from its plain dict form.

        Raises:
            FatalError: If a field is missing or has the wrong form
        """
        if not isinstance(data, dict):
            raise FatalError("Backup metadata must be an object", value=data)
        for name in (*_REQUIRED_FIELDS, "timestamp", "operating_system"):
            if name not in data:
                raise FatalError("Missing backup metadata field", field=name)

        version = data["backup_version"]
        if isinstance(version, bool) or not isinstance(version, int):
            raise FatalError("Backup version must be an integer", value=version)

        return cls(
            backup_scheme=BackupScheme.parse(data["backup_scheme"]),
            backup_version=BackupVersion.from_validated_integer(version),
            timestamp=_parse_timestamp(data["timestamp"]),
            device_id=DeviceIdentifier.parse(data["device_id"]),
            device_name=data["device_name"],
            operating_system=OperatingSystem.parse(data["operating_system"]),
            kdf_nonce=data["kdf_nonce"],
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, text: str) -> BackupMetadata:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise FatalError("Backup metadata is not valid JSON", error=str(e)) from e
        return cls.from_dict(data)

    def write_sidecar(self, path: Path) -> None:
        """Write the plaintext metadata file that travels with the archive."""
        path.write_text(self.to_json(), encoding="utf-8")
        logger.debug("Backup metadata saved: %s", path)

    @classmethod
    def read_sidecar(cls, path: Path) -> BackupMetadata:
        return cls.from_json(path.read_text(encoding="utf-8"))

    # Canonical serialization

    def canonical_json(self) -> bytes:
        """Byte-exact serialization used as associated data of the backup AEAD.

        Keys are sorted, there is no insignificant whitespace and every number
        is an integer, so field-wise equal records always produce the same
        bytes regardless of how they were built.
        """
        try:
            return json.dumps(
                self.to_dict(),
                sort_keys=True,
                separators=(",", ":"),
                ensure_ascii=False,
                allow_nan=False,
            ).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise FatalError("Failed to serialize backup metadata", error=str(e)) from e


class BackupMetadataBuilder:
    """Fluent builder for `BackupMetadata`.

    Required: backup_scheme, backup_version, device_id, device_name, kdf_nonce.
    Defaulted: timestamp (now), operating_system (host).
    """

    def __init__(self) -> None:
        self._fields: dict[str, Any] = {}

    def backup_scheme(self, scheme: BackupScheme) -> BackupMetadataBuilder:
        self._fields["backup_scheme"] = scheme
        return self

    def backup_version(self, version: BackupVersion) -> BackupMetadataBuilder:
        self._fields["backup_version"] = version
        return self

    def timestamp(self, timestamp: int) -> BackupMetadataBuilder:
        self._fields["timestamp"] = timestamp
        return self

    def device_id(self, device_id: DeviceIdentifier) -> BackupMetadataBuilder:
        self._fields["device_id"] = device_id
        return self

    def device_name(self, device_name: DeviceName) -> BackupMetadataBuilder:
        self._fields["device_name"] = device_name
        return self

    def operating_system(self, os: OperatingSystem) -> BackupMetadataBuilder:
        self._fields["operating_system"] = os
        return self

    def kdf_nonce(self, kdf_nonce: str | bytes) -> BackupMetadataBuilder:
        if isinstance(kdf_nonce, bytes):
            kdf_nonce = kdf_nonce.decode("ascii")
        self._fields["kdf_nonce"] = kdf_nonce
        return self

    def build(self) -> BackupMetadata:
        for name in _REQUIRED_FIELDS:
            if name not in self._fields:
                raise FatalError("Missing backup metadata field", field=name)
        fields = dict(self._fields)
        if "timestamp" not in fields:
            fields["timestamp"] = unix_timestamp()
        if "operating_system" not in fields:
            fields["operating_system"] = OperatingSystem.default()
        return BackupMetadata(**fields)


@dataclass(frozen=True)
class MetadataFromFileName:
    """The metadata fields recoverable from a backup file name.

    The scheme is checked while parsing but not kept.
    """

    timestamp: int
    os: OperatingSystem
    device_id: DeviceIdentifier
    backup_version: BackupVersion

    @classmethod
    def parse(cls, file_name: str) -> MetadataFromFileName:
        """Parse a backup file name.

        Raises:
            FatalError: If the name does not match the backup file name format
                or a field does not parse into its type
        """
        match = BACKUP_FILE_NAME_REGEX.fullmatch(file_name)
        if match is None:
            raise FatalError("Invalid backup file name format", file_name=file_name)

        try:
            BackupScheme.parse(match.group("scheme"))
            timestamp = _parse_timestamp(int(match.group("timestamp")))
            os = OperatingSystem.parse(match.group("os"))
            device_id = DeviceIdentifier.parse(match.group("device_id"))
            backup_version = BackupVersion.from_string(match.group("version"))
        except SealvaultError as e:
            raise FatalError(
                "Invalid field in backup file name", file_name=file_name, error=e.message
            ) from e

        return cls(
            timestamp=timestamp,
            os=os,
            device_id=device_id,
            backup_version=backup_version,
        )


def get_backup_file_name(
    backup_scheme: BackupScheme,
    os: OperatingSystem,
    timestamp: int,
    device_id: DeviceIdentifier,
    backup_version: BackupVersion,
) -> str:
    return (
        f"{BACKUP_FILE_PREFIX}_{backup_scheme}_{os}_{timestamp}"
        f"_{device_id}_{backup_version}.{BACKUP_FILE_EXTENSION}"
    )


def last_uploaded_backup(resources: Resources) -> Optional[int]:
    """Get the last backup time as a unix timestamp.

    Returns None if there are no backups or the last backup hasn't been
    uploaded to backup storage yet.
    """
    backup_version, datestamp = resources.connection.deferred_transaction(
        lambda conn: (
            LocalSettings.fetch_backup_version(conn),
            LocalSettings.fetch_backup_timestamp(conn),
        )
    )
    if datestamp is None:
        return None

    # Storage is checked outside the transaction
    timestamp = int(parse_rfc3339_timestamp(datestamp).timestamp())
    backup_file_name = get_backup_file_name(
        BackupScheme.current(),
        OperatingSystem.default(),
        timestamp,
        resources.device_id,
        backup_version,
    )

    if resources.backup_storage.is_uploaded(backup_file_name):
        return timestamp

    logger.info("Last backup %s has not been uploaded yet", backup_file_name)
    return None
