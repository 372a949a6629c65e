"""Content-addressed identifiers for entity rows.

An entity's primary key is the SHA-256 digest of its namespace tag followed by
its unique columns in a fixed order. Identical natural keys always map to the
same id, so creation can be written as "insert, ignoring conflicts" without a
separate existence check.

Each component is prefixed with its 8-byte big-endian length before hashing,
which keeps ("ab", "c") and ("a", "bc") apart.
"""

from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import Enum

# 64 lowercase hex characters
DeterministicId = str

_LENGTH_PREFIX_BYTES = 8


class EntityName(Enum):
    """Namespace tags, one per entity kind with a deterministic id.

    Values are part of every derived id. Never change an existing value.
    Only DAPP and PROFILE_PICTURE have tables here; the other tags stay
    reserved so ids of those kinds never share a namespace.
    """

    ACCOUNT_PICTURE = "AccountPicture"
    ADDRESS = "Address"
    ASYMMETRIC_KEY = "AsymmetricKey"
    DAPP = "Dapp"
    PROFILE = "Profile"
    PROFILE_PICTURE = "ProfilePicture"

    @property
    def tag(self) -> bytes:
        return self.value.encode("utf-8")


def _as_bytes(column: str | bytes) -> bytes:
    if isinstance(column, str):
        return column.encode("utf-8")
    return bytes(column)


def derive_deterministic_id(
    entity_name: EntityName, unique_columns: Sequence[str | bytes]
) -> DeterministicId:
    """Derive the id for an entity from its namespace and ordered unique columns."""
    hasher = hashlib.sha256()
    for part in (entity_name.tag, *(_as_bytes(c) for c in unique_columns)):
        hasher.update(len(part).to_bytes(_LENGTH_PREFIX_BYTES, "big"))
        hasher.update(part)
    return hasher.hexdigest()


class DeriveDeterministicId(ABC):
    """Mixin for entities whose primary key is derived from their content."""

    @abstractmethod
    def entity_name(self) -> EntityName:
        """Namespace of this entity kind."""

    @abstractmethod
    def unique_columns(self) -> Sequence[str | bytes]:
        """Natural key columns, always in the same order for the entity kind."""

    def deterministic_id(self) -> DeterministicId:
        return derive_deterministic_id(self.entity_name(), self.unique_columns())
