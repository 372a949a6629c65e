"""
SealVault Database Package

- connection: SQLite connection management and deferred transactions
- migrations: versioned schema migrations
- deterministic_id: content-addressed primary keys for entity rows
"""

from .connection import DatabaseConnection
from .deterministic_id import (
    DeriveDeterministicId,
    DeterministicId,
    EntityName,
    derive_deterministic_id,
)

__all__ = [
    "DatabaseConnection",
    "DeriveDeterministicId",
    "DeterministicId",
    "EntityName",
    "derive_deterministic_id",
]
