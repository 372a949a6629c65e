"""
Dapps the user has interacted with, keyed by deterministic id.

A dapp is identified by its registrable domain ("example.com" for
"https://www.example.com/app"), falling back to the URL origin when the
host has none. The public suffix list lookup is supplied by the caller.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import Optional, Protocol
from urllib.parse import urlsplit

from ..database.deterministic_id import DeriveDeterministicId, DeterministicId, EntityName
from ..exceptions import FatalError, NotFoundError
from ..utils.datetime_utils import rfc3339_timestamp

_DEFAULT_PORTS = {"http": 80, "https": 443, "ws": 80, "wss": 443}


class PublicSuffixList(Protocol):
    """Public suffix list lookup."""

    def registrable_domain(self, host: str) -> Optional[str]:
        """Return the registrable domain of `host`, or None if it has none."""
        ...


def url_origin(url: str) -> str:
    """ASCII serialization of a URL's origin: scheme://host[:port]."""
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError as e:
        raise FatalError("Invalid dapp url", url=url) from e
    if not parts.scheme or not parts.hostname:
        raise FatalError("Dapp url has no origin", url=url)

    scheme = parts.scheme.lower()
    try:
        host = parts.hostname.encode("idna").decode("ascii")
    except UnicodeError as e:
        raise FatalError("Invalid dapp host", url=url) from e
    if port is None or port == _DEFAULT_PORTS.get(scheme):
        return f"{scheme}://{host}"
    return f"{scheme}://{host}:{port}"


@dataclass(frozen=True)
class Dapp:
    deterministic_id: DeterministicId
    identifier: str
    url: str
    created_at: str
    updated_at: Optional[str]

    @classmethod
    def _from_row(cls, row: sqlite3.Row) -> Dapp:
        return cls(
            deterministic_id=row["deterministic_id"],
            identifier=row["identifier"],
            url=row["url"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    @classmethod
    def list_all(cls, conn: sqlite3.Connection) -> list[Dapp]:
        rows = conn.execute("SELECT * FROM dapps ORDER BY created_at, identifier").fetchall()
        return [cls._from_row(row) for row in rows]

    @staticmethod
    def list_dapp_ids_desc(conn: sqlite3.Connection, limit: int) -> list[DeterministicId]:
        """List dapp ids in descending order by last updated at."""
        rows = conn.execute(
            """
            SELECT deterministic_id FROM dapps
            ORDER BY updated_at DESC, created_at DESC
            LIMIT ?
            """,
            (limit,),
        ).fetchall()
        return [row["deterministic_id"] for row in rows]

    @staticmethod
    def dapp_identifier(url: str, public_suffix_list: PublicSuffixList) -> str:
        """Get the human-readable dapp identifier from an url."""
        return DappEntity.new(url, public_suffix_list).identifier

    @staticmethod
    def fetch_dapp_identifier(conn: sqlite3.Connection, dapp_id: DeterministicId) -> str:
        row = conn.execute(
            "SELECT identifier FROM dapps WHERE deterministic_id = ?", (dapp_id,)
        ).fetchone()
        if row is None:
            raise NotFoundError("Dapp not found", table="dapps", dapp_id=dapp_id)
        return row["identifier"]

    @staticmethod
    def create_if_not_exists(
        conn: sqlite3.Connection, url: str, public_suffix_list: PublicSuffixList
    ) -> DeterministicId:
        """Create a dapp entity and return its deterministic id.

        The operation is idempotent.
        """
        return DappEntity.new(url, public_suffix_list).create_if_not_exists(conn)


@dataclass(frozen=True)
class DappEntity(DeriveDeterministicId):
    identifier: str
    url: str

    @classmethod
    def new(cls, url: str, public_suffix_list: PublicSuffixList) -> DappEntity:
        origin = url_origin(url)
        host = urlsplit(origin).hostname or ""
        identifier = public_suffix_list.registrable_domain(host) or origin
        return cls(identifier=identifier, url=url)

    def entity_name(self) -> EntityName:
        return EntityName.DAPP

    def unique_columns(self) -> list[str]:
        return [self.identifier]

    def create_if_not_exists(self, conn: sqlite3.Connection) -> DeterministicId:
        deterministic_id = self.deterministic_id()
        conn.execute(
            """
            INSERT INTO dapps (deterministic_id, identifier, url, created_at)
            VALUES (?, ?, ?, ?)
            ON CONFLICT (deterministic_id) DO NOTHING
            """,
            (deterministic_id, self.identifier, self.url, rfc3339_timestamp()),
        )
        return deterministic_id
