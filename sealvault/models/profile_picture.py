"""
Profile pictures, keyed by the deterministic id of their image hash.

Bundled pictures are loaded by a caller-supplied loader; the same image
always maps to the same row.
"""

from __future__ import annotations

import hashlib
import sqlite3
from dataclasses import dataclass
from typing import Callable, Optional

from ..database.deterministic_id import DeriveDeterministicId, DeterministicId, EntityName
from ..exceptions import NotFoundError
from ..utils.datetime_utils import rfc3339_timestamp

ImageLoader = Callable[[str], bytes]


def image_hash(image: bytes) -> bytes:
    return hashlib.sha256(image).digest()


class ProfilePicture:
    @staticmethod
    def fetch_image(conn: sqlite3.Connection, picture_id: DeterministicId) -> bytes:
        row = conn.execute(
            "SELECT image FROM profile_pictures WHERE deterministic_id = ?", (picture_id,)
        ).fetchone()
        if row is None:
            raise NotFoundError(
                "Profile picture not found", table="profile_pictures", picture_id=picture_id
            )
        return bytes(row["image"])

    @staticmethod
    def insert_bundled(
        conn: sqlite3.Connection, image_name: str, loader: ImageLoader
    ) -> DeterministicId:
        """Insert a bundled picture and return its deterministic id."""
        image = loader(image_name)
        entity = ProfilePictureEntity(image_hash=image_hash(image))
        return entity.create_if_not_exists(conn, image, image_name)

    @staticmethod
    def insert(conn: sqlite3.Connection, image: bytes) -> DeterministicId:
        entity = ProfilePictureEntity(image_hash=image_hash(image))
        return entity.create_if_not_exists(conn, image, None)


@dataclass(frozen=True)
class ProfilePictureEntity(DeriveDeterministicId):
    image_hash: bytes

    def entity_name(self) -> EntityName:
        return EntityName.PROFILE_PICTURE

    def unique_columns(self) -> list[bytes]:
        return [self.image_hash]

    def create_if_not_exists(
        self, conn: sqlite3.Connection, image: bytes, image_name: Optional[str]
    ) -> DeterministicId:
        deterministic_id = self.deterministic_id()
        conn.execute(
            """
            INSERT INTO profile_pictures
                (deterministic_id, image_name, image_hash, image, created_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT (deterministic_id) DO NOTHING
            """,
            (deterministic_id, image_name, self.image_hash, image, rfc3339_timestamp()),
        )
        return deterministic_id
