"""
OpenMusic API — Albums Service
===============================

What:  CRUD for the `albums` table plus the cover upload workflow.
Who:   Called by routes/albums.py.

Cover Upload Flow (POST /albums/{id}/covers):
    ┌──────────┐    ┌─────────────┐    ┌──────────────┐    ┌──────────────┐
    │  Album   │───▶│  Validate   │───▶│  Store file  │───▶│  Save URL    │
    │  exists? │    │  (FileServ) │    │  (FileServ)  │    │  (albums)    │
    └──────────┘    └─────────────┘    └──────────────┘    └──────────────┘

    Existence is confirmed before any byte is written. If saving the URL
    fails, the stored file is removed again and the error propagates.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from openmusic.config import settings
from openmusic.core.ids import generate_id
from openmusic.exceptions import InvariantError, NotFoundError
from openmusic.models.album import Album
from openmusic.models.song import Song
from openmusic.schemas.album import AlbumDetail, AlbumPayload
from openmusic.schemas.song import SongSummary
from openmusic.services.file_service import file_service

logger = logging.getLogger(__name__)


def build_cover_url(relative_path: str) -> str:
    """Public URL under which routes/uploads.py serves a stored cover."""
    return f"{settings.public_base_url.rstrip('/')}/uploads/{relative_path}"


class AlbumsService:
    """CRUD operations for albums."""

    async def add_album(self, db: AsyncSession, payload: AlbumPayload) -> str:
        """
        Insert a new album and return its generated id.

        Raises:
            InvariantError: the insert returned no id
        """
        album_id = generate_id("album")
        result = await db.execute(
            insert(Album)
            .values(id=album_id, name=payload.name, year=payload.year)
            .returning(Album.id)
        )

        inserted_id = result.scalar_one_or_none()
        if not inserted_id:
            raise InvariantError(message="Album could not be added")

        logger.info("Album created: %s", inserted_id)
        return inserted_id

    async def get_album_by_id(self, db: AsyncSession, album_id: str) -> AlbumDetail:
        """
        Retrieve an album together with its songs (id, title, performer).

        Raises:
            NotFoundError: no album with this id
        """
        result = await db.execute(select(Album).where(Album.id == album_id))
        album = result.scalar_one_or_none()

        if album is None:
            raise NotFoundError(resource="album", resource_id=album_id)

        songs_result = await db.execute(
            select(Song.id, Song.title, Song.performer)
            .where(Song.album_id == album_id)
            .order_by(Song.created_at, Song.id)
        )
        songs = [
            SongSummary(id=row.id, title=row.title, performer=row.performer)
            for row in songs_result.all()
        ]

        return AlbumDetail(
            id=album.id,
            name=album.name,
            year=album.year,
            cover_url=album.cover_url,
            songs=songs,
        )

    async def edit_album_by_id(
        self,
        db: AsyncSession,
        album_id: str,
        payload: AlbumPayload,
    ) -> None:
        """
        Raises:
            NotFoundError: zero rows affected
        """
        result = await db.execute(
            update(Album)
            .where(Album.id == album_id)
            .values(
                name=payload.name,
                year=payload.year,
                updated_at=datetime.now(timezone.utc),
            )
            .returning(Album.id)
        )

        if result.scalar_one_or_none() is None:
            raise NotFoundError(resource="album", resource_id=album_id)

        logger.info("Album updated: %s", album_id)

    async def delete_album_by_id(self, db: AsyncSession, album_id: str) -> None:
        """
        Raises:
            NotFoundError: zero rows affected
        """
        result = await db.execute(
            delete(Album).where(Album.id == album_id).returning(Album.id)
        )

        if result.scalar_one_or_none() is None:
            raise NotFoundError(resource="album", resource_id=album_id)

        logger.info("Album deleted: %s", album_id)

    async def set_cover_url(self, db: AsyncSession, album_id: str, cover_url: str) -> None:
        """
        Raises:
            NotFoundError: zero rows affected
        """
        result = await db.execute(
            update(Album)
            .where(Album.id == album_id)
            .values(cover_url=cover_url, updated_at=datetime.now(timezone.utc))
            .returning(Album.id)
        )

        if result.scalar_one_or_none() is None:
            raise NotFoundError(resource="album", resource_id=album_id)

    async def upload_cover(
        self,
        db: AsyncSession,
        album_id: str,
        filename: str,
        content: bytes,
        content_length: Optional[int] = None,
    ) -> str:
        """
        Validate, store and attach a cover image to an album.

        Returns:
            The public cover URL now recorded on the album.

        Raises:
            NotFoundError:    the album does not exist (nothing is written)
            ValidationError:  wrong file type or size
            FileStorageError: the file could not be written
        """
        result = await db.execute(select(Album.id).where(Album.id == album_id))
        if result.scalar_one_or_none() is None:
            raise NotFoundError(resource="album", resource_id=album_id)

        absolute_path, relative_path = await file_service.validate_and_store(
            filename=filename,
            content=content,
            content_length=content_length,
        )
        cover_url = build_cover_url(relative_path)

        try:
            await self.set_cover_url(db, album_id, cover_url)
        except Exception:
            await file_service.cleanup_file(absolute_path)
            raise

        logger.info("Cover attached to album %s: %s", album_id, relative_path)
        return cover_url


# ── Singleton Instance ────────────────────────────────────────────────────
albums_service = AlbumsService()
