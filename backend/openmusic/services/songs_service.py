"""
OpenMusic API — Songs Service
==============================

What:  Sole mediator between the /songs handlers and the `songs` table.
How:   Each method issues one parameterized SQLAlchemy statement on the
       request's AsyncSession and maps the result to a response schema.
Who:   Called by routes/songs.py; get_song_by_id is also used by the playlist
       handlers to confirm a song exists before attaching it.

Failure taxonomy:
    NotFoundError   → id matched no row (get / edit / delete)
    InvariantError  → INSERT returned no row or the store rejected it
                      (e.g. albumId that does not exist)
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from openmusic.core.ids import generate_id
from openmusic.exceptions import InvariantError, NotFoundError
from openmusic.models.song import Song
from openmusic.schemas.song import SongDetail, SongPayload, SongSummary

logger = logging.getLogger(__name__)


def build_song_filters(
    title: Optional[str] = None,
    performer: Optional[str] = None,
) -> List[Tuple[InstrumentedAttribute, str]]:
    """
    Compose the optional list filters into (column, pattern) pairs.

    Empty or missing values add no predicate, so:
        no filter   → []                         (full scan)
        one field   → [(column, "%value%")]
        both fields → two pairs, AND-ed by the caller

    Matching is case-insensitive partial match (ILIKE).
    """
    candidates = ((Song.title, title), (Song.performer, performer))
    return [(column, f"%{value}%") for column, value in candidates if value]


class SongsService:
    """
    CRUD operations for songs.

    Stateless: every call receives the session it runs on.
    """

    async def add_song(self, db: AsyncSession, payload: SongPayload) -> str:
        """
        Insert a new song and return its generated id.

        Raises:
            InvariantError: the insert returned no id or violated a constraint
        """
        song_id = generate_id("song")
        statement = (
            insert(Song)
            .values(
                id=song_id,
                title=payload.title,
                year=payload.year,
                performer=payload.performer,
                genre=payload.genre,
                duration=payload.duration,
                album_id=payload.album_id,
            )
            .returning(Song.id)
        )

        try:
            result = await db.execute(statement)
        except IntegrityError as e:
            logger.warning("Song insert rejected by the store: %s", e.orig)
            raise InvariantError(
                message="Song could not be added",
                context={"album_id": payload.album_id},
            )

        inserted_id = result.scalar_one_or_none()
        if not inserted_id:
            raise InvariantError(message="Song could not be added")

        logger.info("Song created: %s", inserted_id)
        return inserted_id

    async def get_songs(
        self,
        db: AsyncSession,
        title: Optional[str] = None,
        performer: Optional[str] = None,
    ) -> List[SongSummary]:
        """
        List songs as (id, title, performer) projections, optionally filtered.

        Query plan:
            SELECT id, title, performer FROM songs
            [WHERE title ILIKE :title] [AND performer ILIKE :performer]
        """
        query = select(Song.id, Song.title, Song.performer)

        filters = build_song_filters(title, performer)
        if filters:
            query = query.where(*(column.ilike(pattern) for column, pattern in filters))

        result = await db.execute(query.order_by(Song.created_at, Song.id))
        return [
            SongSummary(id=row.id, title=row.title, performer=row.performer)
            for row in result.all()
        ]

    async def get_song_by_id(self, db: AsyncSession, song_id: str) -> SongDetail:
        """
        Retrieve a single song.

        Raises:
            NotFoundError: no song with this id (→ 404)
        """
        result = await db.execute(select(Song).where(Song.id == song_id))
        song = result.scalar_one_or_none()

        if song is None:
            raise NotFoundError(resource="song", resource_id=song_id)

        return SongDetail.model_validate(song)

    async def edit_song_by_id(
        self,
        db: AsyncSession,
        song_id: str,
        payload: SongPayload,
    ) -> None:
        """
        Replace every mutable field of a song in one statement.

        Raises:
            NotFoundError:  zero rows affected
            InvariantError: the new values violate a constraint
        """
        statement = (
            update(Song)
            .where(Song.id == song_id)
            .values(
                title=payload.title,
                year=payload.year,
                performer=payload.performer,
                genre=payload.genre,
                duration=payload.duration,
                album_id=payload.album_id,
                updated_at=datetime.now(timezone.utc),
            )
            .returning(Song.id)
        )

        try:
            result = await db.execute(statement)
        except IntegrityError as e:
            logger.warning("Song update rejected by the store: %s", e.orig)
            raise InvariantError(
                message="Song could not be updated",
                context={"song_id": song_id, "album_id": payload.album_id},
            )

        if result.scalar_one_or_none() is None:
            raise NotFoundError(resource="song", resource_id=song_id)

        logger.info("Song updated: %s", song_id)

    async def delete_song_by_id(self, db: AsyncSession, song_id: str) -> None:
        """
        Delete a song by id.

        Raises:
            NotFoundError: zero rows affected
        """
        result = await db.execute(
            delete(Song).where(Song.id == song_id).returning(Song.id)
        )

        if result.scalar_one_or_none() is None:
            raise NotFoundError(resource="song", resource_id=song_id)

        logger.info("Song deleted: %s", song_id)


# ── Singleton Instance ────────────────────────────────────────────────────
songs_service = SongsService()
