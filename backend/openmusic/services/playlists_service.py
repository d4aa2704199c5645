"""
OpenMusic API — Playlists Service
==================================

What:  Playlist CRUD, playlist ↔ song membership, and the access checks that
       guard every playlist operation.
How:   Ownership and collaboration facts are read from the store and handed to
       the pure decision functions in openmusic.core.access.
Who:   Called by routes/playlists.py and routes/collaborations.py.

Access check flow (verify_playlist_access):

    SELECT owner FROM playlists WHERE id = :id
        │
        ├─ no row ─────────────────────────────▶ NotFoundError (404)
        ├─ owner == user ──────────────────────▶ allowed
        └─ owner != user
              │
              └─ CollaborationsService.is_collaborator()
                    ├─ True ───────────────────▶ allowed
                    └─ False ──────────────────▶ AuthorizationError (403),
                                                 the ownership denial

The collaboration lookup only runs when ownership was denied.
"""

import logging
from typing import List

from sqlalchemy import delete, insert, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from openmusic.core.access import AccessDecision, AccessOutcome, decide_access, decide_ownership
from openmusic.core.ids import generate_id
from openmusic.exceptions import InvariantError, NotFoundError
from openmusic.models.collaboration import Collaboration
from openmusic.models.playlist import Playlist, PlaylistSong
from openmusic.models.song import Song
from openmusic.models.user import User
from openmusic.schemas.playlist import PlaylistSummary, PlaylistWithSongs
from openmusic.schemas.song import SongSummary
from openmusic.services.collaborations_service import (
    CollaborationsService,
    collaborations_service,
)

logger = logging.getLogger(__name__)


class PlaylistsService:
    """
    Playlist persistence plus ownership/collaboration access control.

    Args:
        collaborations: The collaboration checker consulted when the caller
                        is not the owner.
    """

    def __init__(self, collaborations: CollaborationsService):
        self.collaborations = collaborations

    # ── Playlists ─────────────────────────────────────────────────────────

    async def add_playlist(self, db: AsyncSession, name: str, owner: str) -> str:
        """
        Raises:
            InvariantError: insert did not apply (e.g. owner is not a user)
        """
        playlist_id = generate_id("playlist")
        statement = (
            insert(Playlist)
            .values(id=playlist_id, name=name, owner=owner)
            .returning(Playlist.id)
        )

        try:
            result = await db.execute(statement)
        except IntegrityError as e:
            logger.warning("Playlist insert rejected by the store: %s", e.orig)
            raise InvariantError(
                message="Playlist could not be added",
                context={"owner": owner},
            )

        inserted_id = result.scalar_one_or_none()
        if not inserted_id:
            raise InvariantError(message="Playlist could not be added")

        logger.info("Playlist created: %s (owner %s)", inserted_id, owner)
        return inserted_id

    async def get_playlists(self, db: AsyncSession, user_id: str) -> List[PlaylistSummary]:
        """Playlists the user owns or collaborates on, with the owner's username."""
        shared_ids = select(Collaboration.playlist_id).where(Collaboration.user_id == user_id)

        query = (
            select(Playlist.id, Playlist.name, User.username)
            .join(User, User.id == Playlist.owner)
            .where(or_(Playlist.owner == user_id, Playlist.id.in_(shared_ids)))
            .order_by(Playlist.created_at, Playlist.id)
        )

        result = await db.execute(query)
        return [
            PlaylistSummary(id=row.id, name=row.name, username=row.username)
            for row in result.all()
        ]

    async def get_playlist_by_id(self, db: AsyncSession, playlist_id: str) -> PlaylistSummary:
        """
        Raises:
            NotFoundError: no playlist with this id
        """
        result = await db.execute(
            select(Playlist.id, Playlist.name, User.username)
            .join(User, User.id == Playlist.owner)
            .where(Playlist.id == playlist_id)
        )
        row = result.first()

        if row is None:
            raise NotFoundError(resource="playlist", resource_id=playlist_id)

        return PlaylistSummary(id=row.id, name=row.name, username=row.username)

    async def delete_playlist_by_id(self, db: AsyncSession, playlist_id: str) -> None:
        """
        Songs, collaborations and activities go with it (ON DELETE CASCADE).

        Raises:
            NotFoundError: zero rows affected
        """
        result = await db.execute(
            delete(Playlist).where(Playlist.id == playlist_id).returning(Playlist.id)
        )

        if result.scalar_one_or_none() is None:
            raise NotFoundError(resource="playlist", resource_id=playlist_id)

        logger.info("Playlist deleted: %s", playlist_id)

    # ── Playlist Songs ────────────────────────────────────────────────────

    async def add_song_to_playlist(
        self,
        db: AsyncSession,
        playlist_id: str,
        song_id: str,
    ) -> str:
        """
        Append a song to the end of a playlist.

        Raises:
            InvariantError: song already attached, or insert did not apply
        """
        existing = await db.execute(
            select(PlaylistSong.id).where(
                PlaylistSong.playlist_id == playlist_id,
                PlaylistSong.song_id == song_id,
            )
        )
        if existing.scalar_one_or_none() is not None:
            raise InvariantError(
                message="Song is already in this playlist",
                context={"playlist_id": playlist_id, "song_id": song_id},
            )

        entry_id = generate_id("playlistsong")
        statement = (
            insert(PlaylistSong)
            .values(id=entry_id, playlist_id=playlist_id, song_id=song_id)
            .returning(PlaylistSong.id)
        )

        try:
            result = await db.execute(statement)
        except IntegrityError as e:
            logger.warning("Playlist song insert rejected by the store: %s", e.orig)
            raise InvariantError(
                message="Song could not be added to the playlist",
                context={"playlist_id": playlist_id, "song_id": song_id},
            )

        inserted_id = result.scalar_one_or_none()
        if not inserted_id:
            raise InvariantError(message="Song could not be added to the playlist")

        logger.info("Song %s added to playlist %s", song_id, playlist_id)
        return inserted_id

    async def get_songs_from_playlist(
        self,
        db: AsyncSession,
        playlist_id: str,
    ) -> PlaylistWithSongs:
        """
        Playlist summary plus its songs in insertion order.

        Raises:
            NotFoundError: no playlist with this id
        """
        playlist = await self.get_playlist_by_id(db, playlist_id)

        result = await db.execute(
            select(Song.id, Song.title, Song.performer)
            .join(PlaylistSong, PlaylistSong.song_id == Song.id)
            .where(PlaylistSong.playlist_id == playlist_id)
            .order_by(PlaylistSong.added_at, PlaylistSong.id)
        )
        songs = [
            SongSummary(id=row.id, title=row.title, performer=row.performer)
            for row in result.all()
        ]

        return PlaylistWithSongs(
            id=playlist.id,
            name=playlist.name,
            username=playlist.username,
            songs=songs,
        )

    async def delete_song_from_playlist(
        self,
        db: AsyncSession,
        playlist_id: str,
        song_id: str,
    ) -> None:
        """
        Raises:
            NotFoundError: the song is not in this playlist
        """
        result = await db.execute(
            delete(PlaylistSong)
            .where(
                PlaylistSong.playlist_id == playlist_id,
                PlaylistSong.song_id == song_id,
            )
            .returning(PlaylistSong.id)
        )

        if result.scalar_one_or_none() is None:
            raise NotFoundError(
                resource="song",
                resource_id=song_id,
                context={"playlist_id": playlist_id},
            )

        logger.info("Song %s removed from playlist %s", song_id, playlist_id)

    # ── Access Control ────────────────────────────────────────────────────

    async def check_playlist_owner(
        self,
        db: AsyncSession,
        playlist_id: str,
        user_id: str,
    ) -> AccessDecision:
        result = await db.execute(select(Playlist.owner).where(Playlist.id == playlist_id))
        return decide_ownership(result.scalar_one_or_none(), user_id)

    async def verify_playlist_owner(
        self,
        db: AsyncSession,
        playlist_id: str,
        user_id: str,
    ) -> None:
        """
        Raises:
            NotFoundError:      playlist does not exist
            AuthorizationError: caller is not the owner
        """
        decision = await self.check_playlist_owner(db, playlist_id, user_id)
        decision.raise_for_outcome("playlist", playlist_id)

    async def check_playlist_access(
        self,
        db: AsyncSession,
        playlist_id: str,
        user_id: str,
    ) -> AccessDecision:
        """Owner or collaborator; the collaboration table is only read when needed."""
        ownership = await self.check_playlist_owner(db, playlist_id, user_id)
        if ownership.outcome is not AccessOutcome.DENIED:
            return ownership

        is_collaborator = await self.collaborations.is_collaborator(db, playlist_id, user_id)
        return decide_access(ownership, is_collaborator)

    async def verify_playlist_access(
        self,
        db: AsyncSession,
        playlist_id: str,
        user_id: str,
    ) -> None:
        """
        Raises:
            NotFoundError:      playlist does not exist
            AuthorizationError: neither owner nor collaborator (ownership reason)
        """
        decision = await self.check_playlist_access(db, playlist_id, user_id)
        decision.raise_for_outcome("playlist", playlist_id)


# ── Singleton Instance ────────────────────────────────────────────────────
playlists_service = PlaylistsService(collaborations_service)
