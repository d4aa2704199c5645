"""
OpenMusic API — Playlist SQLAlchemy Models
===========================================

What:  ORM models for `playlists` and the `playlist_songs` join table.
Who:   Used by PlaylistsService.

Cascades:
    Deleting a playlist removes its playlist_songs, collaborations and
    playlist_song_activities rows (ON DELETE CASCADE on each foreign key).
    Deleting a song removes it from every playlist.
"""

from datetime import datetime, timezone

from sqlalchemy import ForeignKey, Index, String, Text, TIMESTAMP, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from openmusic.database import Base


class Playlist(Base):
    """A named, owned list of songs."""

    __tablename__ = "playlists"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)

    name: Mapped[str] = mapped_column(Text, nullable=False)

    # Owner user id; access checks compare against this column
    owner: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_playlists_owner", "owner"),
    )

    def __repr__(self) -> str:
        return f"<Playlist(id={self.id}, name='{self.name}', owner='{self.owner}')>"


class PlaylistSong(Base):
    """
    Membership of a song in a playlist.

    Songs are listed in insertion order (added_at, then id).
    A song appears at most once per playlist.
    """

    __tablename__ = "playlist_songs"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)

    playlist_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("playlists.id", ondelete="CASCADE"),
        nullable=False,
    )

    song_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("songs.id", ondelete="CASCADE"),
        nullable=False,
    )

    added_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        UniqueConstraint("playlist_id", "song_id", name="uq_playlist_songs_playlist_song"),
    )

    def __repr__(self) -> str:
        return f"<PlaylistSong(playlist_id={self.playlist_id}, song_id={self.song_id})>"
