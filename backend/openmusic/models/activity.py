"""
OpenMusic API — Playlist Song Activity SQLAlchemy Model
========================================================

What:  Append-only log of song add/remove events on a playlist.
Who:   Written by PlaylistSongActivitiesService after each attach/detach;
       read by GET /playlists/{id}/activities.

song_id and user_id carry no foreign key: an entry keeps describing what
happened even after the song or user is gone. Only the playlist cascades.
"""

from datetime import datetime, timezone

from sqlalchemy import ForeignKey, Index, String, TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from openmusic.database import Base

ACTION_ADD = "add"
ACTION_DELETE = "delete"


class PlaylistSongActivity(Base):
    """One immutable activity entry. There is no update or delete path."""

    __tablename__ = "playlist_song_activities"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)

    playlist_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("playlists.id", ondelete="CASCADE"),
        nullable=False,
    )

    song_id: Mapped[str] = mapped_column(String(50), nullable=False)

    user_id: Mapped[str] = mapped_column(String(50), nullable=False)

    # 'add' | 'delete'
    action: Mapped[str] = mapped_column(String(20), nullable=False)

    time: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_playlist_song_activities_playlist_time", "playlist_id", "time"),
    )

    def __repr__(self) -> str:
        return (
            f"<PlaylistSongActivity(playlist_id={self.playlist_id}, "
            f"song_id={self.song_id}, action='{self.action}')>"
        )
