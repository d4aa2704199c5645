"""
OpenMusic API — Song SQLAlchemy Model
======================================

What:  ORM model representing the `songs` table.
Who:   Used by SongsService for CRUD; joined by album, playlist and activity queries.

Query Patterns:
    - List with filters: SELECT id, title, performer FROM songs
                         WHERE title ILIKE :t AND performer ILIKE :p
    - Album tracklist:   SELECT id, title, performer FROM songs WHERE album_id = :id
      → Uses idx_songs_album_id
"""

from datetime import datetime, timezone

from sqlalchemy import ForeignKey, Index, Integer, String, Text, TIMESTAMP, text
from sqlalchemy.orm import Mapped, mapped_column

from openmusic.database import Base


class Song(Base):
    """
    A song record.

    Lifecycle:
        1. Created on add
        2. Mutated on edit (full replace of every mutable field)
        3. Deleted by id (no soft delete); playlist links cascade away
    """

    __tablename__ = "songs"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)

    title: Mapped[str] = mapped_column(Text, nullable=False)

    year: Mapped[int] = mapped_column(Integer, nullable=False)

    performer: Mapped[str] = mapped_column(Text, nullable=False)

    genre: Mapped[str] = mapped_column(Text, nullable=False)

    # Seconds; optional in the API contract
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)

    album_id: Mapped[str | None] = mapped_column(
        String(50),
        ForeignKey("albums.id", ondelete="SET NULL"),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_songs_album_id", "album_id"),
    )

    def __repr__(self) -> str:
        return f"<Song(id={self.id}, title='{self.title}', performer='{self.performer}')>"
