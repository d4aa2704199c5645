"""
OpenMusic API — Collaboration SQLAlchemy Model
===============================================

What:  ORM model representing the `collaborations` table.
Who:   Used by CollaborationsService; read by the playlist access check and by
       the "playlists shared with me" listing.
"""

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from openmusic.database import Base


class Collaboration(Base):
    """
    Grants `user_id` write access to `playlist_id` without transferring ownership.

    The owner is authorized regardless of these rows.
    """

    __tablename__ = "collaborations"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)

    playlist_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("playlists.id", ondelete="CASCADE"),
        nullable=False,
    )

    user_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("playlist_id", "user_id", name="uq_collaborations_playlist_user"),
    )

    def __repr__(self) -> str:
        return f"<Collaboration(playlist_id={self.playlist_id}, user_id={self.user_id})>"
