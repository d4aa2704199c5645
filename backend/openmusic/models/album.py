"""
OpenMusic API — Album SQLAlchemy Model
=======================================

What:  ORM model representing the `albums` table.
Who:   Used by AlbumsService for CRUD and cover updates; songs reference it.
"""

from datetime import datetime, timezone

from sqlalchemy import Integer, String, Text, TIMESTAMP, text
from sqlalchemy.orm import Mapped, mapped_column

from openmusic.database import Base


class Album(Base):
    """
    An album grouping zero or more songs.

    Lifecycle:
        1. Created without a cover (cover_url = NULL)
        2. Cover set by POST /albums/{id}/covers (overwrites the previous URL)
        3. Deleted by id; its songs keep existing with album_id = NULL
    """

    __tablename__ = "albums"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)

    name: Mapped[str] = mapped_column(Text, nullable=False)

    year: Mapped[int] = mapped_column(Integer, nullable=False)

    # Public URL of the stored cover image; NULL until one is uploaded
    cover_url: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)

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

    def __repr__(self) -> str:
        return f"<Album(id={self.id}, name='{self.name}', year={self.year})>"
