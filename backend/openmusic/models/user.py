"""
OpenMusic API — User SQLAlchemy Model
======================================

What:  ORM model representing the `users` table.
Who:   Written by UsersService; joined by playlist and activity queries to
       resolve owner/actor usernames.
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, TIMESTAMP, text
from sqlalchemy.orm import Mapped, mapped_column

from openmusic.database import Base


class User(Base):
    """
    A registered account.

    The password column only ever holds a bcrypt hash; it is never part of
    any response schema.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)

    # Unique constraint backs the service-level "username taken" check
    username: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)

    password: Mapped[str] = mapped_column(Text, nullable=False)

    fullname: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
