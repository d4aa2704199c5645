"""Create OpenMusic tables

Revision ID: 001
Revises: None
Create Date: 2024-03-01 00:00:00.000000+00:00

What:  users, albums, songs, playlists, playlist_songs, collaborations and
       playlist_song_activities with their foreign keys.

Cascades:
    albums    ─(SET NULL)→ songs.album_id
    users     ─(CASCADE)─→ playlists.owner, collaborations.user_id
    songs     ─(CASCADE)─→ playlist_songs.song_id
    playlists ─(CASCADE)─→ playlist_songs, collaborations, playlist_song_activities

Rollback: downgrade() drops every table (destructive).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.TIMESTAMP(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(50), nullable=False),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("password", sa.Text(), nullable=False, comment="bcrypt hash"),
        sa.Column("fullname", sa.Text(), nullable=False),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
    )

    op.create_table(
        "albums",
        sa.Column("id", sa.String(50), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("cover_url", sa.Text(), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "songs",
        sa.Column("id", sa.String(50), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("performer", sa.Text(), nullable=False),
        sa.Column("genre", sa.Text(), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=True, comment="seconds"),
        sa.Column("album_id", sa.String(50), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["album_id"], ["albums.id"], ondelete="SET NULL"),
    )
    op.create_index("idx_songs_album_id", "songs", ["album_id"])

    op.create_table(
        "playlists",
        sa.Column("id", sa.String(50), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("owner", sa.String(50), nullable=False),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["owner"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_playlists_owner", "playlists", ["owner"])

    op.create_table(
        "playlist_songs",
        sa.Column("id", sa.String(50), nullable=False),
        sa.Column("playlist_id", sa.String(50), nullable=False),
        sa.Column("song_id", sa.String(50), nullable=False),
        _timestamp("added_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["playlist_id"], ["playlists.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["song_id"], ["songs.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("playlist_id", "song_id", name="uq_playlist_songs_playlist_song"),
    )

    op.create_table(
        "collaborations",
        sa.Column("id", sa.String(50), nullable=False),
        sa.Column("playlist_id", sa.String(50), nullable=False),
        sa.Column("user_id", sa.String(50), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["playlist_id"], ["playlists.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("playlist_id", "user_id", name="uq_collaborations_playlist_user"),
    )

    # song_id/user_id have no foreign key: log entries outlive songs and users
    op.create_table(
        "playlist_song_activities",
        sa.Column("id", sa.String(50), nullable=False),
        sa.Column("playlist_id", sa.String(50), nullable=False),
        sa.Column("song_id", sa.String(50), nullable=False),
        sa.Column("user_id", sa.String(50), nullable=False),
        sa.Column("action", sa.String(20), nullable=False),
        sa.Column("time", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["playlist_id"], ["playlists.id"], ondelete="CASCADE"),
    )
    op.create_index(
        "idx_playlist_song_activities_playlist_time",
        "playlist_song_activities",
        ["playlist_id", "time"],
    )


def downgrade() -> None:
    op.drop_index("idx_playlist_song_activities_playlist_time", table_name="playlist_song_activities")
    op.drop_table("playlist_song_activities")
    op.drop_table("collaborations")
    op.drop_table("playlist_songs")
    op.drop_index("idx_playlists_owner", table_name="playlists")
    op.drop_table("playlists")
    op.drop_index("idx_songs_album_id", table_name="songs")
    op.drop_table("songs")
    op.drop_table("albums")
    op.drop_table("users")
