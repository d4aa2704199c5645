"""
OpenMusic API — Playlist Song Activities Service
=================================================

What:  Append-only log of songs being added to or removed from a playlist.
Who:   Written by the playlist song handlers after each attach/detach;
       read by GET /playlists/{id}/activities.

Reads use outer joins: an entry survives the deletion of its song or user
and is then shown with a null title or username.
"""

import logging
from datetime import datetime, timezone
from typing import List

from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from openmusic.core.ids import generate_id
from openmusic.models.activity import ACTION_ADD, ACTION_DELETE, PlaylistSongActivity
from openmusic.models.song import Song
from openmusic.models.user import User
from openmusic.schemas.playlist import ActivityItem

logger = logging.getLogger(__name__)

VALID_ACTIONS = {ACTION_ADD, ACTION_DELETE}


class PlaylistSongActivitiesService:

    async def add_activity(
        self,
        db: AsyncSession,
        playlist_id: str,
        song_id: str,
        user_id: str,
        action: str,
    ) -> str:
        """Append one entry stamped with the current UTC time and return its id."""
        if action not in VALID_ACTIONS:
            raise ValueError(f"Unknown playlist activity action: {action!r}")

        activity_id = generate_id("activity")
        await db.execute(
            insert(PlaylistSongActivity).values(
                id=activity_id,
                playlist_id=playlist_id,
                song_id=song_id,
                user_id=user_id,
                action=action,
                time=datetime.now(timezone.utc),
            )
        )

        logger.debug("Activity %s: %s %s on %s", activity_id, action, song_id, playlist_id)
        return activity_id

    async def get_activities(self, db: AsyncSession, playlist_id: str) -> List[ActivityItem]:
        """Chronological activity log of one playlist."""
        query = (
            select(
                User.username,
                Song.title,
                PlaylistSongActivity.action,
                PlaylistSongActivity.time,
            )
            .select_from(PlaylistSongActivity)
            .outerjoin(User, User.id == PlaylistSongActivity.user_id)
            .outerjoin(Song, Song.id == PlaylistSongActivity.song_id)
            .where(PlaylistSongActivity.playlist_id == playlist_id)
            .order_by(PlaylistSongActivity.time, PlaylistSongActivity.id)
        )

        result = await db.execute(query)
        return [
            ActivityItem(
                username=row.username,
                title=row.title,
                action=row.action,
                time=row.time,
            )
            for row in result.all()
        ]


# ── Singleton Instance ────────────────────────────────────────────────────
activities_service = PlaylistSongActivitiesService()
