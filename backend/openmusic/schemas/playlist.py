"""
OpenMusic API — Playlist Schemas
=================================

What:  Request bodies and response shapes for /playlists and its sub-resources
       (songs, activities).
Who:   PlaylistsService and PlaylistSongActivitiesService return these models.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from openmusic.schemas.common import CamelModel
from openmusic.schemas.song import SongSummary


class PlaylistPayload(CamelModel):
    name: str = Field(min_length=1)


class PlaylistSongPayload(CamelModel):
    song_id: str = Field(min_length=1)


class PlaylistSummary(CamelModel):
    """Playlist row with the owner's username instead of the owner id."""
    id: str
    name: str
    username: str


class PlaylistWithSongs(PlaylistSummary):
    songs: List[SongSummary] = Field(default_factory=list)


class ActivityItem(CamelModel):
    """
    One activity log entry as shown to clients.

    username/title are null when the user or song no longer exists;
    the entry itself is never rewritten.
    """
    username: Optional[str] = None
    title: Optional[str] = None
    action: str
    time: datetime


class PlaylistIdData(CamelModel):
    playlist_id: str


class PlaylistListData(CamelModel):
    playlists: List[PlaylistSummary]


class PlaylistData(CamelModel):
    playlist: PlaylistWithSongs


class ActivityListData(CamelModel):
    playlist_id: str
    activities: List[ActivityItem]
