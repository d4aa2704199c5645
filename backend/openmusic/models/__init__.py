# Models package init
"""
OpenMusic API — ORM Models
===========================

What:  SQLAlchemy models for every table of the record store.
Why imported here: Alembic's env.py and the test schema builder only see
       models that are registered on Base.metadata.

Tables:
    users ─┬─< playlists ─┬─< playlist_songs >── songs >── albums
           │              ├─< collaborations >── users
           │              └─< playlist_song_activities
"""

from openmusic.models.user import User
from openmusic.models.album import Album
from openmusic.models.song import Song
from openmusic.models.playlist import Playlist, PlaylistSong
from openmusic.models.collaboration import Collaboration
from openmusic.models.activity import PlaylistSongActivity

__all__ = [
    "User",
    "Album",
    "Song",
    "Playlist",
    "PlaylistSong",
    "Collaboration",
    "PlaylistSongActivity",
]
