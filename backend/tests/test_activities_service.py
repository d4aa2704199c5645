"""
OpenMusic API — Playlist Activity Log Tests
============================================
"""

import pytest

from openmusic.models.activity import ACTION_ADD, ACTION_DELETE
from openmusic.schemas.song import SongPayload
from openmusic.schemas.user import UserPayload
from openmusic.services.activities_service import PlaylistSongActivitiesService
from openmusic.services.collaborations_service import CollaborationsService
from openmusic.services.playlists_service import PlaylistsService
from openmusic.services.songs_service import SongsService
from openmusic.services.users_service import UsersService


class TestActivitiesService:

    def setup_method(self):
        self.service = PlaylistSongActivitiesService()

    @pytest.mark.asyncio
    async def test_log_keeps_entries_for_deleted_songs(self, db_session):
        user_id = await UsersService().add_user(
            db_session, UserPayload(username="dj", password="pw", fullname="DJ")
        )
        playlist_id = await PlaylistsService(CollaborationsService()).add_playlist(
            db_session, "Set", user_id
        )
        songs = SongsService()
        song_id = await songs.add_song(
            db_session, SongPayload(title="Track", year=2020, performer="P", genre="house")
        )

        await self.service.add_activity(db_session, playlist_id, song_id, user_id, ACTION_ADD)
        await self.service.add_activity(db_session, playlist_id, song_id, user_id, ACTION_DELETE)

        activities = await self.service.get_activities(db_session, playlist_id)
        assert [(a.username, a.title, a.action) for a in activities] == [
            ("dj", "Track", "add"),
            ("dj", "Track", "delete"),
        ]

        await songs.delete_song_by_id(db_session, song_id)
        activities = await self.service.get_activities(db_session, playlist_id)
        assert [a.title for a in activities] == [None, None]

    @pytest.mark.asyncio
    async def test_unknown_action_is_rejected(self, mock_db_session):
        with pytest.raises(ValueError):
            await self.service.add_activity(mock_db_session, "playlist-1", "song-1", "user-1", "move")
        mock_db_session.execute.assert_not_awaited()
