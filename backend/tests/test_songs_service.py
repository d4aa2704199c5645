"""
OpenMusic API — Songs Service Tests
====================================

What:  Filter composition, NotFound mapping with a mocked session, and the
       add → get → edit → delete lifecycle against SQLite.
"""

import pytest

from openmusic.exceptions import InvariantError, NotFoundError
from openmusic.models.song import Song
from openmusic.schemas.song import SongPayload
from openmusic.services.songs_service import SongsService, build_song_filters


def make_payload(**overrides) -> SongPayload:
    fields = {
        "title": "A",
        "year": 2020,
        "performer": "X",
        "genre": "pop",
        "duration": 180,
        "album_id": None,
    }
    fields.update(overrides)
    return SongPayload(**fields)


class TestBuildSongFilters:

    def test_no_filters(self):
        assert build_song_filters() == []
        assert build_song_filters(title="", performer=None) == []

    def test_title_only(self):
        filters = build_song_filters(title="foo")
        assert len(filters) == 1
        column, pattern = filters[0]
        assert column is Song.title
        assert pattern == "%foo%"

    def test_both_fields(self):
        filters = build_song_filters(title="foo", performer="bar")
        assert [column for column, _ in filters] == [Song.title, Song.performer]
        assert [pattern for _, pattern in filters] == ["%foo%", "%bar%"]


class TestSongsServiceMocked:

    def setup_method(self):
        self.service = SongsService()

    @pytest.mark.asyncio
    async def test_get_missing_song_raises_not_found(self, mock_db_session, result_with):
        mock_db_session.execute.return_value = result_with(scalar=None)

        with pytest.raises(NotFoundError, match="song-missing"):
            await self.service.get_song_by_id(mock_db_session, "song-missing")

    @pytest.mark.asyncio
    async def test_edit_missing_song_raises_not_found(self, mock_db_session, result_with):
        mock_db_session.execute.return_value = result_with(scalar=None)

        with pytest.raises(NotFoundError):
            await self.service.edit_song_by_id(mock_db_session, "song-missing", make_payload())

    @pytest.mark.asyncio
    async def test_delete_missing_song_raises_not_found(self, mock_db_session, result_with):
        mock_db_session.execute.return_value = result_with(scalar=None)

        with pytest.raises(NotFoundError):
            await self.service.delete_song_by_id(mock_db_session, "song-missing")

    @pytest.mark.asyncio
    async def test_add_without_returned_id_raises_invariant(self, mock_db_session, result_with):
        mock_db_session.execute.return_value = result_with(scalar=None)

        with pytest.raises(InvariantError):
            await self.service.add_song(mock_db_session, make_payload())


class TestSongsServiceStore:

    def setup_method(self):
        self.service = SongsService()

    @pytest.mark.asyncio
    async def test_song_lifecycle(self, db_session):
        song_id = await self.service.add_song(db_session, make_payload())
        assert song_id.startswith("song-")

        song = await self.service.get_song_by_id(db_session, song_id)
        assert (song.title, song.year, song.performer, song.genre, song.duration, song.album_id) == (
            "A", 2020, "X", "pop", 180, None,
        )

        await self.service.edit_song_by_id(db_session, song_id, make_payload(title="B"))
        assert (await self.service.get_song_by_id(db_session, song_id)).title == "B"

        await self.service.delete_song_by_id(db_session, song_id)
        with pytest.raises(NotFoundError):
            await self.service.get_song_by_id(db_session, song_id)

    @pytest.mark.asyncio
    async def test_unknown_album_is_rejected(self, db_session):
        with pytest.raises(InvariantError):
            await self.service.add_song(db_session, make_payload(album_id="album-nope"))

    @pytest.mark.asyncio
    async def test_filters_are_case_insensitive_and_conjunctive(self, db_session):
        await self.service.add_song(db_session, make_payload(title="Foo Fighters Live", performer="Dave"))
        await self.service.add_song(db_session, make_payload(title="the FOOL", performer="Other"))
        await self.service.add_song(db_session, make_payload(title="Bar", performer="Dave"))

        by_title = await self.service.get_songs(db_session, title="foo")
        assert {s.title for s in by_title} == {"Foo Fighters Live", "the FOOL"}

        both = await self.service.get_songs(db_session, title="foo", performer="dave")
        assert [s.title for s in both] == ["Foo Fighters Live"]

        everything = await self.service.get_songs(db_session)
        assert len(everything) == 3
        assert set(everything[0].model_dump()) == {"id", "title", "performer"}
