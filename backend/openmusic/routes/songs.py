"""
OpenMusic API — Songs Route Handlers
=====================================

What:  CRUD endpoints for /songs.
Who:   Public; no access token required.

GET /songs accepts optional `title` and `performer` query parameters
(case-insensitive partial match, AND-ed when both are given).
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from openmusic.core.routing import Route, register_routes
from openmusic.database import get_db_session
from openmusic.schemas.common import DataResponse, ErrorResponse, MessageResponse
from openmusic.schemas.song import SongData, SongIdData, SongListData, SongPayload
from openmusic.services.songs_service import songs_service


async def post_song(
    payload: SongPayload,
    db: AsyncSession = Depends(get_db_session),
) -> DataResponse[SongIdData]:
    song_id = await songs_service.add_song(db, payload)
    return DataResponse(data=SongIdData(song_id=song_id))


async def get_songs(
    title: Optional[str] = Query(default=None, description="Partial, case-insensitive title match"),
    performer: Optional[str] = Query(default=None, description="Partial, case-insensitive performer match"),
    db: AsyncSession = Depends(get_db_session),
) -> DataResponse[SongListData]:
    songs = await songs_service.get_songs(db, title=title, performer=performer)
    return DataResponse(data=SongListData(songs=songs))


async def get_song(
    song_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> DataResponse[SongData]:
    song = await songs_service.get_song_by_id(db, song_id)
    return DataResponse(data=SongData(song=song))


async def put_song(
    song_id: str,
    payload: SongPayload,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await songs_service.edit_song_by_id(db, song_id, payload)
    return MessageResponse(message="Song updated")


async def delete_song(
    song_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await songs_service.delete_song_by_id(db, song_id)
    return MessageResponse(message="Song deleted")


_not_found = {404: {"description": "Song not found", "model": ErrorResponse}}

routes = [
    Route("POST", "/songs", post_song, status_code=201, summary="Add a song",
          responses={400: {"description": "Song could not be added", "model": ErrorResponse}}),
    Route("GET", "/songs", get_songs, summary="List songs"),
    Route("GET", "/songs/{song_id}", get_song, summary="Get a song", responses=_not_found),
    Route("PUT", "/songs/{song_id}", put_song, summary="Edit a song", responses=_not_found),
    Route("DELETE", "/songs/{song_id}", delete_song, summary="Delete a song", responses=_not_found),
]

router = register_routes(APIRouter(tags=["Songs"]), routes)
