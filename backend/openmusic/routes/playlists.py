"""
OpenMusic API — Playlists Route Handlers
=========================================

What:  Playlist endpoints, including songs and the activity log.
Who:   Every route requires a valid access token (auth="openmusic_jwt").

Access rules:
    POST   /playlists                   any authenticated user (becomes owner)
    GET    /playlists                   owned + collaborated playlists
    DELETE /playlists/{id}              owner only
    POST   /playlists/{id}/songs        owner or collaborator
    GET    /playlists/{id}/songs        owner or collaborator
    DELETE /playlists/{id}/songs        owner or collaborator
    GET    /playlists/{id}/activities   owner or collaborator

Attaching and detaching songs appends an entry to the activity log in the
same session, so both are committed or rolled back together.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from openmusic.core.routing import Route, register_routes
from openmusic.core.security import require_access_token
from openmusic.database import get_db_session
from openmusic.models.activity import ACTION_ADD, ACTION_DELETE
from openmusic.schemas.common import DataResponse, ErrorResponse, MessageResponse
from openmusic.schemas.playlist import (
    ActivityListData,
    PlaylistData,
    PlaylistIdData,
    PlaylistListData,
    PlaylistPayload,
    PlaylistSongPayload,
)
from openmusic.services.activities_service import activities_service
from openmusic.services.playlists_service import playlists_service
from openmusic.services.songs_service import songs_service


async def post_playlist(
    payload: PlaylistPayload,
    user_id: str = Depends(require_access_token),
    db: AsyncSession = Depends(get_db_session),
) -> DataResponse[PlaylistIdData]:
    playlist_id = await playlists_service.add_playlist(db, payload.name, owner=user_id)
    return DataResponse(data=PlaylistIdData(playlist_id=playlist_id))


async def get_playlists(
    user_id: str = Depends(require_access_token),
    db: AsyncSession = Depends(get_db_session),
) -> DataResponse[PlaylistListData]:
    playlists = await playlists_service.get_playlists(db, user_id)
    return DataResponse(data=PlaylistListData(playlists=playlists))


async def delete_playlist(
    playlist_id: str,
    user_id: str = Depends(require_access_token),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await playlists_service.verify_playlist_owner(db, playlist_id, user_id)
    await playlists_service.delete_playlist_by_id(db, playlist_id)
    return MessageResponse(message="Playlist deleted")


async def post_playlist_song(
    playlist_id: str,
    payload: PlaylistSongPayload,
    user_id: str = Depends(require_access_token),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    """Attach a song; the playlist is checked first, then the song's existence."""
    await playlists_service.verify_playlist_access(db, playlist_id, user_id)
    await songs_service.get_song_by_id(db, payload.song_id)
    await playlists_service.add_song_to_playlist(db, playlist_id, payload.song_id)
    await activities_service.add_activity(
        db, playlist_id, payload.song_id, user_id, ACTION_ADD
    )
    return MessageResponse(message="Song added to playlist")


async def get_playlist_songs(
    playlist_id: str,
    user_id: str = Depends(require_access_token),
    db: AsyncSession = Depends(get_db_session),
) -> DataResponse[PlaylistData]:
    await playlists_service.verify_playlist_access(db, playlist_id, user_id)
    playlist = await playlists_service.get_songs_from_playlist(db, playlist_id)
    return DataResponse(data=PlaylistData(playlist=playlist))


async def delete_playlist_song(
    playlist_id: str,
    payload: PlaylistSongPayload,
    user_id: str = Depends(require_access_token),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await playlists_service.verify_playlist_access(db, playlist_id, user_id)
    await playlists_service.delete_song_from_playlist(db, playlist_id, payload.song_id)
    await activities_service.add_activity(
        db, playlist_id, payload.song_id, user_id, ACTION_DELETE
    )
    return MessageResponse(message="Song removed from playlist")


async def get_playlist_activities(
    playlist_id: str,
    user_id: str = Depends(require_access_token),
    db: AsyncSession = Depends(get_db_session),
) -> DataResponse[ActivityListData]:
    await playlists_service.verify_playlist_access(db, playlist_id, user_id)
    activities = await activities_service.get_activities(db, playlist_id)
    return DataResponse(
        data=ActivityListData(playlist_id=playlist_id, activities=activities)
    )


_auth_errors = {
    401: {"description": "Missing or invalid access token", "model": ErrorResponse},
    403: {"description": "Not the owner or a collaborator", "model": ErrorResponse},
    404: {"description": "Playlist not found", "model": ErrorResponse},
}

routes = [
    Route("POST", "/playlists", post_playlist, auth="openmusic_jwt", status_code=201,
          summary="Create a playlist"),
    Route("GET", "/playlists", get_playlists, auth="openmusic_jwt",
          summary="List the caller's playlists"),
    Route("DELETE", "/playlists/{playlist_id}", delete_playlist, auth="openmusic_jwt",
          summary="Delete a playlist", responses=_auth_errors),
    Route("POST", "/playlists/{playlist_id}/songs", post_playlist_song, auth="openmusic_jwt",
          status_code=201, summary="Add a song to a playlist", responses=_auth_errors),
    Route("GET", "/playlists/{playlist_id}/songs", get_playlist_songs, auth="openmusic_jwt",
          summary="List a playlist's songs", responses=_auth_errors),
    Route("DELETE", "/playlists/{playlist_id}/songs", delete_playlist_song, auth="openmusic_jwt",
          summary="Remove a song from a playlist", responses=_auth_errors),
    Route("GET", "/playlists/{playlist_id}/activities", get_playlist_activities,
          auth="openmusic_jwt", summary="Playlist activity log", responses=_auth_errors),
]

router = register_routes(APIRouter(tags=["Playlists"]), routes)
