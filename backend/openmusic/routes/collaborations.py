"""
OpenMusic API — Collaborations Route Handlers
==============================================

What:  POST/DELETE /collaborations, both with a {playlistId, userId} body.
Who:   Only the playlist owner may add or remove collaborators.

Check order: playlist exists and caller owns it, then the collaborator user
exists, then the write.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from openmusic.core.routing import Route, register_routes
from openmusic.core.security import require_access_token
from openmusic.database import get_db_session
from openmusic.schemas.collaboration import CollaborationIdData, CollaborationPayload
from openmusic.schemas.common import DataResponse, ErrorResponse, MessageResponse
from openmusic.services.collaborations_service import collaborations_service
from openmusic.services.playlists_service import playlists_service
from openmusic.services.users_service import users_service


async def post_collaboration(
    payload: CollaborationPayload,
    user_id: str = Depends(require_access_token),
    db: AsyncSession = Depends(get_db_session),
) -> DataResponse[CollaborationIdData]:
    await playlists_service.verify_playlist_owner(db, payload.playlist_id, user_id)
    await users_service.get_user_by_id(db, payload.user_id)
    collaboration_id = await collaborations_service.add_collaboration(
        db, payload.playlist_id, payload.user_id
    )
    return DataResponse(data=CollaborationIdData(collaboration_id=collaboration_id))


async def delete_collaboration(
    payload: CollaborationPayload,
    user_id: str = Depends(require_access_token),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await playlists_service.verify_playlist_owner(db, payload.playlist_id, user_id)
    await collaborations_service.delete_collaboration(
        db, payload.playlist_id, payload.user_id
    )
    return MessageResponse(message="Collaboration removed")


_errors = {
    400: {"description": "Collaboration could not be applied", "model": ErrorResponse},
    401: {"description": "Missing or invalid access token", "model": ErrorResponse},
    403: {"description": "Caller does not own the playlist", "model": ErrorResponse},
    404: {"description": "Playlist or user not found", "model": ErrorResponse},
}

routes = [
    Route("POST", "/collaborations", post_collaboration, auth="openmusic_jwt",
          status_code=201, summary="Add a playlist collaborator", responses=_errors),
    Route("DELETE", "/collaborations", delete_collaboration, auth="openmusic_jwt",
          summary="Remove a playlist collaborator", responses=_errors),
]

router = register_routes(APIRouter(tags=["Collaborations"]), routes)
