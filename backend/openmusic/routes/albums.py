"""
OpenMusic API — Albums Route Handlers
======================================

What:  CRUD endpoints for /albums plus the cover upload.
Who:   Public; no access token required.

Cover upload (POST /albums/{id}/covers):
    multipart/form-data with a single `cover` field. The album must exist
    before the file is validated or written; see AlbumsService.upload_cover.
"""

import logging

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from openmusic.core.routing import Route, register_routes
from openmusic.database import get_db_session
from openmusic.schemas.album import AlbumData, AlbumIdData, AlbumPayload
from openmusic.schemas.common import DataResponse, ErrorResponse, MessageResponse
from openmusic.services.albums_service import albums_service

logger = logging.getLogger(__name__)


async def post_album(
    payload: AlbumPayload,
    db: AsyncSession = Depends(get_db_session),
) -> DataResponse[AlbumIdData]:
    album_id = await albums_service.add_album(db, payload)
    return DataResponse(data=AlbumIdData(album_id=album_id))


async def get_album(
    album_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> DataResponse[AlbumData]:
    album = await albums_service.get_album_by_id(db, album_id)
    return DataResponse(data=AlbumData(album=album))


async def put_album(
    album_id: str,
    payload: AlbumPayload,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await albums_service.edit_album_by_id(db, album_id, payload)
    return MessageResponse(message="Album updated")


async def delete_album(
    album_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await albums_service.delete_album_by_id(db, album_id)
    return MessageResponse(message="Album deleted")


async def post_album_cover(
    album_id: str,
    cover: UploadFile = File(..., description="Cover image (PNG, JPG, GIF or WEBP)"),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    """Read the whole upload into memory and hand it to the service, which enforces MAX_COVER_SIZE."""
    content = await cover.read()
    logger.info(
        "Received cover for album %s: filename=%s, size=%d bytes",
        album_id,
        cover.filename or "unknown",
        len(content),
    )

    try:
        await albums_service.upload_cover(
            db,
            album_id,
            filename=cover.filename or "cover.jpg",
            content=content,
            content_length=cover.size,
        )
    finally:
        await cover.close()

    return MessageResponse(message="Cover uploaded")


_not_found = {404: {"description": "Album not found", "model": ErrorResponse}}

routes = [
    Route("POST", "/albums", post_album, status_code=201, summary="Add an album"),
    Route("GET", "/albums/{album_id}", get_album, summary="Get an album with its songs",
          responses=_not_found),
    Route("PUT", "/albums/{album_id}", put_album, summary="Edit an album", responses=_not_found),
    Route("DELETE", "/albums/{album_id}", delete_album, summary="Delete an album",
          responses=_not_found),
    Route("POST", "/albums/{album_id}/covers", post_album_cover, status_code=201,
          summary="Upload an album cover",
          responses={
              **_not_found,
              400: {"description": "Invalid file type or size", "model": ErrorResponse},
          }),
]

router = register_routes(APIRouter(tags=["Albums"]), routes)
