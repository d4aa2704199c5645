"""
OpenMusic API — Uploaded File Route
====================================

What:  Serves stored album covers back at the URL recorded in coverUrl.
How:   The path is resolved under STORAGE_ROOT by FileService, which rejects
       anything that escapes it (e.g. ../../etc/passwd).
"""

from fastapi import APIRouter
from fastapi.responses import FileResponse

from openmusic.core.routing import Route, register_routes
from openmusic.exceptions import NotFoundError
from openmusic.schemas.common import ErrorResponse
from openmusic.services.file_service import file_service


async def serve_upload(file_path: str) -> FileResponse:
    full_path = file_service.resolve_stored_path(file_path)

    if not full_path.is_file():
        raise NotFoundError(resource="file", resource_id=file_path)

    # media_type is guessed from the stored extension
    return FileResponse(
        path=str(full_path),
        headers={"Cache-Control": "public, max-age=86400"},
    )


routes = [
    Route("GET", "/uploads/{file_path:path}", serve_upload, summary="Serve an uploaded cover",
          responses={
              200: {"description": "Image file"},
              404: {"description": "File not found", "model": ErrorResponse},
          }),
]

router = register_routes(APIRouter(tags=["Uploads"]), routes)
