"""
OpenMusic API — Users Route Handlers
=====================================

What:  POST /users (registration) and GET /users/{id} (public profile).
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from openmusic.core.routing import Route, register_routes
from openmusic.database import get_db_session
from openmusic.schemas.common import DataResponse, ErrorResponse
from openmusic.schemas.user import UserData, UserIdData, UserPayload
from openmusic.services.users_service import users_service


async def post_user(
    payload: UserPayload,
    db: AsyncSession = Depends(get_db_session),
) -> DataResponse[UserIdData]:
    user_id = await users_service.add_user(db, payload)
    return DataResponse(data=UserIdData(user_id=user_id))


async def get_user(
    user_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> DataResponse[UserData]:
    user = await users_service.get_user_by_id(db, user_id)
    return DataResponse(data=UserData(user=user))


routes = [
    Route("POST", "/users", post_user, status_code=201, summary="Register a user",
          responses={400: {"description": "Username already taken", "model": ErrorResponse}}),
    Route("GET", "/users/{user_id}", get_user, summary="Get a user profile",
          responses={404: {"description": "User not found", "model": ErrorResponse}}),
]

router = register_routes(APIRouter(tags=["Users"]), routes)
