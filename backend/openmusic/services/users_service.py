"""
OpenMusic API — Users Service
==============================

What:  Registration and profile lookup for the `users` table.
Who:   Called by routes/users.py; get_user_by_id also backs the collaborator
       existence check in routes/collaborations.py.

Passwords are hashed with bcrypt before they reach the database and are
never read back by this service.
"""

import logging

import bcrypt
from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from openmusic.core.ids import generate_id
from openmusic.exceptions import InvariantError, NotFoundError
from openmusic.models.user import User
from openmusic.schemas.user import UserDetail, UserPayload

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


class UsersService:

    async def verify_new_username(self, db: AsyncSession, username: str) -> None:
        """
        Raises:
            InvariantError: the username is already registered
        """
        result = await db.execute(select(User.id).where(User.username == username))
        if result.scalar_one_or_none() is not None:
            raise InvariantError(
                message="Failed to add user. Username is already taken.",
                context={"username": username},
            )

    async def add_user(self, db: AsyncSession, payload: UserPayload) -> str:
        """
        Register a user and return the generated id.

        Raises:
            InvariantError: username taken, or the insert did not apply
        """
        await self.verify_new_username(db, payload.username)

        user_id = generate_id("user")
        statement = (
            insert(User)
            .values(
                id=user_id,
                username=payload.username,
                password=hash_password(payload.password),
                fullname=payload.fullname,
            )
            .returning(User.id)
        )

        try:
            result = await db.execute(statement)
        except IntegrityError as e:
            # Lost a race with a concurrent registration of the same username
            logger.warning("User insert rejected by the store: %s", e.orig)
            raise InvariantError(
                message="Failed to add user. Username is already taken.",
                context={"username": payload.username},
            )

        inserted_id = result.scalar_one_or_none()
        if not inserted_id:
            raise InvariantError(message="User could not be added")

        logger.info("User registered: %s", inserted_id)
        return inserted_id

    async def get_user_by_id(self, db: AsyncSession, user_id: str) -> UserDetail:
        """
        Raises:
            NotFoundError: no user with this id
        """
        result = await db.execute(
            select(User.id, User.username, User.fullname).where(User.id == user_id)
        )
        row = result.first()

        if row is None:
            raise NotFoundError(resource="user", resource_id=user_id)

        return UserDetail(id=row.id, username=row.username, fullname=row.fullname)


# ── Singleton Instance ────────────────────────────────────────────────────
users_service = UsersService()
