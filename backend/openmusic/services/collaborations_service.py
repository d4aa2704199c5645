"""
OpenMusic API — Collaborations Service
=======================================

What:  Grants and revokes write access to a playlist for a non-owner.
Who:   Called by routes/collaborations.py, and held by PlaylistsService as
       the collaboration checker behind check_playlist_access().

A collaboration is a (playlist_id, user_id) pair, unique per pair. It never
transfers ownership.
"""

import logging

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from openmusic.core.ids import generate_id
from openmusic.exceptions import InvariantError
from openmusic.models.collaboration import Collaboration

logger = logging.getLogger(__name__)


class CollaborationsService:
    """Stateless CRUD over the `collaborations` table."""

    async def add_collaboration(
        self,
        db: AsyncSession,
        playlist_id: str,
        user_id: str,
    ) -> str:
        """
        Record that `user_id` collaborates on `playlist_id`.

        Returns:
            The generated collaboration id (collab-…)

        Raises:
            InvariantError: pair already present or insert did not apply
        """
        if await self.is_collaborator(db, playlist_id, user_id):
            raise InvariantError(
                message="User is already a collaborator on this playlist",
                context={"playlist_id": playlist_id, "user_id": user_id},
            )

        collaboration_id = generate_id("collab")
        statement = (
            insert(Collaboration)
            .values(id=collaboration_id, playlist_id=playlist_id, user_id=user_id)
            .returning(Collaboration.id)
        )

        try:
            result = await db.execute(statement)
        except IntegrityError as e:
            logger.warning("Collaboration insert rejected by the store: %s", e.orig)
            raise InvariantError(
                message="Collaboration could not be added",
                context={"playlist_id": playlist_id, "user_id": user_id},
            )

        inserted_id = result.scalar_one_or_none()
        if not inserted_id:
            raise InvariantError(message="Collaboration could not be added")

        logger.info("Collaboration added: %s on %s", user_id, playlist_id)
        return inserted_id

    async def delete_collaboration(
        self,
        db: AsyncSession,
        playlist_id: str,
        user_id: str,
    ) -> None:
        """
        Raises:
            InvariantError: no such collaboration existed
        """
        result = await db.execute(
            delete(Collaboration)
            .where(
                Collaboration.playlist_id == playlist_id,
                Collaboration.user_id == user_id,
            )
            .returning(Collaboration.id)
        )

        if result.scalar_one_or_none() is None:
            raise InvariantError(
                message="Collaboration could not be deleted",
                context={"playlist_id": playlist_id, "user_id": user_id},
            )

        logger.info("Collaboration removed: %s from %s", user_id, playlist_id)

    async def is_collaborator(
        self,
        db: AsyncSession,
        playlist_id: str,
        user_id: str,
    ) -> bool:
        result = await db.execute(
            select(Collaboration.id).where(
                Collaboration.playlist_id == playlist_id,
                Collaboration.user_id == user_id,
            )
        )
        return result.scalar_one_or_none() is not None


# ── Singleton Instance ────────────────────────────────────────────────────
collaborations_service = CollaborationsService()
