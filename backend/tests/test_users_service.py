"""
OpenMusic API — Users Service Tests
====================================
"""

import bcrypt
import pytest
from sqlalchemy import select

from openmusic.exceptions import InvariantError, NotFoundError
from openmusic.models.user import User
from openmusic.schemas.user import UserPayload
from openmusic.services.users_service import UsersService


class TestUsersService:

    def setup_method(self):
        self.service = UsersService()

    @pytest.mark.asyncio
    async def test_register_and_fetch(self, db_session):
        user_id = await self.service.add_user(
            db_session, UserPayload(username="dicoding", password="secret", fullname="Dicoding Indonesia")
        )
        assert user_id.startswith("user-")

        user = await self.service.get_user_by_id(db_session, user_id)
        assert user.model_dump() == {
            "id": user_id,
            "username": "dicoding",
            "fullname": "Dicoding Indonesia",
        }

    @pytest.mark.asyncio
    async def test_password_is_stored_hashed(self, db_session):
        user_id = await self.service.add_user(
            db_session, UserPayload(username="hashme", password="secret", fullname="H")
        )

        stored = (await db_session.execute(select(User.password).where(User.id == user_id))).scalar_one()
        assert stored != "secret"
        assert bcrypt.checkpw(b"secret", stored.encode("utf-8"))

    @pytest.mark.asyncio
    async def test_duplicate_username_is_rejected(self, db_session):
        payload = UserPayload(username="taken", password="a", fullname="A")
        await self.service.add_user(db_session, payload)

        with pytest.raises(InvariantError, match="already taken"):
            await self.service.add_user(db_session, payload)

    @pytest.mark.asyncio
    async def test_missing_user(self, mock_db_session, result_with):
        mock_db_session.execute.return_value = result_with(first=None)

        with pytest.raises(NotFoundError):
            await self.service.get_user_by_id(mock_db_session, "user-nope")
