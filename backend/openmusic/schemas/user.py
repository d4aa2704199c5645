"""
OpenMusic API — User Schemas
=============================

What:  Registration body and public profile shape for /users.
The password is accepted on input only; no response model carries it.
"""

from pydantic import Field

from openmusic.schemas.common import CamelModel


class UserPayload(CamelModel):
    username: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=1)
    fullname: str = Field(min_length=1)


class UserDetail(CamelModel):
    id: str
    username: str
    fullname: str


class UserIdData(CamelModel):
    user_id: str


class UserData(CamelModel):
    user: UserDetail
