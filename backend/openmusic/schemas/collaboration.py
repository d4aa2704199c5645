"""
OpenMusic API — Collaboration Schemas
======================================

What:  Body of POST/DELETE /collaborations and the creation response.
"""

from pydantic import Field

from openmusic.schemas.common import CamelModel


class CollaborationPayload(CamelModel):
    playlist_id: str = Field(min_length=1)
    user_id: str = Field(min_length=1)


class CollaborationIdData(CamelModel):
    collaboration_id: str
