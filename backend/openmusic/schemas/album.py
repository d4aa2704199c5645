"""
OpenMusic API — Album Schemas
==============================

What:  Request body and response shapes for /albums.
"""

from typing import List, Optional

from pydantic import Field

from openmusic.schemas.common import CamelModel
from openmusic.schemas.song import SongSummary


class AlbumPayload(CamelModel):
    name: str = Field(min_length=1)
    year: int = Field(ge=0, le=9999)


class AlbumDetail(CamelModel):
    """Full album with its tracklist. coverUrl is null until a cover is uploaded."""
    id: str
    name: str
    year: int
    cover_url: Optional[str] = None
    songs: List[SongSummary] = Field(default_factory=list)


class AlbumIdData(CamelModel):
    album_id: str


class AlbumData(CamelModel):
    album: AlbumDetail
