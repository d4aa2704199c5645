"""
OpenMusic API — Song Schemas
=============================

What:  Request body and response shapes for /songs.
Who:   SongPayload is validated by FastAPI on POST/PUT; SongsService returns
       SongSummary (list projection) and SongDetail (full record).
"""

from typing import List, Optional

from pydantic import Field

from openmusic.schemas.common import CamelModel


class SongPayload(CamelModel):
    """Every mutable song field. Used for both add and full-replace edit."""
    title: str = Field(min_length=1)
    year: int = Field(ge=0, le=9999)
    performer: str = Field(min_length=1)
    genre: str = Field(min_length=1)
    duration: Optional[int] = Field(default=None, ge=0, description="Seconds")
    album_id: Optional[str] = Field(default=None)


class SongSummary(CamelModel):
    """Lightweight projection used by every song listing."""
    id: str
    title: str
    performer: str


class SongDetail(CamelModel):
    id: str
    title: str
    year: int
    performer: str
    genre: str
    duration: Optional[int] = None
    album_id: Optional[str] = None


class SongIdData(CamelModel):
    song_id: str


class SongData(CamelModel):
    song: SongDetail


class SongListData(CamelModel):
    songs: List[SongSummary]
