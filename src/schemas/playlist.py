"""Pydantic schemas for playlists"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.schemas.song import SongRead


class PlaylistCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    is_public: bool = False


class PlaylistUpdate(BaseModel):
    """Partial update; only fields that are sent are applied."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    is_public: Optional[bool] = None

    @field_validator("name", "is_public", mode="before")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not set to null")
        return value


class PlaylistRead(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    is_public: bool
    user_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    song_count: int = 0
    cover_image_url: Optional[str] = Field(
        default=None, description="Presigned cover of the first song"
    )

    model_config = ConfigDict(from_attributes=True)


class PlaylistSongRead(SongRead):
    position: int


class PlaylistDetail(PlaylistRead):
    songs: List[PlaylistSongRead] = Field(default_factory=list)


class PlaylistSongAdd(BaseModel):
    song_id: str = Field(..., min_length=1)


class PlaylistEntryRead(BaseModel):
    playlist_id: str
    song_id: str
    position: int

    model_config = ConfigDict(from_attributes=True)


class PlaylistReorder(BaseModel):
    song_ids: List[str] = Field(..., description="Every song in the playlist, in the new order")
