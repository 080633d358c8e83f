"""Pydantic schemas for Song resources"""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


SongStatus = Literal["processing", "published", "private", "unlisted"]


class SongCreate(BaseModel):
    """Schema for creating a song."""

    title: str = Field(..., min_length=2, max_length=100)
    artist: str = Field(..., min_length=1, max_length=50)
    album: Optional[str] = Field(default=None, max_length=100)
    genre: Optional[str] = Field(default=None, max_length=50)
    description: Optional[str] = Field(default=None, max_length=500)
    audio_key: str = Field(..., min_length=1, description="Storage key of the uploaded audio")
    cover_image_key: Optional[str] = Field(default=None)
    status: SongStatus = "processing"
    duration: Optional[int] = Field(default=None, ge=1, description="Length in seconds")


class SongUpdate(BaseModel):
    """Partial update; only fields that are sent are applied."""

    title: Optional[str] = Field(default=None, min_length=2, max_length=100)
    artist: Optional[str] = Field(default=None, min_length=1, max_length=50)
    album: Optional[str] = Field(default=None, max_length=100)
    genre: Optional[str] = Field(default=None, max_length=50)
    description: Optional[str] = Field(default=None, max_length=500)
    audio_key: Optional[str] = Field(default=None, min_length=1)
    cover_image_key: Optional[str] = None
    status: Optional[SongStatus] = None
    duration: Optional[int] = Field(default=None, ge=1)

    @field_validator("title", "artist", "audio_key", "status", mode="before")
    @classmethod
    def _not_null(cls, value):
        # These columns are NOT NULL; omit the field to leave it unchanged
        if value is None:
            raise ValueError("may be omitted but not set to null")
        return value


class SongRead(BaseModel):
    """Schema returned when reading a song."""

    id: str
    title: str
    artist: str
    album: Optional[str] = None
    genre: Optional[str] = None
    description: Optional[str] = None
    audio_key: Optional[str] = None
    cover_image_key: Optional[str] = None
    status: str
    duration: Optional[int] = None
    play_count: int = 0
    download_count: int = 0
    user_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    audio_url: str = Field(default="", description="Presigned download URL")
    cover_image_url: Optional[str] = Field(default=None, description="Presigned cover URL")

    model_config = ConfigDict(from_attributes=True)
