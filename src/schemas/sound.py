"""Pydantic schemas for sounds and their comments"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TagRead(BaseModel):
    id: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class SoundCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    code: str = Field(..., min_length=1)
    tags: List[str] = Field(default_factory=list)


class SoundUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    code: Optional[str] = Field(default=None, min_length=1)
    tags: Optional[List[str]] = Field(default=None, description="Replaces all tags when sent")


class SoundRead(BaseModel):
    id: str
    title: str
    code: str
    user_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    tags: List[TagRead] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class CommentBody(BaseModel):
    """Comment text as submitted by a user."""

    content: str = Field(
        ...,
        min_length=1,
        max_length=1000,
        description="Comment text, 1 to 1000 characters",
    )


class CommentAuthor(BaseModel):
    id: str
    name: str
    image: Optional[str] = None


class CommentRead(BaseModel):
    id: str
    content: str
    sound_id: str
    user_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user: Optional[CommentAuthor] = None

    model_config = ConfigDict(from_attributes=True)


class HeartState(BaseModel):
    is_hearted: bool
    heart_count: int


class HeartCount(BaseModel):
    heart_count: int
