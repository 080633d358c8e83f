"""Pydantic schemas for user profiles and billing requests"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ProfileRead(BaseModel):
    id: str
    name: str
    image: Optional[str] = None
    avatar_url: Optional[str] = Field(default=None, description="Resolved image URL")
    created_at: Optional[datetime] = None


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    image: Optional[str] = None


class UploadUrlRequest(BaseModel):
    kind: str = Field(..., pattern="^(audio|cover|profile)$")
    file_name: str = Field(..., min_length=1)
    content_type: Optional[str] = None


class CheckoutRequest(BaseModel):
    price_id: str = Field(..., min_length=1, description="Stripe price identifier")


class AccountDeleteRequest(BaseModel):
    email: str = Field(
        ...,
        pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$",
        description="Must match the account email; compared case-insensitively",
    )
