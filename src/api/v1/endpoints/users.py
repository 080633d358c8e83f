"""Endpoints for user profiles, account deletion and direct-to-storage uploads."""
from __future__ import annotations

import logging
import time
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_db_session
from src.api.v1.endpoints.sounds import sound_responses
from src.auth.jwt import require_auth
from src.core.exceptions import BadRequestError, NotFoundError
from src.db.models.user import User
from src.repositories.sound_repo import SoundRepo
from src.repositories.user_repo import UserRepo
from src.schemas.sound import SoundRead
from src.schemas.user import AccountDeleteRequest, ProfileRead, ProfileUpdate, UploadUrlRequest
from src.services.limits import check_rate_limit
from src.services.storage import (
    get_presigned_upload_url,
    is_owned_key,
    owner_prefix,
    resolve_avatar_url,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])
storage_router = APIRouter(prefix="/storage", tags=["storage"])


def _profile(user: User) -> ProfileRead:
    return ProfileRead(
        id=user.id,
        name=user.name,
        image=user.image,
        avatar_url=resolve_avatar_url(user.image),
        created_at=user.created_at,
    )


@router.get("/me", response_model=ProfileRead)
async def my_profile(auth=Depends(require_auth), db: AsyncSession = Depends(get_db_session)):
    user = await UserRepo(db).get(auth["user_id"])
    if user is None:
        raise NotFoundError("User not found")
    return _profile(user)


@router.patch("/me", response_model=ProfileRead)
async def update_my_profile(
    payload: ProfileUpdate,
    auth=Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
):
    repo = UserRepo(db)
    user = await repo.get(auth["user_id"])
    if user is None:
        raise NotFoundError("User not found")
    if payload.image and not payload.image.startswith(("http://", "https://")):
        if not is_owned_key(payload.image, "profile", user.id):
            raise BadRequestError("image must be one of your own uploads")
    user = await repo.update_profile(user, name=payload.name, image=payload.image)
    return _profile(user)


@router.delete("/me")
async def delete_my_account(
    payload: AccountDeleteRequest,
    auth=Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
):
    """Delete the caller's account; songs, sounds and the rest cascade with it."""

    repo = UserRepo(db)
    user = await repo.get(auth["user_id"])
    if user is None:
        raise NotFoundError("User not found")
    if user.email.lower() != payload.email.lower():
        raise BadRequestError("Email does not match your account email")

    await repo.delete(user)
    logger.info(f"Deleted account {user.id}")
    return {"success": True}


@router.get("/{user_id}", response_model=ProfileRead)
async def get_profile(user_id: str, db: AsyncSession = Depends(get_db_session)):
    user = await UserRepo(db).get(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return _profile(user)


@router.get("/{user_id}/sounds", response_model=List[SoundRead])
async def user_sounds(user_id: str, db: AsyncSession = Depends(get_db_session)):
    return await sound_responses(db, await SoundRepo(db).list_for_user(user_id))


@storage_router.post("/upload-url")
async def upload_url(payload: UploadUrlRequest, auth=Depends(require_auth)):
    user_id = auth["user_id"]
    await check_rate_limit(user_id)

    extension = payload.file_name.rsplit(".", 1)[-1] if "." in payload.file_name else ""
    key = f"{owner_prefix(payload.kind, user_id)}{int(time.time() * 1000)}"
    if extension:
        key = f"{key}.{extension}"

    return {
        "key": key,
        "presigned_url": get_presigned_upload_url(key, payload.content_type),
    }
