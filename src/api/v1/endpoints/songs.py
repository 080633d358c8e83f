"""Endpoints for uploading, browsing and hearting songs."""
from __future__ import annotations

import logging
from typing import List, Optional

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_db_session
from src.auth.jwt import require_auth
from src.core.exceptions import (
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    QuotaExceededError,
)
from src.db.models.song import Song
from src.repositories.heart_repo import HeartRepo
from src.repositories.song_repo import SongRepo
from src.repositories.user_repo import UserRepo
from src.schemas.song import SongCreate, SongRead, SongUpdate
from src.schemas.sound import HeartCount, HeartState
from src.services.limits import check_rate_limit
from src.services.quota import get_song_limit, has_reached_song_limit
from src.services.storage import delete_object, get_presigned_url, is_owned_key


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/songs", tags=["songs"])

LIST_LIMIT = 20


def signed_url(key: Optional[str]) -> Optional[str]:
    return get_presigned_url(key) if key else None


def song_response(song: Song) -> SongRead:
    data = SongRead.model_validate(song)
    data.audio_url = signed_url(song.audio_key) or ""
    data.cover_image_url = signed_url(song.cover_image_key)
    return data


def _check_storage_keys(fields: dict, user_id: str) -> None:
    for field, kind in (("audio_key", "audio"), ("cover_image_key", "cover")):
        key = fields.get(field)
        if key and not is_owned_key(key, kind, user_id):
            raise BadRequestError(f"{field} must be one of your own uploads")


async def _get_song_or_404(repo: SongRepo, song_id: str) -> Song:
    song = await repo.get_by_id(song_id)
    if song is None:
        raise NotFoundError("Song not found")
    return song


async def _get_owned_song(repo: SongRepo, song_id: str, user_id: str, action: str) -> Song:
    song = await _get_song_or_404(repo, song_id)
    if song.user_id != user_id:
        raise ForbiddenError(f"You can only {action} your own songs")
    return song


@router.get("/recent", response_model=List[SongRead])
async def recent_songs(db: AsyncSession = Depends(get_db_session)):
    songs = await SongRepo(db).list_recent(LIST_LIMIT)
    return [song_response(song) for song in songs]


@router.get("/popular", response_model=List[SongRead])
async def popular_songs(db: AsyncSession = Depends(get_db_session)):
    songs = await SongRepo(db).list_popular(LIST_LIMIT)
    return [song_response(song) for song in songs]


@router.get("/mine", response_model=List[SongRead])
async def my_songs(auth=Depends(require_auth), db: AsyncSession = Depends(get_db_session)):
    songs = await SongRepo(db).list_for_user(auth["user_id"])
    return [song_response(song) for song in songs]


@router.post("", response_model=SongRead, status_code=status.HTTP_201_CREATED)
async def create_song(
    payload: SongCreate,
    auth=Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
):
    user_id = auth["user_id"]
    await check_rate_limit(user_id)
    fields = payload.model_dump()
    _check_storage_keys(fields, user_id)

    user = await UserRepo(db).get(user_id)
    if user is None:
        raise NotFoundError("User not found")

    repo = SongRepo(db)
    current_songs = await repo.count_for_user(user_id)
    if has_reached_song_limit(user.plan, current_songs):
        logger.info(
            f"User {user_id} on plan {user.plan} hit song limit "
            f"({current_songs}/{get_song_limit(user.plan)})"
        )
        raise QuotaExceededError(
            "Song limit reached for your plan. Upgrade to upload more songs.",
        )

    song = await repo.create(user_id, **fields)
    return song_response(song)


@router.get("/{song_id}", response_model=SongRead)
async def get_song(song_id: str, db: AsyncSession = Depends(get_db_session)):
    song = await _get_song_or_404(SongRepo(db), song_id)
    return song_response(song)


@router.patch("/{song_id}", response_model=SongRead)
async def update_song(
    song_id: str,
    payload: SongUpdate,
    auth=Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
):
    repo = SongRepo(db)
    song = await _get_owned_song(repo, song_id, auth["user_id"], "edit")
    fields = payload.model_dump(exclude_unset=True)
    _check_storage_keys(fields, auth["user_id"])
    song = await repo.update(song, **fields)
    return song_response(song)


@router.delete("/{song_id}")
async def delete_song(
    song_id: str,
    auth=Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
):
    repo = SongRepo(db)
    song = await _get_owned_song(repo, song_id, auth["user_id"], "delete")
    keys = [
        key
        for key, kind in ((song.audio_key, "audio"), (song.cover_image_key, "cover"))
        if key and is_owned_key(key, kind, song.user_id)
    ]

    await repo.delete(song.id)

    # Orphaned objects are harmless; never fail the delete over them
    for key in keys:
        try:
            delete_object(key)
        except (BotoCoreError, ClientError) as exc:
            logger.warning(f"Failed to delete stored object {key!r}: {exc}")

    return {"success": True}


@router.post("/{song_id}/play")
async def increment_play_count(song_id: str, db: AsyncSession = Depends(get_db_session)):
    play_count = await SongRepo(db).increment_play_count(song_id)
    if play_count is None:
        raise NotFoundError("Song not found")
    return {"success": True, "play_count": play_count}


@router.post("/{song_id}/heart", response_model=HeartState)
async def toggle_heart(
    song_id: str,
    auth=Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
):
    user_id = auth["user_id"]
    await check_rate_limit(user_id)
    await _get_song_or_404(SongRepo(db), song_id)

    hearts = HeartRepo(db)
    if await hearts.find(user_id, song_id):
        await hearts.delete(user_id, song_id)
        is_hearted = False
    else:
        await hearts.create_if_absent(user_id, song_id)
        is_hearted = True

    return HeartState(
        is_hearted=is_hearted,
        heart_count=await hearts.count_for_target(song_id),
    )


@router.get("/{song_id}/heart", response_model=HeartState)
async def heart_status(
    song_id: str,
    auth=Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
):
    hearts = HeartRepo(db)
    existing = await hearts.find(auth["user_id"], song_id)
    return HeartState(
        is_hearted=existing is not None,
        heart_count=await hearts.count_for_target(song_id),
    )


@router.get("/{song_id}/hearts/count", response_model=HeartCount)
async def heart_count(song_id: str, db: AsyncSession = Depends(get_db_session)):
    return HeartCount(heart_count=await HeartRepo(db).count_for_target(song_id))
