"""Endpoints for sounds, their tags, hearts and comments."""
from __future__ import annotations

from typing import List, Sequence

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_db_session
from src.auth.jwt import require_auth
from src.core.exceptions import ForbiddenError, NotFoundError
from src.db.models.sound import Sound
from src.repositories.heart_repo import SoundHeartRepo
from src.repositories.sound_comment_repo import SoundCommentRepo
from src.repositories.sound_repo import SoundRepo
from src.repositories.tag_repo import TagRepo
from src.schemas.sound import (
    CommentBody,
    CommentRead,
    HeartCount,
    HeartState,
    SoundCreate,
    SoundRead,
    SoundUpdate,
    TagRead,
)
from src.services.limits import check_rate_limit


router = APIRouter(prefix="/sounds", tags=["sounds"])
comments_router = APIRouter(prefix="/comments", tags=["comments"])
tags_router = APIRouter(prefix="/tags", tags=["tags"])


async def _get_sound_or_404(repo: SoundRepo, sound_id: str) -> Sound:
    sound = await repo.get(sound_id)
    if sound is None:
        raise NotFoundError("Sound not found")
    return sound


async def sound_responses(db: AsyncSession, sounds: Sequence[Sound]) -> List[SoundRead]:
    """Attach each sound's tags, loaded in one query."""

    tags = await TagRepo(db).tags_for_sounds(sound.id for sound in sounds)
    responses = []
    for sound in sounds:
        data = SoundRead.model_validate(sound)
        data.tags = [TagRead.model_validate(tag) for tag in tags.get(sound.id, [])]
        responses.append(data)
    return responses


async def _sound_response(db: AsyncSession, sound: Sound) -> SoundRead:
    (data,) = await sound_responses(db, [sound])
    return data


@router.get("/recent", response_model=List[SoundRead])
async def recent_sounds(db: AsyncSession = Depends(get_db_session)):
    return await sound_responses(db, await SoundRepo(db).list_recent())


@router.get("/mine", response_model=List[SoundRead])
async def my_sounds(auth=Depends(require_auth), db: AsyncSession = Depends(get_db_session)):
    return await sound_responses(db, await SoundRepo(db).list_for_user(auth["user_id"]))


@router.get("/search", response_model=List[SoundRead])
async def search_sounds(
    q: str = Query(..., min_length=1, description="Case-insensitive title fragment"),
    db: AsyncSession = Depends(get_db_session),
):
    return await sound_responses(db, await SoundRepo(db).search_by_title(q))


@router.get("/tag-suggestions", response_model=List[TagRead])
async def tag_suggestions(q: str = "", db: AsyncSession = Depends(get_db_session)):
    if not q.strip():
        return []
    return await TagRepo(db).search(q)


@router.post("", response_model=SoundRead, status_code=status.HTTP_201_CREATED)
async def create_sound(
    payload: SoundCreate,
    auth=Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
):
    await check_rate_limit(auth["user_id"])
    sound = await SoundRepo(db).create(auth["user_id"], payload.title, payload.code)
    if payload.tags:
        await TagRepo(db).set_sound_tags(sound.id, payload.tags)
    return await _sound_response(db, sound)


@router.get("/{sound_id}", response_model=SoundRead)
async def get_sound(sound_id: str, db: AsyncSession = Depends(get_db_session)):
    sound = await _get_sound_or_404(SoundRepo(db), sound_id)
    return await _sound_response(db, sound)


@router.get("/{sound_id}/tags", response_model=List[TagRead])
async def sound_tags(sound_id: str, db: AsyncSession = Depends(get_db_session)):
    return await TagRepo(db).list_for_sound(sound_id)


@router.patch("/{sound_id}", response_model=SoundRead)
async def update_sound(
    sound_id: str,
    payload: SoundUpdate,
    auth=Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
):
    repo = SoundRepo(db)
    sound = await _get_sound_or_404(repo, sound_id)
    if sound.user_id != auth["user_id"]:
        raise ForbiddenError("You can only edit your own sounds")
    sound = await repo.update(sound, title=payload.title, code=payload.code)
    if payload.tags is not None:
        await TagRepo(db).set_sound_tags(sound.id, payload.tags)
    return await _sound_response(db, sound)


@router.delete("/{sound_id}")
async def delete_sound(
    sound_id: str,
    auth=Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
):
    repo = SoundRepo(db)
    sound = await _get_sound_or_404(repo, sound_id)
    if sound.user_id != auth["user_id"]:
        raise ForbiddenError("You can only delete your own sounds")
    await repo.delete(sound)
    return {"success": True}


@router.post("/{sound_id}/heart", response_model=HeartState)
async def toggle_sound_heart(
    sound_id: str,
    auth=Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
):
    user_id = auth["user_id"]
    await check_rate_limit(user_id)
    await _get_sound_or_404(SoundRepo(db), sound_id)

    hearts = SoundHeartRepo(db)
    if await hearts.find(user_id, sound_id):
        await hearts.delete(user_id, sound_id)
        is_hearted = False
    else:
        await hearts.create_if_absent(user_id, sound_id)
        is_hearted = True

    return HeartState(
        is_hearted=is_hearted,
        heart_count=await hearts.count_for_target(sound_id),
    )


@router.get("/{sound_id}/heart", response_model=HeartState)
async def sound_heart_status(
    sound_id: str,
    auth=Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
):
    hearts = SoundHeartRepo(db)
    existing = await hearts.find(auth["user_id"], sound_id)
    return HeartState(
        is_hearted=existing is not None,
        heart_count=await hearts.count_for_target(sound_id),
    )


@router.get("/{sound_id}/hearts/count", response_model=HeartCount)
async def sound_heart_count(sound_id: str, db: AsyncSession = Depends(get_db_session)):
    return HeartCount(heart_count=await SoundHeartRepo(db).count_for_target(sound_id))


@router.get("/{sound_id}/comments", response_model=List[CommentRead])
async def list_comments(sound_id: str, db: AsyncSession = Depends(get_db_session)):
    return await SoundCommentRepo(db).list_for_sound(sound_id)


@router.post(
    "/{sound_id}/comments",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    sound_id: str,
    payload: CommentBody,
    auth=Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
):
    user_id = auth["user_id"]
    await check_rate_limit(user_id)
    await _get_sound_or_404(SoundRepo(db), sound_id)
    return await SoundCommentRepo(db).create(sound_id, user_id, payload.content)


@comments_router.patch("/{comment_id}", response_model=CommentRead)
async def update_comment(
    comment_id: str,
    payload: CommentBody,
    auth=Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
):
    repo = SoundCommentRepo(db)
    existing = await repo.get(comment_id)
    if existing is None:
        raise NotFoundError("Comment not found")
    if existing.user_id != auth["user_id"]:
        raise ForbiddenError("You can only edit your own comments")

    updated = await repo.update(comment_id, payload.content)
    if updated is None:
        raise NotFoundError("Comment not found")
    return updated


@comments_router.delete("/{comment_id}")
async def delete_comment(
    comment_id: str,
    auth=Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
):
    repo = SoundCommentRepo(db)
    existing = await repo.get(comment_id)
    if existing is None:
        raise NotFoundError("Comment not found")
    if existing.user_id != auth["user_id"]:
        raise ForbiddenError("You can only delete your own comments")

    if not await repo.delete(comment_id):
        raise NotFoundError("Comment not found")
    return {"success": True}


@tags_router.get("", response_model=List[TagRead])
async def list_tags(q: str = "", db: AsyncSession = Depends(get_db_session)):
    repo = TagRepo(db)
    if not q.strip():
        return await repo.list_all()
    return await repo.search(q)


@tags_router.get("/{tag_name}/sounds", response_model=List[SoundRead])
async def sounds_by_tag(tag_name: str, db: AsyncSession = Depends(get_db_session)):
    return await sound_responses(db, await SoundRepo(db).list_by_tag(tag_name))
