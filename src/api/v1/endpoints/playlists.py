"""Endpoints for playlists: plan-limited creation and ordered song entries."""
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_db_session
from src.api.v1.endpoints.songs import signed_url, song_response
from src.auth.jwt import optional_auth, require_auth
from src.core.exceptions import (
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    QuotaExceededError,
)
from src.core.plans import BASIC, get_plan_details
from src.db.models.playlist import Playlist
from src.db.models.user import User
from src.repositories.playlist_repo import PlaylistRepo
from src.repositories.song_repo import SongRepo
from src.repositories.user_repo import UserRepo
from src.schemas.playlist import (
    PlaylistCreate,
    PlaylistDetail,
    PlaylistEntryRead,
    PlaylistRead,
    PlaylistReorder,
    PlaylistSongAdd,
    PlaylistSongRead,
    PlaylistUpdate,
)
from src.services.limits import check_rate_limit
from src.services.quota import get_playlist_limit, has_reached_playlist_limit, is_plan_active


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/playlists", tags=["playlists"])

PUBLIC_LIST_LIMIT = 20
DEFAULT_PLAYLIST = {"name": "My Playlist", "description": "My first playlist"}


async def _ensure_can_create(db: AsyncSession, user: User) -> None:
    if not is_plan_active(user.plan, user.subscription_expires_at):
        raise QuotaExceededError(
            "Your subscription has expired. Please renew to create playlists.",
            code="subscription_expired",
        )

    current = await PlaylistRepo(db).count_for_user(user.id)
    if not has_reached_playlist_limit(user.plan, current):
        return

    plan = get_plan_details(user.plan).plan
    limit = get_playlist_limit(plan)
    logger.info(f"User {user.id} on plan {plan} hit playlist limit ({current}/{limit})")
    if plan == BASIC:
        raise QuotaExceededError(
            f"Basic users can create up to {limit} playlists. "
            "Upgrade to Pro for unlimited playlists.",
            code="playlist_limit_basic",
        )
    raise QuotaExceededError(
        f"Free users can only create {limit} playlist. "
        "Upgrade to Basic for up to 5 playlists, or Pro for unlimited playlists.",
        code="playlist_limit_free",
    )


async def _get_user_or_404(db: AsyncSession, user_id: str) -> User:
    user = await UserRepo(db).get(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def _get_playlist_or_404(repo: PlaylistRepo, playlist_id: str) -> Playlist:
    playlist = await repo.get(playlist_id)
    if playlist is None:
        raise NotFoundError("Playlist not found")
    return playlist


async def _get_owned_playlist(
    repo: PlaylistRepo, playlist_id: str, user_id: str, action: str
) -> Playlist:
    playlist = await _get_playlist_or_404(repo, playlist_id)
    if playlist.user_id != user_id:
        raise ForbiddenError(f"You can only {action} your own playlists")
    return playlist


def _playlist_response(
    playlist: Playlist, song_count: int = 0, cover_key: Optional[str] = None
) -> PlaylistRead:
    data = PlaylistRead.model_validate(playlist)
    data.song_count = song_count
    data.cover_image_url = signed_url(cover_key)
    return data


async def _playlist_detail(repo: PlaylistRepo, playlist: Playlist) -> PlaylistDetail:
    entries = await repo.list_songs(playlist.id)
    songs = [
        PlaylistSongRead(**song_response(song).model_dump(), position=position)
        for song, position in entries
    ]
    cover_key = entries[0][0].cover_image_key if entries else None
    return PlaylistDetail(
        **_playlist_response(playlist, len(songs), cover_key).model_dump(),
        songs=songs,
    )


@router.get("/mine", response_model=List[PlaylistRead])
async def my_playlists(auth=Depends(require_auth), db: AsyncSession = Depends(get_db_session)):
    rows = await PlaylistRepo(db).list_for_user(auth["user_id"])
    return [_playlist_response(playlist, count, cover) for playlist, count, cover in rows]


@router.get("/public", response_model=List[PlaylistRead])
async def public_playlists(db: AsyncSession = Depends(get_db_session)):
    playlists = await PlaylistRepo(db).list_public(PUBLIC_LIST_LIMIT)
    return [_playlist_response(playlist) for playlist in playlists]


@router.get("/latest", response_model=Optional[PlaylistDetail])
async def latest_playlist(auth=Depends(require_auth), db: AsyncSession = Depends(get_db_session)):
    repo = PlaylistRepo(db)
    playlist = await repo.latest_for_user(auth["user_id"])
    if playlist is None:
        return None
    return await _playlist_detail(repo, playlist)


@router.post("/default", response_model=PlaylistRead)
async def default_playlist(auth=Depends(require_auth), db: AsyncSession = Depends(get_db_session)):
    """Return the caller's most recent playlist, creating a first one if none exist."""

    repo = PlaylistRepo(db)
    playlist = await repo.latest_for_user(auth["user_id"])
    if playlist is None:
        user = await _get_user_or_404(db, auth["user_id"])
        await _ensure_can_create(db, user)
        playlist = await repo.create(user.id, **DEFAULT_PLAYLIST)
    return _playlist_response(playlist)


@router.post("", response_model=PlaylistRead, status_code=status.HTTP_201_CREATED)
async def create_playlist(
    payload: PlaylistCreate,
    auth=Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
):
    user_id = auth["user_id"]
    await check_rate_limit(user_id)
    user = await _get_user_or_404(db, user_id)
    await _ensure_can_create(db, user)

    playlist = await PlaylistRepo(db).create(
        user_id,
        name=payload.name,
        description=payload.description or None,
        is_public=payload.is_public,
    )
    return _playlist_response(playlist)


@router.get("/{playlist_id}", response_model=PlaylistDetail)
async def get_playlist(
    playlist_id: str,
    auth=Depends(optional_auth),
    db: AsyncSession = Depends(get_db_session),
):
    repo = PlaylistRepo(db)
    playlist = await _get_playlist_or_404(repo, playlist_id)
    # Private playlists are hidden from everyone but the owner
    if not playlist.is_public and (auth is None or auth["user_id"] != playlist.user_id):
        raise NotFoundError("Playlist not found")
    return await _playlist_detail(repo, playlist)


@router.patch("/{playlist_id}", response_model=PlaylistRead)
async def update_playlist(
    playlist_id: str,
    payload: PlaylistUpdate,
    auth=Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
):
    repo = PlaylistRepo(db)
    playlist = await _get_owned_playlist(repo, playlist_id, auth["user_id"], "edit")
    playlist = await repo.update(playlist, **payload.model_dump(exclude_unset=True))
    return _playlist_response(playlist)


@router.delete("/{playlist_id}")
async def delete_playlist(
    playlist_id: str,
    auth=Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
):
    repo = PlaylistRepo(db)
    playlist = await _get_owned_playlist(repo, playlist_id, auth["user_id"], "delete")
    await repo.delete(playlist.id)
    return {"success": True}


@router.post("/{playlist_id}/songs", response_model=PlaylistEntryRead)
async def add_song(
    playlist_id: str,
    payload: PlaylistSongAdd,
    auth=Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
):
    await check_rate_limit(auth["user_id"])
    repo = PlaylistRepo(db)
    playlist = await _get_owned_playlist(repo, playlist_id, auth["user_id"], "modify")
    if await SongRepo(db).get_by_id(payload.song_id) is None:
        raise NotFoundError("Song not found")

    entry, _ = await repo.add_song(playlist.id, payload.song_id)
    return entry


@router.delete("/{playlist_id}/songs/{song_id}")
async def remove_song(
    playlist_id: str,
    song_id: str,
    auth=Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
):
    repo = PlaylistRepo(db)
    playlist = await _get_owned_playlist(repo, playlist_id, auth["user_id"], "modify")
    if not await repo.remove_song(playlist.id, song_id):
        raise NotFoundError("Song is not in this playlist")
    return {"success": True}


@router.put("/{playlist_id}/songs/order", response_model=PlaylistDetail)
async def reorder_songs(
    playlist_id: str,
    payload: PlaylistReorder,
    auth=Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
):
    repo = PlaylistRepo(db)
    playlist = await _get_owned_playlist(repo, playlist_id, auth["user_id"], "modify")
    if not await repo.reorder(playlist.id, payload.song_ids):
        raise BadRequestError("song_ids must list every song in the playlist exactly once")
    return await _playlist_detail(repo, playlist)
