"""Endpoints exposing the caller's plan limits and usage."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_db_session
from src.auth.jwt import require_auth
from src.core.exceptions import NotFoundError
from src.core.plans import get_plan_details
from src.repositories.playlist_repo import PlaylistRepo
from src.repositories.song_repo import SongRepo
from src.repositories.user_repo import UserRepo
from src.services.quota import (
    get_playlist_limit,
    get_song_limit,
    has_reached_playlist_limit,
    has_reached_song_limit,
    is_plan_active,
)


router = APIRouter(prefix="/limits", tags=["limits"])


@router.get("/current")
async def current_limits(
    auth=Depends(require_auth), db: AsyncSession = Depends(get_db_session)
):
    user_id = auth["user_id"]
    user = await UserRepo(db).get(user_id)
    if user is None:
        raise NotFoundError("User not found")

    song_count = await SongRepo(db).count_for_user(user_id)
    playlist_count = await PlaylistRepo(db).count_for_user(user_id)
    details = get_plan_details(user.plan)

    return {
        "plan": details.plan,
        "plan_name": details.name,
        "plan_active": is_plan_active(user.plan, user.subscription_expires_at),
        "limits": {
            "songs": get_song_limit(user.plan),
            "playlists": get_playlist_limit(user.plan),
        },
        "usage": {
            "songs": song_count,
            "playlists": playlist_count,
        },
        "song_limit_reached": has_reached_song_limit(user.plan, song_count),
        "playlist_limit_reached": has_reached_playlist_limit(user.plan, playlist_count),
    }
