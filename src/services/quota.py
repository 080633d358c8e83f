"""Plan entitlement lookups."""
from __future__ import annotations

import datetime as dt
from typing import Dict, Optional

from src.core.plans import BASIC, FREE, PRO


UNLIMITED = -1

PLAN_LIMITS: Dict[str, Dict[str, int]] = {
    FREE: {"songs": 5, "playlists": 1},
    BASIC: {"songs": 50, "playlists": 5},
    PRO: {"songs": UNLIMITED, "playlists": UNLIMITED},
}


def _limits_for(plan: Optional[str]) -> Dict[str, int]:
    return PLAN_LIMITS.get(plan or FREE, PLAN_LIMITS[FREE])


def get_song_limit(plan: Optional[str]) -> int:
    """Return the song quota for ``plan``, falling back to the free tier."""

    return _limits_for(plan)["songs"]


def has_reached_song_limit(plan: Optional[str], current_count: int) -> bool:
    limit = get_song_limit(plan)
    return limit != UNLIMITED and current_count >= limit


def get_playlist_limit(plan: Optional[str]) -> int:
    """Return the playlist quota for ``plan``, falling back to the free tier."""

    return _limits_for(plan)["playlists"]


def has_reached_playlist_limit(plan: Optional[str], current_count: int) -> bool:
    limit = get_playlist_limit(plan)
    return limit != UNLIMITED and current_count >= limit


def is_plan_active(
    plan: Optional[str],
    expires_at: Optional[dt.datetime],
    now: Optional[dt.datetime] = None,
) -> bool:
    """A paid plan lapses once ``expires_at`` has passed; free never lapses."""

    if plan not in (BASIC, PRO) or expires_at is None:
        return True
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=dt.timezone.utc)
    return expires_at > (now or dt.datetime.now(dt.timezone.utc))
