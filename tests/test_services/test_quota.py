import datetime as dt

import pytest

from src.services.quota import (
    UNLIMITED,
    get_playlist_limit,
    get_song_limit,
    has_reached_playlist_limit,
    has_reached_song_limit,
    is_plan_active,
)


@pytest.mark.parametrize(
    "plan, expected",
    [("free", 5), ("basic", 50), ("pro", UNLIMITED)],
)
def test_song_limit_per_plan(plan, expected):
    assert get_song_limit(plan) == expected


@pytest.mark.parametrize("plan", ["unknown-plan", "", None, "PRO"])
def test_unrecognized_plan_falls_back_to_free(plan):
    assert get_song_limit(plan) == get_song_limit("free") == 5


@pytest.mark.parametrize("count", [0, 1, 49, 50, 5_000, 10**9])
def test_pro_is_never_limited(count):
    assert has_reached_song_limit("pro", count) is False


def test_free_limit_boundary():
    assert has_reached_song_limit("free", 4) is False
    assert has_reached_song_limit("free", 5) is True
    assert has_reached_song_limit("free", 6) is True


def test_basic_limit_boundary():
    assert has_reached_song_limit("basic", 49) is False
    assert has_reached_song_limit("basic", 50) is True


def test_unknown_plan_is_limited_like_free():
    assert has_reached_song_limit("enterprise", 4) is False
    assert has_reached_song_limit("enterprise", 5) is True


@pytest.mark.parametrize(
    "plan, expected",
    [("free", 1), ("basic", 5), ("pro", UNLIMITED), ("unknown-plan", 1), (None, 1)],
)
def test_playlist_limit_per_plan(plan, expected):
    assert get_playlist_limit(plan) == expected


def test_playlist_limit_boundaries():
    assert has_reached_playlist_limit("free", 0) is False
    assert has_reached_playlist_limit("free", 1) is True
    assert has_reached_playlist_limit("basic", 4) is False
    assert has_reached_playlist_limit("basic", 5) is True
    assert has_reached_playlist_limit("pro", 10**6) is False


def test_paid_plan_lapses_after_expiry():
    now = dt.datetime(2026, 6, 1, tzinfo=dt.timezone.utc)

    assert is_plan_active("pro", now + dt.timedelta(days=1), now=now) is True
    assert is_plan_active("pro", now - dt.timedelta(seconds=1), now=now) is False
    assert is_plan_active("basic", dt.datetime(2026, 5, 1), now=now) is False
    assert is_plan_active("basic", None, now=now) is True


@pytest.mark.parametrize("plan", ["free", None, "legacy-gold"])
def test_free_and_unknown_plans_never_lapse(plan):
    long_ago = dt.datetime(2000, 1, 1, tzinfo=dt.timezone.utc)

    assert is_plan_active(plan, long_ago) is True
