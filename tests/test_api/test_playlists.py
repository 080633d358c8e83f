from __future__ import annotations

import datetime as dt

import pytest
from fastapi import status

from src.core.config import settings
from src.db.models.playlist import Playlist
from src.db.models.song import Song


API_PREFIX = f"{settings.API_PREFIX}/v1"


async def seed_songs(session, user_id: str, count: int) -> list[Song]:
    songs = [
        Song(
            user_id=user_id,
            title=f"Track {i}",
            artist="Artist",
            audio_key=f"songs/{user_id}/{i}.mp3",
            cover_image_key=f"covers/{user_id}/{i}.png",
        )
        for i in range(count)
    ]
    session.add_all(songs)
    await session.commit()
    return songs


async def seed_playlists(session, user_id: str, count: int) -> list[Playlist]:
    playlists = [Playlist(user_id=user_id, name=f"List {i}") for i in range(count)]
    session.add_all(playlists)
    await session.commit()
    return playlists


@pytest.mark.asyncio
async def test_create_playlist(client, make_user, auth_header):
    user = await make_user()

    response = await client.post(
        f"{API_PREFIX}/playlists",
        json={"name": "Road Trip", "description": "Long drives", "is_public": True},
        headers=auth_header(user.id),
    )

    assert response.status_code == status.HTTP_201_CREATED, response.text
    body = response.json()
    assert body["name"] == "Road Trip"
    assert body["is_public"] is True
    assert body["user_id"] == user.id
    assert body["song_count"] == 0


@pytest.mark.asyncio
async def test_free_plan_allows_one_playlist(client, test_db, make_user, auth_header):
    user = await make_user(plan="free")
    await seed_playlists(test_db, user.id, 1)

    response = await client.post(
        f"{API_PREFIX}/playlists", json={"name": "Second"}, headers=auth_header(user.id)
    )

    assert response.status_code == status.HTTP_402_PAYMENT_REQUIRED
    assert response.json()["error"] == "playlist_limit_free"
    assert response.json()["message"].startswith("Free users can only create 1 playlist.")


@pytest.mark.asyncio
async def test_basic_plan_allows_five_playlists(client, test_db, make_user, auth_header):
    user = await make_user(plan="basic")
    await seed_playlists(test_db, user.id, 4)

    fifth = await client.post(
        f"{API_PREFIX}/playlists", json={"name": "Fifth"}, headers=auth_header(user.id)
    )
    sixth = await client.post(
        f"{API_PREFIX}/playlists", json={"name": "Sixth"}, headers=auth_header(user.id)
    )

    assert fifth.status_code == status.HTTP_201_CREATED
    assert sixth.status_code == status.HTTP_402_PAYMENT_REQUIRED
    assert sixth.json()["error"] == "playlist_limit_basic"
    assert sixth.json()["message"] == (
        "Basic users can create up to 5 playlists. Upgrade to Pro for unlimited playlists."
    )


@pytest.mark.asyncio
async def test_pro_plan_is_unlimited(client, test_db, make_user, auth_header):
    user = await make_user(plan="pro")
    await seed_playlists(test_db, user.id, 25)

    response = await client.post(
        f"{API_PREFIX}/playlists", json={"name": "Another"}, headers=auth_header(user.id)
    )

    assert response.status_code == status.HTTP_201_CREATED


@pytest.mark.asyncio
async def test_expired_subscription_blocks_playlist_creation(client, make_user, auth_header):
    expired = dt.datetime.now(dt.timezone.utc) - dt.timedelta(days=1)
    user = await make_user(plan="pro", subscription_expires_at=expired)

    response = await client.post(
        f"{API_PREFIX}/playlists", json={"name": "Late"}, headers=auth_header(user.id)
    )

    assert response.status_code == status.HTTP_402_PAYMENT_REQUIRED
    assert response.json()["error"] == "subscription_expired"


@pytest.mark.asyncio
async def test_create_playlist_validates_name(client, make_user, auth_header):
    user = await make_user()

    response = await client.post(
        f"{API_PREFIX}/playlists", json={"name": ""}, headers=auth_header(user.id)
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.asyncio
async def test_only_owner_can_change_playlist(client, test_db, make_user, auth_header):
    owner = await make_user()
    intruder = await make_user()
    (playlist,) = await seed_playlists(test_db, owner.id, 1)
    (song,) = await seed_songs(test_db, intruder.id, 1)
    headers = auth_header(intruder.id)

    edit = await client.patch(
        f"{API_PREFIX}/playlists/{playlist.id}", json={"name": "Mine now"}, headers=headers
    )
    add = await client.post(
        f"{API_PREFIX}/playlists/{playlist.id}/songs", json={"song_id": song.id}, headers=headers
    )
    delete = await client.delete(f"{API_PREFIX}/playlists/{playlist.id}", headers=headers)

    assert edit.status_code == status.HTTP_403_FORBIDDEN
    assert edit.json()["message"] == "You can only edit your own playlists"
    assert add.status_code == status.HTTP_403_FORBIDDEN
    assert add.json()["message"] == "You can only modify your own playlists"
    assert delete.status_code == status.HTTP_403_FORBIDDEN
    assert delete.json()["message"] == "You can only delete your own playlists"


@pytest.mark.asyncio
async def test_private_playlist_visible_only_to_owner(client, test_db, make_user, auth_header):
    owner = await make_user()
    other = await make_user()
    hidden = Playlist(user_id=owner.id, name="Hidden")
    shared = Playlist(user_id=owner.id, name="Shared", is_public=True)
    test_db.add_all([hidden, shared])
    await test_db.commit()

    as_owner = await client.get(f"{API_PREFIX}/playlists/{hidden.id}", headers=auth_header(owner.id))
    as_other = await client.get(f"{API_PREFIX}/playlists/{hidden.id}", headers=auth_header(other.id))
    anonymous = await client.get(f"{API_PREFIX}/playlists/{hidden.id}")
    public = await client.get(f"{API_PREFIX}/playlists/{shared.id}")
    listed = await client.get(f"{API_PREFIX}/playlists/public")

    assert as_owner.status_code == status.HTTP_200_OK
    assert as_other.status_code == status.HTTP_404_NOT_FOUND
    assert anonymous.status_code == status.HTTP_404_NOT_FOUND
    assert public.status_code == status.HTTP_200_OK
    assert [item["id"] for item in listed.json()] == [shared.id]


@pytest.mark.asyncio
async def test_add_remove_and_reorder_songs(client, test_db, make_user, auth_header, signed_urls):
    user = await make_user()
    a, b, c = await seed_songs(test_db, user.id, 3)
    (playlist,) = await seed_playlists(test_db, user.id, 1)
    headers = auth_header(user.id)
    base = f"{API_PREFIX}/playlists/{playlist.id}"

    for song in (a, b, c):
        response = await client.post(f"{base}/songs", json={"song_id": song.id}, headers=headers)
        assert response.status_code == status.HTTP_200_OK
    again = await client.post(f"{base}/songs", json={"song_id": a.id}, headers=headers)
    assert again.json()["position"] == 1

    missing = await client.post(f"{base}/songs", json={"song_id": "nope"}, headers=headers)
    assert missing.status_code == status.HTTP_404_NOT_FOUND
    assert missing.json()["message"] == "Song not found"

    removed = await client.delete(f"{base}/songs/{a.id}", headers=headers)
    assert removed.status_code == status.HTTP_200_OK
    gone = await client.delete(f"{base}/songs/{a.id}", headers=headers)
    assert gone.status_code == status.HTTP_404_NOT_FOUND
    assert gone.json()["message"] == "Song is not in this playlist"

    bad_order = await client.put(
        f"{base}/songs/order", json={"song_ids": [c.id]}, headers=headers
    )
    assert bad_order.status_code == status.HTTP_400_BAD_REQUEST

    reordered = await client.put(
        f"{base}/songs/order", json={"song_ids": [c.id, b.id]}, headers=headers
    )
    assert reordered.status_code == status.HTTP_200_OK, reordered.text
    body = reordered.json()
    assert [(song["id"], song["position"]) for song in body["songs"]] == [(c.id, 1), (b.id, 2)]
    assert body["song_count"] == 2
    assert body["cover_image_url"] == f"https://storage.test/covers/{user.id}/2.png?signed=1"
    assert body["songs"][0]["audio_url"] == f"https://storage.test/songs/{user.id}/2.mp3?signed=1"


@pytest.mark.asyncio
async def test_my_playlists_include_counts(client, test_db, make_user, auth_header, signed_urls):
    user = await make_user(plan="pro")
    (song,) = await seed_songs(test_db, user.id, 1)
    headers = auth_header(user.id)
    created = await client.post(f"{API_PREFIX}/playlists", json={"name": "Filled"}, headers=headers)
    playlist_id = created.json()["id"]
    await client.post(
        f"{API_PREFIX}/playlists/{playlist_id}/songs", json={"song_id": song.id}, headers=headers
    )

    response = await client.get(f"{API_PREFIX}/playlists/mine", headers=headers)

    assert response.status_code == status.HTTP_200_OK
    (item,) = response.json()
    assert item["song_count"] == 1
    assert item["cover_image_url"] == f"https://storage.test/covers/{user.id}/0.png?signed=1"


@pytest.mark.asyncio
async def test_default_playlist_is_created_once(client, make_user, auth_header):
    user = await make_user()
    headers = auth_header(user.id)

    empty = await client.get(f"{API_PREFIX}/playlists/latest", headers=headers)
    first = await client.post(f"{API_PREFIX}/playlists/default", headers=headers)
    second = await client.post(f"{API_PREFIX}/playlists/default", headers=headers)
    latest = await client.get(f"{API_PREFIX}/playlists/latest", headers=headers)

    assert empty.status_code == status.HTTP_200_OK
    assert empty.json() is None
    assert first.json()["name"] == "My Playlist"
    assert second.json()["id"] == first.json()["id"]
    assert latest.json()["id"] == first.json()["id"]
    assert latest.json()["songs"] == []


@pytest.mark.asyncio
async def test_update_playlist_rejects_null_name(client, test_db, make_user, auth_header):
    user = await make_user()
    (playlist,) = await seed_playlists(test_db, user.id, 1)
    headers = auth_header(user.id)

    rejected = await client.patch(
        f"{API_PREFIX}/playlists/{playlist.id}", json={"name": None}, headers=headers
    )
    updated = await client.patch(
        f"{API_PREFIX}/playlists/{playlist.id}",
        json={"is_public": True, "description": None},
        headers=headers,
    )

    assert rejected.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert updated.status_code == status.HTTP_200_OK
    assert updated.json()["is_public"] is True
    assert updated.json()["name"] == "List 0"
