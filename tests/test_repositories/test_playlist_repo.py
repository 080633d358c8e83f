import pytest

from src.db.models.song import Song
from src.repositories.playlist_repo import PlaylistRepo


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


async def positions(repo: PlaylistRepo, playlist_id: str) -> list[tuple[str, int]]:
    return [(song.id, position) for song, position in await repo.list_songs(playlist_id)]


@pytest.mark.asyncio
async def test_add_song_appends_and_is_idempotent(test_db, make_user):
    user = await make_user()
    first, second = await seed_songs(test_db, user.id, 2)
    repo = PlaylistRepo(test_db)
    playlist = await repo.create(user.id, "Mix")

    entry, created = await repo.add_song(playlist.id, first.id)
    assert created is True
    assert entry.position == 1

    again, created = await repo.add_song(playlist.id, first.id)
    assert created is False
    assert again.id == entry.id

    entry, _ = await repo.add_song(playlist.id, second.id)
    assert entry.position == 2
    assert await positions(repo, playlist.id) == [(first.id, 1), (second.id, 2)]


@pytest.mark.asyncio
async def test_remove_song_closes_the_gap(test_db, make_user):
    user = await make_user()
    songs = await seed_songs(test_db, user.id, 3)
    repo = PlaylistRepo(test_db)
    playlist = await repo.create(user.id, "Mix")
    for song in songs:
        await repo.add_song(playlist.id, song.id)

    assert await repo.remove_song(playlist.id, songs[0].id) is True
    assert await repo.remove_song(playlist.id, songs[0].id) is False

    assert await positions(repo, playlist.id) == [(songs[1].id, 1), (songs[2].id, 2)]
    entry, _ = await repo.add_song(playlist.id, songs[0].id)
    assert entry.position == 3


@pytest.mark.asyncio
async def test_reorder_requires_every_song_once(test_db, make_user):
    user = await make_user()
    a, b, c = await seed_songs(test_db, user.id, 3)
    repo = PlaylistRepo(test_db)
    playlist = await repo.create(user.id, "Mix")
    for song in (a, b, c):
        await repo.add_song(playlist.id, song.id)

    assert await repo.reorder(playlist.id, [a.id, b.id]) is False
    assert await repo.reorder(playlist.id, [a.id, a.id, b.id]) is False
    assert await repo.reorder(playlist.id, [a.id, b.id, "missing"]) is False
    assert await positions(repo, playlist.id) == [(a.id, 1), (b.id, 2), (c.id, 3)]

    assert await repo.reorder(playlist.id, [c.id, a.id, b.id]) is True
    assert await positions(repo, playlist.id) == [(c.id, 1), (a.id, 2), (b.id, 3)]


@pytest.mark.asyncio
async def test_list_for_user_reports_count_and_first_cover(test_db, make_user):
    user = await make_user()
    other = await make_user()
    songs = await seed_songs(test_db, user.id, 2)
    repo = PlaylistRepo(test_db)
    filled = await repo.create(user.id, "Filled")
    await repo.add_song(filled.id, songs[1].id)
    await repo.add_song(filled.id, songs[0].id)
    await repo.create(other.id, "Not mine")

    rows = {playlist.name: (count, cover) for playlist, count, cover in await repo.list_for_user(user.id)}
    assert rows == {"Filled": (2, f"covers/{user.id}/1.png")}

    empty = await repo.create(user.id, "Empty")
    rows = {playlist.id: (count, cover) for playlist, count, cover in await repo.list_for_user(user.id)}
    assert rows[empty.id] == (0, None)
    assert await repo.count_for_user(user.id) == 2
    assert await repo.count_for_user(other.id) == 1


@pytest.mark.asyncio
async def test_delete_playlist_removes_entries(test_db, make_user):
    user = await make_user()
    (song,) = await seed_songs(test_db, user.id, 1)
    repo = PlaylistRepo(test_db)
    playlist = await repo.create(user.id, "Short lived")
    await repo.add_song(playlist.id, song.id)

    assert await repo.delete(playlist.id) is True
    assert await repo.get(playlist.id) is None
    assert await repo.find_entry(playlist.id, song.id) is None
    assert await repo.delete(playlist.id) is False


@pytest.mark.asyncio
async def test_list_public_skips_private(test_db, make_user):
    user = await make_user()
    repo = PlaylistRepo(test_db)
    shared = await repo.create(user.id, "Shared", is_public=True)
    await repo.create(user.id, "Hidden")

    assert [playlist.id for playlist in await repo.list_public()] == [shared.id]
