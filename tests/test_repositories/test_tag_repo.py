import pytest

from src.db.models.sound import Sound
from src.repositories.sound_repo import SoundRepo
from src.repositories.tag_repo import TagRepo, normalize_tag


async def seed_sound(session, user_id: str, title: str = "Beat") -> Sound:
    sound = Sound(user_id=user_id, title=title, code='s("bd sd")')
    session.add(sound)
    await session.commit()
    return sound


def test_normalize_tag():
    assert normalize_tag("  Lo-Fi ") == "lo-fi"


@pytest.mark.asyncio
async def test_set_sound_tags_dedupes_and_replaces(test_db, make_user):
    user = await make_user()
    sound = await seed_sound(test_db, user.id)
    repo = TagRepo(test_db)

    tags = await repo.set_sound_tags(sound.id, ["Techno", " techno ", "", "ambient"])
    assert [tag.name for tag in tags] == ["ambient", "techno"]

    await repo.set_sound_tags(sound.id, ["house"])
    assert [tag.name for tag in await repo.list_for_sound(sound.id)] == ["house"]
    # Replaced tags stay available for suggestions
    assert [tag.name for tag in await repo.list_all()] == ["ambient", "house", "techno"]


@pytest.mark.asyncio
async def test_find_or_create_reuses_existing_tag(test_db):
    repo = TagRepo(test_db)

    first = await repo.find_or_create("Drums")
    second = await repo.find_or_create("drums ")

    assert first.id == second.id
    assert first.name == "drums"


@pytest.mark.asyncio
async def test_tags_for_sounds_groups_by_sound(test_db, make_user):
    user = await make_user()
    tagged = await seed_sound(test_db, user.id, "Tagged")
    untagged = await seed_sound(test_db, user.id, "Plain")
    repo = TagRepo(test_db)
    await repo.set_sound_tags(tagged.id, ["b", "a"])

    grouped = await repo.tags_for_sounds([tagged.id, untagged.id])

    assert [tag.name for tag in grouped[tagged.id]] == ["a", "b"]
    assert untagged.id not in grouped
    assert await repo.tags_for_sounds([]) == {}


@pytest.mark.asyncio
async def test_search_is_substring_and_literal(test_db):
    repo = TagRepo(test_db)
    for name in ("drum_and_bass", "drumless", "dub"):
        await repo.find_or_create(name)

    assert [tag.name for tag in await repo.search("DRUM")] == ["drum_and_bass", "drumless"]
    assert [tag.name for tag in await repo.search("m_a")] == ["drum_and_bass"]
    assert len(await repo.search("d", limit=2)) == 2


@pytest.mark.asyncio
async def test_list_by_tag_matches_normalized_name(test_db, make_user):
    user = await make_user()
    tagged = await seed_sound(test_db, user.id, "Tagged")
    await seed_sound(test_db, user.id, "Plain")
    await TagRepo(test_db).set_sound_tags(tagged.id, ["Jungle"])

    sounds = await SoundRepo(test_db).list_by_tag(" JUNGLE")

    assert [sound.id for sound in sounds] == [tagged.id]
