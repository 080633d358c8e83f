"""Repository utilities for tags and the tags attached to sounds."""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models.tag import SoundTag, Tag


SUGGESTION_LIMIT = 10


def normalize_tag(name: str) -> str:
    return name.strip().lower()


class TagRepo:
    """Data-access helpers for :class:`Tag` and :class:`SoundTag`."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_all(self) -> List[Tag]:
        result = await self.session.execute(select(Tag).order_by(Tag.name))
        return list(result.scalars().all())

    async def search(self, term: str, limit: int = SUGGESTION_LIMIT) -> List[Tag]:
        result = await self.session.execute(
            select(Tag)
            .where(Tag.name.icontains(normalize_tag(term), autoescape=True))
            .order_by(Tag.name)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_by_name(self, name: str) -> Optional[Tag]:
        result = await self.session.execute(select(Tag).where(Tag.name == normalize_tag(name)))
        return result.scalar_one_or_none()

    async def find_or_create(self, name: str) -> Tag:
        tag = await self.get_by_name(name)
        if tag is not None:
            return tag
        tag = Tag(name=normalize_tag(name))
        self.session.add(tag)
        await self.session.flush()
        return tag

    async def list_for_sound(self, sound_id: str) -> List[Tag]:
        return (await self.tags_for_sounds([sound_id])).get(sound_id, [])

    async def tags_for_sounds(self, sound_ids: Iterable[str]) -> Dict[str, List[Tag]]:
        """Map each sound id to its tags, sorted by name; untagged ids are absent."""

        ids = list(sound_ids)
        if not ids:
            return {}
        result = await self.session.execute(
            select(SoundTag.sound_id, Tag)
            .join(Tag, SoundTag.tag_id == Tag.id)
            .where(SoundTag.sound_id.in_(ids))
            .order_by(Tag.name)
        )
        tags: Dict[str, List[Tag]] = {}
        for sound_id, tag in result.all():
            tags.setdefault(sound_id, []).append(tag)
        return tags

    async def set_sound_tags(self, sound_id: str, names: Sequence[str]) -> List[Tag]:
        """Replace the sound's tags; blank names are skipped and duplicates collapse."""

        await self.session.execute(delete(SoundTag).where(SoundTag.sound_id == sound_id))

        tags: Dict[str, Tag] = {}
        for name in names:
            normalized = normalize_tag(name)
            if not normalized or normalized in tags:
                continue
            tags[normalized] = await self.find_or_create(normalized)

        for tag in tags.values():
            self.session.add(SoundTag(sound_id=sound_id, tag_id=tag.id))
        await self.session.flush()
        return sorted(tags.values(), key=lambda tag: tag.name)
