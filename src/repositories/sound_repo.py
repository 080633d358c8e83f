"""Repository utilities for Sound records."""
from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.base import utcnow
from src.db.models.sound import Sound
from src.db.models.tag import SoundTag, Tag
from src.repositories.tag_repo import normalize_tag


class SoundRepo:
    """Data-access helpers for :class:`Sound`."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, sound_id: str) -> Sound | None:
        result = await self.session.execute(select(Sound).where(Sound.id == sound_id))
        return result.scalar_one_or_none()

    async def create(self, user_id: str, title: str, code: str) -> Sound:
        sound = Sound(user_id=user_id, title=title, code=code)
        self.session.add(sound)
        await self.session.flush()
        return sound

    async def update(
        self, sound: Sound, title: Optional[str] = None, code: Optional[str] = None
    ) -> Sound:
        if title is not None:
            sound.title = title
        if code is not None:
            sound.code = code
        sound.updated_at = utcnow()
        self.session.add(sound)
        await self.session.flush()
        return sound

    async def delete(self, sound: Sound) -> None:
        await self.session.delete(sound)
        await self.session.flush()

    async def list_recent(self, limit: int = 20) -> List[Sound]:
        result = await self.session.execute(
            select(Sound).order_by(Sound.created_at.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def list_for_user(self, user_id: str) -> List[Sound]:
        result = await self.session.execute(
            select(Sound).where(Sound.user_id == user_id).order_by(Sound.created_at.desc())
        )
        return list(result.scalars().all())

    async def search_by_title(self, term: str, limit: int = 20) -> List[Sound]:
        result = await self.session.execute(
            select(Sound)
            .where(Sound.title.icontains(term, autoescape=True))
            .order_by(Sound.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def list_by_tag(self, tag_name: str) -> List[Sound]:
        result = await self.session.execute(
            select(Sound)
            .join(SoundTag, SoundTag.sound_id == Sound.id)
            .join(Tag, SoundTag.tag_id == Tag.id)
            .where(Tag.name == normalize_tag(tag_name))
            .order_by(Sound.created_at.desc())
        )
        return list(result.scalars().all())
