"""Repository utilities for working with Song records."""
from typing import Any, List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.base import utcnow
from src.db.models.song import Song


class SongRepo:
    """Simple data-access helper for Song entities."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, song_id: str) -> Optional[Song]:
        result = await self.session.execute(select(Song).where(Song.id == song_id))
        return result.scalar_one_or_none()

    async def create(self, user_id: str, **fields: Any) -> Song:
        song = Song(user_id=user_id, **fields)
        self.session.add(song)
        await self.session.flush()
        return song

    async def update(self, song: Song, **fields: Any) -> Song:
        for name, value in fields.items():
            setattr(song, name, value)
        song.updated_at = utcnow()
        self.session.add(song)
        await self.session.flush()
        return song

    async def delete(self, song_id: str) -> bool:
        song = await self.get_by_id(song_id)
        if song is None:
            return False
        await self.session.delete(song)
        await self.session.flush()
        return True

    async def list_recent(self, limit: int = 10) -> List[Song]:
        result = await self.session.execute(
            select(Song).order_by(Song.created_at.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def list_popular(self, limit: int = 10) -> List[Song]:
        result = await self.session.execute(
            select(Song).order_by(Song.play_count.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def list_for_user(self, user_id: str) -> List[Song]:
        result = await self.session.execute(
            select(Song).where(Song.user_id == user_id).order_by(Song.created_at.desc())
        )
        return list(result.scalars().all())

    async def count_for_user(self, user_id: str) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(Song).where(Song.user_id == user_id)
        )
        value = result.scalar_one()
        return int(value or 0)

    async def increment_play_count(self, song_id: str) -> Optional[int]:
        """Atomically bump the play counter; ``None`` when the song is missing."""

        result = await self.session.execute(
            update(Song)
            .where(Song.id == song_id)
            .values(play_count=Song.play_count + 1, updated_at=utcnow())
            .returning(Song.play_count)
        )
        return result.scalar_one_or_none()
