"""Repository utilities for song and sound hearts."""
from __future__ import annotations

from typing import Generic, Optional, Tuple, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.base import new_id
from src.db.models.heart import Heart, SoundHeart


HeartT = TypeVar("HeartT", Heart, SoundHeart)

_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class _TargetHeartRepo(Generic[HeartT]):
    """Hearts keyed by (user, target); subclasses name the target column."""

    model: Type[HeartT]
    target_field: str

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @property
    def _target(self):
        return getattr(self.model, self.target_field)

    async def create(self, user_id: str, target_id: str) -> HeartT:
        """Insert a heart. A duplicate pair violates the unique constraint."""

        heart = self.model(user_id=user_id, **{self.target_field: target_id})
        self.session.add(heart)
        await self.session.flush()
        return heart

    async def create_if_absent(self, user_id: str, target_id: str) -> Tuple[HeartT, bool]:
        """Insert the pair unless it already exists.

        Returns the stored heart and whether this call created it.
        """

        dialect = self.session.get_bind().dialect.name
        insert = _INSERTS.get(dialect)
        if insert is None:
            raise NotImplementedError(f"Conditional insert unsupported for {dialect}")

        stmt = (
            insert(self.model)
            .values(id=new_id(), user_id=user_id, **{self.target_field: target_id})
            .on_conflict_do_nothing(index_elements=["user_id", self.target_field])
            .returning(self.model.id)
        )
        inserted_id = (await self.session.execute(stmt)).scalar_one_or_none()
        heart = await self.find(user_id, target_id)
        return heart, inserted_id is not None

    async def delete(self, user_id: str, target_id: str) -> Optional[HeartT]:
        heart = await self.find(user_id, target_id)
        if heart is None:
            return None
        await self.session.delete(heart)
        await self.session.flush()
        return heart

    async def find(self, user_id: str, target_id: str) -> Optional[HeartT]:
        result = await self.session.execute(
            select(self.model)
            .where(self.model.user_id == user_id, self._target == target_id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def count_for_target(self, target_id: str) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(self.model).where(self._target == target_id)
        )
        value = result.scalar_one()
        return int(value or 0)


class HeartRepo(_TargetHeartRepo[Heart]):
    """Data-access helpers for :class:`Heart` (song hearts)."""

    model = Heart
    target_field = "song_id"


class SoundHeartRepo(_TargetHeartRepo[SoundHeart]):
    """Data-access helpers for :class:`SoundHeart`."""

    model = SoundHeart
    target_field = "sound_id"
