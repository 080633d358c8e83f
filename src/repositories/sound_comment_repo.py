"""Repository utilities for comments on sounds."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.base import utcnow
from src.db.models.sound_comment import SoundComment
from src.db.models.user import User


class SoundCommentRepo:
    """Data-access helpers for :class:`SoundComment`."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_for_sound(self, sound_id: str) -> List[Dict[str, Any]]:
        """Return comments newest first, each with the author's display fields."""

        result = await self.session.execute(
            select(SoundComment, User.id, User.name, User.image)
            .outerjoin(User, SoundComment.user_id == User.id)
            .where(SoundComment.sound_id == sound_id)
            .order_by(SoundComment.created_at.desc())
        )
        rows = []
        for comment, author_id, author_name, author_image in result.all():
            rows.append(
                {
                    "id": comment.id,
                    "content": comment.content,
                    "sound_id": comment.sound_id,
                    "user_id": comment.user_id,
                    "created_at": comment.created_at,
                    "updated_at": comment.updated_at,
                    "user": (
                        {"id": author_id, "name": author_name, "image": author_image}
                        if author_id is not None
                        else None
                    ),
                }
            )
        return rows

    async def get(self, comment_id: str) -> Optional[SoundComment]:
        result = await self.session.execute(
            select(SoundComment).where(SoundComment.id == comment_id)
        )
        return result.scalar_one_or_none()

    async def create(self, sound_id: str, user_id: str, content: str) -> SoundComment:
        comment = SoundComment(sound_id=sound_id, user_id=user_id, content=content)
        self.session.add(comment)
        await self.session.flush()
        return comment

    async def update(self, comment_id: str, content: str) -> Optional[SoundComment]:
        comment = await self.get(comment_id)
        if comment is None:
            return None
        comment.content = content
        comment.updated_at = utcnow()
        self.session.add(comment)
        await self.session.flush()
        return comment

    async def delete(self, comment_id: str) -> bool:
        comment = await self.get(comment_id)
        if comment is None:
            return False
        await self.session.delete(comment)
        await self.session.flush()
        return True
