"""Sound comment model definition."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.db.base import Base, new_id, utcnow


class SoundComment(Base):
    """Free-text comment left by a user on a sound."""

    __tablename__ = "sound_comment"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=new_id)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    sound_id: Mapped[str] = mapped_column(
        String, ForeignKey("sound.id", ondelete="CASCADE"), index=True, nullable=False
    )
    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("user.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<SoundComment {self.id} sound={self.sound_id}>"
