"""Heart (like) models for songs and sounds."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.db.base import Base, new_id, utcnow


class Heart(Base):
    """A user's heart on a song."""

    __tablename__ = "heart"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("user.id", ondelete="CASCADE"), nullable=False
    )
    song_id: Mapped[str] = mapped_column(
        String, ForeignKey("song.id", ondelete="CASCADE"), index=True, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    __table_args__ = (
        UniqueConstraint("user_id", "song_id", name="uq_heart_user_song"),
    )

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Heart user={self.user_id} song={self.song_id}>"


class SoundHeart(Base):
    """A user's heart on a sound."""

    __tablename__ = "sound_heart"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("user.id", ondelete="CASCADE"), nullable=False
    )
    sound_id: Mapped[str] = mapped_column(
        String, ForeignKey("sound.id", ondelete="CASCADE"), index=True, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    __table_args__ = (
        UniqueConstraint("user_id", "sound_id", name="uq_sound_heart_user_sound"),
    )

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<SoundHeart user={self.user_id} sound={self.sound_id}>"
