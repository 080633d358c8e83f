"""Tag models for labelling sounds."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.db.base import Base, new_id, utcnow


class Tag(Base):
    """A lower-cased label shared across sounds."""

    __tablename__ = "tag"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Tag {self.name}>"


class SoundTag(Base):
    __tablename__ = "sound_tag"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=new_id)
    sound_id: Mapped[str] = mapped_column(
        String, ForeignKey("sound.id", ondelete="CASCADE"), nullable=False
    )
    tag_id: Mapped[str] = mapped_column(
        String, ForeignKey("tag.id", ondelete="CASCADE"), index=True, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    __table_args__ = (
        UniqueConstraint("sound_id", "tag_id", name="uq_sound_tag_sound_tag"),
    )
