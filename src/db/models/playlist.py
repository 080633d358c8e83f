"""Playlist models: a user's ordered collection of songs."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.db.base import Base, new_id, utcnow


class Playlist(Base):
    """A named list of songs owned by a user; counted against the playlist quota."""

    __tablename__ = "playlist"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("user.id", ondelete="CASCADE"), index=True, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Playlist {self.id} user={self.user_id}>"


class PlaylistSong(Base):
    """Membership of a song in a playlist, at a 1-based position."""

    __tablename__ = "playlist_song"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=new_id)
    playlist_id: Mapped[str] = mapped_column(
        String, ForeignKey("playlist.id", ondelete="CASCADE"), nullable=False
    )
    song_id: Mapped[str] = mapped_column(
        String, ForeignKey("song.id", ondelete="CASCADE"), index=True, nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    __table_args__ = (
        UniqueConstraint("playlist_id", "song_id", name="uq_playlist_song_playlist_song"),
    )

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<PlaylistSong playlist={self.playlist_id} song={self.song_id} pos={self.position}>"
