"""Repository utilities for playlists and their song entries."""
from __future__ import annotations

from typing import Any, List, Optional, Sequence, Tuple

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.base import utcnow
from src.db.models.playlist import Playlist, PlaylistSong
from src.db.models.song import Song


class PlaylistRepo:
    """Data-access helpers for :class:`Playlist` and :class:`PlaylistSong`.

    Positions are 1-based and kept contiguous: adding appends after the
    current last entry, removing shifts the following entries up by one.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, playlist_id: str) -> Optional[Playlist]:
        result = await self.session.execute(select(Playlist).where(Playlist.id == playlist_id))
        return result.scalar_one_or_none()

    async def create(
        self,
        user_id: str,
        name: str,
        description: Optional[str] = None,
        is_public: bool = False,
    ) -> Playlist:
        playlist = Playlist(
            user_id=user_id, name=name, description=description, is_public=is_public
        )
        self.session.add(playlist)
        await self.session.flush()
        return playlist

    async def update(self, playlist: Playlist, **fields: Any) -> Playlist:
        for name, value in fields.items():
            setattr(playlist, name, value)
        playlist.updated_at = utcnow()
        self.session.add(playlist)
        await self.session.flush()
        return playlist

    async def delete(self, playlist_id: str) -> bool:
        playlist = await self.get(playlist_id)
        if playlist is None:
            return False
        await self.session.execute(
            delete(PlaylistSong).where(PlaylistSong.playlist_id == playlist_id)
        )
        await self.session.delete(playlist)
        await self.session.flush()
        return True

    async def count_for_user(self, user_id: str) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(Playlist).where(Playlist.user_id == user_id)
        )
        return int(result.scalar_one() or 0)

    async def list_for_user(self, user_id: str) -> List[Tuple[Playlist, int, Optional[str]]]:
        """Newest first, each with its song count and the first song's cover key."""

        song_counts = (
            select(PlaylistSong.playlist_id, func.count().label("song_count"))
            .group_by(PlaylistSong.playlist_id)
            .subquery()
        )
        first_cover = (
            select(Song.cover_image_key)
            .join(PlaylistSong, PlaylistSong.song_id == Song.id)
            .where(PlaylistSong.playlist_id == Playlist.id)
            .order_by(PlaylistSong.position)
            .limit(1)
            .correlate(Playlist)
            .scalar_subquery()
        )
        result = await self.session.execute(
            select(Playlist, func.coalesce(song_counts.c.song_count, 0), first_cover)
            .outerjoin(song_counts, song_counts.c.playlist_id == Playlist.id)
            .where(Playlist.user_id == user_id)
            .order_by(Playlist.created_at.desc())
        )
        return [(playlist, int(count), cover) for playlist, count, cover in result.all()]

    async def latest_for_user(self, user_id: str) -> Optional[Playlist]:
        result = await self.session.execute(
            select(Playlist)
            .where(Playlist.user_id == user_id)
            .order_by(Playlist.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def list_public(self, limit: int = 20) -> List[Playlist]:
        result = await self.session.execute(
            select(Playlist)
            .where(Playlist.is_public.is_(True))
            .order_by(Playlist.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def list_songs(self, playlist_id: str) -> List[Tuple[Song, int]]:
        result = await self.session.execute(
            select(Song, PlaylistSong.position)
            .join(PlaylistSong, PlaylistSong.song_id == Song.id)
            .where(PlaylistSong.playlist_id == playlist_id)
            .order_by(PlaylistSong.position)
        )
        return [(song, position) for song, position in result.all()]

    async def find_entry(self, playlist_id: str, song_id: str) -> Optional[PlaylistSong]:
        result = await self.session.execute(
            select(PlaylistSong).where(
                PlaylistSong.playlist_id == playlist_id,
                PlaylistSong.song_id == song_id,
            )
        )
        return result.scalar_one_or_none()

    async def add_song(self, playlist_id: str, song_id: str) -> Tuple[PlaylistSong, bool]:
        """Append ``song_id``; an existing entry is returned unchanged with ``False``."""

        existing = await self.find_entry(playlist_id, song_id)
        if existing is not None:
            return existing, False

        result = await self.session.execute(
            select(func.max(PlaylistSong.position)).where(
                PlaylistSong.playlist_id == playlist_id
            )
        )
        last_position = result.scalar_one() or 0
        entry = PlaylistSong(
            playlist_id=playlist_id, song_id=song_id, position=last_position + 1
        )
        self.session.add(entry)
        await self.session.flush()
        return entry, True

    async def remove_song(self, playlist_id: str, song_id: str) -> bool:
        entry = await self.find_entry(playlist_id, song_id)
        if entry is None:
            return False
        removed_position = entry.position
        await self.session.delete(entry)
        await self.session.flush()
        await self.session.execute(
            update(PlaylistSong)
            .where(
                PlaylistSong.playlist_id == playlist_id,
                PlaylistSong.position > removed_position,
            )
            .values(position=PlaylistSong.position - 1)
        )
        return True

    async def reorder(self, playlist_id: str, song_ids: Sequence[str]) -> bool:
        """Apply a new order given as the full list of song ids.

        Returns ``False`` without changing anything unless ``song_ids`` is a
        permutation of the playlist's current songs.
        """

        result = await self.session.execute(
            select(PlaylistSong).where(PlaylistSong.playlist_id == playlist_id)
        )
        entries = {entry.song_id: entry for entry in result.scalars().all()}
        if len(song_ids) != len(entries) or set(song_ids) != set(entries):
            return False

        for position, song_id in enumerate(song_ids, start=1):
            entries[song_id].position = position
        await self.session.flush()
        return True
