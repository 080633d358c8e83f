"""Database models package exports."""

from src.db.models.heart import Heart, SoundHeart
from src.db.models.playlist import Playlist, PlaylistSong
from src.db.models.song import Song
from src.db.models.sound import Sound
from src.db.models.sound_comment import SoundComment
from src.db.models.tag import SoundTag, Tag
from src.db.models.user import User

__all__ = [
    "Heart",
    "Playlist",
    "PlaylistSong",
    "Song",
    "Sound",
    "SoundComment",
    "SoundHeart",
    "SoundTag",
    "Tag",
    "User",
]
