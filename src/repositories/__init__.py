"""Repository layer package."""

from src.repositories.heart_repo import HeartRepo, SoundHeartRepo
from src.repositories.playlist_repo import PlaylistRepo
from src.repositories.song_repo import SongRepo
from src.repositories.sound_comment_repo import SoundCommentRepo
from src.repositories.sound_repo import SoundRepo
from src.repositories.tag_repo import TagRepo
from src.repositories.user_repo import UserRepo

__all__ = [
    "HeartRepo",
    "PlaylistRepo",
    "SongRepo",
    "SoundCommentRepo",
    "SoundHeartRepo",
    "SoundRepo",
    "TagRepo",
    "UserRepo",
]
