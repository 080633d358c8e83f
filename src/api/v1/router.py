"""Version 1 API router."""
from fastapi import APIRouter

from src.api.v1.endpoints import billing, limits, playlists, songs, sounds, users


api_router = APIRouter()
api_router.include_router(songs.router)
api_router.include_router(playlists.router)
api_router.include_router(sounds.router)
api_router.include_router(sounds.comments_router)
api_router.include_router(sounds.tags_router)
api_router.include_router(users.router)
api_router.include_router(users.storage_router)
api_router.include_router(billing.router)
api_router.include_router(billing.plans_router)
api_router.include_router(limits.router)
