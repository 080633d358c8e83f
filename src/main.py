"""FastAPI application factory."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.api.v1.router import api_router
from src.core.config import settings
from src.core.exceptions import register_exception_handlers
from src.core.logging import setup_logging
from src.db.session import engine
from src.services import limits


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info(f"Starting {settings.PROJECT_NAME} ({settings.ENV})")
    yield
    await limits.close_client()
    await engine.dispose()
    logger.info("Shutdown complete")


def create_application() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        lifespan=lifespan,
    )
    register_exception_handlers(app)
    app.include_router(api_router, prefix=f"{settings.API_PREFIX}/v1")

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok", "env": settings.ENV}

    return app


app = create_application()

__all__ = ["create_application", "app"]
