"""
Pytest configuration for the application
"""
import os
from typing import AsyncGenerator, Awaitable, Callable, Dict

import httpx
import jwt
import pytest
import pytest_asyncio
from asgi_lifespan import LifespanManager
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine
)
from sqlalchemy.pool import StaticPool

from src.core.config import settings
from src.db.base import Base
from src.db.models.user import User
from src.db.session import get_db
from src.main import create_application
from src.services import limits as limits_service


# Set test environment and override runtime settings to avoid external deps
os.environ["ENV"] = "test"
settings.ENV = "test"
settings.STRIPE_BASIC_PRICE_ID = "price_basic_test"
settings.STRIPE_PRO_PRICE_ID = "price_pro_test"
settings.STRIPE_WEBHOOK_SECRET = "whsec_test"
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
API_PREFIX = f"{settings.API_PREFIX}/v1"


class FakeRedis:
    """Minimal async Redis stub for rate limiting tests."""

    def __init__(self) -> None:
        self.store: Dict[str, int | str] = {}

    async def incr(self, key: str) -> int:
        current = int(self.store.get(key, 0)) + 1
        self.store[key] = current
        return current

    async def expire(self, key: str, seconds: int) -> None:
        self.store.setdefault(f"{key}:ttl", seconds)

    async def aclose(self) -> None:
        return None


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch) -> FakeRedis:
    """Patch the limits module to use an in-memory Redis stub."""

    fake = FakeRedis()
    monkeypatch.setattr(limits_service, "_redis_client", fake, raising=False)
    yield fake
    monkeypatch.setattr(limits_service, "_redis_client", None, raising=False)


@pytest_asyncio.fixture
async def test_db_engine():
    """
    Create an in-memory test database with all tables.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def test_db(test_db_engine) -> AsyncGenerator[AsyncSession, None]:
    """
    Create a new database session for a test.
    """
    session_factory = async_sessionmaker(test_db_engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_app(test_db: AsyncSession) -> AsyncGenerator[FastAPI, None]:
    """
    Create a FastAPI test application sharing the test session.
    """
    app = create_application()

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield test_db

    app.dependency_overrides[get_db] = _override_get_db
    async with LifespanManager(app):
        yield app


@pytest_asyncio.fixture
async def client(test_app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    """
    Create an async HTTP client for testing.
    """
    transport = httpx.ASGITransport(app=test_app)
    async with httpx.AsyncClient(
        transport=transport,
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
def make_user(test_db: AsyncSession) -> Callable[..., Awaitable[User]]:
    """Return a coroutine that inserts a user row."""

    counter = {"n": 0}

    async def _make_user(user_id: str | None = None, plan: str = "free", **fields) -> User:
        counter["n"] += 1
        user_id = user_id or f"user-{counter['n']}"
        user = User(
            id=user_id,
            name=fields.pop("name", f"User {counter['n']}"),
            email=fields.pop("email", f"{user_id}@example.com"),
            plan=plan,
            **fields,
        )
        test_db.add(user)
        await test_db.commit()
        return user

    return _make_user


def build_auth_header(user_id: str) -> Dict[str, str]:
    token = jwt.encode({"sub": user_id}, settings.JWT_SECRET, algorithm=settings.JWT_ALG)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_header() -> Callable[[str], Dict[str, str]]:
    return build_auth_header


@pytest.fixture
def signed_urls(monkeypatch) -> None:
    """Replace storage signing with deterministic fake URLs."""

    def _fake_presigned(key: str, expires_in=None) -> str:
        return f"https://storage.test/{key}?signed=1"

    def _fake_upload(key: str, content_type=None) -> str:
        return f"https://storage.test/{key}?upload=1"

    monkeypatch.setattr("src.services.storage.get_presigned_url", _fake_presigned)
    monkeypatch.setattr("src.api.v1.endpoints.songs.get_presigned_url", _fake_presigned)
    monkeypatch.setattr("src.api.v1.endpoints.users.get_presigned_upload_url", _fake_upload)
