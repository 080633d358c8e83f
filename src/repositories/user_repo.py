"""Repository for user records."""
from __future__ import annotations

import datetime as dt
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.base import utcnow
from src.db.models.user import User


class UserRepo:
    """Data-access helpers for :class:`User`."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, user_id: str) -> User | None:
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_customer_id(self, customer_id: str) -> User | None:
        result = await self.session.execute(
            select(User).where(User.stripe_customer_id == customer_id)
        )
        return result.scalars().first()

    async def update_profile(
        self, user: User, name: Optional[str] = None, image: Optional[str] = None
    ) -> User:
        if name is not None:
            user.name = name
        if image is not None:
            user.image = image
        user.updated_at = utcnow()
        self.session.add(user)
        await self.session.flush()
        return user

    async def set_customer_id(self, user: User, customer_id: str) -> User:
        user.stripe_customer_id = customer_id
        user.updated_at = utcnow()
        self.session.add(user)
        await self.session.flush()
        return user

    async def update_subscription(
        self,
        user: User,
        *,
        plan: str,
        status: Optional[str],
        subscription_id: Optional[str] = None,
        customer_id: Optional[str] = None,
        expires_at: Optional[dt.datetime] = None,
    ) -> User:
        user.plan = plan
        user.subscription_status = status
        if subscription_id is not None:
            user.subscription_id = subscription_id
        if customer_id is not None:
            user.stripe_customer_id = customer_id
        if expires_at is not None:
            user.subscription_expires_at = expires_at
        user.updated_at = utcnow()
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def delete(self, user: User) -> None:
        await self.session.delete(user)
        await self.session.flush()
