"""Apply Stripe subscription lifecycle events to user records."""
from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.plans import FREE, get_plan_by_price_id
from src.repositories.user_repo import UserRepo
from src.services import billing


logger = logging.getLogger(__name__)


def _first_item(subscription: Dict[str, Any]) -> Dict[str, Any]:
    items = (subscription.get("items") or {}).get("data") or []
    return items[0] if items else {}


def _from_timestamp(value: Optional[int]) -> Optional[dt.datetime]:
    if not value:
        return None
    return dt.datetime.fromtimestamp(int(value), tz=dt.timezone.utc)


async def handle_checkout_completed(db: AsyncSession, session: Dict[str, Any]) -> None:
    logger.info(f"Handling checkout completed: {session.get('id')}")

    user_id = (session.get("metadata") or {}).get("user_id")
    subscription = billing.retrieve_subscription(session["subscription"])
    item = _first_item(subscription)

    # Billing period lives on the subscription item in current API versions
    period_end = item.get("current_period_end") or subscription.get("current_period_end")
    if not period_end:
        raise ValueError("Invalid subscription period end date")

    user = await UserRepo(db).get(user_id) if user_id else None
    if user is None:
        logger.error(f"No user found for checkout session {session.get('id')}")
        return

    details = get_plan_by_price_id((item.get("price") or {}).get("id"))
    await UserRepo(db).update_subscription(
        user,
        plan=details.plan if details else user.plan,
        status=subscription.get("status"),
        subscription_id=subscription.get("id"),
        customer_id=subscription.get("customer"),
        expires_at=_from_timestamp(period_end),
    )
    logger.info(f"Checkout completed for user {user.id}")


async def handle_subscription_change(db: AsyncSession, subscription: Dict[str, Any]) -> None:
    logger.info(f"Handling subscription change: {subscription.get('id')}")

    item = _first_item(subscription)
    price_id = (item.get("price") or {}).get("id")
    details = get_plan_by_price_id(price_id)
    if details is None:
        logger.error(f"No plan found for price ID: {price_id}")
        return

    repo = UserRepo(db)
    user = await repo.get_by_customer_id(subscription.get("customer"))
    if user is None:
        logger.error(f"No user found for customer: {subscription.get('customer')}")
        return

    period_end = item.get("current_period_end") or subscription.get("current_period_end")
    await repo.update_subscription(
        user,
        plan=details.plan,
        status=subscription.get("status"),
        subscription_id=subscription.get("id"),
        customer_id=subscription.get("customer"),
        expires_at=_from_timestamp(period_end),
    )
    logger.info(f"Updated subscription {subscription.get('id')} for user {user.id}")


async def handle_subscription_deleted(db: AsyncSession, subscription: Dict[str, Any]) -> None:
    logger.info(f"Handling subscription deleted: {subscription.get('id')}")

    repo = UserRepo(db)
    user = await repo.get_by_customer_id(subscription.get("customer"))
    if user is None:
        logger.error(f"No user found for customer: {subscription.get('customer')}")
        return

    await repo.update_subscription(
        user,
        plan=FREE,
        status="canceled",
        expires_at=_from_timestamp(subscription.get("canceled_at")),
    )
    logger.info(f"Reset user {user.id} to free plan after subscription deletion")


_HANDLERS = {
    "checkout.session.completed": handle_checkout_completed,
    "customer.subscription.created": handle_subscription_change,
    "customer.subscription.updated": handle_subscription_change,
    "customer.subscription.deleted": handle_subscription_deleted,
}


async def process_webhook_event(db: AsyncSession, event: Dict[str, Any]) -> bool:
    """Dispatch a verified event; returns ``False`` for unhandled types."""

    event_type = event.get("type")
    logger.info(f"Received Stripe webhook: {event_type}")

    handler = _HANDLERS.get(event_type)
    if handler is None:
        logger.info(f"Unhandled event type: {event_type}")
        return False

    await handler(db, (event.get("data") or {}).get("object") or {})
    return True
