"""Endpoints for plans, Stripe subscriptions and webhooks."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_db_session
from src.auth.jwt import require_auth
from src.core.exceptions import BadRequestError, NotFoundError
from src.core.plans import get_plan_by_price_id, get_plan_details, subscription_plans
from src.repositories.user_repo import UserRepo
from src.schemas.user import CheckoutRequest
from src.services import billing
from src.services.limits import check_rate_limit
from src.services.subscriptions import process_webhook_event


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/billing", tags=["billing"])
plans_router = APIRouter(prefix="/plans", tags=["billing"])


@plans_router.get("")
async def list_plans():
    return [
        {
            "plan": details.plan,
            "name": details.name,
            "price": details.price,
            "price_id": details.price_id,
            "features": details.features,
        }
        for details in subscription_plans().values()
    ]


async def _current_user(auth, db: AsyncSession):
    user = await UserRepo(db).get(auth["user_id"])
    if user is None:
        raise NotFoundError("User not found")
    return user


@router.get("/plan")
async def current_plan(auth=Depends(require_auth), db: AsyncSession = Depends(get_db_session)):
    user = await _current_user(auth, db)
    details = get_plan_details(user.plan)
    return {
        "plan": details.plan,
        "plan_name": details.name,
        "subscription_status": user.subscription_status,
        "subscription_expires_at": user.subscription_expires_at,
        "stripe_customer_id": user.stripe_customer_id,
        "subscription_id": user.subscription_id,
    }


@router.post("/checkout")
async def create_checkout(
    payload: CheckoutRequest,
    auth=Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
):
    await check_rate_limit(auth["user_id"])
    user = await _current_user(auth, db)

    details = get_plan_by_price_id(payload.price_id)
    if details is None:
        raise BadRequestError("Invalid price ID")

    customer_id = user.stripe_customer_id
    if not customer_id:
        customer_id = billing.create_customer(user.id, user.email, user.name)
        await UserRepo(db).set_customer_id(user, customer_id)
        # Keep the customer even if the checkout session below fails
        await db.commit()
        logger.info(f"Created Stripe customer {customer_id} for user {user.id}")

    session_url = billing.create_checkout_session(
        customer_id, payload.price_id, user.id, details.plan
    )
    return {"session_url": session_url}


@router.post("/portal")
async def create_portal(auth=Depends(require_auth), db: AsyncSession = Depends(get_db_session)):
    user = await _current_user(auth, db)
    if not user.stripe_customer_id:
        raise NotFoundError("No subscription found")
    return {"session_url": billing.create_portal_session(user.stripe_customer_id)}


@router.post("/cancel")
async def cancel(auth=Depends(require_auth), db: AsyncSession = Depends(get_db_session)):
    user = await _current_user(auth, db)
    if not user.subscription_id:
        raise NotFoundError("No active subscription found")
    cancel_at = billing.cancel_subscription(user.subscription_id)
    return {"cancel_at": cancel_at}


@router.post("/webhook")
async def stripe_webhook(request: Request, db: AsyncSession = Depends(get_db_session)):
    body = await request.body()
    try:
        event = billing.parse_webhook_event(body, request.headers.get("stripe-signature"))
    except billing.WebhookVerificationError as exc:
        logger.warning(f"Webhook signature verification failed: {exc}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    try:
        await process_webhook_event(db, event)
    except Exception:
        # A 5xx makes Stripe redeliver the event later
        logger.exception(f"Error processing webhook {event.get('id')}")
        await db.rollback()
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "webhook_failed", "message": "Webhook processing failed"},
        )

    return {"received": True}
