"""Utilities for interacting with the Stripe Billing APIs."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import stripe

from src.core.config import settings
from src.core.exceptions import BillingError


logger = logging.getLogger(__name__)


class WebhookVerificationError(Exception):
    """Raised when a webhook payload cannot be authenticated or decoded."""


def _configure() -> None:
    if not settings.STRIPE_SECRET_KEY:
        raise BillingError("STRIPE_SECRET_KEY is not configured")
    stripe.api_key = settings.STRIPE_SECRET_KEY


def create_customer(user_id: str, email: str, name: Optional[str] = None) -> str:
    """Create a Stripe customer tagged with our user id and return its id."""

    _configure()
    try:
        customer = stripe.Customer.create(
            email=email,
            name=name,
            metadata={"user_id": user_id},
        )
    except stripe.StripeError as exc:
        raise BillingError(f"Stripe customer creation failed: {exc}") from exc
    return customer.id


def create_checkout_session(
    customer_id: str, price_id: str, user_id: str, plan: str
) -> str:
    _configure()
    try:
        session = stripe.checkout.Session.create(
            customer=customer_id,
            payment_method_types=["card"],
            line_items=[{"price": price_id, "quantity": 1}],
            mode="subscription",
            success_url=f"{settings.APP_BASE_URL}/settings?success=true",
            cancel_url=f"{settings.APP_BASE_URL}/settings?canceled=true",
            metadata={"user_id": user_id, "plan": plan},
        )
    except stripe.StripeError as exc:
        raise BillingError(f"Stripe checkout session creation failed: {exc}") from exc
    return session.url


def create_portal_session(customer_id: str) -> str:
    _configure()
    try:
        session = stripe.billing_portal.Session.create(
            customer=customer_id,
            return_url=f"{settings.APP_BASE_URL}/settings",
        )
    except stripe.StripeError as exc:
        raise BillingError(f"Stripe portal session creation failed: {exc}") from exc
    return session.url


def cancel_subscription(subscription_id: str) -> Optional[int]:
    """Schedule cancellation at period end; returns the ``cancel_at`` timestamp."""

    _configure()
    try:
        subscription = stripe.Subscription.modify(
            subscription_id, cancel_at_period_end=True
        )
    except stripe.StripeError as exc:
        raise BillingError(f"Stripe subscription cancellation failed: {exc}") from exc
    return subscription["cancel_at"]


def retrieve_subscription(subscription_id: str) -> Dict[str, Any]:
    _configure()
    subscription = stripe.Subscription.retrieve(subscription_id)
    return subscription.to_dict()


def parse_webhook_event(payload: bytes, signature: Optional[str]) -> Dict[str, Any]:
    """Verify the ``stripe-signature`` header and decode the event body."""

    if not signature:
        raise WebhookVerificationError("Missing stripe signature")
    if not settings.STRIPE_WEBHOOK_SECRET:
        raise WebhookVerificationError("STRIPE_WEBHOOK_SECRET is not configured")

    try:
        event = stripe.Webhook.construct_event(
            payload, signature, settings.STRIPE_WEBHOOK_SECRET
        )
    except ValueError as exc:
        raise WebhookVerificationError("Invalid payload") from exc
    except stripe.SignatureVerificationError as exc:
        raise WebhookVerificationError("Invalid signature") from exc
    return event.to_dict()
