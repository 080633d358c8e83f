"""Subscription plan catalog."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from src.core.config import settings


FREE = "free"
BASIC = "basic"
PRO = "pro"

PLAN_IDS: Tuple[str, ...] = (FREE, BASIC, PRO)


@dataclass(frozen=True)
class PlanDetails:
    plan: str
    name: str
    price: int  # cents
    price_id: Optional[str]
    features: List[str] = field(default_factory=list)


def subscription_plans() -> Dict[str, PlanDetails]:
    """Return the catalog keyed by plan id.

    Stripe price ids come from settings so they can differ per deployment.
    """

    return {
        FREE: PlanDetails(
            plan=FREE,
            name="Free",
            price=0,
            price_id=None,
            features=[
                "Upload up to 5 songs",
                "Basic audio hosting",
                "Community support",
            ],
        ),
        BASIC: PlanDetails(
            plan=BASIC,
            name="Basic",
            price=999,
            price_id=settings.STRIPE_BASIC_PRICE_ID,
            features=[
                "Upload up to 50 songs",
                "High-quality audio hosting",
                "Basic analytics",
                "Email support",
            ],
        ),
        PRO: PlanDetails(
            plan=PRO,
            name="Pro",
            price=2999,
            price_id=settings.STRIPE_PRO_PRICE_ID,
            features=[
                "Unlimited song uploads",
                "Lossless audio hosting",
                "Advanced analytics",
                "Priority support",
                "Custom branding",
            ],
        ),
    }


def get_plan_details(plan: Optional[str]) -> PlanDetails:
    """Look up a plan; anything unrecognized resolves to the free plan."""

    catalog = subscription_plans()
    return catalog.get(plan or FREE, catalog[FREE])


def get_plan_by_price_id(price_id: Optional[str]) -> Optional[PlanDetails]:
    if not price_id:
        return None
    for details in subscription_plans().values():
        if details.price_id == price_id:
            return details
    return None
