"""
Premium feature catalog, Stripe payment intents and entitlement checks.

Stripe is called over its REST API with a shared requests session. Webhook
handling lives outside this service; grant_feature() is what a webhook
consumer calls once a payment has succeeded.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from types import MappingProxyType
from typing import Mapping, Optional

import requests
from sqlalchemy.orm import Session

from domain.errors import NotFoundError, PaymentError
from repositories import UsersRepository
from settings import settings

logger = logging.getLogger(__name__)
_session = requests.Session()
users_repo = UsersRepository()

# Features that never require premium
FREE_FEATURES = frozenset({"basic_generation"})


@dataclass(frozen=True)
class PremiumFeature:
    id: str
    name: str
    description: str
    price_cents: int
    duration_days: int


@dataclass(frozen=True)
class PaymentIntent:
    id: str
    amount: int
    currency: str
    status: str
    client_secret: str


PREMIUM_FEATURES: Mapping[str, PremiumFeature] = MappingProxyType(
    {
        "premium_styles": PremiumFeature(
            id="premium_styles",
            name="Premium Styles Pack",
            description="Access to exclusive color palettes and advanced transformations",
            price_cents=99,
            duration_days=30,
        ),
        "unlimited_generation": PremiumFeature(
            id="unlimited_generation",
            name="Unlimited Generation",
            description="Remove daily generation limits",
            price_cents=199,
            duration_days=30,
        ),
        "advanced_presets": PremiumFeature(
            id="advanced_presets",
            name="Advanced Preset Library",
            description="Access to community-created premium presets",
            price_cents=149,
            duration_days=30,
        ),
    }
)


def get_feature(feature_id: str) -> PremiumFeature:
    feature = PREMIUM_FEATURES.get(feature_id)
    if not feature:
        raise NotFoundError(f"Premium feature '{feature_id}'")
    return feature


def create_payment_intent(user_id: str, feature_id: str) -> PaymentIntent:
    """
    Create a Stripe payment intent for a premium feature.

    Raises NotFoundError for unknown features and PaymentError when Stripe is
    not configured, unreachable or rejects the request.
    """
    feature = get_feature(feature_id)
    if not settings.STRIPE_SECRET_KEY:
        raise PaymentError("Payments are not configured")

    try:
        resp = _session.post(
            f"{settings.STRIPE_API_BASE}/payment_intents",
            auth=(settings.STRIPE_SECRET_KEY, ""),
            data={
                "amount": feature.price_cents,
                "currency": "usd",
                "description": f"LetterCraft: {feature.name}",
                "metadata[user_id]": user_id,
                "metadata[feature_id]": feature.id,
                "metadata[duration]": str(feature.duration_days),
            },
            timeout=settings.STRIPE_TIMEOUT,
        )
        resp.raise_for_status()
        payload = resp.json()
    except (requests.RequestException, ValueError) as exc:
        logger.warning("[payments] payment intent failed user=%s feature=%s: %s", user_id, feature_id, exc)
        raise PaymentError("Failed to create payment intent") from exc

    return PaymentIntent(
        id=payload["id"],
        amount=payload["amount"],
        currency=payload["currency"],
        status=payload["status"],
        client_secret=payload["client_secret"],
    )


def check_premium_status(session: Session, user_id: str, now: Optional[datetime] = None) -> bool:
    expires_at = users_repo.get_premium_expiry(session, user_id)
    if not expires_at:
        return False
    return expires_at > (now or datetime.utcnow())


def has_premium_access(
    session: Session,
    user_id: Optional[str],
    feature_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> bool:
    """True when the user holds an unexpired premium grant (free features always pass)."""
    if feature_id in FREE_FEATURES:
        return True
    if not user_id:
        return False
    return check_premium_status(session, user_id, now=now)


def grant_feature(
    session: Session,
    user_id: str,
    feature_id: str,
    now: Optional[datetime] = None,
) -> datetime:
    """
    Extend the user's premium expiry by the feature's duration.

    An unexpired grant is extended from its current expiry, otherwise from now.
    Returns the new expiry.
    """
    feature = get_feature(feature_id)
    now = now or datetime.utcnow()
    current = users_repo.get_premium_expiry(session, user_id)
    base = current if current and current > now else now
    expires_at = base + timedelta(days=feature.duration_days)
    users_repo.set_premium_expiry(session, user_id, expires_at)
    logger.info("[payments] feature %s active for user %s until %s", feature_id, user_id, expires_at.isoformat())
    return expires_at
