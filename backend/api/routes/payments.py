"""
Payment API routes.

Lists the premium catalog and creates payment intents. Confirming payments
(webhooks) is handled elsewhere.
"""
from typing import List
from fastapi import APIRouter
from pydantic import BaseModel

from services.payments import PREMIUM_FEATURES, create_payment_intent
from services.premium import get_premium_upgrade_prompt

router = APIRouter()


class FeatureResponse(BaseModel):
    id: str
    name: str
    description: str
    price_cents: int
    duration_days: int
    upgrade_prompt: str


class PaymentIntentRequest(BaseModel):
    user_id: str
    feature_id: str


class PaymentIntentResponse(BaseModel):
    id: str
    amount: int
    currency: str
    status: str
    client_secret: str


@router.get("/features", response_model=List[FeatureResponse])
async def list_features():
    return [
        FeatureResponse(
            id=f.id,
            name=f.name,
            description=f.description,
            price_cents=f.price_cents,
            duration_days=f.duration_days,
            upgrade_prompt=get_premium_upgrade_prompt(f.id),
        )
        for f in PREMIUM_FEATURES.values()
    ]


@router.post("/intent", response_model=PaymentIntentResponse)
def payment_intent(payload: PaymentIntentRequest):
    intent = create_payment_intent(payload.user_id, payload.feature_id)
    return PaymentIntentResponse(
        id=intent.id,
        amount=intent.amount,
        currency=intent.currency,
        status=intent.status,
        client_secret=intent.client_secret,
    )
