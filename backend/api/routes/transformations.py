"""
Transformation API routes.

Random generation, built-in presets and validation.
"""
import random
from typing import Any, Dict, List, Optional
from fastapi import APIRouter
from pydantic import BaseModel

from db import SessionLocal
from domain.errors import AuthorizationError, FieldError
from domain.models import TextTransformation
from services.generator import (
    generate_from_preset,
    generate_premium_transformation,
    generate_random,
    list_presets,
)
from services.payments import has_premium_access
from services.premium import can_access_feature, get_premium_upgrade_prompt
from services.validation import validate_transformation

router = APIRouter()

PREMIUM_GENERATION_FEATURE = "premium_styles"


class RandomTransformationRequest(BaseModel):
    user_id: Optional[str] = None
    premium: bool = False
    seed: Optional[int] = None


class TransformationResponse(BaseModel):
    colors: List[str]
    rotation_range: float
    scale_range: float
    animation_type: str
    font_size: float
    font_weight: str
    letter_spacing: float
    background_type: str
    background_color: Optional[str] = None
    gradient_colors: Optional[List[str]] = None


class ValidateRequest(BaseModel):
    transformation: Optional[Dict[str, Any]] = None


class FieldErrorResponse(BaseModel):
    field: str
    message: str


class ValidateResponse(BaseModel):
    valid: bool
    errors: List[FieldErrorResponse]


def transformation_to_response(transformation: TextTransformation) -> TransformationResponse:
    return TransformationResponse(**transformation.to_dict())


def errors_to_response(errors: List[FieldError]) -> List[FieldErrorResponse]:
    return [FieldErrorResponse(field=e.field, message=e.message) for e in errors]


@router.post("/random", response_model=TransformationResponse)
def random_transformation(payload: RandomTransformationRequest):
    """
    Draw a random transformation.

    Premium generation requires an active premium grant for the user.
    """
    rng = random.Random(payload.seed) if payload.seed is not None else None
    if payload.premium:
        with SessionLocal() as session:
            premium = has_premium_access(session, payload.user_id)
        if not can_access_feature(PREMIUM_GENERATION_FEATURE, premium):
            raise AuthorizationError(get_premium_upgrade_prompt(PREMIUM_GENERATION_FEATURE))
        return transformation_to_response(generate_premium_transformation(rng))
    return transformation_to_response(generate_random(rng))


@router.get("/presets", response_model=List[str])
async def preset_names():
    """List built-in preset names."""
    return list_presets()


@router.get("/presets/{name}", response_model=TransformationResponse)
async def preset_transformation(name: str):
    """Return a built-in preset; 404 for unknown names."""
    return transformation_to_response(generate_from_preset(name))


@router.post("/validate", response_model=ValidateResponse)
async def validate(payload: ValidateRequest):
    errors = validate_transformation(payload.transformation)
    return ValidateResponse(valid=not errors, errors=errors_to_response(errors))
