"""
User API routes: saved presets, generation history, features and usage.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from db import SessionLocal
from domain.errors import ValidationError
from domain.models import GeneratedText, Preset, TextTransformation
from repositories import GeneratedTextsRepository, PresetsRepository, UsageRepository, UsersRepository
from services.payments import has_premium_access
from services.premium import get_available_features
from services.validation import validate_preset

router = APIRouter()
users_repo = UsersRepository()
presets_repo = PresetsRepository()
generated_repo = GeneratedTextsRepository()
usage_repo = UsageRepository()

TRACKED_ACTIONS = ("generate", "frame_generate")


class PresetCreate(BaseModel):
    name: str
    transformation: Dict[str, Any]


class PresetRename(BaseModel):
    name: str


class PresetResponse(BaseModel):
    id: str
    owner_id: str
    name: str
    transformation: Dict[str, Any]
    created_at: str


class GeneratedTextResponse(BaseModel):
    id: str
    text: str
    transformation: Dict[str, Any]
    image_path: Optional[str] = None
    created_at: str


class FeaturesResponse(BaseModel):
    has_premium: bool
    basic: List[str]
    premium: List[str]


class UsageResponse(BaseModel):
    user_id: str
    generated_styles_count: int
    actions: Dict[str, int]


def preset_to_response(preset: Preset) -> PresetResponse:
    """Convert domain Preset to API response."""
    return PresetResponse(
        id=preset.id,
        owner_id=preset.owner_id,
        name=preset.name,
        transformation=preset.transformation.to_dict(),
        created_at=preset.created_at.isoformat(),
    )


def generated_to_response(generated: GeneratedText) -> GeneratedTextResponse:
    return GeneratedTextResponse(
        id=generated.id,
        text=generated.text,
        transformation=generated.transformation.to_dict(),
        image_path=generated.image_path,
        created_at=generated.created_at.isoformat(),
    )


@router.get("/{user_id}/presets", response_model=List[PresetResponse])
async def list_presets(user_id: str):
    """List a user's saved presets, newest first."""
    with SessionLocal() as session:
        return [preset_to_response(p) for p in presets_repo.list_presets(session, user_id)]


@router.post("/{user_id}/presets", response_model=PresetResponse, status_code=201)
async def create_preset(user_id: str, payload: PresetCreate):
    errors = validate_preset(payload.name, payload.transformation)
    if errors:
        raise ValidationError(errors)
    try:
        transformation = TextTransformation.from_dict(payload.transformation)
    except (KeyError, ValueError) as exc:
        raise HTTPException(status_code=400, detail=f"Incomplete transformation: {exc}")

    with SessionLocal() as session:
        users_repo.get_or_create_user(session, user_id)
        preset = presets_repo.create_preset(
            session,
            Preset(
                id=Preset.generate_id(),
                owner_id=user_id,
                name=payload.name,
                transformation=transformation,
                created_at=datetime.utcnow(),
            ),
        )
    return preset_to_response(preset)


@router.delete("/{user_id}/presets/{preset_id}")
async def delete_preset(user_id: str, preset_id: str):
    with SessionLocal() as session:
        deleted = presets_repo.delete_preset(session, user_id, preset_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Preset not found")
    return {"success": True}


@router.get("/{user_id}/generated", response_model=List[GeneratedTextResponse])
async def list_generated(user_id: str, limit: int = Query(50, ge=1, le=200)):
    with SessionLocal() as session:
        history = generated_repo.list_generated_texts(session, user_id, limit=limit)
    return [generated_to_response(g) for g in history]


@router.get("/{user_id}/features", response_model=FeaturesResponse)
async def features(user_id: str):
    with SessionLocal() as session:
        premium = has_premium_access(session, user_id)
    available = get_available_features(premium)
    return FeaturesResponse(has_premium=available.has_premium, basic=available.basic, premium=available.premium)


@router.get("/{user_id}/usage", response_model=UsageResponse)
async def usage(user_id: str):
    with SessionLocal() as session:
        user = users_repo.get_user(session, user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        actions = {a: usage_repo.get_user_usage(session, user_id, a) for a in TRACKED_ACTIONS}
    return UsageResponse(
        user_id=user.id,
        generated_styles_count=user.generated_styles_count,
        actions=actions,
    )


@router.patch("/{user_id}/presets/{preset_id}", response_model=PresetResponse)
async def rename_preset(user_id: str, preset_id: str, payload: PresetRename):
    with SessionLocal() as session:
        preset = presets_repo.get_preset(session, preset_id)
        if not preset or preset.owner_id != user_id:
            raise HTTPException(status_code=404, detail="Preset not found")
        errors = validate_preset(payload.name)
        if errors:
            raise ValidationError(errors)
        renamed = presets_repo.rename_preset(session, preset_id, payload.name)
    return preset_to_response(renamed)
