"""
Premium gating for transformations.

Styling stays pure: every function here takes the caller's entitlement as a
boolean instead of looking it up.
"""
from dataclasses import dataclass, field
from typing import List

from domain.models import BASIC_ANIMATIONS, AnimationType, BackgroundType, TextTransformation
from services.generator import BASIC_COLOR_PALETTES
from services.payments import PREMIUM_FEATURES

BASIC_COLORS = frozenset(color for palette in BASIC_COLOR_PALETTES for color in palette)
# Colors a non-premium user may keep when a transformation is stripped to basic
STRIP_ALLOWED_COLORS = BASIC_COLOR_PALETTES[0]
STRIP_FALLBACK_COLOR = STRIP_ALLOWED_COLORS[0]
BASIC_BACKGROUND_COLORS = frozenset({"#000000", "#ffffff"})
MAX_BASIC_COLORS = 5

BASIC_FEATURES = (
    "basic_generation",
    "basic_presets",
    "basic_colors",
    "basic_animations",
)
PREMIUM_FEATURE_IDS = (
    "premium_styles",
    "premium_colors",
    "premium_animations",
    "premium_backgrounds",
    "advanced_presets",
    "unlimited_generation",
)


@dataclass
class AvailableFeatures:
    has_premium: bool
    basic: List[str] = field(default_factory=list)
    premium: List[str] = field(default_factory=list)


def is_premium_transformation(transformation: TextTransformation) -> bool:
    """True when any color, the animation or the background needs premium access."""
    has_premium_colors = any(color.lower() not in BASIC_COLORS for color in transformation.colors)
    has_premium_animation = transformation.animation_type not in BASIC_ANIMATIONS
    has_premium_background = transformation.background_type == BackgroundType.GRADIENT or (
        transformation.background_type == BackgroundType.SOLID
        and (transformation.background_color or "").lower() not in BASIC_BACKGROUND_COLORS
    )
    return has_premium_colors or has_premium_animation or has_premium_background


def strip_to_basic(transformation: TextTransformation) -> TextTransformation:
    """
    Reduce a transformation to what the basic tier can use.

    Keeps at most five colors, replacing non-basic ones with the fallback,
    swaps premium animations for bounce and drops the background.
    """
    colors = tuple(
        color if color.lower() in STRIP_ALLOWED_COLORS else STRIP_FALLBACK_COLOR
        for color in transformation.colors[:MAX_BASIC_COLORS]
    )
    animation = transformation.animation_type
    if animation not in BASIC_ANIMATIONS:
        animation = AnimationType.BOUNCE
    return transformation.with_overrides(
        colors=colors,
        animation_type=animation,
        background_type=BackgroundType.TRANSPARENT,
        background_color=None,
        gradient_colors=None,
    )


def apply_premium_restrictions(transformation: TextTransformation, has_premium: bool) -> TextTransformation:
    if has_premium:
        return transformation
    return strip_to_basic(transformation)


def get_available_features(has_premium: bool) -> AvailableFeatures:
    return AvailableFeatures(
        has_premium=has_premium,
        basic=list(BASIC_FEATURES),
        premium=list(PREMIUM_FEATURE_IDS) if has_premium else [],
    )


def can_access_feature(feature_id: str, has_premium: bool) -> bool:
    features = get_available_features(has_premium)
    return feature_id in features.basic or feature_id in features.premium


def get_premium_upgrade_prompt(feature_id: str) -> str:
    feature = PREMIUM_FEATURES.get(feature_id)
    if not feature:
        return "Upgrade to premium for access to advanced features!"
    return f"Unlock {feature.name} for ${feature.price_cents / 100:.2f} - {feature.description}"
