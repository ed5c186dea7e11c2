"""
Transformation generator.

Produces styling configurations either at random or from a fixed table of
named presets. All palette and preset tables are immutable module data.

Every sampling function takes an optional random.Random; pass a seeded one
to make the output reproducible.
"""
import random
from types import MappingProxyType
from typing import List, Mapping, Optional

from domain.errors import NotFoundError
from domain.models import (
    BASIC_ANIMATIONS,
    AnimationType,
    BackgroundType,
    FontWeight,
    TextTransformation,
)

BASIC_COLOR_PALETTES = (
    ("#ff6b6b", "#4ecdc4", "#45b7d1", "#96ceb4", "#feca57"),
    ("#e74c3c", "#3498db", "#2ecc71", "#f39c12", "#9b59b6"),
    ("#ff9ff3", "#54a0ff", "#5f27cd", "#00d2d3", "#ff9f43"),
    ("#ff6348", "#2ed573", "#1e90ff", "#ffa502", "#ff4757"),
)

PREMIUM_COLOR_PALETTES = (
    ("#ff0080", "#ff4000", "#ff8000", "#ffb000", "#ffff00"),  # hot pink to yellow
    ("#8000ff", "#4000ff", "#0000ff", "#0040ff", "#0080ff"),  # purple to blue
    ("#ff00ff", "#8000ff", "#0000ff", "#0080ff", "#00ffff"),  # magenta to cyan
    ("#ff4444", "#ff8844", "#ffcc44", "#ffff44", "#ccff44"),  # red to yellow-green
    ("#4444ff", "#8844ff", "#cc44ff", "#ff44ff", "#ff4488"),  # blue to pink
)

PREMIUM_ANIMATIONS = (
    AnimationType.BOUNCE,
    AnimationType.ROTATE,
    AnimationType.SCALE,
    AnimationType.PULSE,
    AnimationType.GLOW,
    AnimationType.RAINBOW,
)

# (background_type, background_color, gradient_colors)
PREMIUM_BACKGROUNDS = (
    (BackgroundType.GRADIENT, None, ("#ff6b6b", "#4ecdc4")),
    (BackgroundType.GRADIENT, None, ("#667eea", "#764ba2")),
    (BackgroundType.GRADIENT, None, ("#f093fb", "#f5576c")),
    (BackgroundType.GRADIENT, None, ("#4facfe", "#00f2fe")),
    (BackgroundType.SOLID, "#000000", None),
    (BackgroundType.SOLID, "#ffffff", None),
)

DEFAULT_TRANSFORMATION = TextTransformation(
    colors=BASIC_COLOR_PALETTES[0],
    rotation_range=15,
    scale_range=0.2,
    animation_type=AnimationType.BOUNCE,
    font_size=48,
    font_weight=FontWeight.BOLD,
    letter_spacing=2,
)

PRESET_TRANSFORMATIONS: Mapping[str, TextTransformation] = MappingProxyType(
    {
        "rainbow": TextTransformation(
            colors=("#ff0000", "#ff8000", "#ffff00", "#00ff00", "#0080ff", "#8000ff"),
            rotation_range=10,
            scale_range=0.1,
            animation_type=AnimationType.BOUNCE,
            font_size=52,
            font_weight=FontWeight.BOLD,
            letter_spacing=3,
        ),
        "neon": TextTransformation(
            colors=("#ff00ff", "#00ffff", "#ffff00", "#ff0080"),
            rotation_range=20,
            scale_range=0.3,
            animation_type=AnimationType.ROTATE,
            font_size=48,
            font_weight=FontWeight.BOLD,
            letter_spacing=4,
            background_type=BackgroundType.SOLID,
            background_color="#000000",
        ),
        "ocean": TextTransformation(
            colors=("#0077be", "#00a8cc", "#4dd0e1", "#80deea"),
            rotation_range=8,
            scale_range=0.15,
            animation_type=AnimationType.SCALE,
            font_size=44,
            font_weight=FontWeight.NORMAL,
            letter_spacing=2,
            background_type=BackgroundType.GRADIENT,
            gradient_colors=("#001f3f", "#003d7a"),
        ),
        "fire": TextTransformation(
            colors=("#ff4444", "#ff6600", "#ffaa00", "#ffdd00"),
            rotation_range=25,
            scale_range=0.4,
            animation_type=AnimationType.BOUNCE,
            font_size=50,
            font_weight=FontWeight.BOLD,
            letter_spacing=1,
            background_type=BackgroundType.GRADIENT,
            gradient_colors=("#330000", "#660000"),
        ),
    }
)


def _uniform(rng: random.Random, low: float, high: float) -> float:
    """Sample from [low, high); random.uniform may return high itself."""
    return low + rng.random() * (high - low)


def generate_random(rng: Optional[random.Random] = None) -> TextTransformation:
    """Draw a basic-tier transformation with a transparent background."""
    rng = rng or random.Random()
    return TextTransformation(
        colors=rng.choice(BASIC_COLOR_PALETTES),
        rotation_range=_uniform(rng, 5, 35),
        scale_range=_uniform(rng, 0.1, 0.5),
        animation_type=rng.choice(BASIC_ANIMATIONS),
        font_size=_uniform(rng, 40, 60),
        font_weight=FontWeight.BOLD if rng.random() > 0.5 else FontWeight.NORMAL,
        letter_spacing=_uniform(rng, 1, 5),
        background_type=BackgroundType.TRANSPARENT,
    )


def generate_premium_transformation(rng: Optional[random.Random] = None) -> TextTransformation:
    """
    Draw a premium transformation.

    Uses the richer palette bank, wider rotation/scale ranges, the extended
    animation set and a solid or gradient background. Callers are responsible
    for checking the user's entitlement first.
    """
    rng = rng or random.Random()
    background_type, background_color, gradient_colors = rng.choice(PREMIUM_BACKGROUNDS)
    return TextTransformation(
        colors=rng.choice(PREMIUM_COLOR_PALETTES),
        rotation_range=_uniform(rng, 5, 50),
        scale_range=_uniform(rng, 0.2, 0.8),
        animation_type=rng.choice(PREMIUM_ANIMATIONS),
        font_size=_uniform(rng, 50, 80),
        font_weight=FontWeight.BOLD if rng.random() > 0.7 else FontWeight.NORMAL,
        letter_spacing=_uniform(rng, 2, 8),
        background_type=background_type,
        background_color=background_color,
        gradient_colors=gradient_colors,
    )


def generate_from_preset(name: str) -> TextTransformation:
    """Look up a built-in preset by name. Raises NotFoundError for unknown names."""
    try:
        return PRESET_TRANSFORMATIONS[name]
    except KeyError:
        raise NotFoundError(f"Preset '{name}'") from None


def list_presets() -> List[str]:
    return list(PRESET_TRANSFORMATIONS.keys())
