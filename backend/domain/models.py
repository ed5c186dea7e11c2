"""
Core domain models for LetterCraft.
These are framework-agnostic and can be used across all services.
"""
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple
import uuid


class AnimationType(str, Enum):
    """
    Animation applied to each letter in live previews.

    The basic tier uses BOUNCE, ROTATE, SCALE and NONE.
    PULSE, GLOW and RAINBOW are premium-only.
    """
    BOUNCE = "bounce"
    ROTATE = "rotate"
    SCALE = "scale"
    PULSE = "pulse"
    GLOW = "glow"
    RAINBOW = "rainbow"
    NONE = "none"


class FontWeight(str, Enum):
    NORMAL = "normal"
    BOLD = "bold"
    LIGHT = "light"


class BackgroundType(str, Enum):
    """How the canvas behind the letters is painted."""
    SOLID = "solid"
    GRADIENT = "gradient"
    TRANSPARENT = "transparent"


BASIC_ANIMATIONS = (
    AnimationType.BOUNCE,
    AnimationType.ROTATE,
    AnimationType.SCALE,
    AnimationType.NONE,
)


@dataclass(frozen=True)
class TextTransformation:
    """
    The full set of styling parameters applied to a piece of text.

    Instances are immutable; use with_overrides() to derive a changed copy.
    Exactly one background source is set:
    - solid: background_color
    - gradient: gradient_colors (two colors)
    - transparent: neither
    """
    colors: Tuple[str, ...]
    rotation_range: float
    scale_range: float
    animation_type: AnimationType
    font_size: float
    font_weight: FontWeight
    letter_spacing: float
    background_type: BackgroundType = BackgroundType.TRANSPARENT
    background_color: Optional[str] = None
    gradient_colors: Optional[Tuple[str, str]] = None

    def with_overrides(self, **changes: Any) -> "TextTransformation":
        """Return a new transformation with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "colors": list(self.colors),
            "rotation_range": self.rotation_range,
            "scale_range": self.scale_range,
            "animation_type": self.animation_type.value,
            "font_size": self.font_size,
            "font_weight": self.font_weight.value,
            "letter_spacing": self.letter_spacing,
            "background_type": self.background_type.value,
        }
        if self.background_color is not None:
            data["background_color"] = self.background_color
        if self.gradient_colors is not None:
            data["gradient_colors"] = list(self.gradient_colors)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TextTransformation":
        """
        Build a transformation from its wire form.

        Raises ValueError (or KeyError) on malformed data; callers validate first.
        """
        gradient = data.get("gradient_colors")
        return cls(
            colors=tuple(data["colors"]),
            rotation_range=float(data["rotation_range"]),
            scale_range=float(data["scale_range"]),
            animation_type=AnimationType(data["animation_type"]),
            font_size=float(data["font_size"]),
            font_weight=FontWeight(data["font_weight"]),
            letter_spacing=float(data["letter_spacing"]),
            background_type=BackgroundType(data.get("background_type", "transparent")),
            background_color=data.get("background_color"),
            gradient_colors=tuple(gradient) if gradient else None,
        )


@dataclass(frozen=True)
class LetterStyle:
    """Concrete style resolved for one character."""
    color: str
    rotation_degrees: float
    scale_factor: float


@dataclass(frozen=True)
class GlyphPlacement:
    """Where and how a single character lands on the canvas."""
    character: str
    index: int
    x: float
    y: float
    style: Optional[LetterStyle] = None  # None for spaces (advanced, not drawn)


@dataclass
class User:
    """A LetterCraft user, keyed by their social-platform id."""
    id: str
    farcaster_id: Optional[str] = None
    generated_styles_count: int = 0
    premium_expires_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class Preset:
    """
    A named, persisted transformation a user can reapply.
    """
    id: str
    owner_id: str
    name: str
    transformation: TextTransformation
    created_at: datetime = field(default_factory=datetime.utcnow)

    @staticmethod
    def generate_id() -> str:
        return str(uuid.uuid4())


@dataclass
class GeneratedText:
    """A rendered piece of text recorded in a user's history."""
    id: str
    user_id: str
    text: str
    transformation: TextTransformation
    image_path: Optional[str] = None  # Relative to media root
    created_at: datetime = field(default_factory=datetime.utcnow)

    @staticmethod
    def generate_id() -> str:
        return str(uuid.uuid4())
