"""
Per-letter style math shared by the rasterizer and the widget preview.
"""
import random
from typing import Dict, Optional

from domain.models import AnimationType, LetterStyle, TextTransformation

# CSS animation shorthand for the widget preview, keyed by animation type
_ANIMATION_CSS = {
    AnimationType.BOUNCE: "lc-bounce 1.2s ease-in-out infinite",
    AnimationType.ROTATE: "lc-rotate 2s ease-in-out infinite",
    AnimationType.SCALE: "lc-scale 1.5s ease-in-out infinite",
    AnimationType.PULSE: "lc-pulse 1s ease-in-out infinite",
    AnimationType.GLOW: "lc-glow 2s ease-in-out infinite alternate",
    AnimationType.RAINBOW: "lc-rainbow 3s linear infinite",
}


def color_for_index(index: int, transformation: TextTransformation) -> str:
    colors = transformation.colors
    return colors[index % len(colors)]


def style_for(
    character: str,
    index: int,
    transformation: TextTransformation,
    rng: Optional[random.Random] = None,
) -> LetterStyle:
    """
    Resolve the concrete style for one character.

    The color depends only on the index. Rotation and scale are drawn fresh on
    every call, so two calls for the same index jitter differently unless the
    same seeded rng state is reused.
    """
    rng = rng or random.Random()
    rotation = (rng.random() - 0.5) * 2 * transformation.rotation_range
    scale = 1 + (rng.random() - 0.5) * 2 * transformation.scale_range
    return LetterStyle(
        color=color_for_index(index, transformation),
        rotation_degrees=rotation,
        scale_factor=scale,
    )


def letter_css(style: LetterStyle, transformation: TextTransformation) -> Dict[str, str]:
    """Inline CSS properties for rendering a styled letter as an HTML span."""
    css = {
        "color": style.color,
        "transform": f"rotate({style.rotation_degrees:.2f}deg) scale({style.scale_factor:.3f})",
        "font-size": f"{transformation.font_size:g}px",
        "font-weight": transformation.font_weight.value,
        "letter-spacing": f"{transformation.letter_spacing:g}px",
        "display": "inline-block",
        "margin": "0 2px",
        "transition": "all 0.3s ease-out",
    }
    animation = _ANIMATION_CSS.get(transformation.animation_type)
    if animation:
        css["animation"] = animation
    return css


def css_to_inline(css: Dict[str, str]) -> str:
    return "; ".join(f"{key}: {value}" for key, value in css.items())
