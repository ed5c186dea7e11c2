"""
Input validation for render requests, transformations and presets.

Validators never raise: they return every FieldError found so the caller can
report them all at once.
"""
import math
import re
from numbers import Real
from typing import Any, Dict, List, Mapping, Optional, Union

from domain.errors import FieldError
from domain.models import AnimationType, BackgroundType, FontWeight, TextTransformation

MAX_TEXT_LENGTH = 100
MAX_PRESET_NAME_LENGTH = 50
MAX_COLORS = 10

ROTATION_RANGE_BOUNDS = (0, 90)
SCALE_RANGE_BOUNDS = (0, 1)
FONT_SIZE_BOUNDS = (12, 120)
LETTER_SPACING_BOUNDS = (-5, 20)

OUTPUT_FORMATS = ("png", "base64", "svg")
# Background sources; at most one may be set and it must match background_type
BACKGROUND_FIELDS = ("background_color", "gradient_colors")

_USER_ID_RE = re.compile(r"[A-Za-z0-9_-]{1,64}")
_HEX_COLOR_RE = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")
_HARMFUL_PATTERNS = (
    re.compile(r"<script", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"on\w+\s*=", re.IGNORECASE),  # onclick=, onload=, ...
    re.compile(r"<iframe", re.IGNORECASE),
    re.compile(r"<object", re.IGNORECASE),
    re.compile(r"<embed", re.IGNORECASE),
)


def is_valid_hex_color(value: Any) -> bool:
    return isinstance(value, str) and bool(_HEX_COLOR_RE.match(value))


def is_valid_user_id(value: Any) -> bool:
    return isinstance(value, str) and bool(_USER_ID_RE.fullmatch(value))


def contains_harmful_content(text: str) -> bool:
    return any(pattern.search(text) for pattern in _HARMFUL_PATTERNS)


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a valid range value
    return isinstance(value, Real) and not isinstance(value, bool)


def _check_range(
    errors: List[FieldError],
    data: Mapping[str, Any],
    key: str,
    bounds: tuple,
    label: str,
) -> None:
    if key not in data or data[key] is None:
        return
    value = data[key]
    low, high = bounds
    if not _is_number(value) or not math.isfinite(value) or value < low or value > high:
        errors.append(
            FieldError(
                field=f"transformation.{key}",
                message=f"{label} must be a number between {low} and {high}",
            )
        )


def _check_enum(
    errors: List[FieldError],
    data: Mapping[str, Any],
    key: str,
    enum_cls,
    label: str,
) -> bool:
    """Append an error when the value is outside the enum. Returns True when valid or absent."""
    if key not in data or data[key] is None:
        return True
    allowed = [member.value for member in enum_cls]
    value = data[key]
    if isinstance(value, enum_cls):
        return True
    if value not in allowed:
        errors.append(
            FieldError(
                field=f"transformation.{key}",
                message=f"{label} must be one of: {', '.join(allowed)}",
            )
        )
        return False
    return True


def validate_text(text: Any) -> List[FieldError]:
    """Validate the literal text to stylize: 1-100 characters, no markup injection."""
    errors: List[FieldError] = []
    if not isinstance(text, str):
        errors.append(FieldError("text", "Text is required and must be a string"))
        return errors
    if len(text) == 0:
        errors.append(FieldError("text", "Text cannot be empty"))
    if len(text) > MAX_TEXT_LENGTH:
        errors.append(FieldError("text", f"Text must be {MAX_TEXT_LENGTH} characters or less"))
    if contains_harmful_content(text):
        errors.append(FieldError("text", "Text contains inappropriate content"))
    return errors


def validate_transformation(
    transformation: Union[TextTransformation, Mapping[str, Any], None],
) -> List[FieldError]:
    """
    Check that every present transformation field lies within its allowed range or enum.

    Accepts a TextTransformation or its (possibly partial) wire-form mapping.
    Background consistency (solid needs background_color, gradient needs exactly
    two gradient_colors) is only checked when background_type itself is valid.
    """
    errors: List[FieldError] = []
    if transformation is None:
        errors.append(FieldError("transformation", "Transformation object is required"))
        return errors
    if isinstance(transformation, TextTransformation):
        data: Mapping[str, Any] = transformation.to_dict()
    elif isinstance(transformation, Mapping):
        data = transformation
    else:
        errors.append(FieldError("transformation", "Transformation must be an object"))
        return errors

    colors = data.get("colors")
    if colors is not None:
        if isinstance(colors, tuple):
            colors = list(colors)
        if not isinstance(colors, list):
            errors.append(FieldError("transformation.colors", "Colors must be an array"))
        elif len(colors) == 0:
            errors.append(FieldError("transformation.colors", "At least one color is required"))
        elif len(colors) > MAX_COLORS:
            errors.append(FieldError("transformation.colors", f"Maximum {MAX_COLORS} colors allowed"))
        else:
            for index, color in enumerate(colors):
                if not is_valid_hex_color(color):
                    errors.append(
                        FieldError(f"transformation.colors[{index}]", "Invalid hex color format")
                    )

    _check_range(errors, data, "rotation_range", ROTATION_RANGE_BOUNDS, "Rotation range")
    _check_range(errors, data, "scale_range", SCALE_RANGE_BOUNDS, "Scale range")
    _check_range(errors, data, "font_size", FONT_SIZE_BOUNDS, "Font size")
    _check_range(errors, data, "letter_spacing", LETTER_SPACING_BOUNDS, "Letter spacing")

    _check_enum(errors, data, "animation_type", AnimationType, "Animation type")
    _check_enum(errors, data, "font_weight", FontWeight, "Font weight")
    background_ok = _check_enum(errors, data, "background_type", BackgroundType, "Background type")

    has_background = data.get("background_type") is not None or any(
        data.get(key) is not None for key in BACKGROUND_FIELDS
    )
    if background_ok and has_background:
        errors.extend(_background_errors(data))

    return errors


def _background_errors(data: Mapping[str, Any]) -> List[FieldError]:
    """Exactly one background source may be set, matching background_type."""
    errors: List[FieldError] = []
    background_type = BackgroundType(data.get("background_type") or BackgroundType.TRANSPARENT)
    background_color = data.get("background_color")
    gradient = data.get("gradient_colors")

    if background_type == BackgroundType.SOLID:
        if not is_valid_hex_color(background_color):
            errors.append(
                FieldError("transformation.background_color", "Solid backgrounds need a hex background color")
            )
    elif background_color is not None:
        errors.append(
            FieldError(
                "transformation.background_color",
                f"Background color is only allowed with a solid background, not {background_type.value}",
            )
        )

    if background_type == BackgroundType.GRADIENT:
        if (
            not isinstance(gradient, (list, tuple))
            or len(gradient) != 2
            or not all(is_valid_hex_color(c) for c in gradient)
        ):
            errors.append(
                FieldError("transformation.gradient_colors", "Gradient backgrounds need exactly two hex colors")
            )
    elif gradient is not None:
        errors.append(
            FieldError(
                "transformation.gradient_colors",
                f"Gradient colors are only allowed with a gradient background, not {background_type.value}",
            )
        )
    return errors


def validate_preset(
    name: Any = None,
    transformation: Union[TextTransformation, Mapping[str, Any], None] = None,
) -> List[FieldError]:
    """Validate a preset's name (1-50 chars) and, when given, its transformation."""
    errors: List[FieldError] = []
    if name is not None:
        if not isinstance(name, str):
            errors.append(FieldError("name", "Preset name must be a string"))
        elif len(name) == 0:
            errors.append(FieldError("name", "Preset name cannot be empty"))
        elif len(name) > MAX_PRESET_NAME_LENGTH:
            errors.append(
                FieldError("name", f"Preset name must be {MAX_PRESET_NAME_LENGTH} characters or less")
            )
    if transformation is not None:
        errors.extend(validate_transformation(transformation))
    return errors


def validate_api_request(params: Dict[str, Any]) -> List[FieldError]:
    """Validate the common parameters accepted by the render API."""
    errors: List[FieldError] = []
    if "text" in params:
        errors.extend(validate_text(params["text"]))
    if params.get("transformation") is not None:
        errors.extend(validate_transformation(params["transformation"]))
    output_format: Optional[str] = params.get("format")
    if output_format is not None and output_format not in OUTPUT_FORMATS:
        errors.append(FieldError("format", f"Format must be one of: {', '.join(OUTPUT_FORMATS)}"))
    user_id = params.get("user_id")
    if user_id is not None and not is_valid_user_id(user_id):
        errors.append(
            FieldError("user_id", "User ID must be 1-64 letters, digits, underscores or hyphens")
        )
    return errors

