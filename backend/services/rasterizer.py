"""
Text rasterizer using Pillow.

Lays styled letters out on a fixed-size canvas and encodes the result as PNG.
An SVG rendition with one <text> element per letter is available as a
lower-fidelity fallback for previews.
"""
import random
from functools import lru_cache
from io import BytesIO
from pathlib import Path
from typing import List, Optional, Tuple
from xml.sax.saxutils import escape, quoteattr

from PIL import Image, ImageChops, ImageColor, ImageDraw, ImageFont

from domain.errors import RenderingUnavailable
from domain.models import BackgroundType, FontWeight, GlyphPlacement, TextTransformation
from services.styling import style_for
from settings import settings

PREVIEW_SIZE: Tuple[int, int] = (800, 400)
SHARE_CARD_SIZE: Tuple[int, int] = (1200, 630)

FONT_FILES = {
    FontWeight.NORMAL: "DejaVuSans.ttf",
    FontWeight.BOLD: "DejaVuSans-Bold.ttf",
    FontWeight.LIGHT: "DejaVuSans-ExtraLight.ttf",
}
SVG_FONT_FAMILY = "Inter, sans-serif"
SVG_FONT_WEIGHTS = {
    FontWeight.NORMAL: "normal",
    FontWeight.BOLD: "bold",
    FontWeight.LIGHT: "300",
}


def _font_candidates(weight: FontWeight) -> List[str]:
    filename = FONT_FILES.get(weight, FONT_FILES[FontWeight.NORMAL])
    candidates = []
    if settings.FONT_DIR:
        candidates.append(str(Path(settings.FONT_DIR) / filename))
    # Bare names are resolved by FreeType against the system font directories
    candidates.append(filename)
    if weight != FontWeight.NORMAL:
        candidates.append(FONT_FILES[FontWeight.NORMAL])
    return candidates


@lru_cache(maxsize=64)
def load_font(weight: FontWeight, size: int) -> ImageFont.ImageFont:
    """Load the face for a weight, falling back to Pillow's built-in font."""
    for candidate in _font_candidates(weight):
        try:
            return ImageFont.truetype(candidate, size)
        except OSError:
            continue
    try:
        return ImageFont.load_default(size=size)
    except OSError as exc:
        raise RenderingUnavailable(f"No usable font for weight {weight.value}") from exc


def _new_canvas(size: Tuple[int, int]) -> Image.Image:
    try:
        return Image.new("RGBA", size, (0, 0, 0, 0))
    except (MemoryError, ValueError, OSError) as exc:
        raise RenderingUnavailable(f"Could not allocate a {size[0]}x{size[1]} canvas") from exc


def _diagonal_gradient(size: Tuple[int, int], start: str, end: str) -> Image.Image:
    """
    Linear gradient from the top-left corner (start) to the bottom-right corner (end).

    The blend factor at (x, y) is (x*w + y*h) / (w^2 + h^2), built as the sum of
    a horizontal and a vertical ramp.
    """
    w, h = size
    denom = float(w * w + h * h)
    ramp = Image.linear_gradient("L")  # 256x256, 0 at top, 255 at bottom
    vertical = ramp.resize((w, h)).point(lambda v: round(v * (h * h) / denom))
    horizontal = ramp.transpose(Image.Transpose.ROTATE_90).resize((w, h))
    horizontal = horizontal.point(lambda v: round(v * (w * w) / denom))
    mask = ImageChops.add(horizontal, vertical)
    start_img = Image.new("RGBA", size, ImageColor.getcolor(start, "RGBA"))
    end_img = Image.new("RGBA", size, ImageColor.getcolor(end, "RGBA"))
    return Image.composite(end_img, start_img, mask)


def paint_background(canvas: Image.Image, transformation: TextTransformation) -> Image.Image:
    """Return the canvas with the transformation's background painted on it."""
    if transformation.background_type == BackgroundType.SOLID and transformation.background_color:
        fill = Image.new("RGBA", canvas.size, ImageColor.getcolor(transformation.background_color, "RGBA"))
        return Image.alpha_composite(canvas, fill)
    if transformation.background_type == BackgroundType.GRADIENT and transformation.gradient_colors:
        start, end = transformation.gradient_colors
        return Image.alpha_composite(canvas, _diagonal_gradient(canvas.size, start, end))
    return canvas


def layout_glyphs(
    text: str,
    transformation: TextTransformation,
    size: Tuple[int, int] = PREVIEW_SIZE,
    rng: Optional[random.Random] = None,
) -> List[GlyphPlacement]:
    """
    Compute the anchor and style of every character, left to right.

    Each character occupies font_size + letter_spacing; the row is centered
    horizontally and anchored at mid-height. Spaces keep their slot but get
    no style.
    """
    rng = rng or random.Random()
    width, height = size
    step = transformation.font_size + transformation.letter_spacing
    total_width = len(text) * step
    start_x = (width - total_width) / 2
    y = height / 2

    placements: List[GlyphPlacement] = []
    for index, character in enumerate(text):
        x = start_x + index * step
        style = None if character == " " else style_for(character, index, transformation, rng)
        placements.append(GlyphPlacement(character=character, index=index, x=x, y=y, style=style))
    return placements


def _glyph_tile(character: str, font: ImageFont.ImageFont, color: str, box: int) -> Image.Image:
    tile = Image.new("RGBA", (box, box), (0, 0, 0, 0))
    draw = ImageDraw.Draw(tile)
    left, top, right, bottom = draw.textbbox((0, 0), character, font=font)
    origin = (box / 2 - (left + right) / 2, box / 2 - (top + bottom) / 2)
    draw.text(origin, character, font=font, fill=color)
    return tile


def _draw_glyph(canvas: Image.Image, placement: GlyphPlacement, font: ImageFont.ImageFont, box: int) -> Image.Image:
    style = placement.style
    tile = _glyph_tile(placement.character, font, style.color, box)

    scaled = max(0, round(box * style.scale_factor))
    if scaled < 1:
        return canvas
    if scaled != box:
        tile = tile.resize((scaled, scaled), Image.Resampling.LANCZOS)
    # Pillow rotates counter-clockwise; positive degrees turn clockwise on screen
    if style.rotation_degrees:
        tile = tile.rotate(-style.rotation_degrees, resample=Image.Resampling.BICUBIC, expand=True)

    layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    dest = (round(placement.x - tile.width / 2), round(placement.y - tile.height / 2))
    layer.paste(tile, dest)
    return Image.alpha_composite(canvas, layer)


def render_image(
    text: str,
    transformation: TextTransformation,
    size: Tuple[int, int] = PREVIEW_SIZE,
    rng: Optional[random.Random] = None,
) -> Image.Image:
    """Draw styled text onto a fresh canvas and return the Pillow image."""
    canvas = paint_background(_new_canvas(size), transformation)
    font_px = max(1, round(transformation.font_size))
    font = load_font(transformation.font_weight, font_px)
    # Room for the glyph at full size plus descenders and rotation margin
    box = font_px * 2

    for placement in layout_glyphs(text, transformation, size, rng):
        if placement.style is None:
            continue
        canvas = _draw_glyph(canvas, placement, font, box)
    return canvas


def render(
    text: str,
    transformation: TextTransformation,
    size: Tuple[int, int] = PREVIEW_SIZE,
    rng: Optional[random.Random] = None,
) -> bytes:
    """Render text to PNG bytes."""
    image = render_image(text, transformation, size=size, rng=rng)
    buf = BytesIO()
    try:
        image.save(buf, format="PNG")
    except OSError as exc:
        raise RenderingUnavailable("PNG encoding failed") from exc
    finally:
        image.close()
    return buf.getvalue()


def render_svg(
    text: str,
    transformation: TextTransformation,
    size: Tuple[int, int] = PREVIEW_SIZE,
    rng: Optional[random.Random] = None,
) -> str:
    """Render text as SVG markup with one <text> element per visible letter."""
    width, height = size
    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}">'
    ]
    if transformation.background_type == BackgroundType.SOLID and transformation.background_color:
        parts.append(f'<rect width="100%" height="100%" fill={quoteattr(transformation.background_color)}/>')
    elif transformation.background_type == BackgroundType.GRADIENT and transformation.gradient_colors:
        start, end = transformation.gradient_colors
        parts.append(
            '<defs><linearGradient id="lc-bg" x1="0%" y1="0%" x2="100%" y2="100%">'
            f'<stop offset="0%" stop-color={quoteattr(start)}/>'
            f'<stop offset="100%" stop-color={quoteattr(end)}/>'
            "</linearGradient></defs>"
        )
        parts.append('<rect width="100%" height="100%" fill="url(#lc-bg)"/>')

    weight = SVG_FONT_WEIGHTS.get(transformation.font_weight, "normal")
    for placement in layout_glyphs(text, transformation, size, rng):
        style = placement.style
        if style is None:
            continue
        parts.append(
            f'<text transform="translate({placement.x:.2f} {placement.y:.2f}) '
            f'rotate({style.rotation_degrees:.2f}) scale({style.scale_factor:.3f})" '
            f'font-family="{SVG_FONT_FAMILY}" font-size="{transformation.font_size:g}" '
            f'font-weight="{weight}" text-anchor="middle" dominant-baseline="middle" '
            f"fill={quoteattr(style.color)}>{escape(placement.character)}</text>"
        )
    parts.append("</svg>")
    return "".join(parts)
