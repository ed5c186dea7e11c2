"""
Render API routes.

Turns text plus a transformation into PNG, base64 or SVG output, serves
share-card images and the embeddable widget page.
"""
import base64
import html
import logging
import random
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Query
from fastapi.responses import HTMLResponse, Response
from pydantic import BaseModel

from db import SessionLocal
from domain.errors import FieldError, ValidationError
from domain.models import BackgroundType, GeneratedText, TextTransformation
from repositories import GeneratedTextsRepository, UsageRepository, UsersRepository
from services.generator import DEFAULT_TRANSFORMATION, generate_from_preset, generate_random
from services.payments import has_premium_access
from services.premium import apply_premium_restrictions
from services.rasterizer import SHARE_CARD_SIZE, render, render_svg
from services.styling import css_to_inline, letter_css, style_for
from services.validation import (
    BACKGROUND_FIELDS,
    MAX_TEXT_LENGTH,
    validate_api_request,
    validate_text,
    validate_transformation,
)
from settings import settings
from storage.file_storage import FileStorage

router = APIRouter()
widget_router = APIRouter()
storage = FileStorage(settings.MEDIA_ROOT)
users_repo = UsersRepository()
generated_repo = GeneratedTextsRepository()
usage_repo = UsageRepository()
logger = logging.getLogger(__name__)

OG_DEFAULT_TEXT = "LETTERCRAFT"
OG_TRANSFORMATION = DEFAULT_TRANSFORMATION.with_overrides(
    background_type=BackgroundType.GRADIENT,
    gradient_colors=("#1a2332", "#2d3748"),
)


class RenderRequest(BaseModel):
    text: str
    transformation: Optional[Dict[str, Any]] = None
    preset: Optional[str] = None
    format: str = "png"
    seed: Optional[int] = None
    user_id: Optional[str] = None


class Base64RenderResponse(BaseModel):
    image: str
    transformation: Dict[str, Any]
    generated_id: Optional[str] = None


def merge_transformation(base: TextTransformation, overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Apply field-level overrides to a base transformation's wire form.

    Changing background_type drops the base's background sources so the
    result keeps exactly one of them.
    """
    merged = base.to_dict()
    if "background_type" in overrides:
        for key in BACKGROUND_FIELDS:
            merged.pop(key, None)
    merged.update(overrides)
    return merged


def resolve_transformation(
    overrides: Optional[Dict[str, Any]],
    preset: Optional[str],
    rng: Optional[random.Random],
) -> TextTransformation:
    """Preset or random base, with request overrides applied and validated."""
    base = generate_from_preset(preset) if preset else None
    if not overrides:
        return base or generate_random(rng)
    merged = merge_transformation(base or DEFAULT_TRANSFORMATION, overrides)
    errors = validate_transformation(merged)
    if errors:
        raise ValidationError(errors)
    return TextTransformation.from_dict(merged)


def _record_generation(user_id: str, text: str, transformation: TextTransformation, image: Optional[bytes]) -> str:
    with SessionLocal() as session:
        users_repo.get_or_create_user(session, user_id)
        generated_id = GeneratedText.generate_id()
        image_path = storage.save_generated_image(user_id, image, image_id=generated_id) if image else None
        try:
            generated_repo.create_generated_text(
                session,
                GeneratedText(
                    id=generated_id,
                    user_id=user_id,
                    text=text,
                    transformation=transformation,
                    image_path=image_path,
                ),
            )
        except Exception:
            # Nothing references the image once the insert fails
            if image_path:
                logger.warning("[render] removing %s after failed history insert", image_path)
                storage.delete_file(image_path)
            raise
        users_repo.increment_generated_count(session, user_id)
        usage_repo.increment_usage(session, user_id, "generate")
    logger.info("[render] recorded generation %s for user %s", generated_id, user_id)
    return generated_id


@router.post("/render")
def render_text(payload: RenderRequest):
    """
    Render text with a transformation.

    Without a transformation a random one (or the named preset) is used.
    A seed makes the per-letter jitter reproducible. When user_id is given the
    transformation is limited to the user's tier and the result is recorded.
    """
    errors: List[FieldError] = validate_api_request(
        {"text": payload.text, "format": payload.format, "user_id": payload.user_id}
    )
    if errors:
        raise ValidationError(errors)

    transformation = resolve_transformation(
        payload.transformation,
        payload.preset,
        random.Random(payload.seed) if payload.seed is not None else None,
    )
    if payload.user_id:
        with SessionLocal() as session:
            premium = has_premium_access(session, payload.user_id)
        transformation = apply_premium_restrictions(transformation, premium)

    rng = random.Random(payload.seed) if payload.seed is not None else None
    if payload.format == "svg":
        svg = render_svg(payload.text, transformation, rng=rng)
        if payload.user_id:
            _record_generation(payload.user_id, payload.text, transformation, None)
        return Response(content=svg, media_type="image/svg+xml")

    png = render(payload.text, transformation, rng=rng)
    generated_id = None
    if payload.user_id:
        generated_id = _record_generation(payload.user_id, payload.text, transformation, png)

    if payload.format == "base64":
        return Base64RenderResponse(
            image="data:image/png;base64," + base64.b64encode(png).decode("ascii"),
            transformation=transformation.to_dict(),
            generated_id=generated_id,
        )
    return Response(content=png, media_type="image/png")


@router.get("/og")
def og_image(
    text: str = Query(OG_DEFAULT_TEXT),
    preset: Optional[str] = None,
    seed: Optional[int] = None,
):
    """Share-card PNG for link previews and frames."""
    errors = validate_text(text)
    if errors:
        raise ValidationError(errors)
    transformation = generate_from_preset(preset) if preset else OG_TRANSFORMATION
    rng = random.Random(seed) if seed is not None else None
    png = render(text, transformation, size=SHARE_CARD_SIZE, rng=rng)
    return Response(
        content=png,
        media_type="image/png",
        headers={"Cache-Control": "public, max-age=3600"},
    )


# ============================================
# Embeddable widget
# ============================================

WIDGET_THEMES = {
    "dark": {"background": "#1a2332", "foreground": "#f7fafc", "muted": "#a0aec0"},
    "light": {"background": "#ffffff", "foreground": "#1a202c", "muted": "#4a5568"},
}


def _widget_preview(text: str, transformation: TextTransformation, rng: random.Random) -> str:
    spans = []
    for index, character in enumerate(text):
        if character == " ":
            spans.append("<span>&nbsp;</span>")
            continue
        style = style_for(character, index, transformation, rng)
        css = css_to_inline(letter_css(style, transformation))
        spans.append(f'<span style="{html.escape(css, quote=True)}">{html.escape(character)}</span>')
    return "".join(spans)


def render_widget_html(
    text: str,
    transformation: TextTransformation,
    theme: str,
    placeholder: str,
    max_length: int,
    show_download: bool,
    seed: int,
    preset: Optional[str] = None,
    error: Optional[str] = None,
) -> str:
    colors = WIDGET_THEMES.get(theme, WIDGET_THEMES["dark"])
    preview = _widget_preview(text, transformation, random.Random(seed)) if text and not error else ""
    download = ""
    if show_download and preview:
        # Same seed as the preview, so the exported letters match what is on screen
        png = render(text, transformation, rng=random.Random(seed))
        data_url = "data:image/png;base64," + base64.b64encode(png).decode("ascii")
        filename = f"lettercraft-{text.lower()}.png"
        download = (
            f'<a class="lc-download" href="{data_url}" '
            f'download="{html.escape(filename, quote=True)}">Download</a>'
        )
    error_html = f'<p class="lc-error">{html.escape(error)}</p>' if error else ""
    preset_field = f'<input type="hidden" name="preset" value="{html.escape(preset, quote=True)}" />' if preset else ""
    return f"""<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8" />
    <title>LetterCraft Widget</title>
    <style>
      body {{ margin: 0; font-family: Inter, -apple-system, sans-serif; background: {colors['background']}; color: {colors['foreground']}; }}
      .lc-widget {{ padding: 16px; }}
      .lc-preview {{ min-height: 120px; display: flex; align-items: center; justify-content: center; flex-wrap: wrap; }}
      .lc-error {{ color: #ff6b6b; }}
      .lc-download {{ color: {colors['muted']}; }}
    </style>
  </head>
  <body>
    <div class="lc-widget">
      <form method="get" action="/embed">
        <input name="text" maxlength="{max_length}" placeholder="{html.escape(placeholder, quote=True)}" value="{html.escape(text, quote=True)}" />
        <input type="hidden" name="theme" value="{html.escape(theme, quote=True)}" />
        {preset_field}
        <button type="submit">Generate</button>
      </form>
      {error_html}
      <div class="lc-preview">{preview}</div>
      {download}
    </div>
  </body>
</html>
"""


@widget_router.get("/embed", response_class=HTMLResponse)
def embed_widget(
    text: str = "",
    theme: str = "dark",
    preset: Optional[str] = None,
    placeholder: str = "Enter text...",
    max_length: int = Query(30, ge=1, le=MAX_TEXT_LENGTH),
    show_download: bool = True,
    seed: Optional[int] = None,
):
    """Self-contained widget page meant to be embedded in an iframe."""
    text = text[:max_length]
    error = None
    if text:
        errors = validate_text(text)
        error = errors[0].message if errors else None
    rng = random.Random(seed) if seed is not None else random.Random()
    transformation = generate_from_preset(preset) if preset else generate_random(rng)
    return render_widget_html(
        text=text,
        transformation=transformation,
        theme=theme,
        placeholder=placeholder,
        max_length=max_length,
        show_download=show_download,
        seed=seed if seed is not None else rng.randrange(2**31),
        preset=preset,
        error=error,
    )
