import random
from io import BytesIO

import pytest
from PIL import Image

from domain.errors import RenderingUnavailable
from domain.models import AnimationType, BackgroundType, LetterStyle
from services import rasterizer
from services.generator import DEFAULT_TRANSFORMATION, generate_from_preset
from services.rasterizer import SHARE_CARD_SIZE, layout_glyphs, render, render_image, render_svg


def _open(png: bytes) -> Image.Image:
    return Image.open(BytesIO(png))


def test_layout_centers_row():
    t = DEFAULT_TRANSFORMATION.with_overrides(font_size=48, letter_spacing=2)
    placements = layout_glyphs("HI", t, size=(800, 400), rng=random.Random(0))
    assert [(p.x, p.y) for p in placements] == [(350, 200), (400, 200)]
    assert [p.style.color for p in placements] == list(t.colors[:2])


def test_spaces_keep_their_slot_without_style():
    placements = layout_glyphs("A B", DEFAULT_TRANSFORMATION, rng=random.Random(0))
    assert len(placements) == 3
    assert placements[1].style is None
    step = DEFAULT_TRANSFORMATION.font_size + DEFAULT_TRANSFORMATION.letter_spacing
    assert placements[2].x - placements[0].x == pytest.approx(2 * step)


def test_render_returns_png_of_requested_size():
    png = render("Hello", DEFAULT_TRANSFORMATION, rng=random.Random(1))
    assert png.startswith(b"\x89PNG\r\n\x1a\n")
    img = _open(png)
    assert img.size == (800, 400)
    assert img.mode == "RGBA"

    card = _open(render("Hi", DEFAULT_TRANSFORMATION, size=SHARE_CARD_SIZE))
    assert card.size == (1200, 630)


def test_transparent_background_keeps_corners_clear():
    img = render_image("A", DEFAULT_TRANSFORMATION, rng=random.Random(2))
    assert img.getpixel((0, 0))[3] == 0


def test_solid_background_fills_canvas():
    img = render_image("A", generate_from_preset("neon"), rng=random.Random(2))
    assert img.getpixel((0, 0)) == (0, 0, 0, 255)


def test_gradient_runs_corner_to_corner():
    t = DEFAULT_TRANSFORMATION.with_overrides(
        background_type=BackgroundType.GRADIENT,
        gradient_colors=("#000000", "#ffffff"),
    )
    img = render_image(" ", t)
    top_left = img.getpixel((0, 0))
    bottom_right = img.getpixel((img.width - 1, img.height - 1))
    assert top_left[0] < 10
    assert bottom_right[0] > 245
    assert top_left[3] == bottom_right[3] == 255


def test_letters_are_drawn():
    t = DEFAULT_TRANSFORMATION.with_overrides(rotation_range=0, scale_range=0)
    img = render_image("W", t)
    assert img.getbbox() is not None


def test_same_seed_same_pixels():
    a = render("Seeded", DEFAULT_TRANSFORMATION, rng=random.Random(9))
    b = render("Seeded", DEFAULT_TRANSFORMATION, rng=random.Random(9))
    assert a == b


def test_canvas_failure_is_rendering_unavailable(monkeypatch):
    def boom(*args, **kwargs):
        raise MemoryError()

    monkeypatch.setattr(rasterizer.Image, "new", boom)
    with pytest.raises(RenderingUnavailable) as exc_info:
        render("Hi", DEFAULT_TRANSFORMATION)
    assert exc_info.value.status_code == 503


def test_svg_has_one_text_per_visible_letter():
    svg = render_svg("A B<", generate_from_preset("ocean"), rng=random.Random(4))
    assert svg.startswith("<svg")
    assert svg.count("<text ") == 3
    assert "&lt;</text>" in svg
    assert 'id="lc-bg"' in svg
    assert 'stop-color="#001f3f"' in svg


def test_svg_solid_background():
    svg = render_svg("Hi", generate_from_preset("neon"))
    assert '<rect width="100%" height="100%" fill="#000000"/>' in svg


def test_hi_scenario_without_jitter():
    t = DEFAULT_TRANSFORMATION.with_overrides(
        colors=("#fff",),
        rotation_range=0,
        scale_range=0,
        font_size=48,
        letter_spacing=2,
        animation_type=AnimationType.NONE,
    )
    placements = layout_glyphs("HI", t)
    assert [(p.x, p.y) for p in placements] == [(350, 200), (400, 200)]
    assert [p.style for p in placements] == [
        LetterStyle(color="#fff", rotation_degrees=0, scale_factor=1),
        LetterStyle(color="#fff", rotation_degrees=0, scale_factor=1),
    ]
    img = render_image("HI", t)
    left, top, right, bottom = img.getbbox()
    assert left > 300 and right < 450
    assert top < 200 < bottom
