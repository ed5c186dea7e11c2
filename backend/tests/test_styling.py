import random

from domain.models import AnimationType, LetterStyle
from services.generator import DEFAULT_TRANSFORMATION
from services.styling import color_for_index, css_to_inline, letter_css, style_for


def test_colors_cycle_by_index():
    t = DEFAULT_TRANSFORMATION.with_overrides(colors=("#111111", "#222222", "#333333"))
    assert [color_for_index(i, t) for i in range(5)] == [
        "#111111",
        "#222222",
        "#333333",
        "#111111",
        "#222222",
    ]
    assert style_for("A", 4, t).color == "#222222"


def test_jitter_stays_within_ranges():
    t = DEFAULT_TRANSFORMATION.with_overrides(rotation_range=30, scale_range=0.25)
    rng = random.Random(3)
    for index in range(100):
        style = style_for("X", index, t, rng)
        assert -30 <= style.rotation_degrees <= 30
        assert 0.75 <= style.scale_factor <= 1.25


def test_zero_ranges_mean_no_jitter():
    t = DEFAULT_TRANSFORMATION.with_overrides(rotation_range=0, scale_range=0)
    style = style_for("A", 0, t)
    assert style.rotation_degrees == 0
    assert style.scale_factor == 1


def test_seeded_rng_reproduces_styles():
    a = [style_for("A", i, DEFAULT_TRANSFORMATION, random.Random(5)) for i in range(3)]
    b = [style_for("A", i, DEFAULT_TRANSFORMATION, random.Random(5)) for i in range(3)]
    assert a == b


def test_letter_css_includes_animation_unless_none():
    style = LetterStyle(color="#ff6b6b", rotation_degrees=10, scale_factor=1.1)
    css = letter_css(style, DEFAULT_TRANSFORMATION)
    assert css["color"] == "#ff6b6b"
    assert css["transform"] == "rotate(10.00deg) scale(1.100)"
    assert css["font-size"] == "48px"
    assert css["animation"].startswith("lc-bounce")

    still = letter_css(style, DEFAULT_TRANSFORMATION.with_overrides(animation_type=AnimationType.NONE))
    assert "animation" not in still
    assert css_to_inline({"color": "#000", "display": "inline-block"}) == "color: #000; display: inline-block"
