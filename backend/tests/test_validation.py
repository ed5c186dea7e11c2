import pytest

from domain.models import BackgroundType
from services.generator import DEFAULT_TRANSFORMATION, PRESET_TRANSFORMATIONS
from services.validation import (
    contains_harmful_content,
    is_valid_hex_color,
    validate_api_request,
    validate_preset,
    validate_text,
    validate_transformation,
)


def _valid_dict():
    return DEFAULT_TRANSFORMATION.to_dict()


def test_default_and_presets_are_valid():
    assert validate_transformation(DEFAULT_TRANSFORMATION) == []
    for name, transformation in PRESET_TRANSFORMATIONS.items():
        assert validate_transformation(transformation) == [], name


@pytest.mark.parametrize(
    "key,value",
    [
        ("rotation_range", 91),
        ("rotation_range", -1),
        ("scale_range", 1.5),
        ("font_size", 11),
        ("font_size", 121),
        ("letter_spacing", -6),
        ("letter_spacing", 21),
        ("animation_type", "wobble"),
        ("font_weight", "heavy"),
        ("background_type", "pattern"),
    ],
)
def test_single_bad_field_reports_exactly_one_error(key, value):
    data = _valid_dict()
    data[key] = value
    errors = validate_transformation(data)
    assert len(errors) == 1
    assert errors[0].field == f"transformation.{key}"


def test_range_bounds_are_inclusive():
    data = _valid_dict()
    data.update(rotation_range=90, scale_range=0, font_size=12, letter_spacing=-5)
    assert validate_transformation(data) == []
    data.update(rotation_range=0, scale_range=1, font_size=120, letter_spacing=20)
    assert validate_transformation(data) == []


@pytest.mark.parametrize("key", ["rotation_range", "scale_range", "font_size", "letter_spacing"])
@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_numbers_are_rejected(key, value):
    data = _valid_dict()
    data[key] = value
    assert [e.field for e in validate_transformation(data)] == [f"transformation.{key}"]
    assert [e.field for e in validate_transformation({key: value})] == [f"transformation.{key}"]


def test_booleans_are_not_numbers():
    data = _valid_dict()
    data["scale_range"] = True
    errors = validate_transformation(data)
    assert [e.field for e in errors] == ["transformation.scale_range"]


def test_color_errors_point_at_the_bad_entry():
    data = _valid_dict()
    data["colors"] = ["#fff", "red", "#12345g"]
    errors = validate_transformation(data)
    assert [e.field for e in errors] == ["transformation.colors[1]", "transformation.colors[2]"]


def test_colors_count_limits():
    data = _valid_dict()
    data["colors"] = []
    assert validate_transformation(data)[0].message == "At least one color is required"
    data["colors"] = ["#ffffff"] * 11
    assert validate_transformation(data)[0].message == "Maximum 10 colors allowed"


def test_multiple_errors_are_all_reported():
    data = _valid_dict()
    data.update(rotation_range=200, font_size=5, colors=["nope"])
    fields = {e.field for e in validate_transformation(data)}
    assert fields == {
        "transformation.rotation_range",
        "transformation.font_size",
        "transformation.colors[0]",
    }


def test_partial_transformation_checks_present_fields_only():
    assert validate_transformation({"rotation_range": 45}) == []
    assert validate_transformation({"font_size": 200})[0].field == "transformation.font_size"


def test_missing_transformation():
    errors = validate_transformation(None)
    assert errors[0].field == "transformation"


def test_solid_background_needs_color():
    data = _valid_dict()
    data["background_type"] = "solid"
    errors = validate_transformation(data)
    assert [e.field for e in errors] == ["transformation.background_color"]
    data["background_color"] = "#000"
    assert validate_transformation(data) == []


def test_gradient_background_needs_two_colors():
    data = _valid_dict()
    data["background_type"] = "gradient"
    data["gradient_colors"] = ["#000000"]
    assert [e.field for e in validate_transformation(data)] == ["transformation.gradient_colors"]
    data["gradient_colors"] = ["#000000", "#ffffff"]
    assert validate_transformation(data) == []


def test_background_source_must_match_type():
    data = _valid_dict()
    data["background_type"] = BackgroundType.TRANSPARENT.value
    data["background_color"] = "#000000"
    assert [e.field for e in validate_transformation(data)] == ["transformation.background_color"]


def test_text_rules():
    assert validate_text("Hello") == []
    assert validate_text("a" * 100) == []
    assert validate_text("")[0].message == "Text cannot be empty"
    assert validate_text("a" * 101)[0].message == "Text must be 100 characters or less"
    assert validate_text(None)[0].field == "text"


@pytest.mark.parametrize(
    "text",
    [
        "<script>alert(1)</script>",
        "javascript:void(0)",
        "<img onerror = x>",
        "<IFRAME src=x>",
        "<object>",
        "<embed src=x>",
    ],
)
def test_harmful_text_is_rejected(text):
    assert contains_harmful_content(text)
    assert validate_text(text)[0].message == "Text contains inappropriate content"


def test_hex_colors():
    assert is_valid_hex_color("#abc")
    assert is_valid_hex_color("#A1B2C3")
    assert not is_valid_hex_color("abc")
    assert not is_valid_hex_color("#abcd")
    assert not is_valid_hex_color(None)


def test_preset_name_rules():
    assert validate_preset("Mine", DEFAULT_TRANSFORMATION) == []
    assert validate_preset("")[0].message == "Preset name cannot be empty"
    assert validate_preset("x" * 51)[0].field == "name"
    data = _valid_dict()
    data["font_size"] = 500
    assert validate_preset("ok", data)[0].field == "transformation.font_size"


def test_api_request_rules():
    assert validate_api_request({"text": "Hi", "format": "svg", "user_id": "42"}) == []
    fields = [e.field for e in validate_api_request({"text": "", "format": "gif", "user_id": 42})]
    assert fields == ["text", "format", "user_id"]


def test_background_sources_without_type_are_checked_as_transparent():
    errors = validate_transformation({"background_color": "#000000"})
    assert [e.field for e in errors] == ["transformation.background_color"]
    assert "not transparent" in errors[0].message

    data = _valid_dict()
    data.pop("background_type")
    data["gradient_colors"] = ["#000000", "#ffffff"]
    assert [e.field for e in validate_transformation(data)] == ["transformation.gradient_colors"]


@pytest.mark.parametrize("user_id", ["42", "user_1", "A-b_9", "x" * 64])
def test_user_id_accepts_safe_identifiers(user_id):
    assert validate_api_request({"user_id": user_id}) == []


@pytest.mark.parametrize(
    "user_id",
    ["", "x" * 65, "../../escaped", "/tmp/x", "a/b", "a\\b", "..", "u1\n", "u 1", "ü"],
)
def test_user_id_rejects_unsafe_identifiers(user_id):
    assert [e.field for e in validate_api_request({"user_id": user_id})] == ["user_id"]
