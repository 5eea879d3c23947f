"""Tests for template token resolution."""

import pytest

from app.models.base import Position
from app.templates.tokens import (
    ColorOverrides,
    TemplateOverrides,
    resolve_color_token,
    resolve_extent,
    resolve_position,
)

ACCENT = "#4f46e5"


@pytest.mark.parametrize(
    "token, expected",
    [
        ("#123456", "#123456"),
        ("rgb(1, 2, 3)", "rgb(1, 2, 3)"),
        ("accent", ACCENT),
        ("{{accentColor}}", ACCENT),
        ("", ACCENT),
        (None, ACCENT),
        ("{{headingColor}}", ACCENT),
        ("accentLighten(100)", "#ffffff"),
        ("accentDarken(100)", "#000000"),
        ("accentAlpha(0.5)", "rgba(79, 70, 229, 0.502)"),
        ("accentAlpha(7)", "rgba(79, 70, 229, 1.0)"),
        ("tomato", "tomato"),
    ],
)
def test_resolve_color_token(token, expected):
    assert resolve_color_token(token, ACCENT) == expected


def test_helper_defaults_when_argument_missing():
    assert resolve_color_token("accentLighten()", ACCENT) == resolve_color_token("accentLighten(45)", ACCENT)
    assert resolve_color_token("accentDarken(x)", ACCENT) == resolve_color_token("accentDarken(25)", ACCENT)
    assert resolve_color_token("accentAlpha()", ACCENT) == resolve_color_token("accentAlpha(0.35)", ACCENT)


def test_override_colors():
    overrides = TemplateOverrides(colors=ColorOverrides(heading="#ff0000", background="#00ff00"))
    assert resolve_color_token("{{headingColor}}", ACCENT, overrides) == "#ff0000"
    assert resolve_color_token("{{subheadingColor}}", ACCENT, overrides) == ACCENT
    assert resolve_color_token("{{backgroundColor}}", ACCENT, overrides) == "#00ff00"


@pytest.mark.parametrize(
    "value, expected",
    [(None, 500), (0.25, 250), ("25%", 250), ("0.5", 500), (0, 0), (1, 1000), (300, 300), ("junk", 500)],
)
def test_resolve_position(value, expected):
    assert resolve_position(value, 1000) == pytest.approx(expected)


@pytest.mark.parametrize(
    "value, expected",
    [(None, 1000), (0.6, 600), ("40%", 400), (1, 1000), (0, 0), (250, 250)],
)
def test_resolve_extent(value, expected):
    assert resolve_extent(value, 1000) == pytest.approx(expected)


def test_offsets_from_camel_case_payload():
    overrides = TemplateOverrides.model_validate({"offsets": {"mockup": {"x": 10, "y": -20}}})
    assert overrides.offset_for("mockup") == (10, -20)
    assert overrides.offset_for("heading") == (0, 0)
    assert TemplateOverrides(offsets={"heading": Position(x=1, y=2)}).offset_for("heading") == (1, 2)
