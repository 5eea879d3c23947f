"""Tests for color parsing, interpolation and panel gradient slicing."""

import pytest

from app.canvas.background import gradient_slice
from app.canvas.colors import (
    darken,
    interpolate_color,
    lighten,
    normalize_hex,
    parse_color,
    rgba_string,
    with_alpha,
)


def test_parse_hex_and_named():
    assert parse_color("#ff0000") == (255, 0, 0, 255)
    assert parse_color("#0f0") == (0, 255, 0, 255)
    assert parse_color("white") == (255, 255, 255, 255)
    assert parse_color("transparent") == (0, 0, 0, 0)


def test_parse_css_rgba_alpha_is_fractional():
    assert parse_color("rgba(10, 20, 30, 0.5)") == (10, 20, 30, 128)
    assert parse_color("rgb(300, -5, 7)") == (255, 0, 7, 255)


def test_parse_invalid_returns_default():
    assert parse_color("not-a-color", default=(1, 2, 3, 4)) == (1, 2, 3, 4)
    assert parse_color(None) == (0, 0, 0, 255)
    assert normalize_hex("nope") is None
    assert normalize_hex("#ABCDEF") == "#abcdef"


@pytest.mark.parametrize("start, end", [("#000000", "#ffffff"), ("#ff0000", "#0000ff"), ("#123456", "#654321")])
def test_interpolate_endpoints(start, end):
    assert interpolate_color(start, end, 0) == start
    assert interpolate_color(start, end, 1) == end


def test_interpolate_is_monotonic_per_channel():
    previous = parse_color(interpolate_color("#102030", "#f0e0d0", 0))
    for step in range(1, 21):
        current = parse_color(interpolate_color("#102030", "#f0e0d0", step / 20))
        assert all(c >= p for c, p in zip(current[:3], previous[:3]))
        previous = current


def test_interpolate_clamps_factor():
    assert interpolate_color("#000000", "#ffffff", -1) == "#000000"
    assert interpolate_color("#000000", "#ffffff", 2) == "#ffffff"


def test_lighten_and_darken():
    assert lighten("#000000", 50) == "#808080"
    assert darken("#ffffff", 100) == "#000000"
    assert lighten("garbage", 20) == "garbage"


def test_alpha_helpers():
    assert with_alpha("#ff0000", 0.5) == (255, 0, 0, 128)
    assert rgba_string("#ff0000", 0.35) == "rgba(255, 0, 0, 0.349)"


@pytest.mark.parametrize("count", [1, 2, 3, 5])
def test_horizontal_gradient_continuous_across_panels(count):
    slices = [gradient_slice("#ff0000", "#0000ff", "left-to-right", i, count) for i in range(count)]
    assert slices[0][0] == "#ff0000"
    assert slices[-1][1] == "#0000ff"
    for (_, end), (start, _) in zip(slices, slices[1:]):
        assert end == start


def test_right_to_left_gradient_is_mirrored():
    first = gradient_slice("#ff0000", "#0000ff", "right-to-left", 0, 2)
    last = gradient_slice("#ff0000", "#0000ff", "right-to-left", 1, 2)
    # Slices are (start-side edge, end-side edge); for right-to-left the start side is the right edge
    assert first[1] == "#0000ff"
    assert last[0] == "#ff0000"
    assert first[0] == last[1]


def test_vertical_gradient_spans_full_range_per_panel():
    for i in range(3):
        assert gradient_slice("#ff0000", "#0000ff", "top-to-bottom", i, 3) == ("#ff0000", "#0000ff")
