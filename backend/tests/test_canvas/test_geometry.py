"""Tests for rotation math and the shared rectangle helpers."""

import math

import pytest

from app.utils.geometry import (
    Rect,
    angle_to,
    corner_handle_points,
    is_point_in_rotated_rect,
    mockup_rect,
    normalize_rotation,
    rotate_handle_point,
    rotate_point,
    rotated_bounds,
)


RECT = Rect(100, 200, 300, 100)


@pytest.mark.parametrize("rotation", [0, 15, 45, 90, 137, -60, 180])
def test_rotated_points_stay_inside(rotation):
    """A point inside the unrotated rect, rotated with it, still hits."""
    center = RECT.center
    for local in [(110, 210), (390, 290), (250, 250), (101, 299)]:
        world = rotate_point(local, center, rotation)
        assert is_point_in_rotated_rect(world, RECT, rotation)


@pytest.mark.parametrize("rotation", [0, 30, 90, -120])
def test_rotated_outside_points_miss(rotation):
    center = RECT.center
    for local in [(90, 250), (410, 250), (250, 190), (250, 310)]:
        world = rotate_point(local, center, rotation)
        assert not is_point_in_rotated_rect(world, RECT, rotation)


def test_rotation_uses_custom_pivot():
    rect = Rect(0, 0, 100, 20)
    # Rotated 90 degrees clockwise about the origin, the bar points down the y axis
    assert is_point_in_rotated_rect((-10, 50), rect, 90, pivot=(0, 0))
    assert not is_point_in_rotated_rect((50, 10), rect, 90, pivot=(0, 0))


def test_positive_rotation_is_clockwise_on_screen():
    x, y = rotate_point((10, 0), (0, 0), 90)
    assert x == pytest.approx(0, abs=1e-9)
    assert y == pytest.approx(10)


@pytest.mark.parametrize(
    "raw, expected",
    [(0, 0), (180, 180), (-180, 180), (270, -90), (-270, 90), (720, 0), (540, 180), (359, -1)],
)
def test_normalize_rotation(raw, expected):
    assert normalize_rotation(raw) == pytest.approx(expected)


def test_rotated_bounds_of_square_at_45():
    square = Rect(0, 0, 10, 10)
    bounds = rotated_bounds(square, 45)
    assert bounds.width == pytest.approx(10 * math.sqrt(2))
    assert bounds.center[0] == pytest.approx(5)
    assert bounds.center[1] == pytest.approx(5)


def test_mockup_rect_centers_then_offsets():
    rect = mockup_rect(1000, 2000, (0, 0), 400, 800, 1.0)
    assert rect == Rect(300, 600, 400, 800)
    shifted = mockup_rect(1000, 2000, (50, -100), 400, 800, 0.5)
    assert shifted.width == 200
    assert shifted.center == (550, 900)


def test_corner_handles_follow_rotation():
    rect = Rect(0, 0, 100, 100)
    handles = corner_handle_points(rect, 90)
    # Top-left corner swings to the top-right under a clockwise quarter turn
    x, y = handles["top-left"]
    assert x == pytest.approx(100)
    assert y == pytest.approx(0, abs=1e-9)


def test_rotate_handle_sits_above_top_edge():
    rect = Rect(0, 0, 100, 100)
    assert rotate_handle_point(rect, 0, 40) == pytest.approx((50, -40))
    x, y = rotate_handle_point(rect, 180, 40)
    assert (x, y) == pytest.approx((50, 140))


def test_angle_to():
    assert angle_to((0, 0), (1, 0)) == pytest.approx(0)
    assert angle_to((0, 0), (0, 1)) == pytest.approx(90)
