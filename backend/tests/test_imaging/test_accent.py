"""Tests for accent color extraction."""

from PIL import Image

from app.imaging.accent import DEFAULT_ACCENT_COLOR, extract_accent_color
from tests.conftest import solid_image


def test_no_image_returns_default():
    assert extract_accent_color(None) == DEFAULT_ACCENT_COLOR
    assert extract_accent_color(None, default="#123456") == "#123456"


def test_black_and_white_image_returns_default():
    image = Image.new("RGB", (40, 40), (255, 255, 255))
    image.paste((0, 0, 0), (0, 0, 20, 40))
    assert extract_accent_color(image) == DEFAULT_ACCENT_COLOR


def test_vivid_swatch_beats_larger_gray_area():
    image = Image.new("RGB", (100, 100), (128, 128, 128))
    image.paste((230, 30, 30), (0, 0, 30, 30))
    accent = extract_accent_color(image)
    r, g, b = int(accent[1:3], 16), int(accent[3:5], 16), int(accent[5:7], 16)
    assert r > 200 and g < 60 and b < 60


def test_muted_image_uses_most_common_color():
    image = solid_image((120, 130, 140, 255), (20, 20))
    assert extract_accent_color(image) == "#78828c"
