"""Tests for background painting."""

from PIL import Image

from app.canvas.background import paint_background, render_gradient
from app.models.settings import BackgroundImageSettings, BackgroundSettings, GradientSettings
from tests.conftest import solid_image


def _surface(size=(60, 40)) -> Image.Image:
    return Image.new("RGBA", size, (0, 0, 0, 0))


def test_solid_fill():
    surface = paint_background(_surface(), BackgroundSettings(type="solid", solid="#336699"))
    assert surface.getpixel((0, 0)) == (51, 102, 153, 255)
    assert surface.getpixel((59, 39)) == (51, 102, 153, 255)


def test_gradient_endpoints_single_panel():
    gradient = GradientSettings(start_color="#ff0000", end_color="#0000ff", direction="left-to-right")
    surface = paint_background(_surface(), BackgroundSettings(type="gradient", gradient=gradient))
    assert surface.getpixel((0, 20)) == (255, 0, 0, 255)
    assert surface.getpixel((59, 20)) == (0, 0, 255, 255)


def test_horizontal_gradient_seam_matches_between_panels():
    gradient = GradientSettings(start_color="#ff0000", end_color="#0000ff", direction="left-to-right")
    background = BackgroundSettings(type="gradient", gradient=gradient)
    left = paint_background(_surface(), background, panel_index=0, panel_count=2)
    right = paint_background(_surface(), background, panel_index=1, panel_count=2)
    assert left.getpixel((59, 10)) == right.getpixel((0, 10))
    assert left.getpixel((0, 10)) == (255, 0, 0, 255)
    assert right.getpixel((59, 10)) == (0, 0, 255, 255)


def test_vertical_gradient():
    gradient = GradientSettings(start_color="#ffffff", end_color="#000000", direction="top-to-bottom")
    surface = paint_background(_surface(), BackgroundSettings(type="gradient", gradient=gradient))
    assert surface.getpixel((30, 0)) == (255, 255, 255, 255)
    assert surface.getpixel((30, 39)) == (0, 0, 0, 255)


def test_missing_image_falls_back_to_solid():
    background = BackgroundSettings(
        type="image",
        solid="#00ff00",
        image=BackgroundImageSettings(url="https://example.invalid/bg.png"),
    )
    surface = paint_background(_surface(), background, image=None)
    assert surface.getpixel((10, 10)) == (0, 255, 0, 255)


def test_tiled_image_covers_surface():
    background = BackgroundSettings(type="image", image=BackgroundImageSettings(url="tile.png", fit="tile"))
    surface = paint_background(_surface(), background, image=solid_image((255, 0, 0, 255), (7, 7)))
    assert surface.getpixel((0, 0)) == (255, 0, 0, 255)
    assert surface.getpixel((59, 39)) == (255, 0, 0, 255)


def test_cover_image_spans_panels():
    background = BackgroundSettings(type="image", image=BackgroundImageSettings(url="wide.png", fit="cover"))
    wide = Image.new("RGBA", (120, 40), (0, 0, 255, 255))
    wide.paste((255, 0, 0, 255), (0, 0, 60, 40))
    left = paint_background(_surface(), background, 0, 2, image=wide)
    right = paint_background(_surface(), background, 1, 2, image=wide)
    assert left.getpixel((10, 20)) == (255, 0, 0, 255)
    assert right.getpixel((50, 20)) == (0, 0, 255, 255)


def test_render_gradient_multi_stop():
    stops = [(0.0, (0, 0, 0, 255)), (0.5, (255, 255, 255, 255)), (1.0, (0, 0, 0, 255))]
    image = render_gradient((3, 1), stops, "horizontal")
    assert image.getpixel((1, 0)) == (255, 255, 255, 255)
    assert image.getpixel((2, 0)) == (0, 0, 0, 255)


def test_contain_image_is_letterboxed_over_solid():
    background = BackgroundSettings(
        type="image",
        solid="#00ff00",
        image=BackgroundImageSettings(url="square.png", fit="contain"),
    )
    surface = paint_background(_surface(), background, image=solid_image((255, 0, 0, 255), (20, 20)))
    # 20x20 scaled by 2 to 40x40, centred horizontally at x 10..50
    assert surface.getpixel((30, 20)) == (255, 0, 0, 255)
    assert surface.getpixel((3, 20)) == (0, 255, 0, 255)
    assert surface.getpixel((57, 20)) == (0, 255, 0, 255)
