"""Tests for the element renderer."""

from PIL import Image

from app.canvas.mockup import FALLBACK_BORDER_COLOR, PLACEHOLDER_COLOR, compose_mockup
from app.canvas.renderer import render_all
from app.models.base import Position
from app.models.elements import MockupElement, TextElement, VisualElement
from tests.conftest import solid_image


def _surface(metrics) -> Image.Image:
    return Image.new("RGBA", (metrics.width, metrics.height), (255, 255, 255, 255))


def test_visual_drawn_at_center(iphone_metrics, render_context):
    render_context.images.put("red.png", solid_image((255, 0, 0, 255)))
    visual = VisualElement(id="v", image_url="red.png", width=100, height=100, position=Position(x=300, y=300))
    surface = render_all(_surface(iphone_metrics), [visual], None, None, iphone_metrics, render_context)
    assert surface.getpixel((300, 300)) == (255, 0, 0, 255)
    assert surface.getpixel((400, 400)) == (255, 255, 255, 255)
    assert render_context.errors == {}


def test_broken_visual_does_not_abort(iphone_metrics, render_context):
    render_context.images.put("ok.png", solid_image((0, 0, 255, 255)))
    render_context.images.put("broken.png", None)
    broken = VisualElement(id="broken", image_url="broken.png", position=Position(x=100, y=100), z_index=0)
    good = VisualElement(id="good", image_url="ok.png", width=50, height=50, position=Position(x=600, y=600), z_index=1)
    surface = render_all(_surface(iphone_metrics), [broken, good], None, None, iphone_metrics, render_context)
    assert "broken" in render_context.errors
    assert "good" not in render_context.errors
    assert surface.getpixel((600, 600)) == (0, 0, 255, 255)


def test_z_order_paints_higher_last(iphone_metrics, render_context):
    render_context.images.put("red.png", solid_image((255, 0, 0, 255)))
    render_context.images.put("blue.png", solid_image((0, 0, 255, 255)))
    top = VisualElement(id="top", image_url="blue.png", position=Position(x=300, y=300), z_index=5)
    bottom = VisualElement(id="bottom", image_url="red.png", position=Position(x=300, y=300), z_index=1)
    surface = render_all(_surface(iphone_metrics), [top, bottom], None, None, iphone_metrics, render_context)
    assert surface.getpixel((300, 300)) == (0, 0, 255, 255)


def test_visual_opacity(iphone_metrics, render_context):
    render_context.images.put("black.png", solid_image((0, 0, 0, 255)))
    visual = VisualElement(id="v", image_url="black.png", position=Position(x=300, y=300), opacity=0.5)
    surface = render_all(_surface(iphone_metrics), [visual], None, None, iphone_metrics, render_context)
    r, g, b, _ = surface.getpixel((300, 300))
    assert 120 <= r <= 135


def test_mockup_without_assets_uses_placeholder(iphone_metrics, render_context):
    mockup = MockupElement(id="m", screenshot_url="", scale=1.0)
    surface = render_all(_surface(iphone_metrics), [mockup], None, None, iphone_metrics, render_context)
    center = (iphone_metrics.width // 2, iphone_metrics.height // 2)
    assert surface.getpixel(center) == PLACEHOLDER_COLOR
    assert render_context.errors == {}


def test_mockup_uses_fallback_screenshot(iphone_metrics, render_context):
    mockup = MockupElement(id="m", screenshot_url="missing.png", scale=1.0)
    screenshot = solid_image((0, 200, 0, 255), (100, 200))
    surface = render_all(_surface(iphone_metrics), [mockup], screenshot, None, iphone_metrics, render_context)
    center = (iphone_metrics.width // 2, iphone_metrics.height // 2)
    assert surface.getpixel(center) == (0, 200, 0, 255)


def test_compose_mockup_fallback_border():
    layer = compose_mockup(None, None, 200, 400, 10, 20)
    assert layer.size == (200, 400)
    assert layer.getpixel((100, 2)) == FALLBACK_BORDER_COLOR
    assert layer.getpixel((100, 200)) == PLACEHOLDER_COLOR


def test_compose_mockup_frame_overlay():
    frame = Image.new("RGBA", (50, 100), (0, 0, 0, 0))
    frame.paste((9, 9, 9, 255), (0, 0, 50, 5))
    layer = compose_mockup(solid_image((0, 0, 255, 255)), frame, 200, 400, 10, 20)
    assert layer.getpixel((100, 2)) == (9, 9, 9, 255)
    assert layer.getpixel((100, 200)) == (0, 0, 255, 255)


def test_text_is_drawn(iphone_metrics, render_context):
    text = TextElement(id="t", text="Hello", color="#000000", position=Position(x=100, y=400))
    surface = render_all(_surface(iphone_metrics), [text], None, None, iphone_metrics, render_context)
    region = surface.crop((100, 250, 600, 420)).convert("L")
    assert region.getextrema()[0] < 64


def test_selection_overlay_is_drawn(iphone_metrics, render_context):
    render_context.images.put("red.png", solid_image((255, 0, 0, 255)))
    visual = VisualElement(id="v", image_url="red.png", width=100, height=100, position=Position(x=300, y=300))
    surface = render_all(_surface(iphone_metrics), [visual], None, None, iphone_metrics, render_context, selected_id="v")
    # Outline sits SELECTION_PADDING outside the rect
    assert surface.getpixel((300, 242)) != (255, 255, 255, 255)
