"""Shared test fixtures."""

from __future__ import annotations

import base64
import io

import pytest
from PIL import Image

from app.canvas.context import RenderContext
from app.canvas.presets import CanvasMetrics, get_canvas_metrics
from app.imaging.cache import ImageCache
from app.imaging.fonts import FontRegistry


class FakeFont:
    """Fixed-advance measurer: every character is 10px wide."""

    advance = 10.0

    def getlength(self, text: str) -> float:
        return len(text) * self.advance


def solid_image(color: tuple[int, int, int, int], size: tuple[int, int] = (40, 40)) -> Image.Image:
    return Image.new("RGBA", size, color)


def png_data_url(image: Image.Image) -> str:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")


RED_DATA_URL = png_data_url(solid_image((255, 0, 0, 255)))
BLUE_DATA_URL = png_data_url(solid_image((0, 0, 255, 255)))


# Legacy flat configuration, nested the way the old editor stored it
LEGACY_CONFIG = {
    "id": "shot-1",
    "image": {
        "sourceScreenshotUrl": RED_DATA_URL,
        "configuration": {
            "heading": "Track every habit",
            "subheading": "Simple streaks that stick",
            "headingFont": "Farro",
            "headingFontSize": 48,
            "subheadingFontSize": 28,
            "headingColor": "#111827",
            "subheadingColor": "#374151",
            "headingAlign": "center",
            "headingPosition": {"x": 620, "y": 240},
            "subheadingX": 620,
            "subheadingY": 520,
            "mockupX": 10,
            "mockupY": 120,
            "mockupScale": 1.1,
            "mockupRotation": -8,
            "visuals": [
                {
                    "id": "sticker",
                    "imageUrl": BLUE_DATA_URL,
                    "name": "Sticker",
                    "width": 200,
                    "height": 120,
                    "position": {"x": 300, "y": 1800},
                    "scale": 1.5,
                    "rotation": 30,
                    "opacity": 0.8,
                }
            ],
            "backgroundType": "gradient",
            "backgroundGradient": {"startColor": "#ff0000", "endColor": "#0000ff", "angle": 90},
            "deviceFrame": "iPhone",
            "showDeviceFrame": False,
        },
    },
}


MINIMAL_TEMPLATE = {
    "id": "minimal",
    "name": "Minimal",
    "canvas": {
        "defaultDevice": "iPhone",
        "devices": {
            "iPhone": {
                "width": 120,
                "height": 240,
                "background": {"type": "solid", "color": "#102030"},
            },
        },
    },
    "layers": [
        {
            "id": "block",
            "type": "accentShape",
            "shape": "rounded-rect",
            "color": "#ff0000",
            "size": {"widthRatio": 0.5, "heightRatio": 0.25},
            "position": {"x": 0.5, "y": 0.5},
        },
    ],
}


@pytest.fixture
def iphone_metrics() -> CanvasMetrics:
    return get_canvas_metrics("iphone-15-pro")


@pytest.fixture
def ipad_metrics() -> CanvasMetrics:
    return get_canvas_metrics("ipad-pro-13")


@pytest.fixture
def fonts() -> FontRegistry:
    return FontRegistry()


@pytest.fixture
def render_context() -> RenderContext:
    return RenderContext(images=ImageCache(), fonts=FontRegistry())
