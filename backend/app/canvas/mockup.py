"""Device mockup composition: clipped screenshot plus frame overlay.

`compose_mockup` is the one implementation used by both the element renderer
and the template engine's mockup layer.
"""

from __future__ import annotations

import logging

from PIL import Image, ImageDraw, ImageOps

from app.canvas.bounds import mockup_box
from app.canvas.compositing import composite_rotated, rounded_mask
from app.canvas.presets import CanvasMetrics
from app.models.elements import MockupElement

logger = logging.getLogger(__name__)

# Drawn instead of the frame artwork when none is available
FALLBACK_BORDER_COLOR = (0, 0, 0, 204)
FALLBACK_BORDER_WIDTH = 8
# Neutral screen fill when the screenshot failed to load
PLACEHOLDER_COLOR = (229, 231, 235, 255)


def compose_mockup(
    screenshot: Image.Image | None,
    frame: Image.Image | None,
    width: float,
    height: float,
    inner_padding: float,
    corner_radius: float,
    scale: float = 1.0,
) -> Image.Image:
    """Render a mockup of the given outer size into a new RGBA layer."""
    w, h = max(1, round(width)), max(1, round(height))
    layer = Image.new("RGBA", (w, h), (0, 0, 0, 0))

    pad = max(0, round(inner_padding))
    inner_w, inner_h = max(1, w - 2 * pad), max(1, h - 2 * pad)
    if screenshot is not None:
        screen = ImageOps.fit(screenshot.convert("RGBA"), (inner_w, inner_h), method=Image.Resampling.LANCZOS)
    else:
        screen = Image.new("RGBA", (inner_w, inner_h), PLACEHOLDER_COLOR)
    content = Image.new("RGBA", (w, h), (0, 0, 0, 0))
    content.paste(screen, (pad, pad))
    mask = rounded_mask((w, h), (pad, pad, pad + inner_w - 1, pad + inner_h - 1), corner_radius)
    layer.paste(content, (0, 0), mask)

    if frame is not None:
        layer.alpha_composite(frame.convert("RGBA").resize((w, h), Image.Resampling.LANCZOS))
    else:
        border = max(1, round(FALLBACK_BORDER_WIDTH * scale))
        radius = min(corner_radius + pad, (w - 1) / 2, (h - 1) / 2)
        ImageDraw.Draw(layer).rounded_rectangle(
            (0, 0, w - 1, h - 1),
            radius=max(0.0, radius),
            outline=FALLBACK_BORDER_COLOR,
            width=border,
        )
    return layer


def draw_mockup(
    surface: Image.Image,
    element: MockupElement,
    screenshot: Image.Image | None,
    frame: Image.Image | None,
    metrics: CanvasMetrics,
) -> None:
    box = mockup_box(element, metrics)
    if screenshot is None:
        logger.warning("Mockup %s has no screenshot, drawing placeholder", element.id)
    layer = compose_mockup(
        screenshot,
        frame,
        box.rect.width,
        box.rect.height,
        box.inner_padding,
        box.corner_radius,
        scale=box.scale,
    )
    composite_rotated(
        surface,
        layer,
        (layer.width / 2, layer.height / 2),
        box.rect.center,
        element.rotation,
    )
