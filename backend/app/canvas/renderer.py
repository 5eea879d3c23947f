"""Element renderer: paints a panel's elements in z-order onto a Pillow surface.

A failure on one element is logged and recorded in the render context; the
rest of the composition still renders.
"""

from __future__ import annotations

import logging
import math
import time

from PIL import Image, ImageDraw

from app.canvas.bounds import element_box, layout_text_element, text_font, visual_rect
from app.canvas.colors import parse_color
from app.canvas.compositing import composite_rotated
from app.canvas.context import RenderContext
from app.canvas.mockup import draw_mockup
from app.canvas.presets import CanvasMetrics
from app.canvas.text import draw_text_line
from app.errors import ImageLoadError
from app.models.elements import (
    CanvasElement,
    MockupElement,
    TextElement,
    VisualElement,
    sort_by_z_index,
)
from app.utils.geometry import (
    corner_handle_points,
    rotate_handle_point,
    rotated_corners,
)

logger = logging.getLogger(__name__)

# Selection overlay, in canvas pixels
SELECTION_PADDING = 8
SELECTION_HANDLE_SIZE = 8
SELECTION_COLOR = (59, 130, 246, 255)
ROTATE_HANDLE_OFFSET = 40


def draw_text(surface: Image.Image, element: TextElement, metrics: CanvasMetrics, context: RenderContext) -> None:
    font = text_font(element, metrics, context.fonts)
    layout = layout_text_element(element, metrics, context.fonts)
    if not layout.lines:
        return
    bounds = layout.bounds()
    # Leave room for glyph overshoot beyond the nominal line band
    margin = math.ceil(layout.font_size * 0.5) + 2
    left = math.floor(bounds.x) - margin
    top = math.floor(bounds.y) - margin
    layer = Image.new(
        "RGBA",
        (max(1, math.ceil(bounds.width) + 2 * margin), max(1, math.ceil(bounds.height) + 2 * margin)),
        (0, 0, 0, 0),
    )
    draw = ImageDraw.Draw(layer)
    fill = parse_color(element.color, default=(255, 255, 255, 255))
    for line in layout.lines:
        draw_text_line(draw, (line.x - left, line.baseline - top), line.text, font, fill, layout.letter_spacing)
    anchor = layout.anchor
    composite_rotated(surface, layer, (anchor[0] - left, anchor[1] - top), anchor, element.rotation)


def draw_visual(surface: Image.Image, element: VisualElement, context: RenderContext) -> None:
    image = context.images.peek(element.image_url)
    if image is None:
        raise ImageLoadError(element.image_url, "image not loaded")
    rect = visual_rect(element)
    size = (max(1, round(rect.width)), max(1, round(rect.height)))
    layer = image.convert("RGBA").resize(size, Image.Resampling.LANCZOS)
    composite_rotated(
        surface,
        layer,
        (size[0] / 2, size[1] / 2),
        rect.center,
        element.rotation,
        opacity=element.opacity,
    )


def render_element(
    surface: Image.Image,
    element: CanvasElement,
    screenshot_image: Image.Image | None,
    frame_image: Image.Image | None,
    metrics: CanvasMetrics,
    context: RenderContext,
) -> None:
    if isinstance(element, TextElement):
        draw_text(surface, element, metrics, context)
    elif isinstance(element, MockupElement):
        screenshot = context.images.peek(element.screenshot_url) or screenshot_image
        draw_mockup(surface, element, screenshot, frame_image, metrics)
    elif isinstance(element, VisualElement):
        draw_visual(surface, element, context)
    else:
        raise TypeError(f"Unsupported element type: {type(element).__name__}")


def render_all(
    surface: Image.Image,
    elements: list[CanvasElement],
    screenshot_image: Image.Image | None,
    frame_image: Image.Image | None,
    metrics: CanvasMetrics,
    context: RenderContext,
    selected_id: str | None = None,
) -> Image.Image:
    """Paint `elements` in ascending z-index. Returns the surface."""
    start = time.perf_counter()
    ordered = sort_by_z_index(elements)
    painted = 0
    for element in ordered:
        try:
            render_element(surface, element, screenshot_image, frame_image, metrics, context)
            painted += 1
        except Exception as e:
            context.record_error(element.id, e)

    if selected_id is not None:
        selected = next((e for e in ordered if e.id == selected_id), None)
        if selected is not None:
            draw_selection(surface, selected, metrics, context)

    logger.debug(
        "Rendered %d/%d elements in %.0fms",
        painted,
        len(ordered),
        (time.perf_counter() - start) * 1000,
    )
    return surface


def draw_selection(
    surface: Image.Image,
    element: CanvasElement,
    metrics: CanvasMetrics,
    context: RenderContext,
) -> None:
    """Outline and handles for the selected element, in its rotated frame."""
    box = element_box(element, metrics, context.fonts)
    overlay = Image.new("RGBA", surface.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)

    outline = rotated_corners(box.rect.expanded(SELECTION_PADDING), box.rotation, box.pivot)
    points = [(float(x), float(y)) for x, y in outline]
    draw.line(points + points[:1], fill=SELECTION_COLOR, width=2)

    if isinstance(element, (MockupElement, VisualElement)):
        half = SELECTION_HANDLE_SIZE / 2
        for hx, hy in corner_handle_points(box.rect, box.rotation).values():
            draw.rectangle((hx - half, hy - half, hx + half, hy + half), fill=(255, 255, 255, 255), outline=SELECTION_COLOR)
        rx, ry = rotate_handle_point(box.rect, box.rotation, ROTATE_HANDLE_OFFSET)
        draw.ellipse((rx - half, ry - half, rx + half, ry + half), fill=(255, 255, 255, 255), outline=SELECTION_COLOR)

    surface.alpha_composite(overlay)
