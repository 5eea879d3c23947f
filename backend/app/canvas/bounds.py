"""Element geometry shared by the renderer, hit detection and the transform controller."""

from __future__ import annotations

from dataclasses import dataclass

from app.canvas.presets import CanvasMetrics
from app.canvas.text import TextLayout, layout_lines, wrap_text
from app.imaging.fonts import Font, FontRegistry
from app.models.elements import CanvasElement, MockupElement, TextElement, VisualElement
from app.utils.geometry import Point, Rect, centered_rect, mockup_rect


@dataclass(frozen=True)
class MockupBox:
    rect: Rect
    inner_padding: float
    corner_radius: float
    scale: float


@dataclass(frozen=True)
class ElementBox:
    """Unrotated rect plus the rotation and pivot it is drawn with."""

    rect: Rect
    rotation: float
    pivot: Point


def mockup_box(element: MockupElement, metrics: CanvasMetrics) -> MockupBox:
    geometry = metrics.preset.mockup
    base_width = element.base_width or geometry.base_width
    base_height = element.base_height or geometry.base_height
    padding = geometry.inner_padding if element.inner_padding is None else element.inner_padding
    radius = geometry.corner_radius if element.corner_radius is None else element.corner_radius
    rect = mockup_rect(
        metrics.width,
        metrics.height,
        element.position.as_tuple(),
        base_width,
        base_height,
        element.scale,
    )
    return MockupBox(
        rect=rect,
        inner_padding=padding * element.scale,
        corner_radius=radius * element.scale,
        scale=element.scale,
    )


def visual_rect(element: VisualElement) -> Rect:
    return centered_rect(
        element.position.as_tuple(),
        element.width * element.scale,
        element.height * element.scale,
    )


def text_font(element: TextElement, metrics: CanvasMetrics, fonts: FontRegistry) -> Font:
    return fonts.get(
        element.font_family,
        element.effective_weight,
        element.font_size * metrics.font_scale_multiplier,
    )


def layout_text_element(element: TextElement, metrics: CanvasMetrics, fonts: FontRegistry) -> TextLayout:
    font = text_font(element, metrics, fonts)
    font_size = element.font_size * metrics.font_scale_multiplier
    spacing = element.letter_spacing * metrics.font_scale_multiplier
    max_width = element.width or metrics.default_text_width
    lines = wrap_text(element.text, font, max_width, spacing)
    return layout_lines(
        lines,
        font,
        element.position.as_tuple(),
        font_size,
        font_size * element.line_height,
        element.align,
        spacing,
    )


def element_box(element: CanvasElement, metrics: CanvasMetrics, fonts: FontRegistry) -> ElementBox:
    if isinstance(element, MockupElement):
        rect = mockup_box(element, metrics).rect
        return ElementBox(rect, element.rotation, rect.center)
    if isinstance(element, VisualElement):
        rect = visual_rect(element)
        return ElementBox(rect, element.rotation, rect.center)
    if isinstance(element, TextElement):
        layout = layout_text_element(element, metrics, fonts)
        return ElementBox(layout.bounds(), element.rotation, layout.anchor)
    raise TypeError(f"Unsupported element type: {type(element).__name__}")
