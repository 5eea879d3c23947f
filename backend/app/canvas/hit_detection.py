"""Point-to-element resolution using the renderer's own geometry."""

from __future__ import annotations

from app.canvas.bounds import layout_text_element, mockup_box, visual_rect
from app.canvas.presets import CanvasMetrics
from app.imaging.fonts import FontRegistry
from app.models.elements import CanvasElement, MockupElement, TextElement, VisualElement
from app.utils.geometry import Point, is_point_in_rotated_rect

# Extra slop around each text line, canvas pixels
TEXT_HIT_MARGIN = 20


def element_contains_point(
    element: CanvasElement,
    point: Point,
    metrics: CanvasMetrics,
    fonts: FontRegistry,
) -> bool:
    if isinstance(element, MockupElement):
        rect = mockup_box(element, metrics).rect
        return is_point_in_rotated_rect(point, rect, element.rotation)
    if isinstance(element, VisualElement):
        return is_point_in_rotated_rect(point, visual_rect(element), element.rotation)
    if isinstance(element, TextElement):
        # Per wrapped line, so gaps beside short lines do not count as hits
        layout = layout_text_element(element, metrics, fonts)
        return any(
            is_point_in_rotated_rect(
                point,
                layout.line_rect(line, TEXT_HIT_MARGIN),
                element.rotation,
                pivot=layout.anchor,
            )
            for line in layout.lines
            if line.text
        )
    raise TypeError(f"Unsupported element type: {type(element).__name__}")


def _hit_order(elements: list[CanvasElement]) -> list[CanvasElement]:
    """Topmost first: descending z-index, later list entries win ties (they paint last)."""
    return sorted(reversed(elements), key=lambda e: e.z_index, reverse=True)


def get_element_at_point(
    point: Point,
    elements: list[CanvasElement],
    metrics: CanvasMetrics,
    fonts: FontRegistry,
) -> str | None:
    for element in _hit_order(elements):
        if element_contains_point(element, point, metrics, fonts):
            return element.id
    return None


def get_all_elements_at_point(
    point: Point,
    elements: list[CanvasElement],
    metrics: CanvasMetrics,
    fonts: FontRegistry,
) -> list[str]:
    return [e.id for e in _hit_order(elements) if element_contains_point(e, point, metrics, fonts)]
