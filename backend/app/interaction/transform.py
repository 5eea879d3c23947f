"""Interactive move / resize / rotate state machine for one pointer.

Values are always derived from a snapshot taken at drag start, never
accumulated move by move.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass

from app.canvas.bounds import element_box
from app.canvas.hit_detection import element_contains_point
from app.canvas.presets import CanvasMetrics
from app.imaging.fonts import FontRegistry
from app.models.base import Position
from app.models.elements import CanvasElement, MockupElement, VisualElement, clamp_scale
from app.utils.geometry import (
    Point,
    angle_to,
    corner_handle_points,
    distance,
    normalize_rotation,
    rotate_handle_point,
)

logger = logging.getLogger(__name__)

# Canvas pixels; callers with a zoomed view pass their own values
HANDLE_HIT_RADIUS = 16.0
ROTATE_HANDLE_OFFSET = 40.0
ROTATION_SNAP_DEGREES = 15.0

ROTATE_HANDLE = "rotate"


class DragMode(str, enum.Enum):
    IDLE = "idle"
    MOVE = "move"
    RESIZE = "resize"
    ROTATE = "rotate"


@dataclass(frozen=True)
class DragSnapshot:
    element: CanvasElement
    pointer: Point
    position: Point
    scale: float
    rotation: float
    center: Point


def _has_handles(element: CanvasElement) -> bool:
    return isinstance(element, (MockupElement, VisualElement))


class TransformController:
    """Drives one element through a drag. Single active pointer only."""

    def __init__(
        self,
        metrics: CanvasMetrics,
        fonts: FontRegistry | None = None,
        on_change: Callable[[CanvasElement], None] | None = None,
        on_commit: Callable[[CanvasElement], None] | None = None,
        handle_radius: float = HANDLE_HIT_RADIUS,
        rotate_handle_offset: float = ROTATE_HANDLE_OFFSET,
    ) -> None:
        self.metrics = metrics
        self.fonts = fonts or FontRegistry()
        self.on_change = on_change
        self.on_commit = on_commit
        self.handle_radius = handle_radius
        self.rotate_handle_offset = rotate_handle_offset
        self.mode = DragMode.IDLE
        self.snap_rotation = False
        self._snapshot: DragSnapshot | None = None

    @property
    def active_element(self) -> CanvasElement | None:
        return self._snapshot.element if self._snapshot else None

    def hovered_handle(self, point: Point, element: CanvasElement) -> str | None:
        """Name of the handle under `point`: a corner name, 'rotate', or None."""
        if not _has_handles(element):
            return None
        box = element_box(element, self.metrics, self.fonts)
        rotate_at = rotate_handle_point(box.rect, box.rotation, self.rotate_handle_offset)
        if distance(point, rotate_at) <= self.handle_radius:
            return ROTATE_HANDLE
        for name, corner in corner_handle_points(box.rect, box.rotation).items():
            if distance(point, corner) <= self.handle_radius:
                return name
        return None

    def pointer_down(self, point: Point, element: CanvasElement, selected: bool = True) -> DragMode:
        handle = self.hovered_handle(point, element) if selected else None
        if handle == ROTATE_HANDLE:
            mode = DragMode.ROTATE
        elif handle is not None:
            mode = DragMode.RESIZE
        elif selected and element_contains_point(element, point, self.metrics, self.fonts):
            mode = DragMode.MOVE
        else:
            mode = DragMode.IDLE

        if mode is DragMode.IDLE:
            self._reset()
            return self.mode

        box = element_box(element, self.metrics, self.fonts)
        self._snapshot = DragSnapshot(
            element=element,
            pointer=point,
            position=element.position.as_tuple(),
            scale=getattr(element, "scale", 1.0),
            rotation=element.rotation,
            center=box.rect.center if _has_handles(element) else box.pivot,
        )
        self.mode = mode
        logger.debug("Drag start: %s on %s", mode.value, element.id)
        return mode

    def pointer_move(self, point: Point) -> CanvasElement | None:
        snap = self._snapshot
        if snap is None or self.mode is DragMode.IDLE:
            return None
        element = snap.element

        if self.mode is DragMode.MOVE:
            element.position = Position(
                x=snap.position[0] + (point[0] - snap.pointer[0]),
                y=snap.position[1] + (point[1] - snap.pointer[1]),
            )
        elif self.mode is DragMode.RESIZE:
            start_distance = distance(snap.center, snap.pointer)
            if start_distance > 1e-9:
                ratio = distance(snap.center, point) / start_distance
                element.scale = clamp_scale(snap.scale * ratio)
        elif self.mode is DragMode.ROTATE:
            delta = angle_to(snap.center, point) - angle_to(snap.center, snap.pointer)
            rotation = snap.rotation + delta
            if self.snap_rotation:
                rotation = round(rotation / ROTATION_SNAP_DEGREES) * ROTATION_SNAP_DEGREES
            element.rotation = normalize_rotation(rotation)

        if self.on_change is not None:
            self.on_change(element)
        return element

    def pointer_up(self) -> CanvasElement | None:
        return self._finish()

    def pointer_leave(self) -> CanvasElement | None:
        return self._finish()

    def _finish(self) -> CanvasElement | None:
        snap = self._snapshot
        was_dragging = self.mode is not DragMode.IDLE and snap is not None
        self._reset()
        if was_dragging:
            logger.debug("Drag end: %s", snap.element.id)
            if self.on_commit is not None:
                self.on_commit(snap.element)
            return snap.element
        return None

    def _reset(self) -> None:
        self.mode = DragMode.IDLE
        self._snapshot = None
