"""Leaf-node geometry helpers. No engine imports.

Coordinates are canvas pixels with y pointing down, so a positive rotation
turns clockwise on screen. Renderer, hit detection and the transform
controller all derive their rectangles from the functions below.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

Point = tuple[float, float]


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> Point:
        return (self.x + self.width / 2, self.y + self.height / 2)

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, point: Point) -> bool:
        px, py = point
        return self.x <= px <= self.right and self.y <= py <= self.bottom

    def expanded(self, margin: float) -> Rect:
        return Rect(self.x - margin, self.y - margin, self.width + 2 * margin, self.height + 2 * margin)

    def corners(self) -> NDArray[np.float64]:
        """Corners as a 4x2 array: top-left, top-right, bottom-right, bottom-left."""
        return np.array(
            [
                [self.x, self.y],
                [self.right, self.y],
                [self.right, self.bottom],
                [self.x, self.bottom],
            ],
            dtype=np.float64,
        )


def normalize_rotation(degrees: float) -> float:
    """Map any angle into (-180, 180]."""
    r = math.fmod(float(degrees), 360.0)
    if r <= -180.0:
        r += 360.0
    elif r > 180.0:
        r -= 360.0
    return r


def rotation_matrix(degrees: float) -> NDArray[np.float64]:
    theta = math.radians(degrees)
    c, s = math.cos(theta), math.sin(theta)
    return np.array([[c, -s], [s, c]], dtype=np.float64)


def rotate_points(points: NDArray[np.float64], pivot: Point, degrees: float) -> NDArray[np.float64]:
    """Rotate an Nx2 array of points around pivot."""
    if not degrees:
        return np.asarray(points, dtype=np.float64).copy()
    origin = np.array(pivot, dtype=np.float64)
    return (np.asarray(points, dtype=np.float64) - origin) @ rotation_matrix(degrees).T + origin


def rotate_point(point: Point, pivot: Point, degrees: float) -> Point:
    rotated = rotate_points(np.array([point], dtype=np.float64), pivot, degrees)[0]
    return (float(rotated[0]), float(rotated[1]))


def is_point_in_rotated_rect(
    point: Point,
    rect: Rect,
    rotation: float,
    pivot: Point | None = None,
) -> bool:
    """Inverse-rotate point into the rect's unrotated frame, then bounds-test.

    The rotation pivot defaults to the rect center.
    """
    local = rotate_point(point, pivot or rect.center, -rotation)
    return rect.contains(local)


def rotated_corners(rect: Rect, rotation: float, pivot: Point | None = None) -> NDArray[np.float64]:
    return rotate_points(rect.corners(), pivot or rect.center, rotation)


def rotated_bounds(rect: Rect, rotation: float, pivot: Point | None = None) -> Rect:
    """Axis-aligned bounding box of a rotated rect."""
    pts = rotated_corners(rect, rotation, pivot)
    xmin, ymin = pts.min(axis=0)
    xmax, ymax = pts.max(axis=0)
    return Rect(float(xmin), float(ymin), float(xmax - xmin), float(ymax - ymin))


def distance(a: Point, b: Point) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


def angle_to(center: Point, point: Point) -> float:
    """Screen angle in degrees from center to point."""
    return math.degrees(math.atan2(point[1] - center[1], point[0] - center[0]))


def mockup_rect(
    canvas_width: float,
    canvas_height: float,
    position: Point,
    base_width: float,
    base_height: float,
    scale: float,
) -> Rect:
    """Mockup draw rect: centered on the canvas, shifted by the position offset."""
    w = base_width * scale
    h = base_height * scale
    return Rect((canvas_width - w) / 2 + position[0], (canvas_height - h) / 2 + position[1], w, h)


def centered_rect(center: Point, width: float, height: float) -> Rect:
    return Rect(center[0] - width / 2, center[1] - height / 2, width, height)


# Handle names in clockwise order from top-left
CORNER_HANDLES = ("top-left", "top-right", "bottom-right", "bottom-left")


def corner_handle_points(rect: Rect, rotation: float) -> dict[str, Point]:
    """Resize handle centres in the rect's rotated frame."""
    pts = rotated_corners(rect, rotation)
    return {name: (float(p[0]), float(p[1])) for name, p in zip(CORNER_HANDLES, pts)}


def rotate_handle_point(rect: Rect, rotation: float, offset: float) -> Point:
    """Rotate handle centre: `offset` px above the top edge midpoint, rotated with the rect."""
    cx, _ = rect.center
    return rotate_point((cx, rect.y - offset), rect.center, rotation)
