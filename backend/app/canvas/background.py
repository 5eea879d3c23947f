"""Background fill: solid, gradient or image, continuous across a multi-panel set.

Panels are laid out side by side. A horizontal gradient or a non-tiled image
is treated as one panorama spanning all panels, and each panel renders only
its own slice.
"""

from __future__ import annotations

import logging
import math

import numpy as np
from PIL import Image

from app.canvas.colors import RGBA, interpolate_color, parse_color
from app.canvas.compositing import apply_opacity, paste_layer
from app.models.settings import BackgroundImageSettings, BackgroundSettings, GradientSettings

logger = logging.getLogger(__name__)

_HORIZONTAL = {"left-to-right", "right-to-left", "horizontal"}

ColorStop = tuple[float, RGBA]


def gradient_slice(
    start_color: str,
    end_color: str,
    direction: str,
    panel_index: int = 0,
    panel_count: int = 1,
) -> tuple[str, str]:
    """Colors at this panel's start and end edges.

    Horizontal gradients are sliced to [i/N, (i+1)/N] (mirrored right-to-left);
    vertical gradients span the full range on every panel.
    """
    count = max(1, panel_count)
    index = min(max(panel_index, 0), count - 1)
    if direction not in _HORIZONTAL:
        return interpolate_color(start_color, end_color, 0.0), interpolate_color(start_color, end_color, 1.0)
    lo, hi = index / count, (index + 1) / count
    if direction == "right-to-left":
        lo, hi = 1 - hi, 1 - lo
    return interpolate_color(start_color, end_color, lo), interpolate_color(start_color, end_color, hi)


def _gradient_factors(width: int, height: int, direction: str) -> np.ndarray:
    """Per-pixel position along the gradient axis, 0 at the start edge and 1 at the end."""
    xs = np.linspace(0.0, 1.0, width) if width > 1 else np.zeros(width)
    ys = np.linspace(0.0, 1.0, height) if height > 1 else np.zeros(height)
    gx, gy = np.meshgrid(xs, ys)
    if direction in ("left-to-right", "horizontal"):
        return gx
    if direction == "right-to-left":
        return 1.0 - gx
    if direction == "bottom-to-top":
        return 1.0 - gy
    if direction in ("diagonal", "diagonal-right"):
        # Projection onto the (0,0)->(w,h) axis
        return (gx * width**2 + gy * height**2) / (width**2 + height**2)
    if direction == "diagonal-bottom-left":
        return ((1.0 - gx) * width**2 + gy * height**2) / (width**2 + height**2)
    if direction == "radial":
        radius = math.hypot(width, height) / 2
        dx = (gx - 0.5) * width
        dy = (gy - 0.5) * height
        return np.clip(np.hypot(dx, dy) / radius, 0.0, 1.0)
    # top-to-bottom, vertical and anything unrecognized
    return gy


def render_gradient(size: tuple[int, int], stops: list[ColorStop], direction: str) -> Image.Image:
    """Piecewise-linear gradient through `stops` (offset, RGBA) along `direction`."""
    width, height = size
    if not stops:
        return Image.new("RGBA", size, (0, 0, 0, 0))
    ordered = sorted(stops, key=lambda s: s[0])
    offsets = np.array([s[0] for s in ordered], dtype=np.float64)
    colors = np.array([s[1] for s in ordered], dtype=np.float64)
    t = _gradient_factors(width, height, direction)
    channels = [np.interp(t, offsets, colors[:, c]) for c in range(4)]
    pixels = np.clip(np.rint(np.dstack(channels)), 0, 255).astype(np.uint8)
    return Image.fromarray(pixels)


def _paint_gradient(surface: Image.Image, gradient: GradientSettings, panel_index: int, panel_count: int) -> None:
    start, end = gradient_slice(
        gradient.start_color,
        gradient.end_color,
        gradient.direction,
        panel_index,
        panel_count,
    )
    stops = [(0.0, parse_color(start)), (1.0, parse_color(end))]
    surface.alpha_composite(render_gradient(surface.size, stops, gradient.direction))


def _panorama_placement(
    image_size: tuple[int, int],
    panorama_size: tuple[int, int],
    fit: str,
) -> tuple[float, float, float, float]:
    """(x, y, width, height) of the image inside the panorama."""
    iw, ih = image_size
    pw, ph = panorama_size
    if fit == "fill":
        return 0.0, 0.0, float(pw), float(ph)
    scale = max(pw / iw, ph / ih) if fit == "cover" else min(pw / iw, ph / ih)
    dw, dh = iw * scale, ih * scale
    return (pw - dw) / 2, (ph - dh) / 2, dw, dh


def _paint_image(
    surface: Image.Image,
    image: Image.Image,
    settings: BackgroundImageSettings,
    panel_index: int,
    panel_count: int,
) -> None:
    width, height = surface.size
    source = apply_opacity(image.convert("RGBA"), settings.opacity)

    if settings.fit == "tile":
        # Offset the pattern so tiles continue across panel seams
        start_x = -((panel_index * width) % source.width)
        for y in range(0, height, source.height):
            for x in range(start_x, width, source.width):
                paste_layer(surface, source, x, y)
        return

    x, y, dw, dh = _panorama_placement(source.size, (width * max(1, panel_count), height), settings.fit)
    # Crop the source to the part visible in this panel before resizing
    scale_x, scale_y = source.width / dw, source.height / dh
    left = max(x, panel_index * width)
    right = min(x + dw, (panel_index + 1) * width)
    top = max(y, 0.0)
    bottom = min(y + dh, float(height))
    if right <= left or bottom <= top:
        return
    box = (
        (left - x) * scale_x,
        (top - y) * scale_y,
        (right - x) * scale_x,
        (bottom - y) * scale_y,
    )
    target = (max(1, round(right - left)), max(1, round(bottom - top)))
    piece = source.resize(target, Image.Resampling.LANCZOS, box=box)
    paste_layer(surface, piece, left - panel_index * width, top)


def paint_background(
    surface: Image.Image,
    background: BackgroundSettings,
    panel_index: int = 0,
    panel_count: int = 1,
    image: Image.Image | None = None,
) -> Image.Image:
    """Fill `surface` according to `background`. Returns the surface."""
    if background.type == "gradient":
        _paint_gradient(surface, background.gradient, panel_index, panel_count)
        return surface

    surface.paste(parse_color(background.solid, default=(255, 255, 255, 255)), (0, 0, *surface.size))
    if background.type == "image":
        if image is None:
            logger.warning("Background image %s unavailable, using solid fill", background.image.url)
        else:
            _paint_image(surface, image, background.image, panel_index, panel_count)
    return surface
