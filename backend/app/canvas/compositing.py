"""Layer compositing helpers: rotation about a pivot, opacity, drop shadows, clipping."""

from __future__ import annotations

import math

from PIL import Image, ImageDraw, ImageFilter

from app.canvas.colors import RGBA


def paste_layer(surface: Image.Image, layer: Image.Image, left: float, top: float) -> None:
    """Alpha-composite `layer` onto `surface` at (left, top), clipping to the surface."""
    left, top = int(round(left)), int(round(top))
    sx, sy = max(0, -left), max(0, -top)
    dx, dy = max(0, left), max(0, top)
    w = min(layer.width - sx, surface.width - dx)
    h = min(layer.height - sy, surface.height - dy)
    if w <= 0 or h <= 0:
        return
    surface.alpha_composite(layer, dest=(dx, dy), source=(sx, sy, sx + w, sy + h))


def apply_opacity(layer: Image.Image, opacity: float) -> Image.Image:
    if opacity >= 1:
        return layer
    alpha = layer.getchannel("A").point(lambda a: int(round(a * max(opacity, 0.0))))
    out = layer.copy()
    out.putalpha(alpha)
    return out


def _center_on_pivot(layer: Image.Image, pivot: tuple[float, float]) -> Image.Image:
    """Pad `layer` so that `pivot` (layer coords) lands on the exact centre."""
    px, py = pivot
    half_w = math.ceil(max(px, layer.width - px))
    half_h = math.ceil(max(py, layer.height - py))
    padded = Image.new("RGBA", (max(1, 2 * half_w), max(1, 2 * half_h)), (0, 0, 0, 0))
    padded.paste(layer, (int(round(half_w - px)), int(round(half_h - py))))
    return padded


def composite_rotated(
    surface: Image.Image,
    layer: Image.Image,
    pivot_local: tuple[float, float],
    pivot_canvas: tuple[float, float],
    rotation: float,
    opacity: float = 1.0,
    shadow: tuple[RGBA, float, float, float] | None = None,
) -> None:
    """Draw `layer` so its `pivot_local` point sits on `pivot_canvas`, rotated clockwise.

    `shadow` is (color, blur, offset_x, offset_y).
    """
    layer = apply_opacity(layer, opacity)
    if rotation:
        centered = _center_on_pivot(layer, pivot_local)
        # Pillow rotates counter-clockwise for positive angles
        rotated = centered.rotate(-rotation, resample=Image.Resampling.BICUBIC, expand=True)
        left = pivot_canvas[0] - rotated.width / 2
        top = pivot_canvas[1] - rotated.height / 2
    else:
        rotated = layer
        left = pivot_canvas[0] - pivot_local[0]
        top = pivot_canvas[1] - pivot_local[1]

    if shadow is not None:
        color, blur, offset_x, offset_y = shadow
        if color[3] > 0:
            margin = int(math.ceil(blur)) * 2
            shadow_layer = Image.new("RGBA", (rotated.width + 2 * margin, rotated.height + 2 * margin), color[:3] + (0,))
            alpha = rotated.getchannel("A").point(lambda a: int(a * color[3] / 255))
            mask = Image.new("L", shadow_layer.size, 0)
            mask.paste(alpha, (margin, margin))
            if blur > 0:
                mask = mask.filter(ImageFilter.GaussianBlur(blur / 2))
            shadow_layer.putalpha(mask)
            paste_layer(surface, shadow_layer, left - margin + offset_x, top - margin + offset_y)

    paste_layer(surface, rotated, left, top)


def rounded_mask(size: tuple[int, int], box: tuple[float, float, float, float], radius: float) -> Image.Image:
    """L-mode mask with a filled rounded rectangle."""
    mask = Image.new("L", size, 0)
    x0, y0, x1, y1 = box
    if x1 <= x0 or y1 <= y0:
        return mask
    radius = max(0.0, min(radius, (x1 - x0) / 2, (y1 - y0) / 2))
    ImageDraw.Draw(mask).rounded_rectangle(box, radius=radius, fill=255)
    return mask
