"""Color parsing and arithmetic shared by the background, element and template renderers."""

from __future__ import annotations

import logging
import re

from PIL import ImageColor

logger = logging.getLogger(__name__)

RGBA = tuple[int, int, int, int]
RGB = tuple[int, int, int]

TRANSPARENT: RGBA = (0, 0, 0, 0)

_RGB_RE = re.compile(
    r"^rgba?\(\s*(-?[\d.]+)\s*,\s*(-?[\d.]+)\s*,\s*(-?[\d.]+)\s*(?:,\s*(-?[\d.]+%?)\s*)?\)$",
    re.IGNORECASE,
)


def _clamp(value: float, lo: float, hi: float) -> float:
    return min(max(value, lo), hi)


def _channel(value: float) -> int:
    return int(_clamp(round(value), 0, 255))


def parse_color(value: str | None, default: RGBA = (0, 0, 0, 255)) -> RGBA:
    """Parse hex, rgb()/rgba() or a named color into an RGBA tuple.

    CSS-style rgba() alpha in [0, 1] is supported (Pillow's own parser expects 0..255).
    Unparseable input returns `default`.
    """
    if value is None:
        return default
    text = str(value).strip()
    if not text:
        return default
    if text.lower() == "transparent":
        return TRANSPARENT

    match = _RGB_RE.match(text)
    if match:
        r, g, b, a = match.groups()
        alpha = 1.0
        if a is not None:
            alpha = float(a[:-1]) / 100 if a.endswith("%") else float(a)
        return (_channel(float(r)), _channel(float(g)), _channel(float(b)), _channel(_clamp(alpha, 0.0, 1.0) * 255))

    try:
        rgba = ImageColor.getcolor(text, "RGBA")
    except ValueError:
        logger.debug("Unparseable color %r, using default", value)
        return default
    return rgba  # type: ignore[return-value]


def to_hex(color: RGB | RGBA) -> str:
    r, g, b = color[:3]
    return f"#{_channel(r):02x}{_channel(g):02x}{_channel(b):02x}"


def normalize_hex(value: str | None) -> str | None:
    """Normalize to lowercase #rrggbb, or None when the value is not a color."""
    if not value:
        return None
    rgba = parse_color(value, default=(-1, -1, -1, -1))
    if rgba[0] < 0:
        return None
    return to_hex(rgba)


def interpolate_color(start: str, end: str, factor: float) -> str:
    """Linear per-channel RGB interpolation, factor clamped to [0, 1]."""
    t = _clamp(float(factor), 0.0, 1.0)
    c1 = parse_color(start)
    c2 = parse_color(end)
    return to_hex(tuple(c1[i] + (c2[i] - c1[i]) * t for i in range(3)))  # type: ignore[arg-type]


def lighten(color: str, percent: float) -> str:
    """Blend toward white by `percent` (0-100)."""
    rgba = parse_color(color, default=(-1, -1, -1, -1))
    if rgba[0] < 0:
        return color
    amount = _clamp(percent, 0, 100) / 100
    return to_hex(tuple(c + (255 - c) * amount for c in rgba[:3]))  # type: ignore[arg-type]


def darken(color: str, percent: float) -> str:
    """Blend toward black by `percent` (0-100)."""
    rgba = parse_color(color, default=(-1, -1, -1, -1))
    if rgba[0] < 0:
        return color
    amount = _clamp(percent, 0, 100) / 100
    return to_hex(tuple(c * (1 - amount) for c in rgba[:3]))  # type: ignore[arg-type]


def with_alpha(color: str | None, alpha: float = 1.0) -> RGBA:
    """Multiply a color's own alpha by `alpha`."""
    r, g, b, a = parse_color(color)
    return (r, g, b, _channel(a * _clamp(alpha, 0.0, 1.0)))


def rgba_string(color: str | None, alpha: float = 1.0) -> str:
    r, g, b, a = with_alpha(color, alpha)
    return f"rgba({r}, {g}, {b}, {round(a / 255, 4)})"
