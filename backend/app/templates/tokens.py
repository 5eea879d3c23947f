"""Token resolution for template colors, positions and per-image overrides."""

from __future__ import annotations

import logging
import re

from pydantic import Field

from app.canvas.colors import darken, lighten, rgba_string
from app.models.base import CamelModel, Position

logger = logging.getLogger(__name__)

# Defaults for accent helper tokens when the argument is missing or unparseable
DEFAULT_LIGHTEN_PERCENT = 45.0
DEFAULT_DARKEN_PERCENT = 25.0
DEFAULT_ALPHA = 0.35

_FUNCTION_RE = re.compile(r"^(accentlighten|accentdarken|accentalpha)\(\s*([^)]*)\s*\)$")


class ColorOverrides(CamelModel):
    heading: str | None = None
    subheading: str | None = None
    background: str | None = None


class TemplateOverrides(CamelModel):
    """Per-image adjustments layered over a template."""

    offsets: dict[str, Position] = Field(default_factory=dict)
    colors: ColorOverrides = Field(default_factory=ColorOverrides)
    theme: str = "accent"

    def offset_for(self, key: str) -> tuple[float, float]:
        offset = self.offsets.get(key)
        return offset.as_tuple() if offset else (0.0, 0.0)


def _parse_argument(raw: str, default: float) -> float:
    try:
        value = float(raw)
    except ValueError:
        return default
    return value or default


def resolve_color_token(
    token: str | None,
    accent_color: str,
    overrides: TemplateOverrides | None = None,
) -> str:
    """Turn a template color value into a concrete CSS color string."""
    if not token:
        return accent_color
    trimmed = str(token).strip()
    if trimmed.startswith("#") or trimmed.lower().startswith("rgb"):
        return trimmed

    lower = trimmed.lower()
    colors = overrides.colors if overrides else ColorOverrides()

    if lower in ("accent", "{{accentcolor}}"):
        return accent_color
    if lower == "{{headingcolor}}":
        return colors.heading or accent_color
    if lower == "{{subheadingcolor}}":
        return colors.subheading or accent_color
    if lower == "{{backgroundcolor}}":
        return colors.background or accent_color

    match = _FUNCTION_RE.match(lower)
    if match:
        name, raw = match.groups()
        if name == "accentlighten":
            return lighten(accent_color, _parse_argument(raw, DEFAULT_LIGHTEN_PERCENT))
        if name == "accentdarken":
            return darken(accent_color, _parse_argument(raw, DEFAULT_DARKEN_PERCENT))
        alpha = min(max(_parse_argument(raw, DEFAULT_ALPHA), 0.0), 1.0)
        return rgba_string(accent_color, alpha)

    return trimmed


def _numeric(value: float | str) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def resolve_position(value: float | str | None, dimension: float) -> float:
    """Ratio in [0, 1], 'NN%' string, or absolute pixels. Missing -> centre."""
    if value is None:
        return dimension / 2
    if isinstance(value, str) and value.strip().endswith("%"):
        percent = _numeric(value.strip()[:-1])
        return dimension / 2 if percent is None else percent / 100 * dimension
    numeric = _numeric(value)
    if numeric is None:
        return dimension / 2
    return numeric * dimension if 0 <= numeric <= 1 else numeric


def resolve_extent(value: float | str | None, dimension: float) -> float:
    """Like resolve_position but for sizes: missing -> full dimension, 0 is absolute."""
    if value is None:
        return dimension
    if isinstance(value, str) and value.strip().endswith("%"):
        percent = _numeric(value.strip()[:-1])
        return dimension if percent is None else percent / 100 * dimension
    numeric = _numeric(value)
    if numeric is None:
        return dimension
    return numeric * dimension if 0 < numeric <= 1 else numeric
