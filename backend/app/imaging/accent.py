"""Accent color extraction: a vivid, non-black/non-white swatch from a screenshot."""

from __future__ import annotations

import logging

import numpy as np
from PIL import Image

from app.canvas.colors import normalize_hex, to_hex

logger = logging.getLogger(__name__)

DEFAULT_ACCENT_COLOR = "#4f46e5"

_PALETTE_SIZE = 16
_SAMPLE_SIZE = (128, 128)
_EXCLUDED = {"#000000", "#ffffff"}
# A swatch counts as vibrant with at least this saturation, away from the extremes of lightness
_VIBRANT_MIN_SATURATION = 0.35
_VIBRANT_LIGHTNESS = (0.2, 0.8)


def _hls(rgb: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Vectorized lightness and saturation (HLS) for an Nx3 array in [0, 1]."""
    cmax = rgb.max(axis=1)
    cmin = rgb.min(axis=1)
    lightness = (cmax + cmin) / 2
    delta = cmax - cmin
    denom = 1 - np.abs(2 * lightness - 1)
    saturation = np.where(denom > 1e-9, delta / np.maximum(denom, 1e-9), 0.0)
    return lightness, np.clip(saturation, 0.0, 1.0)


def extract_accent_color(image: Image.Image | None, default: str = DEFAULT_ACCENT_COLOR) -> str:
    """Pick the most vivid well-represented swatch, else the most common muted one, else `default`."""
    if image is None:
        return default
    try:
        sample = image.convert("RGB")
        sample.thumbnail(_SAMPLE_SIZE)
        quantized = sample.quantize(colors=_PALETTE_SIZE, method=Image.Quantize.MEDIANCUT)
        palette = np.array(quantized.getpalette()[: _PALETTE_SIZE * 3], dtype=np.float64).reshape(-1, 3)
        counts = quantized.getcolors() or []
    except (OSError, ValueError) as e:
        logger.warning("Accent extraction failed, using default: %s", e)
        return default

    if not counts:
        return default
    indices = np.array([idx for _, idx in counts])
    population = np.array([n for n, _ in counts], dtype=np.float64)
    swatches = palette[indices]
    lightness, saturation = _hls(swatches / 255.0)
    share = population / population.sum()

    hexes = [to_hex(tuple(int(c) for c in s)) for s in swatches]
    allowed = np.array([h not in _EXCLUDED for h in hexes])
    vibrant = (
        allowed
        & (saturation >= _VIBRANT_MIN_SATURATION)
        & (lightness > _VIBRANT_LIGHTNESS[0])
        & (lightness < _VIBRANT_LIGHTNESS[1])
    )

    if vibrant.any():
        score = np.where(vibrant, saturation**2 * np.sqrt(share), -1.0)
    elif allowed.any():
        score = np.where(allowed, share, -1.0)
    else:
        return default
    return normalize_hex(hexes[int(np.argmax(score))]) or default
