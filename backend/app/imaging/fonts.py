"""Font lookup for text measurement and drawing.

Fonts live in `<fonts_dir>/<family directory>/`, one file per weight. A missing
family or weight is logged once and replaced by Pillow's built-in scalable font,
so rendering never fails on a font.
"""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path

from PIL import ImageFont

logger = logging.getLogger(__name__)

# Family name -> directory name under the fonts dir
FONT_DIRECTORIES: dict[str, str] = {
    "Farro": "Farro",
    "Headland One": "Headland One",
    "Inter": "Inter",
    "Lato": "Lato",
    "Montserrat": "Montserrat",
    "Nexa": "Nexa-Font-Family",
    "Open Sans": "Open_Sans",
    "Roboto": "Roboto",
}

_FONT_SUFFIXES = (".ttf", ".otf")

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


def interpret_weight(weight: int | str | None) -> str:
    """Collapse a CSS weight to the two faces we ship: 'bold' or 'regular'."""
    if weight is None or weight == "":
        return "regular"
    if isinstance(weight, (int, float)):
        return "bold" if weight >= 600 else "regular"
    normalized = str(weight).strip().lower()
    if "bold" in normalized or normalized in {"600", "700", "800", "900"}:
        return "bold"
    return "regular"


def find_font_file(font_dir: Path, family: str, weight: str) -> Path | None:
    if not font_dir.is_dir():
        return None
    files = sorted(p.name for p in font_dir.iterdir() if p.suffix.lower() in _FONT_SUFFIXES)
    compact = re.escape(family.lower().replace(" ", ""))
    patterns = [
        re.compile(rf"^{compact}[-_]?{weight}.*\.(ttf|otf)$", re.IGNORECASE),
        re.compile(rf"^{compact}.*{weight}.*\.(ttf|otf)$", re.IGNORECASE),
    ]
    for pattern in patterns:
        for name in files:
            if pattern.match(name):
                return font_dir / name

    def _first(word: str) -> str | None:
        return next(
            (n for n in files if re.search(word, n, re.IGNORECASE) and not re.search("italic", n, re.IGNORECASE)),
            None,
        )

    fallback = (_first("bold") if weight == "bold" else None) or _first("regular") or _first("book")
    if fallback is None and files:
        fallback = files[0]
    return font_dir / fallback if fallback else None


class FontRegistry:
    """Resolves (family, weight, size) to a Pillow font. One instance per render session."""

    def __init__(self, fonts_dir: Path | None = None) -> None:
        self._fonts_dir = fonts_dir
        self._paths: dict[tuple[str, str], Path | None] = {}
        self._fonts: dict[tuple[Path | None, int], Font] = {}

    def resolve_path(self, family: str, weight: int | str | None = None) -> Path | None:
        face = interpret_weight(weight)
        key = (family.lower(), face)
        if key in self._paths:
            return self._paths[key]
        path = None
        if self._fonts_dir is not None:
            directory = self._fonts_dir / FONT_DIRECTORIES.get(family, family)
            path = find_font_file(directory, family, face)
        if path is None:
            logger.warning("Font %s (%s) not found, falling back to default font", family, face)
        self._paths[key] = path
        return path

    async def ensure(self, family: str, weight: int | str | None = None) -> Path | None:
        """Resolve a font file off the event loop before any measurement happens."""
        return await asyncio.to_thread(self.resolve_path, family, weight)

    def get(self, family: str, weight: int | str | None, size: float) -> Font:
        pixel_size = max(1, round(size))
        path = self.resolve_path(family, weight)
        key = (path, pixel_size)
        font = self._fonts.get(key)
        if font is not None:
            return font
        if path is not None:
            try:
                font = ImageFont.truetype(str(path), pixel_size)
            except OSError as e:
                logger.warning("Failed to load font %s: %s", path, e)
        if font is None:
            font = ImageFont.load_default(size=pixel_size)
        self._fonts[key] = font
        return font
