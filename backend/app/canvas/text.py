"""Text measurement, word-wrap and letter-spaced drawing.

Lines are anchored on their alphabetic baseline. The per-line boxes computed
here are what both the renderer draws and hit detection tests against.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from PIL import ImageDraw

from app.canvas.colors import RGBA
from app.utils.geometry import Point, Rect

# Line band used for hit boxes and selection outlines, as fractions of font size
ASCENT_RATIO = 0.8
DESCENT_RATIO = 0.2


class Measurer(Protocol):
    def getlength(self, text: str) -> float: ...


def spaced_width(font: Measurer, text: str, letter_spacing: float = 0.0) -> float:
    """Rendered width of `text` with `letter_spacing` px inserted between characters."""
    if not text:
        return 0.0
    return font.getlength(text) + letter_spacing * (len(text) - 1)


def char_offsets(font: Measurer, text: str, letter_spacing: float = 0.0) -> list[float]:
    """x offset of each character: measured prefix width plus accumulated spacing."""
    return [font.getlength(text[:i]) + i * letter_spacing for i in range(len(text))]


def wrap_text(text: str, font: Measurer, max_width: float, letter_spacing: float = 0.0) -> list[str]:
    """Greedy word-wrap honoring manual line breaks.

    A candidate line is rejected once its spaced width exceeds `max_width`;
    a single word wider than `max_width` still gets its own line, unsplit.
    """
    lines: list[str] = []
    for paragraph in text.split("\n"):
        words = paragraph.split()
        if not words:
            lines.append("")
            continue
        current = words[0]
        for word in words[1:]:
            candidate = f"{current} {word}"
            if spaced_width(font, candidate, letter_spacing) > max_width:
                lines.append(current)
                current = word
            else:
                current = candidate
        lines.append(current)
    return lines


def apply_text_transform(text: str, transform: str | None) -> str:
    if transform == "uppercase":
        return text.upper()
    if transform == "lowercase":
        return text.lower()
    if transform == "capitalize":
        return " ".join(w[:1].upper() + w[1:] for w in text.split(" "))
    return text


def line_left(anchor_x: float, width: float, align: str) -> float:
    if align == "center":
        return anchor_x - width / 2
    if align == "right":
        return anchor_x - width
    return anchor_x


@dataclass(frozen=True)
class LineBox:
    text: str
    x: float
    baseline: float
    width: float


@dataclass(frozen=True)
class TextLayout:
    lines: list[LineBox]
    font_size: float
    line_height: float
    letter_spacing: float
    anchor: Point

    def line_rect(self, line: LineBox, margin: float = 0.0) -> Rect:
        """Band from 0.8 x font size above the baseline to 0.2 x below, plus margin."""
        top = line.baseline - ASCENT_RATIO * self.font_size
        rect = Rect(line.x, top, line.width, (ASCENT_RATIO + DESCENT_RATIO) * self.font_size)
        return rect.expanded(margin) if margin else rect

    def bounds(self) -> Rect:
        """Unrotated union of all line bands."""
        if not self.lines:
            return Rect(self.anchor[0], self.anchor[1], 0.0, 0.0)
        rects = [self.line_rect(line) for line in self.lines]
        x0 = min(r.x for r in rects)
        y0 = min(r.y for r in rects)
        x1 = max(r.right for r in rects)
        y1 = max(r.bottom for r in rects)
        return Rect(x0, y0, x1 - x0, y1 - y0)


def layout_lines(
    lines: list[str],
    font: Measurer,
    anchor: Point,
    font_size: float,
    line_height: float,
    align: str,
    letter_spacing: float = 0.0,
) -> TextLayout:
    """Place wrapped lines: first baseline at anchor y, then one line height apart."""
    boxes = []
    for i, line in enumerate(lines):
        width = spaced_width(font, line, letter_spacing)
        boxes.append(
            LineBox(
                text=line,
                x=line_left(anchor[0], width, align),
                baseline=anchor[1] + i * line_height,
                width=width,
            )
        )
    return TextLayout(
        lines=boxes,
        font_size=font_size,
        line_height=line_height,
        letter_spacing=letter_spacing,
        anchor=anchor,
    )


def draw_text_line(
    draw: ImageDraw.ImageDraw,
    origin: Point,
    text: str,
    font,
    fill: RGBA,
    letter_spacing: float = 0.0,
    anchor: str = "ls",
) -> None:
    """Draw one line starting at origin (left edge, baseline by default).

    With letter spacing each character is drawn at its cumulative prefix
    offset, which keeps kerning between neighbours intact.
    """
    if not text:
        return
    x, y = origin
    if not letter_spacing:
        draw.text((x, y), text, font=font, fill=fill, anchor=anchor)
        return
    for ch, offset in zip(text, char_offsets(font, text, letter_spacing)):
        if not ch.isspace():
            draw.text((x + offset, y), ch, font=font, fill=fill, anchor=anchor)
