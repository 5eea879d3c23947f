"""Conversion between the legacy flat per-image configuration and the element model.

Both directions are total: missing or malformed legacy fields are replaced by
fixed defaults and nothing here raises on bad input.

Legacy fields may sit at the top level of the record or under
`image.configuration`; top-level values win. Positions may be given either as
`headingPosition: {x, y}` or as `headingX` / `headingY`.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from app.canvas.presets import resolve_device_preset
from app.models.base import Position
from app.models.elements import (
    CanvasElement,
    MockupElement,
    ScreenshotState,
    TextElement,
    VisualElement,
    clamp_scale,
    generate_element_id,
)
from app.models.settings import (
    BackgroundImageSettings,
    BackgroundSettings,
    GlobalSettings,
    GradientSettings,
    direction_from_angle,
)

logger = logging.getLogger(__name__)

DEFAULT_FONT_FAMILY = "Inter"
DEFAULT_TEXT_COLOR = "#ffffff"
DEFAULT_LINE_HEIGHT = 1.2
DEFAULT_THEME = "default"

# Sizes written when a text element is absent on encode
ENCODE_HEADING_FONT_SIZE = 64.0
ENCODE_SUBHEADING_FONT_SIZE = 32.0
# Sizes used when the legacy record has none on decode
DECODE_HEADING_FONT_SIZE = 32.0
DECODE_SUBHEADING_FONT_SIZE = 24.0

DEFAULT_HEADING_POSITION = (100.0, 100.0)
DEFAULT_SUBHEADING_POSITION = (100.0, 200.0)
DEFAULT_VISUAL_POSITION = (600.0, 1300.0)
DEFAULT_VISUAL_SIZE = 300.0
# Mockups at or below this scale were hidden in the legacy editor
MIN_VISIBLE_MOCKUP_SCALE = 0.01

_ALIGNMENTS = ("left", "center", "right")
_FITS = ("cover", "contain", "fill", "tile")
_BACKGROUND_TYPES = ("solid", "gradient", "image")


# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------

def _number(value: Any, default: float) -> float:
    if isinstance(value, bool):
        return default
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return default
    return numeric if math.isfinite(numeric) else default


def _text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return value if isinstance(value, str) else str(value)


def _choice(value: Any, options: tuple[str, ...], default: str) -> str:
    return value if isinstance(value, str) and value in options else default


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _position(fields: Mapping[str, Any], prefix: str, default: tuple[float, float]) -> tuple[float, float]:
    nested = _mapping(fields.get(f"{prefix}Position"))
    x = nested.get("x", fields.get(f"{prefix}X"))
    y = nested.get("y", fields.get(f"{prefix}Y"))
    return (_number(x, default[0]), _number(y, default[1]))


def _merged_fields(legacy: Any) -> dict[str, Any]:
    record = _mapping(legacy)
    image = _mapping(record.get("image"))
    fields: dict[str, Any] = dict(_mapping(image.get("configuration")))
    fields.update(record)
    if "sourceScreenshotUrl" not in fields and image.get("sourceScreenshotUrl"):
        fields["sourceScreenshotUrl"] = image["sourceScreenshotUrl"]
    return fields


# ---------------------------------------------------------------------------
# Decode
# ---------------------------------------------------------------------------

def _decode_text(fields: Mapping[str, Any], role: str, z_index: int, default_position: tuple[float, float]) -> TextElement | None:
    text = _text(fields.get(role))
    if not text.strip():
        return None
    is_heading = role == "heading"
    family = _text(
        fields.get(f"{role}Font") or fields.get("fontFamily") or fields.get("headingFont"),
        DEFAULT_FONT_FAMILY,
    )
    x, y = _position(fields, role, default_position)
    return TextElement(
        id=f"text-{role}",
        role=role,
        text=text,
        position=Position(x=x, y=y),
        font_family=family or DEFAULT_FONT_FAMILY,
        font_size=_number(
            fields.get(f"{role}FontSize"),
            DECODE_HEADING_FONT_SIZE if is_heading else DECODE_SUBHEADING_FONT_SIZE,
        ),
        font_weight=700 if is_heading else 400,
        is_bold=is_heading,
        color=_text(fields.get(f"{role}Color"), DEFAULT_TEXT_COLOR) or DEFAULT_TEXT_COLOR,
        align=_choice(fields.get(f"{role}Align"), _ALIGNMENTS, "left"),
        letter_spacing=_number(fields.get(f"{role}LetterSpacing"), 0.0),
        line_height=_number(fields.get(f"{role}LineHeight"), DEFAULT_LINE_HEIGHT) or DEFAULT_LINE_HEIGHT,
        width=_number(fields.get(f"{role}Width"), 0.0) or None,
        z_index=z_index,
    )


def _decode_visual(raw: Any, index: int, z_index: int) -> VisualElement | None:
    data = _mapping(raw)
    url = _text(data.get("imageUrl"))
    if not url:
        logger.debug("Skipping legacy visual %d without imageUrl", index)
        return None
    position = _mapping(data.get("position"))
    raw_id = _text(data.get("id"))
    return VisualElement(
        id=f"visual-{raw_id}" if raw_id else f"visual-legacy-{index}",
        image_url=url,
        name=_text(data.get("name"), "Visual") or "Visual",
        width=_number(data.get("width"), DEFAULT_VISUAL_SIZE) or DEFAULT_VISUAL_SIZE,
        height=_number(data.get("height"), DEFAULT_VISUAL_SIZE) or DEFAULT_VISUAL_SIZE,
        position=Position(
            x=_number(position.get("x"), DEFAULT_VISUAL_POSITION[0]),
            y=_number(position.get("y"), DEFAULT_VISUAL_POSITION[1]),
        ),
        scale=clamp_scale(_number(data.get("scale"), 1.0) or 1.0),
        rotation=_number(data.get("rotation"), 0.0),
        opacity=_number(data.get("opacity"), 1.0),
        z_index=int(_number(data.get("zIndex"), z_index)),
    )


def decode(legacy: Any) -> ScreenshotState:
    """Legacy flat configuration -> ScreenshotState."""
    fields = _merged_fields(legacy)
    preset = resolve_device_preset(_text(fields.get("deviceFrame")) or None)
    source_url = _text(fields.get("sourceScreenshotUrl"))
    elements: list[CanvasElement] = []
    z_index = 0

    mockup_scale = _number(fields.get("mockupScale"), preset.mockup.default_scale)
    if mockup_scale > MIN_VISIBLE_MOCKUP_SCALE:
        x, y = _position(fields, "mockup", (0.0, 0.0))
        elements.append(
            MockupElement(
                id="mockup-primary",
                screenshot_url=source_url,
                frame=preset.id,
                position=Position(x=x, y=y),
                scale=clamp_scale(mockup_scale),
                rotation=_number(fields.get("mockupRotation"), 0.0),
                z_index=z_index,
            )
        )
        z_index += 1

    for role, default_position in (
        ("heading", preset.heading_position),
        ("subheading", preset.subheading_position),
    ):
        element = _decode_text(fields, role, z_index, default_position)
        if element is not None:
            elements.append(element)
            z_index += 1

    raw_visuals = fields.get("visuals")
    for index, raw in enumerate(raw_visuals if isinstance(raw_visuals, list) else []):
        visual = _decode_visual(raw, index, z_index)
        if visual is None:
            continue
        if any(e.id == visual.id for e in elements):
            visual.id = generate_element_id("visual")
        elements.append(visual)
        z_index = max(z_index, visual.z_index) + 1

    font_family = _text(fields.get("fontFamily") or fields.get("headingFont"), DEFAULT_FONT_FAMILY)
    return ScreenshotState(
        id=_text(fields.get("id"), "screenshot") or "screenshot",
        source_screenshot_url=source_url,
        elements=elements,
        theme=_text(fields.get("theme"), DEFAULT_THEME) or DEFAULT_THEME,
        font_family=font_family or DEFAULT_FONT_FAMILY,
    )


def decode_global_settings(legacy: Any) -> GlobalSettings:
    """Legacy background/frame fields -> GlobalSettings."""
    fields = _merged_fields(legacy)
    defaults = GlobalSettings()

    gradient_raw = _mapping(fields.get("backgroundGradient"))
    gradient = GradientSettings(
        start_color=_text(gradient_raw.get("startColor"), defaults.background.gradient.start_color),
        end_color=_text(gradient_raw.get("endColor"), defaults.background.gradient.end_color),
        direction=direction_from_angle(_number(gradient_raw.get("angle"), defaults.background.gradient.angle)),
    )
    image_raw = _mapping(fields.get("backgroundImage"))
    image = BackgroundImageSettings(
        url=_text(image_raw.get("url")) or None,
        fit=_choice(image_raw.get("fit"), _FITS, "cover"),
        opacity=_number(image_raw.get("opacity"), 1.0),
    )
    solid = fields.get("backgroundSolid") or fields.get("backgroundColor")
    try:
        background = BackgroundSettings(
            type=_choice(fields.get("backgroundType"), _BACKGROUND_TYPES, defaults.background.type),
            solid=_text(solid, defaults.background.solid) or defaults.background.solid,
            gradient=gradient,
            image=image,
        )
    except ValidationError as e:
        logger.warning("Malformed legacy background, using defaults: %s", e)
        background = defaults.background

    show_frame = fields.get("showDeviceFrame")
    return GlobalSettings(
        background=background,
        device_frame=resolve_device_preset(_text(fields.get("deviceFrame")) or None).id,
        show_device_frame=show_frame if isinstance(show_frame, bool) else True,
    )


# ---------------------------------------------------------------------------
# Encode
# ---------------------------------------------------------------------------

def _pick_text(elements: list[CanvasElement], role: str) -> TextElement | None:
    texts = [e for e in elements if isinstance(e, TextElement)]
    tagged = next((e for e in texts if e.role == role), None)
    if tagged is not None:
        return tagged
    want_bold = role == "heading"
    return next((e for e in texts if e.role is None and e.is_bold == want_bold), None)


def _encode_text(element: TextElement | None, role: str) -> dict[str, Any]:
    default_size = ENCODE_HEADING_FONT_SIZE if role == "heading" else ENCODE_SUBHEADING_FONT_SIZE
    default_position = DEFAULT_HEADING_POSITION if role == "heading" else DEFAULT_SUBHEADING_POSITION
    if element is None:
        return {
            role: "",
            f"{role}FontSize": default_size,
            f"{role}Color": DEFAULT_TEXT_COLOR,
            f"{role}Align": "left",
            f"{role}LetterSpacing": 0.0,
            f"{role}LineHeight": DEFAULT_LINE_HEIGHT,
            f"{role}X": default_position[0],
            f"{role}Y": default_position[1],
        }
    out: dict[str, Any] = {
        role: element.text,
        f"{role}Font": element.font_family,
        f"{role}FontSize": element.font_size,
        f"{role}Color": element.color,
        f"{role}Align": element.align,
        f"{role}LetterSpacing": element.letter_spacing,
        f"{role}LineHeight": element.line_height,
        f"{role}X": element.position.x,
        f"{role}Y": element.position.y,
    }
    if element.width is not None:
        out[f"{role}Width"] = element.width
    return out


def encode(state: ScreenshotState, settings: GlobalSettings) -> dict[str, Any]:
    """ScreenshotState + GlobalSettings -> legacy flat configuration record."""
    heading = _pick_text(state.elements, "heading")
    subheading = _pick_text(state.elements, "subheading")
    mockup = next((e for e in state.elements if isinstance(e, MockupElement)), None)
    visuals = [e for e in state.elements if isinstance(e, VisualElement)]

    configuration: dict[str, Any] = {}
    configuration.update(_encode_text(heading, "heading"))
    configuration.update(_encode_text(subheading, "subheading"))
    configuration["fontFamily"] = heading.font_family if heading else state.font_family
    configuration["headingFont"] = configuration["fontFamily"]
    configuration.update(
        {
            "mockupX": mockup.position.x if mockup else 0.0,
            "mockupY": mockup.position.y if mockup else 0.0,
            "mockupScale": mockup.scale if mockup else 0.0,
            "mockupRotation": mockup.rotation if mockup else 0.0,
            "theme": state.theme,
            "visuals": [
                {
                    "id": v.id.removeprefix("visual-"),
                    "imageUrl": v.image_url,
                    "name": v.name,
                    "width": v.width,
                    "height": v.height,
                    "position": {"x": v.position.x, "y": v.position.y},
                    "scale": v.scale,
                    "rotation": v.rotation,
                    "opacity": v.opacity,
                    "zIndex": v.z_index,
                }
                for v in visuals
            ],
            "backgroundType": settings.background.type,
            "backgroundSolid": settings.background.solid,
            "backgroundGradient": {
                "startColor": settings.background.gradient.start_color,
                "endColor": settings.background.gradient.end_color,
                "angle": settings.background.gradient.angle,
            },
            "backgroundImage": {
                "url": settings.background.image.url,
                "fit": settings.background.image.fit,
                "opacity": settings.background.image.opacity,
            },
            "deviceFrame": settings.device_frame,
            "showDeviceFrame": settings.show_device_frame,
        }
    )
    return {
        "id": state.id,
        "image": {
            "sourceScreenshotUrl": state.source_screenshot_url,
            "configuration": configuration,
        },
    }
