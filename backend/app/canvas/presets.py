"""Device preset registry.

Every preset is derived from one ratio template measured on a 1242x2688
reference canvas, so text and mockup geometry stay proportional across
devices. Presets are built once at import and never mutated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

# Reference canvas the ratios below were measured on
_BASE_WIDTH = 1242
_BASE_HEIGHT = 2688

_HEADING_X_RATIO = 0.49749962
_HEADING_Y_RATIO = 0.10586081
_SUBHEADING_X_RATIO = 0.51107036
_SUBHEADING_Y_RATIO = 0.24385017
_TEXT_WIDTH_RATIO = 0.90016103

_MOCKUP_OFFSET_X_RATIO = 0.00846561
_MOCKUP_OFFSET_Y_RATIO = 0.16438874
_MOCKUP_BASE_WIDTH_RATIO = 0.58333333
_MOCKUP_BASE_HEIGHT_RATIO = 0.53846154
# Fractions of the mockup base width
_MOCKUP_INNER_PADDING_RATIO = 0.02760524
_MOCKUP_CORNER_RADIUS_RATIO = 0.07591442

_DEFAULT_MOCKUP_SCALE = 1.2
# Stored font sizes are in logical units; 1 unit = canvas width / 365 px
_FONT_SCALE_DIVISOR = 365


@dataclass(frozen=True)
class MockupGeometry:
    base_width: float
    base_height: float
    default_scale: float
    offset_x: float
    offset_y: float
    inner_padding: float
    corner_radius: float


@dataclass(frozen=True)
class DevicePreset:
    id: str
    label: str
    legacy_label: str
    width: int
    height: int
    font_scale_multiplier: float
    default_text_width: int
    mockup: MockupGeometry
    heading_position: tuple[float, float]
    subheading_position: tuple[float, float]
    frame_asset: str
    aliases: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class CanvasMetrics:
    """Canvas dimensions and text scaling for one resolved preset."""

    width: int
    height: int
    font_scale_multiplier: float
    default_text_width: int
    preset: DevicePreset

    @classmethod
    def from_preset(cls, preset: DevicePreset) -> CanvasMetrics:
        return cls(
            width=preset.width,
            height=preset.height,
            font_scale_multiplier=preset.font_scale_multiplier,
            default_text_width=preset.default_text_width,
            preset=preset,
        )


def _build_preset(
    *,
    id: str,
    label: str,
    legacy_label: str,
    width: int,
    height: int,
    frame_asset: str,
    aliases: tuple[str, ...],
    default_scale: float = _DEFAULT_MOCKUP_SCALE,
    inner_padding_multiplier: float = 1.0,
    corner_radius_multiplier: float = 1.0,
) -> DevicePreset:
    base_width = width * _MOCKUP_BASE_WIDTH_RATIO
    base_height = height * _MOCKUP_BASE_HEIGHT_RATIO
    mockup = MockupGeometry(
        base_width=base_width,
        base_height=base_height,
        default_scale=default_scale,
        offset_x=width * _MOCKUP_OFFSET_X_RATIO,
        offset_y=height * _MOCKUP_OFFSET_Y_RATIO,
        inner_padding=base_width * _MOCKUP_INNER_PADDING_RATIO * inner_padding_multiplier,
        corner_radius=base_width * _MOCKUP_CORNER_RADIUS_RATIO * corner_radius_multiplier,
    )
    return DevicePreset(
        id=id,
        label=label,
        legacy_label=legacy_label,
        width=width,
        height=height,
        font_scale_multiplier=width / _FONT_SCALE_DIVISOR,
        default_text_width=round(width * _TEXT_WIDTH_RATIO),
        mockup=mockup,
        heading_position=(width * _HEADING_X_RATIO, height * _HEADING_Y_RATIO),
        subheading_position=(width * _SUBHEADING_X_RATIO, height * _SUBHEADING_Y_RATIO),
        frame_asset=frame_asset,
        aliases=aliases,
    )


IPHONE_15_PRO = _build_preset(
    id="iphone-15-pro",
    label="iPhone 15 Pro",
    legacy_label="iPhone",
    width=_BASE_WIDTH,
    height=_BASE_HEIGHT,
    frame_asset="iphone_15_frame.png",
    aliases=(
        "iphone",
        "iphone 15",
        "iphone 15 pro",
        "iphone-15",
        "iphone-15-pro",
        "iphone15",
        "iphone15pro",
        "iphone 14 pro",
        "iphone-14-pro",
    ),
)

IPAD_PRO_13 = _build_preset(
    id="ipad-pro-13",
    label="iPad Pro 13",
    legacy_label="iPad",
    width=2048,
    height=2732,
    frame_asset="ipad_pro_13_frame.png",
    aliases=(
        "ipad",
        "ipad pro",
        "ipad pro 13",
        "ipad pro 12.9",
        "ipad 12.9",
        "ipad-pro-13",
        "ipad13",
        "ipad pro 11",
        "ipad-pro-11",
        "ipad 11",
        'ipad pro 13"',
        'ipad pro 11"',
    ),
    default_scale=1.0,
    inner_padding_multiplier=1.70,
    corner_radius_multiplier=0.1,
)

DEFAULT_PRESET = IPHONE_15_PRO

_PRESETS: tuple[DevicePreset, ...] = (IPHONE_15_PRO, IPAD_PRO_13)


def _build_alias_table(presets: tuple[DevicePreset, ...]) -> dict[str, DevicePreset]:
    table: dict[str, DevicePreset] = {}
    for preset in presets:
        for key in (preset.id, preset.label, preset.legacy_label, *preset.aliases):
            table[key.strip().lower()] = preset
    return table


_ALIASES = _build_alias_table(_PRESETS)


def resolve_device_preset(device: str | None) -> DevicePreset:
    """Resolve any device string to a preset. Never fails."""
    if not device:
        return DEFAULT_PRESET
    normalized = str(device).strip().lower()
    if not normalized:
        return DEFAULT_PRESET
    preset = _ALIASES.get(normalized)
    if preset is not None:
        return preset
    if "ipad" in normalized:
        return IPAD_PRO_13
    logger.debug("Unknown device %r, using %s", device, DEFAULT_PRESET.id)
    return DEFAULT_PRESET


def list_device_presets() -> list[DevicePreset]:
    return list(_PRESETS)


def is_ipad_preset(preset: DevicePreset) -> bool:
    return preset.id == IPAD_PRO_13.id


def get_canvas_metrics(device: str | DevicePreset | None) -> CanvasMetrics:
    preset = device if isinstance(device, DevicePreset) else resolve_device_preset(device)
    return CanvasMetrics.from_preset(preset)
