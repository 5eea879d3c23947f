"""Headless template renderer.

Draws a template's background and layers for one device. Text wrapping,
letter spacing, mockup composition and gradients come from the same
functions the element renderer uses.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from PIL import Image, ImageDraw

from app.canvas.background import render_gradient
from app.canvas.colors import lighten, parse_color, with_alpha
from app.canvas.compositing import composite_rotated
from app.canvas.context import RenderContext
from app.canvas.mockup import compose_mockup
from app.canvas.presets import DevicePreset, resolve_device_preset
from app.canvas.text import apply_text_transform, draw_text_line, layout_lines, spaced_width, wrap_text
from app.templates.schema import (
    AccentShapeLayer,
    BackgroundSpec,
    BadgeLayer,
    DeviceCanvas,
    MockupLayer,
    ShadowSpec,
    TemplateSchema,
    TextLayer,
)
from app.templates.tokens import TemplateOverrides, resolve_color_token, resolve_extent, resolve_position

logger = logging.getLogger(__name__)

# Used when a template defines no devices we can match
FALLBACK_DEVICE_CANVAS = DeviceCanvas.model_validate(
    {
        "width": 1284,
        "height": 2778,
        "background": {
            "type": "gradient",
            "direction": "vertical",
            "stops": [
                {"offset": 0, "color": "accentLighten(62)"},
                {"offset": 1, "color": "#f8fafc"},
            ],
        },
    }
)

DEFAULT_SHADOW_COLOR = "rgba(15, 15, 15, 0.22)"

# Per text role: (line height, max width ratio, default y)
_TEXT_DEFAULTS = {
    "heading": (1.05, 0.78, 0.2),
    "subheading": (1.2, 0.74, 0.2),
}


@dataclass
class FontChoice:
    family: str
    size: float
    weight: int | str


@dataclass
class TemplateFonts:
    heading: FontChoice = field(default_factory=lambda: FontChoice("Farro", 120, "700"))
    subheading: FontChoice = field(default_factory=lambda: FontChoice("Headland One", 72, "400"))

    def for_role(self, role: str) -> FontChoice:
        return self.heading if role == "heading" else self.subheading


@dataclass
class TemplateRenderInput:
    heading: str
    subheading: str
    accent_color: str
    device: str = "iPhone"
    fonts: TemplateFonts = field(default_factory=TemplateFonts)
    overrides: TemplateOverrides = field(default_factory=TemplateOverrides)
    screenshot: Image.Image | None = None
    frame: Image.Image | None = None


@dataclass
class _DrawState:
    surface: Image.Image
    width: int
    height: int
    preset: DevicePreset
    request: TemplateRenderInput
    context: RenderContext

    def color(self, token: str | None) -> str:
        return resolve_color_token(token, self.request.accent_color, self.request.overrides)

    def shadow(self, spec: ShadowSpec | None) -> tuple | None:
        if spec is None:
            return None
        color = parse_color(self.color(spec.color or DEFAULT_SHADOW_COLOR))
        return (color, spec.blur, spec.offset_x, spec.offset_y)


def _opacity(value: float | None) -> float:
    return 1.0 if value is None else min(max(value, 0.0), 1.0)


def device_definition(schema: TemplateSchema, device: str) -> DeviceCanvas:
    """Pick the device canvas: preset label, raw name, template default, first entry."""
    devices = schema.canvas.devices
    preset = resolve_device_preset(device)
    for key in (preset.legacy_label, device, schema.canvas.default_device):
        if key and key in devices:
            return devices[key]
    if devices:
        return next(iter(devices.values()))
    return FALLBACK_DEVICE_CANVAS


def render_template_background(
    spec: BackgroundSpec | None,
    size: tuple[int, int],
    accent_color: str,
    overrides: TemplateOverrides | None = None,
) -> Image.Image:
    if spec is None:
        return Image.new("RGBA", size, parse_color(lighten(accent_color, 70)))

    if spec.type == "gradient":
        if spec.stops:
            last = max(len(spec.stops) - 1, 1)
            stops = [
                (
                    min(max(stop.offset, 0.0), 1.0) if stop.offset is not None else i / last,
                    parse_color(resolve_color_token(stop.color, accent_color, overrides)),
                )
                for i, stop in enumerate(spec.stops)
            ]
        else:
            stops = [(0.0, parse_color(lighten(accent_color, 65))), (1.0, parse_color("#ffffff"))]
        return render_gradient(size, stops, spec.direction.lower())

    opacity = 1.0 if spec.opacity is None else spec.opacity
    if spec.type == "solid":
        color = resolve_color_token(spec.color, accent_color, overrides)
    else:
        color = resolve_color_token(spec.color, accent_color, overrides) if spec.color else lighten(accent_color, 70)
    return Image.new("RGBA", size, with_alpha(color, opacity))


def _render_text_layer(state: _DrawState, layer: TextLayer, text: str) -> None:
    if not text:
        return
    role = layer.type
    default_line_height, default_ratio, default_y = _TEXT_DEFAULTS[role]
    choice = state.request.fonts.for_role(role)
    font_spec = layer.font
    family = _font_family(font_spec.family, state.request.fonts, choice)
    size = font_spec.size or choice.size
    weight = font_spec.weight or choice.weight or "700"
    font = state.context.fonts.get(family, weight, size)

    ratio = min(max(layer.max_width_ratio or default_ratio, 0.1), 1.0)
    max_width = state.width * ratio
    offset_x, offset_y = state.request.overrides.offset_for(role)
    x = resolve_position(layer.position.x if layer.position.x is not None else 0.5, state.width) + offset_x
    y = resolve_position(layer.position.y if layer.position.y is not None else default_y, state.height) + offset_y

    content = apply_text_transform(text, font_spec.transform)
    lines = wrap_text(content, font, max_width, font_spec.letter_spacing)
    line_height = size * (layer.line_height or default_line_height)
    total_height = len(lines) * line_height
    if layer.vertical_align == "middle":
        y = y - total_height / 2 + line_height / 2
    elif layer.vertical_align == "bottom":
        y = y - total_height + line_height

    layout = layout_lines(lines, font, (x, y), size, line_height, layer.text_align, font_spec.letter_spacing)
    fill = with_alpha(state.color(layer.color), _opacity(layer.opacity))
    overlay = Image.new("RGBA", state.surface.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)
    for line in layout.lines:
        draw_text_line(draw, (line.x, line.baseline), line.text, font, fill, layout.letter_spacing)
    composite_rotated(state.surface, overlay, (0, 0), (0, 0), 0.0, shadow=state.shadow(layer.shadow))


def _font_family(family: str | None, fonts: TemplateFonts, fallback: FontChoice) -> str:
    if not family:
        return fallback.family
    if family == "{{headingFont}}":
        return fonts.heading.family
    if family == "{{subheadingFont}}":
        return fonts.subheading.family
    return family


def _render_accent_shape(state: _DrawState, layer: AccentShapeLayer) -> None:
    width = resolve_extent(layer.size.width_ratio if layer.size.width_ratio is not None else 0.6, state.width)
    height = resolve_extent(layer.size.height_ratio if layer.size.height_ratio is not None else 0.4, state.height)
    x = resolve_position(layer.position.x if layer.position.x is not None else 0.5, state.width)
    y = resolve_position(layer.position.y if layer.position.y is not None else 0.6, state.height)

    w, h = max(1, round(width)), max(1, round(height))
    shape = Image.new("RGBA", (w, h), (0, 0, 0, 0))
    draw = ImageDraw.Draw(shape)
    fill = parse_color(state.color(layer.color))
    if layer.shape == "circle":
        d = min(w, h)
        left, top = (w - d) / 2, (h - d) / 2
        draw.ellipse((left, top, left + d - 1, top + d - 1), fill=fill)
    elif layer.shape == "capsule":
        draw.rounded_rectangle((0, 0, w - 1, h - 1), radius=h / 2, fill=fill)
    else:
        radius = (layer.corner_radius_ratio or 0.18) * min(w, h)
        draw.rounded_rectangle((0, 0, w - 1, h - 1), radius=min(radius, min(w, h) / 2), fill=fill)

    composite_rotated(
        state.surface,
        shape,
        (w / 2, h / 2),
        (x, y),
        layer.rotation,
        opacity=_opacity(layer.opacity),
        shadow=state.shadow(layer.shadow),
    )


def _render_badge(state: _DrawState, layer: BadgeLayer) -> None:
    if not layer.text:
        return
    choice = state.request.fonts.subheading
    family = _font_family(layer.font.family, state.request.fonts, choice)
    size = layer.font.size or 32
    weight = layer.font.weight or "600"
    font = state.context.fonts.get(family, weight, size)
    spacing = layer.font.letter_spacing

    x = resolve_position(layer.position.x if layer.position.x is not None else 0.5, state.width)
    y = resolve_position(layer.position.y if layer.position.y is not None else 0.4, state.height)
    text_width = spaced_width(font, layer.text, spacing)
    badge_w = text_width + 2 * layer.padding.x
    badge_h = size + 2 * layer.padding.y
    radius = badge_h / 2 if layer.border_radius is None else layer.border_radius

    w, h = max(1, math.ceil(badge_w)), max(1, math.ceil(badge_h))
    badge = Image.new("RGBA", (w, h), (0, 0, 0, 0))
    draw = ImageDraw.Draw(badge)
    background = parse_color(state.color(layer.background_color or "accentLighten(52)"))
    draw.rounded_rectangle((0, 0, w - 1, h - 1), radius=max(0.0, min(radius, h / 2, w / 2)), fill=background)
    text_color = parse_color(state.color(layer.color or "#0f172a"))
    draw_text_line(draw, ((w - text_width) / 2, h / 2), layer.text, font, text_color, spacing, anchor="lm")

    composite_rotated(
        state.surface,
        badge,
        (w / 2, h / 2),
        (x, y),
        layer.rotation,
        opacity=_opacity(layer.opacity),
        shadow=state.shadow(layer.shadow),
    )


def _render_mockup_layer(state: _DrawState, layer: MockupLayer) -> None:
    geometry = state.preset.mockup
    mockup = compose_mockup(
        state.request.screenshot,
        state.request.frame,
        geometry.base_width,
        geometry.base_height,
        geometry.inner_padding,
        geometry.corner_radius,
    )
    desired = layer.size.scale or 0.9
    max_width = state.width * layer.size.max_width_ratio if layer.size.max_width_ratio else state.width
    max_height = state.height * layer.size.max_height_ratio if layer.size.max_height_ratio else state.height
    limiting = min(1.0, max_width / (mockup.width * desired), max_height / (mockup.height * desired))
    final_scale = desired * limiting

    size = (max(1, round(mockup.width * final_scale)), max(1, round(mockup.height * final_scale)))
    scaled = mockup.resize(size, Image.Resampling.LANCZOS)

    offset_x, offset_y = state.request.overrides.offset_for("mockup")
    x = resolve_position(layer.position.x if layer.position.x is not None else 0.5, state.width) + offset_x
    y = resolve_position(layer.position.y if layer.position.y is not None else 0.65, state.height) + offset_y
    composite_rotated(
        state.surface,
        scaled,
        (size[0] / 2, size[1] / 2),
        (x, y),
        layer.rotation,
        opacity=_opacity(layer.opacity),
        shadow=state.shadow(layer.shadow),
    )


def render_template(
    schema: TemplateSchema,
    request: TemplateRenderInput,
    context: RenderContext | None = None,
) -> Image.Image:
    """Render `schema` for `request.device`. Layer failures are logged and skipped."""
    context = context or RenderContext()
    canvas = device_definition(schema, request.device)
    size = (canvas.width, canvas.height)
    background = canvas.background or schema.canvas.background
    surface = render_template_background(background, size, request.accent_color, request.overrides)

    state = _DrawState(
        surface=surface,
        width=canvas.width,
        height=canvas.height,
        preset=resolve_device_preset(request.device),
        request=request,
        context=context,
    )

    for index, layer in enumerate(schema.layers):
        key = layer.id or f"layer-{index}-{layer.type}"
        try:
            if isinstance(layer, TextLayer):
                text = request.heading if layer.type == "heading" else request.subheading
                _render_text_layer(state, layer, text)
            elif isinstance(layer, AccentShapeLayer):
                _render_accent_shape(state, layer)
            elif isinstance(layer, BadgeLayer):
                _render_badge(state, layer)
            elif isinstance(layer, MockupLayer):
                _render_mockup_layer(state, layer)
            else:
                raise TypeError(f"Unsupported layer type: {type(layer).__name__}")
        except Exception as e:
            context.record_error(key, e)

    logger.info("Rendered template %s for %s (%d layers)", schema.id or "<inline>", request.device, len(schema.layers))
    return surface
