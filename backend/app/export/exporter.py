"""Headless export: the authoritative path from a panel (or template) to image bytes.

Image and font loading happens up front on the event loop; the Pillow work
then runs in a worker thread so several panels can export concurrently.
"""

from __future__ import annotations

import asyncio
import io
import logging
import time
from dataclasses import dataclass, field
from typing import Any

from PIL import Image

from app.canvas.background import paint_background
from app.canvas.context import RenderContext
from app.canvas.presets import CanvasMetrics, DevicePreset, get_canvas_metrics, resolve_device_preset
from app.canvas.renderer import render_all
from app.config import settings as app_settings
from app.imaging.accent import extract_accent_color
from app.migration.legacy import decode, decode_global_settings
from app.models.elements import ScreenshotState
from app.models.settings import GlobalSettings
from app.templates.renderer import TemplateRenderInput, render_template
from app.templates.schema import TemplateSchema

logger = logging.getLogger(__name__)

MIN_QUALITY = 0.2
MAX_QUALITY = 0.95
DEFAULT_QUALITY = 0.55
JPEG_BACKGROUND = (255, 255, 255)

_MEDIA_TYPES = {"png": "image/png", "jpeg": "image/jpeg"}


@dataclass
class ExportResult:
    data: bytes
    media_type: str
    width: int
    height: int
    # Element or layer id -> failure message, for anything that was skipped
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def extension(self) -> str:
        return "jpg" if self.media_type == "image/jpeg" else "png"


def clamp_quality(quality: float | None) -> float:
    if quality is None:
        return DEFAULT_QUALITY
    return min(max(float(quality), MIN_QUALITY), MAX_QUALITY)


def normalize_format(fmt: str | None) -> str:
    value = (fmt or "png").lower()
    if value == "jpg":
        value = "jpeg"
    if value not in _MEDIA_TYPES:
        raise ValueError(f"Unsupported export format: {fmt}")
    return value


def encode_image(image: Image.Image, fmt: str = "png", quality: float | None = None) -> tuple[bytes, str]:
    """Encode `image` as PNG or JPEG. JPEG output is flattened onto white."""
    fmt = normalize_format(fmt)
    buffer = io.BytesIO()
    if fmt == "jpeg":
        flat = Image.new("RGB", image.size, JPEG_BACKGROUND)
        rgba = image.convert("RGBA")
        flat.paste(rgba, mask=rgba.getchannel("A"))
        flat.save(buffer, format="JPEG", quality=round(clamp_quality(quality) * 100))
    else:
        image.save(buffer, format="PNG")
    return buffer.getvalue(), _MEDIA_TYPES[fmt]


def compose_screenshot(
    state: ScreenshotState,
    global_settings: GlobalSettings,
    metrics: CanvasMetrics,
    context: RenderContext,
    frame_image: Image.Image | None = None,
    panel_index: int = 0,
    panel_count: int = 1,
) -> Image.Image:
    """Paint background then elements. Every image must already be in `context`."""
    surface = Image.new("RGBA", (metrics.width, metrics.height), (0, 0, 0, 0))
    background = global_settings.background
    background_image = context.images.peek(background.image.url) if background.type == "image" else None
    paint_background(surface, background, panel_index, panel_count, background_image)
    screenshot = context.images.peek(state.source_screenshot_url)
    frame = frame_image if global_settings.show_device_frame else None
    return render_all(surface, state.elements, screenshot, frame, metrics, context)


async def load_frame(preset: DevicePreset, context: RenderContext) -> Image.Image | None:
    """Device frame overlay for `preset`, or None when the asset is missing."""
    path = app_settings.frames_dir / preset.frame_asset
    return await context.images.get(str(path))


async def export_screenshot(
    state: ScreenshotState,
    global_settings: GlobalSettings,
    context: RenderContext,
    fmt: str = "png",
    quality: float | None = None,
    panel_index: int = 0,
    panel_count: int = 1,
) -> ExportResult:
    start = time.perf_counter()
    preset = resolve_device_preset(global_settings.device_frame)
    metrics = get_canvas_metrics(preset)
    background = global_settings.background
    await context.prepare(
        state.elements,
        extra_urls=[
            state.source_screenshot_url,
            background.image.url if background.type == "image" else None,
        ],
    )
    frame = await load_frame(preset, context) if global_settings.show_device_frame else None

    image = await asyncio.to_thread(
        compose_screenshot, state, global_settings, metrics, context, frame, panel_index, panel_count
    )
    data, media_type = await asyncio.to_thread(encode_image, image, fmt, quality)
    logger.info(
        "Exported %s (%s, %dx%d) in %.0fms, %d errors",
        state.id,
        media_type,
        image.width,
        image.height,
        (time.perf_counter() - start) * 1000,
        len(context.errors),
    )
    return ExportResult(data, media_type, image.width, image.height, dict(context.errors))


async def export_legacy(
    legacy: Any,
    context: RenderContext,
    fmt: str = "png",
    quality: float | None = None,
    panel_index: int = 0,
    panel_count: int = 1,
) -> ExportResult:
    """Decode a legacy configuration record and export it."""
    state = decode(legacy)
    global_settings = decode_global_settings(legacy)
    return await export_screenshot(state, global_settings, context, fmt, quality, panel_index, panel_count)


async def export_template(
    schema: TemplateSchema,
    request: TemplateRenderInput,
    context: RenderContext,
    fmt: str = "png",
    quality: float | None = None,
    screenshot_url: str | None = None,
) -> ExportResult:
    """Render `schema` headlessly. An empty accent is extracted from the screenshot."""
    start = time.perf_counter()
    preset = resolve_device_preset(request.device)
    if screenshot_url and request.screenshot is None:
        request.screenshot = await context.images.get(screenshot_url)
    if request.frame is None:
        request.frame = await load_frame(preset, context)
    if not request.accent_color:
        request.accent_color = await asyncio.to_thread(
            extract_accent_color, request.screenshot, app_settings.default_accent_color
        )
        logger.debug("Extracted accent color %s", request.accent_color)
    for choice in (request.fonts.heading, request.fonts.subheading):
        await context.fonts.ensure(choice.family, choice.weight)

    image = await asyncio.to_thread(render_template, schema, request, context)
    data, media_type = await asyncio.to_thread(encode_image, image, fmt, quality)
    logger.info(
        "Exported template %s for %s in %.0fms",
        schema.id or "<inline>",
        preset.id,
        (time.perf_counter() - start) * 1000,
    )
    return ExportResult(data, media_type, image.width, image.height, dict(context.errors))
