"""POST /api/render/*: headless export to PNG/JPEG bytes."""

from __future__ import annotations

import logging
import re

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from app.canvas.context import RenderContext
from app.config import Settings
from app.dependencies import get_render_context, get_settings, get_template_registry
from app.export.exporter import ExportResult, export_legacy, export_screenshot, export_template
from app.models.requests import FontSelection, RenderScreenshotRequest, RenderTemplateRequest
from app.templates.registry import TemplateRegistry
from app.templates.renderer import FontChoice, TemplateFonts, TemplateRenderInput
from app.templates.schema import parse_template

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/render")


def _image_response(result: ExportResult, name: str) -> Response:
    safe_name = re.sub(r"[^\w.-]", "_", name, flags=re.ASCII) or "export"
    return Response(
        content=result.data,
        media_type=result.media_type,
        headers={
            "Content-Disposition": f'inline; filename="{safe_name}.{result.extension}"',
            "X-Render-Errors": str(len(result.errors)),
        },
    )


def _encoding(req: RenderScreenshotRequest | RenderTemplateRequest, settings: Settings) -> tuple[str, float]:
    fmt = req.format or settings.export_format
    quality = settings.export_quality if req.quality is None else req.quality
    return fmt, quality


def _font_choice(selection: FontSelection | None, fallback: FontChoice) -> FontChoice:
    if selection is None:
        return fallback
    return FontChoice(selection.family, selection.size, selection.weight)


@router.post("/screenshot")
async def render_screenshot(
    req: RenderScreenshotRequest,
    context: RenderContext = Depends(get_render_context),
    settings: Settings = Depends(get_settings),
) -> Response:
    fmt, quality = _encoding(req, settings)
    if req.legacy is not None:
        result = await export_legacy(req.legacy, context, fmt, quality, req.panel_index, req.panel_count)
        name = str(req.legacy.get("id") or "screenshot")
    else:
        result = await export_screenshot(
            req.state, req.settings, context, fmt, quality, req.panel_index, req.panel_count
        )
        name = req.state.id
    return _image_response(result, name)


@router.post("/template")
async def render_template_endpoint(
    req: RenderTemplateRequest,
    context: RenderContext = Depends(get_render_context),
    registry: TemplateRegistry = Depends(get_template_registry),
    settings: Settings = Depends(get_settings),
) -> Response:
    if req.template is not None:
        schema = parse_template(req.template)
    elif req.template_id is not None:
        schema = registry.find(req.template_id)
        if schema is None:
            raise HTTPException(status_code=404, detail=f"Unknown template: {req.template_id}")
    else:
        schema = registry.default()
    logger.debug("Rendering template %s for %s", schema.id or "<inline>", req.device)

    defaults = TemplateFonts()
    request = TemplateRenderInput(
        heading=req.heading,
        subheading=req.subheading,
        accent_color=req.accent_color or "",
        device=req.device,
        fonts=TemplateFonts(
            heading=_font_choice(req.heading_font, defaults.heading),
            subheading=_font_choice(req.subheading_font, defaults.subheading),
        ),
        overrides=req.overrides,
    )
    fmt, quality = _encoding(req, settings)
    result = await export_template(schema, request, context, fmt, quality, req.screenshot_url)
    return _image_response(result, schema.id or "template")
