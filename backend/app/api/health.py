"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.canvas.presets import list_device_presets
from app.dependencies import get_template_registry
from app.models.responses import HealthResponse
from app.templates.registry import TemplateRegistry

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(registry: TemplateRegistry = Depends(get_template_registry)) -> HealthResponse:
    return HealthResponse(
        status="ok",
        version="0.1.0",
        devices_registered=len(list_device_presets()),
        templates_registered=registry.count,
    )
