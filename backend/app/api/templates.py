"""Template listing and validation endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.dependencies import get_template_registry
from app.errors import TemplateValidationError
from app.models.requests import TemplateValidateRequest
from app.models.responses import TemplateListResponse, TemplateSummary, TemplateValidateResponse
from app.templates.registry import TemplateRegistry
from app.templates.schema import parse_template

router = APIRouter(prefix="/templates")


@router.get("", response_model=TemplateListResponse)
async def list_templates(registry: TemplateRegistry = Depends(get_template_registry)) -> TemplateListResponse:
    return TemplateListResponse(
        templates=[
            TemplateSummary(
                id=t.id,
                name=t.name,
                version=t.version,
                is_default=t.is_default,
                devices=list(t.canvas.devices),
                layer_count=len(t.layers),
            )
            for t in registry.all()
        ]
    )


@router.post("/validate", response_model=TemplateValidateResponse)
async def validate_template(req: TemplateValidateRequest) -> TemplateValidateResponse:
    try:
        schema = parse_template(req.template)
    except TemplateValidationError as e:
        return TemplateValidateResponse(valid=False, errors=e.details or [str(e)])
    return TemplateValidateResponse(
        valid=True,
        devices=list(schema.canvas.devices),
        layer_count=len(schema.layers),
    )
