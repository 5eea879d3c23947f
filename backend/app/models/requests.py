"""API request models."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

from app.models.elements import CanvasElement, ScreenshotState
from app.models.settings import GlobalSettings
from app.templates.tokens import TemplateOverrides

ExportFormat = Literal["png", "jpeg", "jpg"]


class HitTestRequest(BaseModel):
    elements: list[CanvasElement] = Field(default_factory=list, description="Elements of one panel")
    x: float = Field(..., description="Pointer x in canvas pixels")
    y: float = Field(..., description="Pointer y in canvas pixels")
    device: str | None = Field(default=None, description="Device identifier or alias")


class MigrateDecodeRequest(BaseModel):
    legacy: dict[str, Any] = Field(..., description="Legacy flat configuration record")


class MigrateEncodeRequest(BaseModel):
    state: ScreenshotState
    settings: GlobalSettings = Field(default_factory=GlobalSettings)


class TemplateValidateRequest(BaseModel):
    template: dict[str, Any] = Field(..., description="Template schema document")


class RenderScreenshotRequest(BaseModel):
    state: ScreenshotState | None = Field(default=None, description="Element-model panel")
    settings: GlobalSettings = Field(default_factory=GlobalSettings)
    legacy: dict[str, Any] | None = Field(
        default=None,
        description="Legacy configuration; used instead of state/settings when given",
    )
    format: ExportFormat | None = Field(default=None, description="Defaults to the configured export format")
    quality: float | None = Field(default=None, description="JPEG quality, clamped to [0.2, 0.95]")
    panel_index: int = Field(default=0, ge=0)
    panel_count: int = Field(default=1, ge=1)

    @model_validator(mode="after")
    def _require_source(self) -> RenderScreenshotRequest:
        if self.state is None and self.legacy is None:
            raise ValueError("Either state or legacy is required")
        return self


class FontSelection(BaseModel):
    family: str
    size: float = Field(..., gt=0)
    weight: int | str = 400


class RenderTemplateRequest(BaseModel):
    template_id: str | None = Field(default=None, description="Registered template id")
    template: dict[str, Any] | None = Field(default=None, description="Inline template document")
    heading: str = ""
    subheading: str = ""
    accent_color: str | None = Field(default=None, description="Extracted from the screenshot when omitted")
    device: str = "iPhone"
    screenshot_url: str | None = None
    heading_font: FontSelection | None = None
    subheading_font: FontSelection | None = None
    overrides: TemplateOverrides = Field(default_factory=TemplateOverrides)
    format: ExportFormat | None = Field(default=None, description="Defaults to the configured export format")
    quality: float | None = Field(default=None, description="JPEG quality, clamped to [0.2, 0.95]")
