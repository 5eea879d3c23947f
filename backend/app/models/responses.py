"""API response models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from app.models.elements import ScreenshotState
from app.models.settings import GlobalSettings


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    devices_registered: int = 0
    templates_registered: int = 0


class DevicePresetResponse(BaseModel):
    id: str
    label: str
    legacy_label: str
    width: int
    height: int
    font_scale_multiplier: float
    default_text_width: int
    frame_asset: str
    aliases: list[str] = Field(default_factory=list)


class DeviceListResponse(BaseModel):
    devices: list[DevicePresetResponse] = Field(default_factory=list)


class HitTestResponse(BaseModel):
    element_id: str | None = None
    # Every element under the point, topmost first
    element_ids: list[str] = Field(default_factory=list)


class MigrateDecodeResponse(BaseModel):
    state: ScreenshotState
    settings: GlobalSettings


class MigrateEncodeResponse(BaseModel):
    legacy: dict[str, Any]


class TemplateValidateResponse(BaseModel):
    valid: bool
    errors: list[str] = Field(default_factory=list)
    devices: list[str] = Field(default_factory=list)
    layer_count: int = 0


class TemplateSummary(BaseModel):
    id: str
    name: str | None = None
    version: str | None = None
    is_default: bool = False
    devices: list[str] = Field(default_factory=list)
    layer_count: int = 0


class TemplateListResponse(BaseModel):
    templates: list[TemplateSummary] = Field(default_factory=list)
