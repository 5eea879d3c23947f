"""GET /api/devices: device preset lookup."""

from __future__ import annotations

from fastapi import APIRouter, Query

from app.canvas.presets import DevicePreset, list_device_presets, resolve_device_preset
from app.models.responses import DeviceListResponse, DevicePresetResponse

router = APIRouter(prefix="/devices")


def _to_response(preset: DevicePreset) -> DevicePresetResponse:
    return DevicePresetResponse(
        id=preset.id,
        label=preset.label,
        legacy_label=preset.legacy_label,
        width=preset.width,
        height=preset.height,
        font_scale_multiplier=preset.font_scale_multiplier,
        default_text_width=preset.default_text_width,
        frame_asset=preset.frame_asset,
        aliases=list(preset.aliases),
    )


@router.get("", response_model=DeviceListResponse)
async def list_devices() -> DeviceListResponse:
    return DeviceListResponse(devices=[_to_response(p) for p in list_device_presets()])


@router.get("/resolve", response_model=DevicePresetResponse)
async def resolve_device(name: str = Query(default="", description="Device identifier or alias")) -> DevicePresetResponse:
    return _to_response(resolve_device_preset(name))
