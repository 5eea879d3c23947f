"""Project-wide settings shared by every panel (background, device frame)."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field, field_validator, model_validator

from app.models.base import CamelModel

GradientDirection = Literal["left-to-right", "right-to-left", "top-to-bottom", "bottom-to-top"]
ImageFit = Literal["cover", "contain", "fill", "tile"]

# Legacy configurations store a CSS-style angle instead of a direction
LEGACY_ANGLE_TO_DIRECTION: dict[int, GradientDirection] = {
    90: "left-to-right",
    270: "right-to-left",
    180: "top-to-bottom",
    0: "bottom-to-top",
}
DIRECTION_TO_LEGACY_ANGLE: dict[str, int] = {v: k for k, v in LEGACY_ANGLE_TO_DIRECTION.items()}


def direction_from_angle(angle: float) -> GradientDirection:
    """Snap an arbitrary angle to the nearest canonical axis direction."""
    normalized = float(angle) % 360
    nearest = min(LEGACY_ANGLE_TO_DIRECTION, key=lambda a: min(abs(normalized - a), 360 - abs(normalized - a)))
    return LEGACY_ANGLE_TO_DIRECTION[nearest]


class GradientSettings(CamelModel):
    start_color: str = "#667eea"
    end_color: str = "#764ba2"
    direction: GradientDirection = "left-to-right"

    @model_validator(mode="before")
    @classmethod
    def _accept_legacy_angle(cls, data: Any) -> Any:
        if isinstance(data, dict) and "direction" not in data and "angle" in data:
            data = dict(data)
            try:
                data["direction"] = direction_from_angle(data.pop("angle"))
            except (TypeError, ValueError):
                data.pop("direction", None)
        return data

    @property
    def angle(self) -> int:
        return DIRECTION_TO_LEGACY_ANGLE[self.direction]


class BackgroundImageSettings(CamelModel):
    url: str | None = None
    fit: ImageFit = "cover"
    opacity: float = 1.0

    @field_validator("opacity")
    @classmethod
    def _clamp_opacity(cls, v: float) -> float:
        return min(max(float(v), 0.0), 1.0)


class BackgroundSettings(CamelModel):
    type: Literal["solid", "gradient", "image"] = "gradient"
    solid: str = "#ffffff"
    gradient: GradientSettings = Field(default_factory=GradientSettings)
    image: BackgroundImageSettings = Field(default_factory=BackgroundImageSettings)


class GlobalSettings(CamelModel):
    background: BackgroundSettings = Field(default_factory=BackgroundSettings)
    device_frame: str = "iphone-15-pro"
    show_device_frame: bool = True
