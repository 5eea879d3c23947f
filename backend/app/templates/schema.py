"""Template schema: per-device canvas definitions plus an ordered list of typed layers."""

from __future__ import annotations

import json
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from app.errors import TemplateValidationError

# Position/size values: ratio in [0, 1], "NN%" string, or absolute pixels
Dimension = float | str | None


class SchemaModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class LayerPosition(SchemaModel):
    x: Dimension = None
    y: Dimension = None


class ShadowSpec(SchemaModel):
    color: str | None = None
    blur: float = 0.0
    offset_x: float = 0.0
    offset_y: float = 0.0


class FontSpec(SchemaModel):
    family: str | None = None
    size: float | None = None
    weight: int | str | None = None
    letter_spacing: float = 0.0
    transform: Literal["uppercase", "lowercase", "capitalize", "none"] | None = None


class LayerBase(SchemaModel):
    id: str | None = None
    position: LayerPosition = Field(default_factory=LayerPosition)
    rotation: float = 0.0
    opacity: float | None = None
    shadow: ShadowSpec | None = None


class TextLayer(LayerBase):
    type: Literal["heading", "subheading"]
    font: FontSpec = Field(default_factory=FontSpec)
    color: str | None = None
    text_align: Literal["left", "center", "right"] = "center"
    vertical_align: Literal["top", "middle", "bottom"] = "top"
    line_height: float | None = None
    max_width_ratio: float | None = None


class MockupSize(SchemaModel):
    scale: float | None = None
    max_width_ratio: float | None = None
    max_height_ratio: float | None = None


class MockupLayer(LayerBase):
    type: Literal["mockup"]
    size: MockupSize = Field(default_factory=MockupSize)


class ShapeSize(SchemaModel):
    width_ratio: Dimension = None
    height_ratio: Dimension = None


class AccentShapeLayer(LayerBase):
    type: Literal["accentShape"]
    shape: Literal["circle", "capsule", "rounded-rect"] = "rounded-rect"
    size: ShapeSize = Field(default_factory=ShapeSize)
    color: str | None = None
    corner_radius_ratio: float | None = None


class Padding(SchemaModel):
    x: float = 28.0
    y: float = 14.0


class BadgeLayer(LayerBase):
    type: Literal["badge"]
    text: str = ""
    padding: Padding = Field(default_factory=Padding)
    font: FontSpec = Field(default_factory=FontSpec)
    background_color: str | None = None
    color: str | None = None
    border_radius: float | None = None


Layer = Annotated[
    Union[TextLayer, MockupLayer, AccentShapeLayer, BadgeLayer],
    Field(discriminator="type"),
]


class GradientStop(SchemaModel):
    offset: float | None = None
    color: str


class BackgroundSpec(SchemaModel):
    type: Literal["gradient", "solid", "image"] = "gradient"
    direction: str = "vertical"
    stops: list[GradientStop] = Field(default_factory=list)
    color: str | None = None
    opacity: float | None = None


class DeviceCanvas(SchemaModel):
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    background: BackgroundSpec | None = None


class TemplateCanvas(SchemaModel):
    devices: dict[str, DeviceCanvas] = Field(..., min_length=1)
    default_device: str | None = None
    background: BackgroundSpec | None = None


class TemplateSchema(SchemaModel):
    id: str | None = None
    name: str | None = None
    version: str | None = None
    is_default: bool = False
    canvas: TemplateCanvas
    layers: list[Layer]


def _format_errors(error: ValidationError) -> list[str]:
    return [
        f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
        for err in error.errors()
    ]


def parse_template(data: str | bytes | dict[str, Any]) -> TemplateSchema:
    """Parse and validate a template document. Raises TemplateValidationError."""
    if isinstance(data, (str, bytes, bytearray)):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise TemplateValidationError(f"Template is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise TemplateValidationError("Template must be a JSON object")
    try:
        return TemplateSchema.model_validate(data)
    except ValidationError as e:
        details = _format_errors(e)
        raise TemplateValidationError(
            f"Template schema is invalid ({len(details)} error(s))",
            details=details,
        ) from e
