"""Unified element model: a discriminated union of text, mockup and visual elements."""

from __future__ import annotations

import time
import uuid
from typing import Annotated, Literal, Union

from pydantic import Field, TypeAdapter, field_validator, model_validator

from app.models.base import CamelModel, Position
from app.utils.geometry import normalize_rotation

MIN_SCALE = 0.2
MAX_SCALE = 2.0
# Offset applied to a duplicated element so it does not sit exactly on the original
DUPLICATE_OFFSET = 20.0


def clamp_scale(value: float) -> float:
    return min(max(float(value), MIN_SCALE), MAX_SCALE)


def generate_element_id(kind: str) -> str:
    return f"{kind}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"


class ElementBase(CamelModel):
    id: str
    position: Position = Field(default_factory=Position)
    # Degrees, clockwise
    rotation: float = 0.0
    z_index: int = 0

    @field_validator("rotation")
    @classmethod
    def _normalize_rotation(cls, v: float) -> float:
        return normalize_rotation(v)


class TextElement(ElementBase):
    kind: Literal["text"] = "text"
    text: str = ""
    font_family: str = "Inter"
    # Logical units, multiplied by the device font-scale multiplier when drawn
    font_size: float = 32.0
    font_weight: int = 400
    is_bold: bool = False
    color: str = "#ffffff"
    align: Literal["left", "center", "right"] = "left"
    letter_spacing: float = 0.0
    line_height: float = 1.2
    # Wrap width in canvas pixels; None uses the device default
    width: float | None = None
    role: Literal["heading", "subheading"] | None = None

    @property
    def effective_weight(self) -> int:
        return max(self.font_weight, 700) if self.is_bold else self.font_weight


class MockupElement(ElementBase):
    kind: Literal["mockup"] = "mockup"
    screenshot_url: str = ""
    frame: str = "iphone-15-pro"
    # Geometry below defaults to the canvas device preset when unset
    base_width: float | None = None
    base_height: float | None = None
    corner_radius: float | None = None
    inner_padding: float | None = None
    scale: float = 1.0

    @field_validator("scale")
    @classmethod
    def _clamp_scale(cls, v: float) -> float:
        return clamp_scale(v)


class VisualElement(ElementBase):
    kind: Literal["visual"] = "visual"
    image_url: str
    name: str = "Visual"
    width: float = 300.0
    height: float = 300.0
    scale: float = 1.0
    opacity: float = 1.0

    @field_validator("scale")
    @classmethod
    def _clamp_scale(cls, v: float) -> float:
        return clamp_scale(v)

    @field_validator("opacity")
    @classmethod
    def _clamp_opacity(cls, v: float) -> float:
        return min(max(float(v), 0.0), 1.0)


CanvasElement = Annotated[
    Union[TextElement, MockupElement, VisualElement],
    Field(discriminator="kind"),
]

_element_adapter: TypeAdapter[CanvasElement] = TypeAdapter(CanvasElement)


def parse_element(data: dict) -> TextElement | MockupElement | VisualElement:
    return _element_adapter.validate_python(data)


def sort_by_z_index(elements: list[CanvasElement]) -> list[CanvasElement]:
    """Paint order: ascending z-index, list order breaks ties."""
    return sorted(elements, key=lambda e: e.z_index)


def create_text_element(
    text: str,
    position: tuple[float, float] = (0.0, 0.0),
    **fields,
) -> TextElement:
    return TextElement(
        id=generate_element_id("text"),
        text=text,
        position=Position(x=position[0], y=position[1]),
        **fields,
    )


def create_mockup_element(
    screenshot_url: str,
    frame: str = "iphone-15-pro",
    position: tuple[float, float] = (0.0, 0.0),
    **fields,
) -> MockupElement:
    return MockupElement(
        id=generate_element_id("mockup"),
        screenshot_url=screenshot_url,
        frame=frame,
        position=Position(x=position[0], y=position[1]),
        **fields,
    )


def create_visual_element(
    image_url: str,
    name: str = "Visual",
    width: float = 300.0,
    height: float = 300.0,
    position: tuple[float, float] = (0.0, 0.0),
    **fields,
) -> VisualElement:
    return VisualElement(
        id=generate_element_id("visual"),
        image_url=image_url,
        name=name,
        width=width,
        height=height,
        position=Position(x=position[0], y=position[1]),
        **fields,
    )


class ScreenshotState(CamelModel):
    """One marketing panel and its elements."""

    id: str
    source_screenshot_url: str = ""
    elements: list[CanvasElement] = Field(default_factory=list)
    theme: str = "default"
    font_family: str = "Inter"

    @model_validator(mode="after")
    def _unique_ids(self) -> ScreenshotState:
        seen: set[str] = set()
        for element in self.elements:
            if element.id in seen:
                raise ValueError(f"Duplicate element id: {element.id}")
            seen.add(element.id)
        return self

    def get_element(self, element_id: str) -> CanvasElement | None:
        for element in self.elements:
            if element.id == element_id:
                return element
        return None

    def _require(self, element_id: str) -> CanvasElement:
        element = self.get_element(element_id)
        if element is None:
            raise KeyError(element_id)
        return element

    def sorted_elements(self) -> list[CanvasElement]:
        return sort_by_z_index(self.elements)

    def next_z_index(self) -> int:
        return max((e.z_index for e in self.elements), default=-1) + 1

    def add_element(self, element: CanvasElement) -> CanvasElement:
        if self.get_element(element.id) is not None:
            raise ValueError(f"Duplicate element id: {element.id}")
        self.elements.append(element)
        return element

    def update_element(self, element_id: str, **changes) -> CanvasElement:
        element = self._require(element_id)
        for name, value in changes.items():
            setattr(element, name, value)
        return element

    def remove_element(self, element_id: str) -> bool:
        before = len(self.elements)
        self.elements = [e for e in self.elements if e.id != element_id]
        return len(self.elements) != before

    def duplicate_element(self, element_id: str) -> CanvasElement:
        source = self._require(element_id)
        clone = source.model_copy(
            deep=True,
            update={
                "id": generate_element_id(source.kind),
                "position": Position(
                    x=source.position.x + DUPLICATE_OFFSET,
                    y=source.position.y + DUPLICATE_OFFSET,
                ),
                "z_index": self.next_z_index(),
            },
        )
        self.elements.append(clone)
        return clone

    # Layer ordering

    def bring_to_front(self, element_id: str) -> None:
        element = self._require(element_id)
        element.z_index = self.next_z_index()

    def send_to_back(self, element_id: str) -> None:
        element = self._require(element_id)
        element.z_index = min(e.z_index for e in self.elements) - 1

    def bring_forward(self, element_id: str) -> None:
        self._swap_with_neighbor(element_id, +1)

    def send_backward(self, element_id: str) -> None:
        self._swap_with_neighbor(element_id, -1)

    def _swap_with_neighbor(self, element_id: str, step: int) -> None:
        self._require(element_id)
        ordered = self.sorted_elements()
        index = next(i for i, e in enumerate(ordered) if e.id == element_id)
        neighbor_index = index + step
        if not 0 <= neighbor_index < len(ordered):
            return
        element, neighbor = ordered[index], ordered[neighbor_index]
        if element.z_index == neighbor.z_index:
            element.z_index += step
        else:
            element.z_index, neighbor.z_index = neighbor.z_index, element.z_index
