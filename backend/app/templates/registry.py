"""Template registry: built-in templates shipped as JSON next to this module.

Usage:
    registry = TemplateRegistry.with_builtins()
    schema = registry.get("spotlight")

Adding a built-in template = dropping one JSON file into `builtin/`.
"""

from __future__ import annotations

import logging
from pathlib import Path

from app.templates.schema import TemplateSchema, parse_template

logger = logging.getLogger(__name__)

BUILTIN_DIR = Path(__file__).resolve().parent / "builtin"


class TemplateRegistry:
    """Templates keyed by id. Instances are independent."""

    def __init__(self) -> None:
        self._templates: dict[str, TemplateSchema] = {}
        self._default_id: str | None = None

    def register(self, schema: TemplateSchema) -> None:
        if not schema.id:
            raise ValueError("Template must have an id to be registered")
        if schema.id in self._templates:
            raise ValueError(f"Duplicate template ID: {schema.id}")
        self._templates[schema.id] = schema
        if schema.is_default or self._default_id is None:
            self._default_id = schema.id
        logger.debug("Registered template %s", schema.id)

    def get(self, template_id: str) -> TemplateSchema:
        return self._templates[template_id]

    def find(self, template_id: str | None) -> TemplateSchema | None:
        if not template_id:
            return None
        return self._templates.get(template_id)

    def default(self) -> TemplateSchema:
        if self._default_id is None:
            raise LookupError("No templates registered")
        return self._templates[self._default_id]

    def all(self) -> list[TemplateSchema]:
        return sorted(self._templates.values(), key=lambda t: t.id or "")

    @property
    def count(self) -> int:
        return len(self._templates)

    def load_directory(self, directory: Path) -> int:
        """Register every *.json template in `directory`. Returns how many were added."""
        added = 0
        for path in sorted(directory.glob("*.json")):
            self.register(parse_template(path.read_text(encoding="utf-8")))
            added += 1
        return added

    @classmethod
    def with_builtins(cls) -> TemplateRegistry:
        registry = cls()
        registry.load_directory(BUILTIN_DIR)
        return registry
