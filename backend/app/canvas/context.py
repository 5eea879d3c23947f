"""RenderContext: the resources and error log for one render session.

Caches live here rather than in module globals, so two sessions never share
mutable state.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from app.imaging.cache import ImageCache
from app.imaging.fonts import FontRegistry
from app.models.elements import CanvasElement, MockupElement, TextElement, VisualElement

logger = logging.getLogger(__name__)


@dataclass
class RenderContext:
    images: ImageCache = field(default_factory=ImageCache)
    fonts: FontRegistry = field(default_factory=FontRegistry)
    # Per-element (or per-layer) failures: id -> message
    errors: dict[str, str] = field(default_factory=dict)

    def record_error(self, key: str, error: Exception) -> None:
        self.errors[key] = str(error)
        logger.warning("  %s FAILED: %s", key, error)

    async def prepare(
        self,
        elements: Iterable[CanvasElement],
        extra_urls: Iterable[str | None] = (),
    ) -> None:
        """Load every image and font the elements need before drawing."""
        urls: list[str | None] = list(extra_urls)
        for element in elements:
            if isinstance(element, VisualElement):
                urls.append(element.image_url)
            elif isinstance(element, MockupElement):
                urls.append(element.screenshot_url)
            elif isinstance(element, TextElement):
                await self.fonts.ensure(element.font_family, element.effective_weight)
        await self.images.preload(urls)
