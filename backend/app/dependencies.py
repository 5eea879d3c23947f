"""FastAPI dependency injection."""

from __future__ import annotations

from fastapi import Request

from app.canvas.context import RenderContext
from app.config import Settings, settings
from app.imaging.cache import ImageCache
from app.imaging.fonts import FontRegistry
from app.templates.registry import TemplateRegistry


def get_settings() -> Settings:
    return settings


def get_render_context() -> RenderContext:
    """Fresh image and font caches per request."""
    return RenderContext(
        images=ImageCache(assets_dir=settings.assets_dir, timeout=settings.image_fetch_timeout),
        fonts=FontRegistry(settings.fonts_dir),
    )


def get_template_registry(request: Request) -> TemplateRegistry:
    return request.app.state.templates
