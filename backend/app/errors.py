"""Exception hierarchy for the composition engine."""

from __future__ import annotations


class ShotFrameError(Exception):
    """Base class for all engine errors."""


class TemplateValidationError(ShotFrameError):
    """Template JSON failed to parse or lacks the required canvas/layer structure."""

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class ImageLoadError(ShotFrameError):
    """An image could not be fetched or decoded."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to load image {url!r}: {reason}")
        self.url = url
        self.reason = reason
