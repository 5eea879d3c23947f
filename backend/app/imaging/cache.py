"""Async image loading with a per-session, URL-keyed cache.

Concurrent requests for the same URL share one pending task, so an image is
fetched and decoded at most once per cache instance.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import io
import logging
from collections.abc import Awaitable, Callable, Iterable
from pathlib import Path
from urllib.parse import unquote_to_bytes

import httpx
from PIL import Image

from app.errors import ImageLoadError

logger = logging.getLogger(__name__)

Loader = Callable[[str], Awaitable[Image.Image]]


def _looks_like_svg(data: bytes, hint: str) -> bool:
    if hint.lower().split("?")[0].endswith(".svg") or "image/svg" in hint.lower():
        return True
    head = data[:256].lstrip()
    return head.startswith(b"<svg") or (head.startswith(b"<?xml") and b"<svg" in data[:1024])


def rasterize_svg(data: bytes) -> Image.Image:
    """Rasterize SVG bytes to an RGBA image using CairoSVG."""
    import cairosvg

    png_bytes = cairosvg.svg2png(bytestring=data)
    return Image.open(io.BytesIO(png_bytes)).convert("RGBA")


def decode_image_bytes(data: bytes, hint: str = "") -> Image.Image:
    """Decode raster or SVG bytes into a fully loaded RGBA image."""
    if _looks_like_svg(data, hint):
        return rasterize_svg(data)
    image = Image.open(io.BytesIO(data))
    image.load()
    return image.convert("RGBA")


def _decode_data_url(url: str) -> tuple[bytes, str]:
    header, _, payload = url.partition(",")
    if header.endswith(";base64"):
        return base64.b64decode(payload, validate=False), header
    return unquote_to_bytes(payload), header


class ImageCache:
    """Content-addressed image cache. Create one per render session."""

    def __init__(
        self,
        assets_dir: Path | None = None,
        timeout: float = 15.0,
        loader: Loader | None = None,
    ) -> None:
        self._assets_dir = assets_dir
        self._timeout = timeout
        self._loader = loader or self._load
        self._images: dict[str, Image.Image | None] = {}
        self._pending: dict[str, asyncio.Task[Image.Image | None]] = {}

    def __contains__(self, url: str) -> bool:
        return url in self._images

    def __len__(self) -> int:
        return len(self._images)

    def peek(self, url: str | None) -> Image.Image | None:
        """Return an already-loaded image without triggering a load."""
        if not url:
            return None
        return self._images.get(url)

    def put(self, url: str, image: Image.Image | None) -> None:
        self._images[url] = image

    async def get(self, url: str | None) -> Image.Image | None:
        """Load (or reuse) the image at `url`. Returns None if it cannot be loaded."""
        if not url:
            return None
        if url in self._images:
            return self._images[url]
        task = self._pending.get(url)
        if task is None:
            task = asyncio.ensure_future(self._load_and_store(url))
            self._pending[url] = task
        return await task

    async def preload(self, urls: Iterable[str | None]) -> None:
        unique = {u for u in urls if u}
        if unique:
            await asyncio.gather(*(self.get(u) for u in unique))

    async def _load_and_store(self, url: str) -> Image.Image | None:
        image: Image.Image | None = None
        try:
            image = await self._loader(url)
        except ImageLoadError as e:
            logger.warning("Image load failed: %s", e)
        except Exception as e:
            logger.warning("Image load failed: %s: %s", url[:80], e)
        finally:
            self._images[url] = image
            self._pending.pop(url, None)
        return image

    async def _load(self, url: str) -> Image.Image:
        data, hint = await self._read_bytes(url)
        try:
            return await asyncio.to_thread(decode_image_bytes, data, hint)
        except Exception as e:
            raise ImageLoadError(url, f"decode failed: {e}") from e

    async def _read_bytes(self, url: str) -> tuple[bytes, str]:
        if url.startswith("data:"):
            try:
                return _decode_data_url(url)
            except (binascii.Error, ValueError) as e:
                raise ImageLoadError(url, f"bad data URL: {e}") from e

        if url.startswith(("http://", "https://")):
            try:
                async with httpx.AsyncClient(timeout=self._timeout, follow_redirects=True) as client:
                    response = await client.get(url)
                    response.raise_for_status()
            except httpx.HTTPError as e:
                raise ImageLoadError(url, str(e)) from e
            return response.content, response.headers.get("content-type", url)

        path = Path(url)
        if not path.is_absolute() and self._assets_dir is not None:
            path = self._assets_dir / url.lstrip("/")
        try:
            data = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            raise ImageLoadError(url, str(e)) from e
        return data, path.name
