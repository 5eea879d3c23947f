"""Tests for the async image cache."""

import asyncio
from xml.etree.ElementTree import ParseError

from app.errors import ImageLoadError
from app.imaging.cache import ImageCache
from tests.conftest import RED_DATA_URL, solid_image


def test_concurrent_requests_share_one_load():
    calls = []

    async def loader(url):
        calls.append(url)
        await asyncio.sleep(0.01)
        return solid_image((1, 2, 3, 255))

    cache = ImageCache(loader=loader)

    async def run():
        return await asyncio.gather(*(cache.get("a.png") for _ in range(5)))

    results = asyncio.run(run())
    assert calls == ["a.png"]
    assert all(image is results[0] for image in results)
    assert "a.png" in cache


def test_loaded_image_is_reused():
    calls = []

    async def loader(url):
        calls.append(url)
        return solid_image((1, 2, 3, 255))

    cache = ImageCache(loader=loader)

    async def run():
        await cache.get("a.png")
        await cache.get("a.png")
        await cache.preload(["a.png", "b.png", None, ""])

    asyncio.run(run())
    assert calls == ["a.png", "b.png"]
    assert len(cache) == 2


def test_failed_load_is_cached_as_none():
    calls = []

    async def loader(url):
        calls.append(url)
        raise ImageLoadError(url, "boom")

    cache = ImageCache(loader=loader)

    async def run():
        first = await cache.get("bad.png")
        second = await cache.get("bad.png")
        return first, second

    assert asyncio.run(run()) == (None, None)
    assert calls == ["bad.png"]
    assert cache.peek("bad.png") is None


def test_data_url_is_decoded():
    cache = ImageCache()
    image = asyncio.run(cache.get(RED_DATA_URL))
    assert image.mode == "RGBA"
    assert image.getpixel((0, 0)) == (255, 0, 0, 255)


def test_local_path_under_assets_dir(tmp_path):
    solid_image((0, 255, 0, 255), (8, 8)).save(tmp_path / "green.png")
    cache = ImageCache(assets_dir=tmp_path)
    image = asyncio.run(cache.get("green.png"))
    assert image.size == (8, 8)
    assert image.getpixel((4, 4)) == (0, 255, 0, 255)


def test_missing_or_garbage_sources_return_none(tmp_path):
    (tmp_path / "garbage.png").write_bytes(b"not an image")
    cache = ImageCache(assets_dir=tmp_path)

    async def run():
        return (
            await cache.get("missing.png"),
            await cache.get("garbage.png"),
            await cache.get("data:image/png;base64,@@@"),
            await cache.get(None),
        )

    assert asyncio.run(run()) == (None, None, None, None)


def test_peek_does_not_load():
    cache = ImageCache()
    assert cache.peek("never-loaded.png") is None
    assert "never-loaded.png" not in cache


def test_unexpected_loader_error_is_cached_as_none():
    async def loader(url):
        raise RuntimeError("decoder crashed")

    cache = ImageCache(loader=loader)

    async def run():
        await cache.preload(["crash.png", RED_DATA_URL])
        return cache.peek("crash.png")

    assert asyncio.run(run()) is None
    assert "crash.png" in cache


def test_svg_rasterizer_error_becomes_load_failure(monkeypatch):
    def broken_rasterizer(data):
        raise ParseError("unclosed token")

    monkeypatch.setattr("app.imaging.cache.rasterize_svg", broken_rasterizer)
    cache = ImageCache()
    assert asyncio.run(cache.get("data:image/svg+xml,<svg><rect")) is None
