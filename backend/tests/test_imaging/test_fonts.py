"""Tests for font file lookup and fallback."""

import asyncio

from PIL import ImageFont

from app.imaging.fonts import FontRegistry, find_font_file, interpret_weight


def test_interpret_weight():
    assert interpret_weight(700) == "bold"
    assert interpret_weight("600") == "bold"
    assert interpret_weight("SemiBold") == "bold"
    assert interpret_weight(400) == "regular"
    assert interpret_weight(None) == "regular"


def test_find_font_file_prefers_weight(tmp_path):
    for name in ("Farro-Regular.ttf", "Farro-Bold.ttf", "README.txt"):
        (tmp_path / name).write_bytes(b"")
    assert find_font_file(tmp_path, "Farro", "bold").name == "Farro-Bold.ttf"
    assert find_font_file(tmp_path, "Farro", "regular").name == "Farro-Regular.ttf"
    assert find_font_file(tmp_path / "missing", "Farro", "bold") is None


def test_missing_family_falls_back_to_default(tmp_path):
    registry = FontRegistry(tmp_path)
    assert asyncio.run(registry.ensure("Nope", 700)) is None
    font = registry.get("Nope", 700, 24)
    assert isinstance(font, ImageFont.FreeTypeFont)
    assert registry.get("Nope", 700, 24) is font


def test_unreadable_font_file_falls_back(tmp_path):
    family_dir = tmp_path / "Inter"
    family_dir.mkdir()
    (family_dir / "Inter-Regular.ttf").write_bytes(b"broken")
    registry = FontRegistry(tmp_path)
    assert registry.resolve_path("Inter", 400) == family_dir / "Inter-Regular.ttf"
    font = registry.get("Inter", 400, 18)
    assert font.getlength("abc") > 0
