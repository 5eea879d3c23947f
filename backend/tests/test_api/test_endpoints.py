"""Tests for API endpoints."""

from __future__ import annotations

import io

from fastapi.testclient import TestClient
from PIL import Image

from app.main import app
from tests.conftest import LEGACY_CONFIG, MINIMAL_TEMPLATE


client = TestClient(app)


def test_health():
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["devices_registered"] == 2
    assert data["templates_registered"] >= 2


def test_list_devices():
    response = client.get("/api/devices")
    assert response.status_code == 200
    ids = [d["id"] for d in response.json()["devices"]]
    assert ids == ["iphone-15-pro", "ipad-pro-13"]


def test_resolve_device():
    response = client.get("/api/devices/resolve", params={"name": "iPad Pro 11"})
    assert response.status_code == 200
    assert response.json()["id"] == "ipad-pro-13"
    assert client.get("/api/devices/resolve").json()["id"] == "iphone-15-pro"


def test_hit_test():
    elements = [
        {"kind": "visual", "id": "back", "imageUrl": "a.png", "width": 100, "height": 100,
         "position": {"x": 200, "y": 200}, "zIndex": 0},
        {"kind": "visual", "id": "front", "imageUrl": "b.png", "width": 100, "height": 100,
         "position": {"x": 220, "y": 220}, "zIndex": 1},
    ]
    response = client.post("/api/hit-test", json={"elements": elements, "x": 230, "y": 230})
    assert response.status_code == 200
    data = response.json()
    assert data["element_id"] == "front"
    assert data["element_ids"] == ["front", "back"]

    miss = client.post("/api/hit-test", json={"elements": elements, "x": 5, "y": 5}).json()
    assert miss["element_id"] is None


def test_hit_test_rejects_bad_elements():
    response = client.post("/api/hit-test", json={"elements": [{"kind": "blob", "id": "x"}], "x": 0, "y": 0})
    assert response.status_code == 422


def test_migrate_decode_then_encode():
    decoded = client.post("/api/migrate/decode", json={"legacy": LEGACY_CONFIG})
    assert decoded.status_code == 200
    data = decoded.json()
    assert len(data["state"]["elements"]) == 4
    assert data["settings"]["showDeviceFrame"] is False

    encoded = client.post("/api/migrate/encode", json={"state": data["state"], "settings": data["settings"]})
    assert encoded.status_code == 200
    configuration = encoded.json()["legacy"]["image"]["configuration"]
    assert configuration["heading"] == "Track every habit"
    assert configuration["headingX"] == 620


def test_list_templates():
    response = client.get("/api/templates")
    assert response.status_code == 200
    templates = {t["id"]: t for t in response.json()["templates"]}
    assert templates["spotlight"]["is_default"] is True
    assert "iPad" in templates["numbered-badge"]["devices"]


def test_validate_template():
    ok = client.post("/api/templates/validate", json={"template": MINIMAL_TEMPLATE}).json()
    assert ok["valid"] is True
    assert ok["layer_count"] == 1

    bad = client.post("/api/templates/validate", json={"template": {"layers": []}}).json()
    assert bad["valid"] is False
    assert bad["errors"]


def test_render_screenshot_from_legacy():
    response = client.post("/api/render/screenshot", json={"legacy": LEGACY_CONFIG})
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.headers["x-render-errors"] == "0"
    assert Image.open(io.BytesIO(response.content)).size == (1242, 2688)


def test_render_screenshot_requires_source():
    response = client.post("/api/render/screenshot", json={"format": "png"})
    assert response.status_code == 422


def test_render_inline_template_as_jpeg():
    response = client.post(
        "/api/render/template",
        json={"template": MINIMAL_TEMPLATE, "heading": "Hi", "accent_color": "#ff0000", "format": "jpeg"},
    )
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/jpeg"
    assert Image.open(io.BytesIO(response.content)).size == (120, 240)


def test_render_invalid_template_is_422():
    response = client.post("/api/render/template", json={"template": {"canvas": {}}})
    assert response.status_code == 422
    assert response.json()["errors"]


def test_render_unknown_template_is_404():
    response = client.post("/api/render/template", json={"template_id": "nope"})
    assert response.status_code == 404
