"""Application configuration from environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings

_BACKEND_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    shotframe_env: str = "development"
    shotframe_log_level: str = "debug"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Asset locations (device frames, fonts, local images)
    assets_dir: Path = _BACKEND_DIR / "assets"
    fonts_dir: Path = _BACKEND_DIR / "assets" / "fonts"
    frames_dir: Path = _BACKEND_DIR / "assets" / "frames"

    # Rendering
    default_accent_color: str = "#4f46e5"
    default_device: str = "iphone-15-pro"
    image_fetch_timeout: float = 15.0

    # Export encoding
    export_format: str = "png"
    export_quality: float = 0.55

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
