"""Application settings using pydantic-settings.

All configuration is centralized here. Values can be overridden
via environment variables prefixed with ``WINDLOAD_``.

Example:
    export WINDLOAD_OVERPASS_TIMEOUT_S=20
    export WINDLOAD_REGIONS_GEOJSON="data/windregions.geojson"
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Windload application settings."""

    model_config = SettingsConfigDict(
        env_prefix="WINDLOAD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # Terrain detection (Overpass feature service)
    overpass_url: str = "https://overpass-api.de/api/interpreter"
    overpass_timeout_s: float = 15.0
    user_agent: str = "windload/0.1.0"

    # Region boundaries (GeoJSON FeatureCollection with a ``region`` property)
    regions_geojson: Optional[Path] = None

    # File paths
    report_dir: Path = Path.home() / "Windload Reports"

    # CORS origins (JSON list in env var)
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8000",
    ]


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (singleton)."""
    return Settings()
