# src/geoproximity/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/geoproximity/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `GEOPROXIMITY_LOG_LEVEL`, `GEOPROXIMITY_IP_LOOKUP_URL`)
- an external YAML file via `GEOPROXIMITY_CONFIG_PATH`

Design rule:
- The reference point, threshold and acquisition options live in YAML, not in code.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from geoproximity.core.env import load_dotenv_if_present
from geoproximity.domain.models import PositionOptions, ReferencePoint


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `geoproximity.config`."""
    text = resources.files("geoproximity.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "GeoProximity"
    log_level: str = "INFO"
    http_timeout_seconds: float = 15


class ProximitySettings(BaseModel):
    threshold_m: float = Field(1000, ge=0)
    reference: ReferencePoint = Field(
        default_factory=lambda: ReferencePoint(
            name="Conestoga College, Kitchener, ON",
            lat=43.39681577710739,
            lon=-80.40618896484375,
        )
    )


class IpLookupSettings(BaseModel):
    url: str = "https://ipapi.co/json/"
    accuracy_m: float = Field(5000, ge=0)


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    proximity: ProximitySettings = Field(default_factory=ProximitySettings)
    position_options: PositionOptions = Field(default_factory=PositionOptions)
    ip_lookup: IpLookupSettings = Field(default_factory=IpLookupSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: the whitelist is kept small on purpose; everything else comes from YAML.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("GEOPROXIMITY_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    lookup_url = os.getenv("GEOPROXIMITY_IP_LOOKUP_URL")
    if lookup_url:
        data.setdefault("ip_lookup", {})["url"] = lookup_url

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("GEOPROXIMITY_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
