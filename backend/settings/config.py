from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, Field


def _repo_root() -> Path:
    # .../backend/settings/config.py -> repo root is 2 levels up
    return Path(__file__).resolve().parents[2]


class ClusterSettings(BaseModel):
    """
    Pin map clustering + marker defaults.

    Loaded from `config/clustering.yaml` (or `PINS_CLUSTER_CONFIG`).
    """

    # The pin map passes 30; the clustering module's own default is 50.
    baseRadiusPx: float = Field(default=30.0, ge=0.0)
    # Optional: hide all pins below this zoom (the older "MIN_PIN_ZOOM" behaviour).
    minVisibleZoom: float | None = Field(default=None, ge=0.0, le=24.0)
    clusterIdPrefix: str = "cluster-"
    pinIdPrefix: str = "pin-"
    popupMaxNames: int = Field(default=5, ge=0, le=100)


def settings_path() -> Path:
    return Path(
        os.getenv("PINS_CLUSTER_CONFIG")
        or (_repo_root() / "config" / "clustering.yaml")
    )


def _load_yaml(path: Path) -> dict:
    raw = path.read_text(encoding="utf-8")
    data = yaml.safe_load(raw) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid clustering settings yaml root: {path}")
    return data


@lru_cache(maxsize=1)
def load_settings() -> ClusterSettings:
    path = settings_path()
    if not path.exists():
        return ClusterSettings()
    return ClusterSettings.model_validate(_load_yaml(path))


def clear_settings_cache() -> None:
    """
    Forget cached settings so the next `load_settings()` re-reads the YAML.
    """
    load_settings.cache_clear()
