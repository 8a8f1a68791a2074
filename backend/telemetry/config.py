from __future__ import annotations

import os
from pathlib import Path


_OFF_VALUES = frozenset({"0", "false", "no", "off"})


def _default_path() -> Path:
    # <repo>/data/telemetry/pins.duckdb
    return Path(__file__).resolve().parents[2] / "data" / "telemetry" / "pins.duckdb"


def telemetry_path() -> Path:
    raw = (os.getenv("PINS_TELEMETRY_PATH") or "").strip()
    return Path(raw).expanduser() if raw else _default_path()


def telemetry_enabled() -> bool:
    return (os.getenv("PINS_TELEMETRY") or "1").strip().lower() not in _OFF_VALUES
