"""Editor settings loaded from an optional JSON file."""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
from pathlib import Path
from typing import Any

LOGGER = logging.getLogger(__name__)

MIN_ZOOM = 0.5
MAX_ZOOM = 3.0
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True, slots=True)
class DesignerSettings:
    zoom: float = 1.0
    zoom_step: float = 0.25
    min_zoom: float = MIN_ZOOM
    max_zoom: float = MAX_ZOOM
    duplicate_offset: float = 20.0
    log_level: str = "INFO"


def _float(value: Any, fallback: float) -> float:
    if value is None:
        return fallback
    try:
        return float(value)
    except (TypeError, ValueError):
        return fallback


def load_settings(settings_path: Path | None) -> DesignerSettings:
    """Read editor defaults from ``settings_path`` if it exists and parses."""
    defaults = DesignerSettings()
    if settings_path is None:
        return defaults
    try:
        raw = settings_path.read_text(encoding="utf-8")
    except OSError:
        return defaults
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        LOGGER.warning("Ignoring malformed settings file %s", settings_path)
        return defaults
    if not isinstance(data, dict):
        return defaults

    min_zoom = max(0.1, _float(data.get("min_zoom"), defaults.min_zoom))
    max_zoom = max(min_zoom, _float(data.get("max_zoom"), defaults.max_zoom))
    zoom = max(min_zoom, min(_float(data.get("zoom"), defaults.zoom), max_zoom))
    zoom_step = _float(data.get("zoom_step"), defaults.zoom_step)
    if zoom_step <= 0:
        zoom_step = defaults.zoom_step
    duplicate_offset = _float(data.get("duplicate_offset"), defaults.duplicate_offset)

    log_level = str(data.get("log_level", defaults.log_level) or "").strip().upper()
    if log_level not in _LOG_LEVELS:
        log_level = defaults.log_level

    return DesignerSettings(
        zoom=zoom,
        zoom_step=zoom_step,
        min_zoom=min_zoom,
        max_zoom=max_zoom,
        duplicate_offset=duplicate_offset,
        log_level=log_level,
    )
