"""Configuration helpers for the graphic overlay."""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

CLIENT_LOG_RETENTION_MIN = 1
CLIENT_LOG_RETENTION_MAX = 20


@dataclass(frozen=True)
class OverlaySettings:
    """Values used to bootstrap the overlay surface."""

    guide_oval_enabled: bool = True
    guide_color: str = "#FF0000"
    guide_line_width: int = 5
    annotation_line_width: int = 2
    label_color: str = "white"
    client_log_retention: int = 5


def _coerce_int(value: Any, fallback: int, *, minimum: int = 0, maximum: Optional[int] = None) -> int:
    if value is None or isinstance(value, bool):
        return fallback
    try:
        numeric = int(value)
    except (TypeError, ValueError):
        return fallback
    numeric = max(minimum, numeric)
    if maximum is not None:
        numeric = min(maximum, numeric)
    return numeric


def _coerce_str(value: Any, fallback: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return fallback


def load_overlay_settings(settings_path: Optional[Path]) -> OverlaySettings:
    """Read overlay defaults from a JSON settings file if it exists."""
    defaults = OverlaySettings()
    if settings_path is None:
        return defaults
    try:
        raw = settings_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return defaults

    try:
        data: Dict[str, Any] = json.loads(raw)
    except json.JSONDecodeError:
        return defaults
    if not isinstance(data, dict):
        return defaults

    guide_section = data.get("guide")
    if not isinstance(guide_section, dict):
        guide_section = {}

    return OverlaySettings(
        guide_oval_enabled=bool(guide_section.get("enabled", defaults.guide_oval_enabled)),
        guide_color=_coerce_str(guide_section.get("color"), defaults.guide_color),
        guide_line_width=_coerce_int(guide_section.get("line_width"), defaults.guide_line_width, minimum=1),
        annotation_line_width=_coerce_int(
            data.get("annotation_line_width"), defaults.annotation_line_width, minimum=1
        ),
        label_color=_coerce_str(data.get("label_color"), defaults.label_color),
        client_log_retention=_coerce_int(
            data.get("client_log_retention"),
            defaults.client_log_retention,
            minimum=CLIENT_LOG_RETENTION_MIN,
            maximum=CLIENT_LOG_RETENTION_MAX,
        ),
    )
