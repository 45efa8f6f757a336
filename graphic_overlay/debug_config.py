"""Debug configuration loader for overlay tracing."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

DEV_MODE_ENV_VAR = "GRAPHIC_OVERLAY_DEV_MODE"


def is_dev_mode(value: Optional[str] = None) -> bool:
    token = value if value is not None else os.getenv(DEV_MODE_ENV_VAR)
    if token is None:
        return False
    return token.strip().lower() in {"1", "true", "yes", "on"}


DEBUG_CONFIG_ENABLED = is_dev_mode()


@dataclass(frozen=True)
class DebugConfig:
    trace_render: bool = False
    surface_outline: bool = False
    log_draw_failures: bool = True


def load_debug_config(path: Path, *, enabled: Optional[bool] = None) -> DebugConfig:
    """Load dev-mode-only flags from debug.json; defaults outside dev mode."""

    active = DEBUG_CONFIG_ENABLED if enabled is None else enabled
    if not active:
        return DebugConfig()
    try:
        raw_text = path.read_text(encoding="utf-8")
        data: Any = json.loads(raw_text)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        data = {}
    if not isinstance(data, dict):
        data = {}

    tracing_section = data.get("tracing")
    if isinstance(tracing_section, dict):
        trace_render = bool(tracing_section.get("enabled", False))
    else:
        trace_render = bool(data.get("trace_render", False))

    return DebugConfig(
        trace_render=trace_render,
        surface_outline=bool(data.get("surface_outline", False)),
        log_draw_failures=bool(data.get("log_draw_failures", True)),
    )
