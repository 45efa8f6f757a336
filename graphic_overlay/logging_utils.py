from __future__ import annotations

import logging
import os
import tempfile
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOGGER_ROOT = "GraphicOverlay"
PROPAGATE_ENV_VAR = "GRAPHIC_OVERLAY_PROPAGATE_LOGS"
LOG_DIR_ENV_VAR = "GRAPHIC_OVERLAY_LOG_DIR"


class ReleaseLogLevelFilter(logging.Filter):
    """Promote debug logs to INFO in release builds so diagnostics stay visible."""

    def __init__(self, release_mode: bool) -> None:
        super().__init__()
        self._release_mode = release_mode

    def filter(self, record: logging.LogRecord) -> bool:
        if self._release_mode and record.levelno == logging.DEBUG:
            record.levelno = logging.INFO
            record.levelname = "INFO"
        return True


def resolve_logs_dir(log_dir_name: str = "GraphicOverlay") -> Path:
    """
    Resolve the directory to store overlay logs.

    Strategy:
    - Use GRAPHIC_OVERLAY_LOG_DIR if set.
    - Fall back to XDG state/cache locations, then `cwd/logs/<log_dir_name>`.
    - Final fallback: tempdir/<log_dir_name>.
    """
    candidates = []

    env_override = os.environ.get(LOG_DIR_ENV_VAR)
    if env_override:
        candidates.append(Path(env_override).expanduser())

    state_home = Path(os.environ.get("XDG_STATE_HOME", Path.home() / ".local" / "state"))
    cache_home = Path(os.environ.get("XDG_CACHE_HOME", Path.home() / ".cache"))
    candidates.append(state_home / "graphic-overlay" / "logs")
    candidates.append(cache_home / "graphic-overlay" / "logs")
    candidates.append(Path.cwd() / "logs")

    for base in candidates:
        try:
            target = base / log_dir_name
            target.mkdir(parents=True, exist_ok=True)
            return target
        except OSError:
            continue

    temp_fallback = Path(tempfile.gettempdir()) / "graphic-overlay" / log_dir_name
    temp_fallback.mkdir(parents=True, exist_ok=True)
    return temp_fallback


def build_rotating_file_handler(
    log_dir: Path,
    filename: str,
    *,
    retention: int = 5,
    max_bytes: int = 512 * 1024,
    formatter: Optional[logging.Formatter] = None,
) -> logging.Handler:
    """Construct a rotating file handler with sane defaults."""
    retention = max(1, retention)
    backup_count = max(0, retention - 1)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / filename
    handler = RotatingFileHandler(
        log_path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    if formatter is not None:
        handler.setFormatter(formatter)
    return handler


def resolve_log_level(debug_enabled: bool) -> int:
    return logging.DEBUG if debug_enabled else logging.INFO


def propagation_requested() -> bool:
    return os.environ.get(PROPAGATE_ENV_VAR, "").lower() in {"1", "true", "yes", "on"}


def configure_client_logger(name: str, *, debug_enabled: bool) -> logging.Logger:
    """Set level, propagation and the release filter on an overlay logger."""
    logger = logging.getLogger(name)
    logger.setLevel(resolve_log_level(debug_enabled))
    logger.propagate = propagation_requested()
    for existing in [item for item in logger.filters if isinstance(item, ReleaseLogLevelFilter)]:
        logger.removeFilter(existing)
    logger.addFilter(ReleaseLogLevelFilter(release_mode=not debug_enabled))
    return logger
