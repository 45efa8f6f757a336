"""Render-pass orchestration for the graphic overlay (no Qt types)."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Iterable, MutableSet, Optional

from graphic_overlay.client_config import OverlaySettings
from graphic_overlay.debug_config import DebugConfig
from graphic_overlay.graphic import Graphic, PainterAdapter
from graphic_overlay.graphic_registry import GraphicRegistry
from graphic_overlay.transform_state import ImageTransform, TransformState

_LOGGER = logging.getLogger("GraphicOverlay.Client.Renderer")

InvalidateFn = Callable[[], None]
LogFn = Callable[..., None]

_GUIDE_FAILURE_KEY = "guide_oval"


@dataclass(frozen=True)
class RenderStats:
    drawn: int = 0
    failed: int = 0
    transform_refreshed: bool = False
    transform_valid: bool = False


def draw_failure_key(graphic: object) -> str:
    graphic_type = type(graphic)
    return f"{graphic_type.__module__}.{graphic_type.__qualname__}"


def log_draw_failure(
    *,
    key: str,
    name: str,
    exc: BaseException,
    reported: MutableSet[str],
    warn_fn: LogFn,
    debug_fn: LogFn,
) -> None:
    """Warn the first time a key fails to draw; repeat failures go to debug.

    Keys are stable across frames (the graphic's type, not its identity), so
    a broken annotation type republished every frame warns once.
    """
    if key not in reported:
        reported.add(key)
        warn_fn("%s failed to draw and was skipped: %s", name, exc, exc_info=exc)
        return
    debug_fn("%s failed to draw again: %s", name, exc)


class OverlayRenderer:
    """Owns the transform state and graphic registry behind one overlay surface.

    The host calls :meth:`notify_surface_resized` on every size change and
    :meth:`render` on every paint. Mutators may be called from any thread;
    each one asks the host to redraw through ``invalidate``.
    """

    def __init__(
        self,
        settings: Optional[OverlaySettings] = None,
        debug_config: Optional[DebugConfig] = None,
        *,
        invalidate: Optional[InvalidateFn] = None,
    ) -> None:
        self._settings = settings or OverlaySettings()
        self._debug_config = debug_config or DebugConfig()
        self._lock = threading.RLock()
        self._transform = TransformState(self._lock)
        self._registry = GraphicRegistry(self._lock)
        self._invalidate = invalidate
        self._failed_graphics: set[str] = set()
        self._last_logged_transform: Optional[ImageTransform] = None

    @property
    def settings(self) -> OverlaySettings:
        return self._settings

    @property
    def transform(self) -> TransformState:
        return self._transform

    @property
    def registry(self) -> GraphicRegistry:
        return self._registry

    def set_invalidate_callback(self, callback: Optional[InvalidateFn]) -> None:
        self._invalidate = callback

    def _request_redraw(self) -> None:
        callback = self._invalidate
        if callback is not None:
            callback()

    # Producer-facing API -------------------------------------------------

    def set_source_info(self, width: int, height: int, mirrored: bool) -> None:
        """Record the detector input size and whether it is mirrored (front camera)."""
        self._transform.set_source_info(width, height, mirrored)
        self._request_redraw()

    def add(self, graphic: Graphic) -> None:
        self._registry.add(graphic)
        self._request_redraw()

    def remove(self, graphic: Graphic) -> bool:
        removed = self._registry.remove(graphic)
        if removed:
            self._request_redraw()
        return removed

    def clear(self) -> None:
        self._registry.clear()
        self._request_redraw()

    def replace(self, graphics: Iterable[Graphic]) -> None:
        self._registry.replace(graphics)
        self._request_redraw()

    # Host-facing API ------------------------------------------------------

    def notify_surface_resized(self) -> None:
        self._transform.notify_surface_resized()

    def render(self, painter: PainterAdapter, width: float, height: float) -> RenderStats:
        """Run one draw pass: refresh the transform, draw every graphic, then the guide."""
        with self._lock:
            refreshed = self._transform.refresh_if_needed(width, height)
            transform = self._transform.snapshot()
            graphics = self._registry.snapshot_for_draw()
        if refreshed:
            self._log_transform(transform)

        drawn = 0
        failed = 0
        failing_keys: set[str] = set()
        for graphic in graphics:
            try:
                graphic.draw(painter, transform)
            except Exception as exc:
                failed += 1
                key = draw_failure_key(graphic)
                failing_keys.add(key)
                self._report_failure(key, f"Graphic {type(graphic).__name__}", exc)
            else:
                drawn += 1

        if self._settings.guide_oval_enabled:
            try:
                self._draw_guide(painter, width, height)
            except Exception as exc:
                failing_keys.add(_GUIDE_FAILURE_KEY)
                self._report_failure(_GUIDE_FAILURE_KEY, "Guide oval", exc)

        # Keys that drew cleanly this pass warn again if they break later.
        self._failed_graphics.intersection_update(failing_keys)

        stats = RenderStats(
            drawn=drawn,
            failed=failed,
            transform_refreshed=refreshed,
            transform_valid=transform.valid,
        )
        if self._debug_config.trace_render:
            _LOGGER.debug(
                "Render pass: surface=%dx%d graphics=%d drawn=%d failed=%d refreshed=%s valid=%s",
                int(width),
                int(height),
                len(graphics),
                drawn,
                failed,
                refreshed,
                transform.valid,
            )
        return stats

    def _report_failure(self, key: str, name: str, exc: Exception) -> None:
        if not self._debug_config.log_draw_failures:
            _LOGGER.debug("%s failed to draw and was skipped: %s", name, exc)
            return
        log_draw_failure(
            key=key,
            name=name,
            exc=exc,
            reported=self._failed_graphics,
            warn_fn=_LOGGER.warning,
            debug_fn=_LOGGER.debug,
        )

    def _draw_guide(self, painter: PainterAdapter, width: float, height: float) -> None:
        if width <= 0 or height <= 0:
            return
        painter.set_pen(self._settings.guide_color, width=self._settings.guide_line_width)
        painter.set_brush(None)
        painter.draw_ellipse(width / 2.0, height / 2.0, width / 2.0, height / 4.0)

    def _log_transform(self, transform: ImageTransform) -> None:
        if transform == self._last_logged_transform:
            return
        _LOGGER.debug(
            "Overlay transform updated: source=%dx%d surface=%dx%d scale=%.4f "
            "crop=(%.1f,%.1f) mirrored=%d",
            transform.source_width,
            transform.source_height,
            int(round(transform.surface_width)),
            int(round(transform.surface_height)),
            transform.scale_factor,
            transform.width_crop_offset,
            transform.height_crop_offset,
            1 if transform.mirrored else 0,
        )
        self._last_logged_transform = transform
