"""PyQt6 surface that renders overlay graphics on top of a live feed."""
from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QColor, QPainter, QPen
from PyQt6.QtWidgets import QWidget

from graphic_overlay.client_config import OverlaySettings
from graphic_overlay.debug_config import DEBUG_CONFIG_ENABLED, DebugConfig
from graphic_overlay.graphic import Graphic
from graphic_overlay.logging_utils import LOGGER_ROOT, configure_client_logger
from graphic_overlay.qt_painter import QtPainterAdapter
from graphic_overlay.render_surface import OverlayRenderer, RenderStats

_LOGGER_NAME = f"{LOGGER_ROOT}.Client"
_CLIENT_LOGGER = configure_client_logger(_LOGGER_NAME, debug_enabled=DEBUG_CONFIG_ENABLED)


class GraphicOverlayWidget(QWidget):
    """Transparent, click-through widget layered over a camera preview.

    Detection code adds graphics expressed in source-image pixels; the
    widget maps them onto its own size, cropping to fill and mirroring for
    front-facing sources. All public mutators are safe to call from worker
    threads.
    """

    invalidate_requested = pyqtSignal()

    def __init__(
        self,
        settings: Optional[OverlaySettings] = None,
        debug_config: Optional[DebugConfig] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._settings = settings or OverlaySettings()
        self._debug_config = debug_config or DebugConfig()
        self._renderer = OverlayRenderer(self._settings, self._debug_config, invalidate=self.post_invalidate)
        self._paint_stats: Dict[str, Any] = {"paint_count": 0, "failed_draws": 0}
        self._last_render: Optional[RenderStats] = None
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground, True)
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)
        self.setAttribute(Qt.WidgetAttribute.WA_NoSystemBackground, True)
        self.invalidate_requested.connect(self.update, Qt.ConnectionType.QueuedConnection)

    @property
    def renderer(self) -> OverlayRenderer:
        return self._renderer

    @property
    def paint_stats(self) -> Dict[str, Any]:
        return dict(self._paint_stats)

    @property
    def last_render(self) -> Optional[RenderStats]:
        return self._last_render

    # Producer-facing API -------------------------------------------------

    def set_source_info(self, width: int, height: int, mirrored: bool) -> None:
        self._renderer.set_source_info(width, height, mirrored)

    def add(self, graphic: Graphic) -> None:
        self._renderer.add(graphic)

    def remove(self, graphic: Graphic) -> bool:
        return self._renderer.remove(graphic)

    def clear(self) -> None:
        self._renderer.clear()

    def replace(self, graphics: Iterable[Graphic]) -> None:
        self._renderer.replace(graphics)

    def post_invalidate(self) -> None:
        """Schedule a repaint on the GUI thread; callable from any thread."""
        self.invalidate_requested.emit()

    # Qt events -------------------------------------------------------------

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._renderer.notify_surface_resized()
        size = event.size()
        _CLIENT_LOGGER.debug("Overlay surface resized to %dx%d", size.width(), size.height())

    def paintEvent(self, event) -> None:  # type: ignore[override]
        painter = QPainter(self)
        try:
            painter.setRenderHint(QPainter.RenderHint.Antialiasing)
            adapter = QtPainterAdapter(painter, default_line_width=self._settings.annotation_line_width)
            stats = self._renderer.render(adapter, self.width(), self.height())
            if self._debug_config.surface_outline:
                self._paint_surface_outline(painter)
        finally:
            painter.end()
        self._last_render = stats
        self._paint_stats["paint_count"] = self._paint_stats.get("paint_count", 0) + 1
        self._paint_stats["failed_draws"] = self._paint_stats.get("failed_draws", 0) + stats.failed
        super().paintEvent(event)

    def _paint_surface_outline(self, painter: QPainter) -> None:
        pen = QPen(QColor(255, 255, 0, 160))
        pen.setWidth(1)
        painter.setPen(pen)
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawRect(0, 0, max(0, self.width() - 1), max(0, self.height() - 1))
