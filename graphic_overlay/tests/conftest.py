from __future__ import annotations

import os
from typing import Any, List, Optional, Sequence, Tuple

import pytest

from graphic_overlay.graphic import PainterAdapter


def pytest_runtest_setup(item):
    if item.get_closest_marker("pyqt_required"):
        if not os.getenv("PYQT_TESTS"):
            pytest.skip("PYQT_TESTS not set; skipping PyQt-dependent test")


class RecordingPainter(PainterAdapter):
    """Painter stub that records every primitive as a (name, args) tuple."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []

    def set_pen(self, color: str, *, width: Optional[float] = None) -> None:
        self.calls.append(("set_pen", (color, width)))

    def set_brush(self, color: Optional[str]) -> None:
        self.calls.append(("set_brush", (color,)))

    def draw_line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self.calls.append(("draw_line", (x1, y1, x2, y2)))

    def draw_rect(self, x: float, y: float, width: float, height: float) -> None:
        self.calls.append(("draw_rect", (x, y, width, height)))

    def draw_ellipse(self, cx: float, cy: float, rx: float, ry: float) -> None:
        self.calls.append(("draw_ellipse", (cx, cy, rx, ry)))

    def draw_polyline(self, points: Sequence[Tuple[float, float]]) -> None:
        self.calls.append(("draw_polyline", (list(points),)))

    def draw_polygon(self, points: Sequence[Tuple[float, float]]) -> None:
        self.calls.append(("draw_polygon", (list(points),)))

    def draw_text(self, x: float, y: float, text: str, color: str) -> None:
        self.calls.append(("draw_text", (x, y, text, color)))

    def named(self, name: str) -> List[Tuple[Any, ...]]:
        return [args for call, args in self.calls if call == name]


@pytest.fixture
def painter() -> RecordingPainter:
    return RecordingPainter()


@pytest.fixture
def qt_app(monkeypatch):
    monkeypatch.setenv("QT_QPA_PLATFORM", os.getenv("QT_QPA_PLATFORM", "offscreen"))
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app
