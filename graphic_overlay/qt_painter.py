"""Qt painter adapter for overlay graphics."""
from __future__ import annotations

from typing import Optional, Sequence, Tuple

from PyQt6.QtCore import QPointF, QRectF, Qt
from PyQt6.QtGui import QBrush, QColor, QPainter, QPen, QPolygonF, QTransform

from graphic_overlay.graphic import PainterAdapter
from graphic_overlay.transform_state import AffineMatrix


def _color(value: Optional[str], fallback: str = "white") -> QColor:
    q_color = QColor(value) if value else QColor(fallback)
    if not q_color.isValid():
        q_color = QColor(fallback)
    return q_color


def matrix_to_qtransform(matrix: AffineMatrix) -> QTransform:
    return QTransform(matrix.m11, matrix.m12, matrix.m21, matrix.m22, matrix.dx, matrix.dy)


def _polygon(points: Sequence[Tuple[float, float]]) -> QPolygonF:
    return QPolygonF([QPointF(float(x), float(y)) for x, y in points])


class QtPainterAdapter(PainterAdapter):
    def __init__(self, painter: QPainter, *, default_line_width: float = 2.0) -> None:
        self._painter = painter
        self._default_line_width = default_line_width

    @property
    def painter(self) -> QPainter:
        return self._painter

    def set_pen(self, color: str, *, width: Optional[float] = None) -> None:
        pen = QPen(_color(color))
        pen_width = self._default_line_width if width is None else max(0.0, float(width))
        pen.setWidthF(pen_width)
        self._painter.setPen(pen)

    def set_brush(self, color: Optional[str]) -> None:
        if color is None:
            self._painter.setBrush(Qt.BrushStyle.NoBrush)
            return
        self._painter.setBrush(QBrush(_color(color)))

    def draw_line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self._painter.drawLine(QPointF(x1, y1), QPointF(x2, y2))

    def draw_rect(self, x: float, y: float, width: float, height: float) -> None:
        self._painter.drawRect(QRectF(x, y, width, height))

    def draw_ellipse(self, cx: float, cy: float, rx: float, ry: float) -> None:
        self._painter.drawEllipse(QPointF(cx, cy), rx, ry)

    def draw_polyline(self, points: Sequence[Tuple[float, float]]) -> None:
        if len(points) < 2:
            return
        self._painter.drawPolyline(_polygon(points))

    def draw_polygon(self, points: Sequence[Tuple[float, float]]) -> None:
        if len(points) < 3:
            self.draw_polyline(points)
            return
        self._painter.drawPolygon(_polygon(points))

    def draw_text(self, x: float, y: float, text: str, color: str) -> None:
        self._painter.save()
        self._painter.setPen(QPen(_color(color)))
        self._painter.drawText(QPointF(x, y), text)
        self._painter.restore()
