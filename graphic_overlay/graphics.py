"""Reference annotation types for detection results (boxes, landmarks, contours)."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from graphic_overlay.graphic import Graphic, PainterAdapter
from graphic_overlay.transform_state import ImageTransform

Point = Tuple[float, float]

_LABEL_OFFSET = 8.0


@dataclass(eq=False)
class BoxGraphic(Graphic):
    """Axis-aligned box around a detection, optionally labelled."""

    left: float
    top: float
    right: float
    bottom: float
    color: str = "white"
    line_width: float = 2.0
    label: Optional[str] = None
    label_color: Optional[str] = None

    def draw(self, painter: PainterAdapter, transform: ImageTransform) -> None:
        x1, y1, x2, y2 = transform.map_rect(self.left, self.top, self.right, self.bottom)
        painter.set_pen(self.color, width=self.line_width)
        painter.set_brush(None)
        painter.draw_rect(x1, y1, x2 - x1, y2 - y1)
        if self.label:
            painter.draw_text(x1, y1 - _LABEL_OFFSET, self.label, self.label_color or self.color)


@dataclass(eq=False)
class LandmarkGraphic(Graphic):
    """Filled circle markers at landmark positions."""

    points: Sequence[Point] = field(default_factory=list)
    color: str = "white"
    radius: float = 4.0
    labels: Optional[Sequence[str]] = None

    def draw(self, painter: PainterAdapter, transform: ImageTransform) -> None:
        if not self.points:
            return
        radius = max(1.0, transform.map_length(self.radius))
        painter.set_pen(self.color, width=1)
        painter.set_brush(self.color)
        for idx, (x, y) in enumerate(self.points):
            cx, cy = transform.map_point(x, y)
            painter.draw_ellipse(cx, cy, radius, radius)
            if self.labels is not None and idx < len(self.labels) and self.labels[idx]:
                painter.draw_text(cx + _LABEL_OFFSET, cy - _LABEL_OFFSET, str(self.labels[idx]), self.color)


@dataclass(eq=False)
class ContourGraphic(Graphic):
    """Outline of a segmentation mask or face contour, mapped in bulk."""

    points: Sequence[Point] = field(default_factory=list)
    color: str = "white"
    line_width: float = 2.0
    closed: bool = True
    fill_color: Optional[str] = None

    def draw(self, painter: PainterAdapter, transform: ImageTransform) -> None:
        if len(self.points) < 2:
            return
        mapped: List[Point] = transform.composed_matrix().map_points(self.points)
        painter.set_pen(self.color, width=self.line_width)
        if self.closed:
            painter.set_brush(self.fill_color)
            painter.draw_polygon(mapped)
        else:
            painter.set_brush(None)
            painter.draw_polyline(mapped)
