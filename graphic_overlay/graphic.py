"""Annotation base class and the painter interface annotations draw through."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence, Tuple

from graphic_overlay.transform_state import ImageTransform


class PainterAdapter:
    """Drawing primitives available to annotations, in surface coordinates."""

    def set_pen(self, color: str, *, width: Optional[float] = None) -> None: ...
    def set_brush(self, color: Optional[str]) -> None: ...
    def draw_line(self, x1: float, y1: float, x2: float, y2: float) -> None: ...
    def draw_rect(self, x: float, y: float, width: float, height: float) -> None: ...
    def draw_ellipse(self, cx: float, cy: float, rx: float, ry: float) -> None: ...
    def draw_polyline(self, points: Sequence[Tuple[float, float]]) -> None: ...
    def draw_polygon(self, points: Sequence[Tuple[float, float]]) -> None: ...
    # Text is positioned by its baseline.
    def draw_text(self, x: float, y: float, text: str, color: str) -> None: ...


class Graphic(ABC):
    """Base class for an annotation rendered on the overlay.

    Subclasses implement :meth:`draw` and convert every coordinate and size
    they emit through ``transform``:

    * ``transform.map_length`` scales an image-space length to surface pixels.
    * ``transform.map_x`` / ``transform.map_y`` convert image coordinates to
      surface coordinates, including crop offsets and mirroring.
    * ``transform.composed_matrix()`` returns the whole mapping as one affine
      matrix for shapes transformed in bulk.

    Add instances to the overlay with ``OverlayRenderer.add``.
    """

    @abstractmethod
    def draw(self, painter: PainterAdapter, transform: ImageTransform) -> None:
        raise NotImplementedError
