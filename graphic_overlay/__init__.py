"""Scale, crop and mirror detection annotations onto a live video overlay."""
from __future__ import annotations

from graphic_overlay.graphic import Graphic, PainterAdapter
from graphic_overlay.graphic_registry import GraphicRegistry
from graphic_overlay.render_surface import OverlayRenderer, RenderStats
from graphic_overlay.transform_state import AffineMatrix, ImageTransform, TransformState

__all__ = [
    "AffineMatrix",
    "Graphic",
    "GraphicRegistry",
    "ImageTransform",
    "OverlayRenderer",
    "PainterAdapter",
    "RenderStats",
    "TransformState",
]
