"""Image-to-surface coordinate transforms (no Qt types)."""
from __future__ import annotations

import math
import threading
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

_EPSILON = 1e-9

Point = Tuple[float, float]


@dataclass(frozen=True)
class AffineMatrix:
    """2D affine transform using QTransform's element layout.

    x' = m11 * x + m21 * y + dx
    y' = m12 * x + m22 * y + dy
    """

    m11: float = 1.0
    m12: float = 0.0
    m21: float = 0.0
    m22: float = 1.0
    dx: float = 0.0
    dy: float = 0.0

    @classmethod
    def identity(cls) -> "AffineMatrix":
        return cls()

    @classmethod
    def scaling(cls, sx: float, sy: Optional[float] = None) -> "AffineMatrix":
        return cls(m11=sx, m22=sx if sy is None else sy)

    @classmethod
    def translation(cls, tx: float, ty: float) -> "AffineMatrix":
        return cls(dx=tx, dy=ty)

    @classmethod
    def horizontal_flip(cls, center_x: float) -> "AffineMatrix":
        return cls(m11=-1.0, dx=2.0 * center_x)

    def then(self, other: "AffineMatrix") -> "AffineMatrix":
        """Return the transform that applies ``self`` first and ``other`` second."""
        return AffineMatrix(
            m11=self.m11 * other.m11 + self.m12 * other.m21,
            m12=self.m11 * other.m12 + self.m12 * other.m22,
            m21=self.m21 * other.m11 + self.m22 * other.m21,
            m22=self.m21 * other.m12 + self.m22 * other.m22,
            dx=self.dx * other.m11 + self.dy * other.m21 + other.dx,
            dy=self.dx * other.m12 + self.dy * other.m22 + other.dy,
        )

    def map(self, x: float, y: float) -> Point:
        return (
            self.m11 * x + self.m21 * y + self.dx,
            self.m12 * x + self.m22 * y + self.dy,
        )

    def map_points(self, points: Iterable[Point]) -> List[Point]:
        return [self.map(float(x), float(y)) for x, y in points]

    def is_identity(self) -> bool:
        return (
            math.isclose(self.m11, 1.0, abs_tol=_EPSILON)
            and math.isclose(self.m22, 1.0, abs_tol=_EPSILON)
            and math.isclose(self.m12, 0.0, abs_tol=_EPSILON)
            and math.isclose(self.m21, 0.0, abs_tol=_EPSILON)
            and math.isclose(self.dx, 0.0, abs_tol=_EPSILON)
            and math.isclose(self.dy, 0.0, abs_tol=_EPSILON)
        )


@dataclass(frozen=True)
class ImageTransform:
    """Resolved scale/crop/mirror details for one render pass.

    Instances are immutable, so a draw callback holding one can never observe
    a scale factor and a crop offset computed from different source sizes.
    When ``valid`` is False every mapping is the identity.
    """

    valid: bool = False
    mirrored: bool = False
    source_width: int = 0
    source_height: int = 0
    surface_width: float = 0.0
    surface_height: float = 0.0
    scale_factor: float = 1.0
    width_crop_offset: float = 0.0
    height_crop_offset: float = 0.0
    matrix: AffineMatrix = AffineMatrix()

    def map_length(self, value: float) -> float:
        if not self.valid:
            return value
        return value * self.scale_factor

    def map_x(self, x: float) -> float:
        if not self.valid:
            return x
        mapped = self.map_length(x) - self.width_crop_offset
        if self.mirrored:
            return self.surface_width - mapped
        return mapped

    def map_y(self, y: float) -> float:
        if not self.valid:
            return y
        return self.map_length(y) - self.height_crop_offset

    def map_point(self, x: float, y: float) -> Point:
        return self.map_x(x), self.map_y(y)

    def map_rect(self, left: float, top: float, right: float, bottom: float) -> Tuple[float, float, float, float]:
        """Map image-space bounds and normalise them so left <= right after mirroring."""
        x1 = self.map_x(left)
        x2 = self.map_x(right)
        y1 = self.map_y(top)
        y2 = self.map_y(bottom)
        return min(x1, x2), min(y1, y2), max(x1, x2), max(y1, y2)

    def composed_matrix(self) -> AffineMatrix:
        if not self.valid:
            return AffineMatrix.identity()
        return self.matrix


_INVALID_TRANSFORM = ImageTransform()


def _coerce_dimension(value: object) -> int:
    if isinstance(value, bool):
        return 0
    try:
        numeric = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(numeric) or numeric <= 0:
        return 0
    return int(numeric)


def _crop_offset(excess: float) -> float:
    # Rounding can leave a tiny negative excess when the aspect ratios match.
    if excess < _EPSILON:
        return 0.0
    return excess / 2.0


def compute_image_transform(
    source_width: int,
    source_height: int,
    surface_width: float,
    surface_height: float,
    mirrored: bool,
) -> ImageTransform:
    """Return the crop-to-fill mapping of the source image onto the surface.

    The source is scaled uniformly until it covers the surface, then centred:
    the excess along the overflowing axis is cropped equally from both sides.
    Mirroring flips the X axis about the surface's vertical centre line after
    cropping.
    """
    if source_width <= 0 or source_height <= 0 or surface_width <= 0 or surface_height <= 0:
        return _INVALID_TRANSFORM

    surface_w = float(surface_width)
    surface_h = float(surface_height)
    view_aspect = surface_w / surface_h
    source_aspect = float(source_width) / float(source_height)

    if view_aspect > source_aspect:
        # Surface is relatively wider: crop vertically.
        scale = surface_w / source_width
        height_offset = _crop_offset(surface_w / source_aspect - surface_h)
        width_offset = 0.0
    else:
        scale = surface_h / source_height
        width_offset = _crop_offset(surface_h * source_aspect - surface_w)
        height_offset = 0.0

    matrix = AffineMatrix.scaling(scale).then(AffineMatrix.translation(-width_offset, -height_offset))
    if mirrored:
        matrix = matrix.then(AffineMatrix.horizontal_flip(surface_w / 2.0))

    return ImageTransform(
        valid=True,
        mirrored=mirrored,
        source_width=source_width,
        source_height=source_height,
        surface_width=surface_w,
        surface_height=surface_h,
        scale_factor=scale,
        width_crop_offset=width_offset,
        height_crop_offset=height_offset,
        matrix=matrix,
    )


class TransformState:
    """Source-image info plus the lazily recomputed image-to-surface transform.

    Setters only mark the state dirty; ``refresh_if_needed`` is the single
    place the cached transform is recomputed and the dirty flag cleared.
    """

    def __init__(self, lock: Optional[threading.RLock] = None) -> None:
        self._lock = lock if lock is not None else threading.RLock()
        self._source_width = 0
        self._source_height = 0
        self._mirrored = False
        self._dirty = True
        self._current: ImageTransform = _INVALID_TRANSFORM

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def set_source_info(self, width: int, height: int, mirrored: bool) -> None:
        with self._lock:
            self._source_width = _coerce_dimension(width)
            self._source_height = _coerce_dimension(height)
            self._mirrored = bool(mirrored)
            self._dirty = True

    def notify_surface_resized(self) -> None:
        with self._lock:
            self._dirty = True

    def refresh_if_needed(self, surface_width: float, surface_height: float) -> bool:
        """Recompute the transform when dirty; return True when it was recomputed."""
        with self._lock:
            if not self._dirty:
                return False
            if not self.source_valid or surface_width <= 0 or surface_height <= 0:
                self._current = _INVALID_TRANSFORM
                return False
            self._current = compute_image_transform(
                self._source_width,
                self._source_height,
                surface_width,
                surface_height,
                self._mirrored,
            )
            self._dirty = False
            return True

    def snapshot(self) -> ImageTransform:
        with self._lock:
            return self._current

    @property
    def dirty(self) -> bool:
        with self._lock:
            return self._dirty

    @property
    def source_valid(self) -> bool:
        with self._lock:
            return self._source_width > 0 and self._source_height > 0

    @property
    def valid(self) -> bool:
        return self.snapshot().valid

    @property
    def source_size(self) -> Tuple[int, int]:
        with self._lock:
            return self._source_width, self._source_height

    @property
    def mirrored(self) -> bool:
        with self._lock:
            return self._mirrored

    @property
    def scale_factor(self) -> float:
        return self.snapshot().scale_factor

    @property
    def width_crop_offset(self) -> float:
        return self.snapshot().width_crop_offset

    @property
    def height_crop_offset(self) -> float:
        return self.snapshot().height_crop_offset

    def map_length(self, value: float) -> float:
        return self.snapshot().map_length(value)

    def map_x(self, x: float) -> float:
        return self.snapshot().map_x(x)

    def map_y(self, y: float) -> float:
        return self.snapshot().map_y(y)

    def composed_matrix(self) -> AffineMatrix:
        return self.snapshot().composed_matrix()
