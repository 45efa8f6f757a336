from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Iterable, Iterator, List, Optional, Tuple

if TYPE_CHECKING:
    from graphic_overlay.graphic import Graphic


class GraphicRegistry:
    """Ordered, lock-guarded collection of annotations drawn on the overlay.

    Membership is by identity, duplicates are allowed, and insertion order is
    draw order. Draw passes read a copy taken under the lock so producers are
    never blocked by slow draw callbacks.
    """

    def __init__(self, lock: Optional[threading.RLock] = None) -> None:
        self._lock = lock if lock is not None else threading.RLock()
        self._graphics: List["Graphic"] = []

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def add(self, graphic: "Graphic") -> None:
        with self._lock:
            self._graphics.append(graphic)

    def remove(self, graphic: "Graphic") -> bool:
        """Remove the first entry that is ``graphic``; return False when absent."""
        with self._lock:
            for index, candidate in enumerate(self._graphics):
                if candidate is graphic:
                    del self._graphics[index]
                    return True
            return False

    def clear(self) -> None:
        with self._lock:
            self._graphics.clear()

    def replace(self, graphics: Iterable["Graphic"]) -> None:
        """Swap the whole collection in one step (clear + add without a visible gap)."""
        incoming = list(graphics)
        with self._lock:
            self._graphics = incoming

    def snapshot_for_draw(self) -> Tuple["Graphic", ...]:
        with self._lock:
            return tuple(self._graphics)

    def __len__(self) -> int:
        with self._lock:
            return len(self._graphics)

    def __contains__(self, graphic: object) -> bool:
        with self._lock:
            return any(candidate is graphic for candidate in self._graphics)

    def __iter__(self) -> Iterator["Graphic"]:
        return iter(self.snapshot_for_draw())
