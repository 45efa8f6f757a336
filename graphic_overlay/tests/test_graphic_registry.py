from __future__ import annotations

import threading

from graphic_overlay.graphic_registry import GraphicRegistry


class _Handle:
    """Opaque annotation stand-in; equal to every other handle on purpose."""

    def __init__(self, name: str) -> None:
        self.name = name

    def __eq__(self, other: object) -> bool:
        return isinstance(other, _Handle)

    __hash__ = object.__hash__

    def draw(self, painter, transform) -> None:  # noqa: ANN001
        return None


def test_remove_leaves_remaining_in_insertion_order() -> None:
    registry = GraphicRegistry()
    a, b, c = _Handle("a"), _Handle("b"), _Handle("c")
    registry.add(a)
    registry.add(b)
    registry.add(c)

    assert registry.remove(a) is True

    snapshot = registry.snapshot_for_draw()
    assert len(snapshot) == 2
    assert snapshot[0] is b
    assert snapshot[1] is c


def test_remove_matches_identity_not_equality() -> None:
    registry = GraphicRegistry()
    a, b = _Handle("a"), _Handle("b")
    registry.add(a)
    registry.add(b)

    registry.remove(b)

    snapshot = registry.snapshot_for_draw()
    assert len(snapshot) == 1
    assert snapshot[0] is a


def test_remove_absent_is_silent() -> None:
    registry = GraphicRegistry()
    registry.add(_Handle("a"))

    assert registry.remove(_Handle("stranger")) is False
    assert len(registry) == 1


def test_duplicates_are_kept_and_removed_one_at_a_time() -> None:
    registry = GraphicRegistry()
    a = _Handle("a")
    registry.add(a)
    registry.add(a)

    assert len(registry) == 2
    assert registry.remove(a) is True
    assert len(registry) == 1
    assert a in registry
    assert registry.remove(a) is True
    assert a not in registry


def test_clear_empties_snapshot() -> None:
    registry = GraphicRegistry()
    for idx in range(5):
        registry.add(_Handle(str(idx)))

    registry.clear()

    assert registry.snapshot_for_draw() == ()
    assert len(registry) == 0


def test_snapshot_is_isolated_from_later_mutation() -> None:
    registry = GraphicRegistry()
    a, b = _Handle("a"), _Handle("b")
    registry.add(a)
    snapshot = registry.snapshot_for_draw()

    registry.add(b)
    registry.clear()

    assert len(snapshot) == 1
    assert snapshot[0] is a


def test_replace_swaps_contents_in_order() -> None:
    registry = GraphicRegistry()
    registry.add(_Handle("old"))
    fresh = [_Handle("x"), _Handle("y")]

    registry.replace(iter(fresh))

    snapshot = registry.snapshot_for_draw()
    assert [item.name for item in snapshot] == ["x", "y"]
    assert [item.name for item in registry] == ["x", "y"]


def test_concurrent_adds_and_removes_keep_count_consistent() -> None:
    registry = GraphicRegistry()
    handles = [_Handle(str(idx)) for idx in range(400)]
    to_remove = handles[::2] + [_Handle("never-added") for _ in range(50)]
    removed = []
    removed_lock = threading.Lock()
    start = threading.Barrier(3)

    def _adder(chunk) -> None:  # noqa: ANN001
        start.wait()
        for handle in chunk:
            registry.add(handle)

    def _remover() -> None:
        start.wait()
        pending = list(to_remove)
        # Keep retrying until every target has been seen or can never appear.
        for _ in range(200):
            still_pending = []
            for handle in pending:
                if registry.remove(handle):
                    with removed_lock:
                        removed.append(handle)
                else:
                    still_pending.append(handle)
            pending = still_pending
            if not pending:
                break
            registry.snapshot_for_draw()

    threads = [
        threading.Thread(target=_adder, args=(handles[:200],)),
        threading.Thread(target=_adder, args=(handles[200:],)),
        threading.Thread(target=_remover),
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    snapshot = registry.snapshot_for_draw()
    assert len(snapshot) == len(handles) - len(removed)
    removed_ids = {id(item) for item in removed}
    assert all(id(item) not in removed_ids for item in snapshot)
    assert len({id(item) for item in snapshot}) == len(snapshot)
