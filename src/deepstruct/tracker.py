"""
Cycle tracking for recursive traversal.

Both trackers are arenas: each traversed reference is assigned a stable
slot index the first time it is seen, and lookups go through that index.
The arena keeps every reference alive for the lifetime of the tracker, so
an id() can never be recycled by a different object mid-traversal.

A tracker is scoped to a single top-level call and discarded afterwards.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Set, Tuple


class _Arena:
    """Assigns stable slot indices to references by identity."""

    def __init__(self):
        self._slots: Dict[int, int] = {}
        self._nodes: List[Any] = []

    def slot(self, ref: Any, create: bool = True) -> Optional[int]:
        index = self._slots.get(id(ref))
        if index is None and create:
            index = len(self._nodes)
            self._nodes.append(ref)
            self._slots[id(ref)] = index
        return index

    def __len__(self) -> int:
        return len(self._nodes)


class CycleTracker:
    """
    Identity-keyed map from a source reference to its produced target.

    Used by the clone engine: the (possibly still empty) target is
    registered before its children are populated, so a child pointing back
    to an ancestor resolves to the partially built target.

    Example:
        tracker = CycleTracker()
        tracker.set(source, target)
        tracker.get(source) is target   # True
        tracker.get(other)              # None
    """

    def __init__(self):
        self._arena = _Arena()
        self._targets: Dict[int, Any] = {}

    def get(self, ref: Any) -> Any:
        index = self._arena.slot(ref, create=False)
        if index is None:
            return None
        return self._targets.get(index)

    def set(self, ref: Any, target: Any) -> None:
        self._targets[self._arena.slot(ref)] = target

    def __contains__(self, ref: Any) -> bool:
        index = self._arena.slot(ref, create=False)
        return index is not None and index in self._targets

    def __len__(self) -> int:
        return len(self._targets)


class PairTracker:
    """
    Set of (a, b) reference pairs already entered by a deep comparison.

    A pair stays entered while its comparison is in progress. Re-entering
    it means the comparison is inside a cycle that is already being
    decided, so the pair is assumed equal (coinductive equality). That
    lets mutually recursive graphs compare as equal instead of recursing
    forever.
    """

    def __init__(self):
        self._arena = _Arena()
        self._pairs: Set[Tuple[int, int]] = set()

    def enter(self, a: Any, b: Any) -> bool:
        """
        Record the pair.

        Returns:
            False if the pair was already entered, True otherwise
        """
        pair = (self._arena.slot(a), self._arena.slot(b))
        if pair in self._pairs:
            return False
        self._pairs.add(pair)
        return True

    def leave(self, a: Any, b: Any) -> None:
        """Forget the pair once its comparison has been decided."""
        self._pairs.discard((self._arena.slot(a), self._arena.slot(b)))

    def __contains__(self, pair: Tuple[Any, Any]) -> bool:
        a, b = pair
        left = self._arena.slot(a, create=False)
        right = self._arena.slot(b, create=False)
        return left is not None and right is not None and (left, right) in self._pairs

    def __len__(self) -> int:
        return len(self._pairs)
