"""
Tests for the identity-keyed cycle trackers.
"""

from deepstruct.tracker import CycleTracker, PairTracker


class TestCycleTracker:
    """Test source -> target registration."""

    def test_identity_not_equality(self):
        """Equal but distinct objects get separate slots."""
        tracker = CycleTracker()
        first, second = {"a": 1}, {"a": 1}
        target = {}
        tracker.set(first, target)

        assert tracker.get(first) is target
        assert tracker.get(second) is None
        assert first in tracker
        assert second not in tracker

    def test_unhashable_keys(self):
        """Lists and dicts can be tracked."""
        tracker = CycleTracker()
        source = [1, 2]
        tracker.set(source, "copy")
        assert tracker.get(source) == "copy"
        assert len(tracker) == 1

    def test_overwrite(self):
        tracker = CycleTracker()
        source = []
        tracker.set(source, 1)
        tracker.set(source, 2)
        assert tracker.get(source) == 2
        assert len(tracker) == 1


class TestPairTracker:
    """Test visited pair bookkeeping."""

    def test_enter_once(self):
        tracker = PairTracker()
        a, b = [], []
        assert tracker.enter(a, b) is True
        assert tracker.enter(a, b) is False
        assert (a, b) in tracker

    def test_pairs_are_ordered(self):
        """(a, b) and (b, a) are different pairs."""
        tracker = PairTracker()
        a, b = [], []
        tracker.enter(a, b)
        assert (b, a) not in tracker
        assert tracker.enter(b, a) is True

    def test_leave(self):
        """A left pair can be entered again."""
        tracker = PairTracker()
        a, b = {}, {}
        tracker.enter(a, b)
        tracker.leave(a, b)
        assert (a, b) not in tracker
        assert tracker.enter(a, b) is True
