"""Tests for PercentageObserver."""

import pytest

from milestone import InvalidArgumentError, InvalidStateError, ProgressEvent, ProgressTracker
from milestone.progress import PercentageObserver


class TestPercentageObserver:
    """Tests for percentage formatting and duplicate suppression."""

    def test_whole_percentages_each_once(self):
        """Every whole percent is reported exactly once, in order."""
        received = []
        tracker = (
            ProgressTracker.with_constant_step_size(1)
            .add_observer(PercentageObserver(received.append))
            .set_maximum(200)
        )
        for _ in range(200):
            tracker.increment()
        tracker.complete()

        assert received == [str(pct) for pct in range(1, 101)]

    def test_zero_is_never_reported(self):
        received = []
        observer = PercentageObserver(received.append)
        observer(ProgressEvent(progress=0, maximum=100))
        observer(ProgressEvent(progress=1, maximum=1000))

        assert received == []
        assert observer.last is None

    def test_duplicates_suppressed(self):
        received = []
        observer = PercentageObserver(received.append)
        for progress in (10, 11, 12, 20):
            observer(ProgressEvent(progress=progress, maximum=1000))

        assert received == ["1", "2"]

    def test_custom_format_spec(self):
        received = []
        observer = PercentageObserver(received.append, format_spec=".1f")
        observer(ProgressEvent(progress=1, maximum=3))
        observer(ProgressEvent(progress=2, maximum=3))

        assert received == ["33.3", "66.7"]

    def test_invalid_format_spec_rejected(self):
        with pytest.raises(InvalidArgumentError):
            PercentageObserver(format_spec="q")

    def test_missing_maximum(self):
        """Events without a maximum cannot be turned into percentages."""
        observer = PercentageObserver(lambda pct: None)
        with pytest.raises(InvalidStateError, match="maximum value undefined"):
            observer(ProgressEvent(progress=10))

    def test_missing_maximum_through_tracker(self):
        tracker = ProgressTracker().add_observer(PercentageObserver(lambda pct: None))
        with pytest.raises(InvalidStateError):
            tracker.set_progress(10)

    def test_subclass_override(self):
        """Subclasses can override on_update instead of passing a callback."""

        class Collecting(PercentageObserver):
            def __init__(self):
                super().__init__()
                self.seen = []

            def on_update(self, pct):
                self.seen.append(pct)

        observer = Collecting()
        observer(ProgressEvent(progress=50, maximum=100))
        assert observer.seen == ["50"]

    def test_reset_allows_repeat(self):
        received = []
        observer = PercentageObserver(received.append)
        observer(ProgressEvent(progress=100, maximum=100))
        observer.reset()
        observer(ProgressEvent(progress=100, maximum=100))

        assert received == ["100", "100"]
