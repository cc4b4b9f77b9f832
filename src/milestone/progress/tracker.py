"""
Progress tracking for long-running operations.

Accumulates a non-decreasing progress count and notifies registered
observers only when the count crosses a multiple of the current step size.
Unless the step size is constant, it grows from the minimum toward the
maximum step size as the run progresses, so total notification volume stays
bounded regardless of how large the operation is.

This module is not thread safe. When several threads report progress,
serialize the calls externally or use SynchronizedProgressTracker.
"""

import logging
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict

from milestone.errors import InvalidArgumentError, InvalidStateError

logger = logging.getLogger(__name__)

DEFAULT_MIN_STEP_SIZE = 10
DEFAULT_MAX_STEP_SIZE = 1000


class ProgressEvent(BaseModel):
    """Snapshot of the tracker published to observers."""
    model_config = ConfigDict(frozen=True)

    progress: int
    maximum: Optional[int] = None


ProgressCallback = Callable[[ProgressEvent], Any]


class StepBasis(str, Enum):
    """Value fed to the step formula when the step is recomputed after a publish."""
    COUNT = "count"           # the count that was just published
    MAXIMUM = "maximum"       # the maximum when set, otherwise the count


def compute_step(value: int, min_step_size: int, max_step_size: int) -> int:
    """
    Derive a step size from a reference value.

    Small values step by the minimum; large values (over five times the
    maximum step size) step by the maximum; anything in between steps by a
    fifth of the value.
    """
    if value > max_step_size * 5:
        return max_step_size
    if value // 5 <= min_step_size:
        return min_step_size
    return value // 5


def _validate_step_range(min_step_size: int, max_step_size: int) -> None:
    if min_step_size <= 0:
        raise InvalidArgumentError("min_step_size <= 0")
    if max_step_size <= 0:
        raise InvalidArgumentError("max_step_size <= 0")
    if max_step_size < min_step_size:
        raise InvalidArgumentError("max_step_size < min_step_size")


class ProgressTracker:
    """
    Tracks the progress of a long-running operation.

    Usage:
        tracker = ProgressTracker().add_observer(lambda e: print(e.progress))

        for item in items:
            process(item)
            tracker.increment()

        tracker.complete()

    The maximum is optional, but once set the progress count can never
    exceed it. Setting the maximum may raise the step size to one derived
    from it, but never lowers the step within a run.

    complete() publishes a final event unless the last value was already
    published, and may be called any number of times. After completion every
    mutating call raises InvalidStateError until reset(). reset() keeps the
    observers, the step range and the maximum.
    """

    def __init__(
        self,
        min_step_size: int = DEFAULT_MIN_STEP_SIZE,
        max_step_size: int = DEFAULT_MAX_STEP_SIZE,
        step_basis: StepBasis = StepBasis.COUNT,
    ):
        _validate_step_range(min_step_size, max_step_size)

        self._min_step_size = min_step_size
        self._max_step_size = max_step_size
        self._step_basis = StepBasis(step_basis)
        self._step = min_step_size
        self._progress = 0
        self._maximum: Optional[int] = None
        self._done = False
        self._last_published: Optional[int] = None
        self._observers: list[ProgressCallback] = []

    @classmethod
    def with_step_range(cls, min_step_size: int, max_step_size: int) -> "ProgressTracker":
        """Create a tracker whose step grows from min_step_size to max_step_size."""
        return cls(min_step_size, max_step_size)

    @classmethod
    def with_constant_step_size(cls, step_size: int) -> "ProgressTracker":
        """Create a tracker that publishes every step_size units."""
        return cls(step_size, step_size)

    @classmethod
    def from_config(cls, config) -> "ProgressTracker":
        """Create a tracker from a TrackerConfig."""
        tracker = cls(config.min_step_size, config.max_step_size, config.step_basis)
        if config.maximum is not None:
            tracker.set_maximum(config.maximum)
        return tracker

    # -- configuration -------------------------------------------------------

    def add_observer(self, callback: ProgressCallback) -> "ProgressTracker":
        """Register a callback; callbacks are notified in registration order."""
        if callback is None:
            raise InvalidArgumentError("callback is None")
        if not callable(callback):
            raise InvalidArgumentError(f"callback is not callable: {callback!r}")
        self._observers.append(callback)
        return self

    def clear_observers(self) -> "ProgressTracker":
        """Remove every registered callback."""
        self._observers.clear()
        return self

    def set_step_size(self, step_size: int) -> "ProgressTracker":
        """Switch to a constant step size."""
        return self.set_step_range(step_size, step_size)

    def set_step_range(self, min_step_size: int, max_step_size: int) -> "ProgressTracker":
        """Switch to a dynamic step range, restarting the step at its minimum."""
        self._check_not_done()
        _validate_step_range(min_step_size, max_step_size)

        self._min_step_size = min_step_size
        self._max_step_size = max_step_size
        self._step = min_step_size
        logger.debug(f"Step range set to [{min_step_size}, {max_step_size}]")
        return self

    def set_maximum(self, maximum: int) -> "ProgressTracker":
        """
        Set the upper bound of the progress count.

        May be called again to adjust an underestimated maximum, as long as
        the operation has not completed.
        """
        self._check_not_done()
        if maximum < 1:
            raise InvalidArgumentError("maximum < 1")
        if maximum < self._progress:
            raise InvalidArgumentError(f"maximum ({maximum}) < progress ({self._progress})")

        self._maximum = maximum
        # the step never shrinks mid-run; reset() starts over from the minimum
        self._step = max(self._step, compute_step(maximum, self._min_step_size, self._max_step_size))
        logger.debug(f"Maximum set to {maximum}, step size {self._step}")
        return self

    # -- progress ------------------------------------------------------------

    def set_progress(self, count: int) -> "ProgressTracker":
        """
        Set the progress count, publishing an event if a step boundary was reached.

        An event is published when count lands on or skips past a multiple of
        the current step size, i.e. when count // step > previous // step.
        A jump that crosses a multiple without landing on one still publishes
        (15 -> 25 with a step of 10 publishes 25), even when the jump is
        smaller than the step. Setting the current value again does nothing.

        Raises:
            InvalidStateError: If the operation has completed.
            InvalidArgumentError: If count is below the current progress or
                above the maximum.
        """
        self._check_not_done()
        if count < self._progress:
            raise InvalidArgumentError(f"count ({count}) < progress ({self._progress})")
        if self._maximum is not None and count > self._maximum:
            raise InvalidArgumentError(f"count ({count}) > maximum ({self._maximum})")

        if count == self._progress:
            return self

        previous = self._progress
        self._progress = count

        if count // self._step > previous // self._step:
            self._publish()

            if self._step < self._max_step_size:
                self._recompute_step(count)

        return self

    def increment(self) -> int:
        """Increment the progress count by one and return the new count."""
        self.set_progress(self._progress + 1)
        return self._progress

    def complete(self) -> None:
        """
        Mark the operation as complete, publishing the final value if needed.

        The tracker is marked done before observers run, so an observer that
        raises still leaves it completed. Subsequent calls have no effect.
        """
        if self._done:
            return

        self._done = True
        logger.debug(f"Completed at {self._progress}")

        if self._last_published != self._progress:
            self._publish()

    def reset(self) -> "ProgressTracker":
        """Return to the initial running state, keeping observers, step range and maximum."""
        self._progress = 0
        self._step = self._min_step_size
        self._done = False
        self._last_published = None
        logger.debug("Reset")
        return self

    # -- accessors -----------------------------------------------------------

    @property
    def progress(self) -> int:
        return self._progress

    @property
    def maximum(self) -> Optional[int]:
        return self._maximum

    @property
    def step(self) -> int:
        """The current step size."""
        return self._step

    @property
    def done(self) -> bool:
        return self._done

    @property
    def min_step_size(self) -> int:
        return self._min_step_size

    @property
    def max_step_size(self) -> int:
        return self._max_step_size

    @property
    def step_basis(self) -> StepBasis:
        return self._step_basis

    @property
    def observers(self) -> tuple[ProgressCallback, ...]:
        return tuple(self._observers)

    def get_progress(self) -> int:
        return self._progress

    def get_maximum(self) -> Optional[int]:
        return self._maximum

    def is_done(self) -> bool:
        return self._done

    # -- internals -----------------------------------------------------------

    def _check_not_done(self) -> None:
        if self._done:
            raise InvalidStateError("operation has completed")

    def _recompute_step(self, count: int) -> None:
        if self._step_basis is StepBasis.MAXIMUM and self._maximum is not None:
            value = self._maximum
        else:
            value = count

        # never shrink mid-run, e.g. below a step derived from the maximum
        step = max(self._step, compute_step(value, self._min_step_size, self._max_step_size))
        if step != self._step:
            logger.debug(f"Step size {self._step} -> {step}")
            self._step = step

    def _publish(self) -> None:
        """Notify all observers; observer exceptions propagate to the caller."""
        event = ProgressEvent(progress=self._progress, maximum=self._maximum)
        self._last_published = self._progress
        logger.debug(f"Publishing progress {event.progress} (maximum {event.maximum})")

        for callback in self._observers:
            callback(event)

    def __enter__(self) -> "ProgressTracker":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.complete()

    def __repr__(self) -> str:
        return (
            f"ProgressTracker(progress={self._progress}, maximum={self._maximum}, "
            f"step={self._step}, done={self._done})"
        )
