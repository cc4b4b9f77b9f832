"""
Percentage formatting observer.

Converts progress events into a formatted percentage of the maximum and
forwards only changed, non-zero values, so two raw events that round to the
same percentage produce a single update.
"""

import logging
from typing import Callable, Optional

from milestone.errors import InvalidArgumentError, InvalidStateError
from milestone.progress.tracker import ProgressEvent

logger = logging.getLogger(__name__)


class PercentageObserver:
    """
    Observer that reports progress as a percentage of the maximum.

    Usage:
        tracker = ProgressTracker().add_observer(
            PercentageObserver(lambda pct: print(f"Processed {pct}%"))
        )
        tracker.set_maximum(len(items))

    The format spec is applied with format(); the default ".0f" rounds to the
    nearest whole percent. Subclasses may override on_update() instead of
    passing a callback. The tracker must have a maximum, otherwise events
    raise InvalidStateError.
    """

    def __init__(
        self,
        on_update: Optional[Callable[[str], None]] = None,
        format_spec: str = ".0f",
    ):
        if format_spec is None:
            raise InvalidArgumentError("format_spec is None")
        try:
            zero = format(0.0, format_spec)
        except ValueError as e:
            raise InvalidArgumentError(f"invalid format spec {format_spec!r}: {e}") from e

        self._callback = on_update
        self._format_spec = format_spec
        self._zero = zero
        self._last: Optional[str] = None

    @property
    def format_spec(self) -> str:
        return self._format_spec

    @property
    def last(self) -> Optional[str]:
        """The last percentage forwarded, if any."""
        return self._last

    def __call__(self, event: ProgressEvent) -> None:
        if event.maximum is None:
            raise InvalidStateError("maximum value undefined")

        percentage = event.progress / event.maximum * 100
        pct = format(percentage, self._format_spec)

        if pct == self._last or pct == self._zero:
            return

        self._last = pct
        self.on_update(pct)

    def on_update(self, pct: str) -> None:
        """Receive a formatted percentage; never called twice with the same value."""
        if self._callback is not None:
            self._callback(pct)
        else:
            logger.debug(f"No percentage callback registered, dropping {pct}%")

    def reset(self) -> None:
        """Forget the last forwarded value, e.g. before reusing with a reset tracker."""
        self._last = None
