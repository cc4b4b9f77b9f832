"""
milestone: adaptive progress notification for long-running operations.

Tracks a growing progress count and notifies observers at milestones whose
spacing widens as the run grows, keeping notification volume bounded.
"""

from milestone.errors import InvalidArgumentError, InvalidStateError, MilestoneError
from milestone.progress import (
    PercentageObserver,
    ProgressCallback,
    ProgressEvent,
    ProgressTracker,
    StepBasis,
    SynchronizedProgressTracker,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "MilestoneError",
    "InvalidArgumentError",
    "InvalidStateError",
    "PercentageObserver",
    "ProgressCallback",
    "ProgressEvent",
    "ProgressTracker",
    "StepBasis",
    "SynchronizedProgressTracker",
]
