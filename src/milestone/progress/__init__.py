"""
Progress tracking for long-running operations.

Publishes snapshots to observers at adaptively spaced milestones.
"""

from .tracker import (
    DEFAULT_MAX_STEP_SIZE,
    DEFAULT_MIN_STEP_SIZE,
    ProgressCallback,
    ProgressEvent,
    ProgressTracker,
    StepBasis,
    compute_step,
)
from .percent import PercentageObserver
from .sync import SynchronizedProgressTracker

__all__ = [
    "DEFAULT_MIN_STEP_SIZE",
    "DEFAULT_MAX_STEP_SIZE",
    "ProgressCallback",
    "ProgressEvent",
    "ProgressTracker",
    "StepBasis",
    "compute_step",
    "PercentageObserver",
    "SynchronizedProgressTracker",
]
