"""
Exception hierarchy for milestone.

Two failure kinds exist for tracker operations:
- InvalidArgumentError: a caller-supplied value violates a precondition
- InvalidStateError: a mutation was attempted after completion

Both are raised before any state changes, so a failed call leaves the
tracker exactly as it was.
"""


class MilestoneError(Exception):
    """Base exception for milestone."""
    pass


class InvalidArgumentError(MilestoneError, ValueError):
    """A supplied value violates a precondition."""
    pass


class InvalidStateError(MilestoneError, RuntimeError):
    """The tracker is not in a state that permits the operation."""
    pass
