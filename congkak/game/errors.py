"""Exception taxonomy for the Congkak engine."""

from __future__ import annotations


class CongkakError(Exception):
    """Base class for every error raised by this package."""


class IllegalMove(CongkakError, ValueError):
    """A move was rejected before anything changed.

    Raised for empty or burned holes, holes outside the mover's row, and moves
    made out of phase or out of turn.
    """


class InvariantViolation(CongkakError, RuntimeError):
    """Seed conservation (or another engine invariant) was broken.

    This is a programming defect, never a user error, and is fatal to the match.
    """


class CancelledOperation(CongkakError):
    """A step sequence was abandoned because its generation token went stale."""
