"""Generation-based cancellation for suspendable operations.

Every suspendable operation captures a :class:`CancelToken` from the owning
:class:`Generation` when it starts. Bumping the generation (a reset, a
concession) makes all outstanding tokens stale; each step re-checks its token
before resuming and abandons the sequence on mismatch.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import CancelledOperation


class Generation:
    def __init__(self) -> None:
        self._value = 0

    @property
    def value(self) -> int:
        return self._value

    def bump(self) -> int:
        self._value += 1
        return self._value

    def token(self) -> "CancelToken":
        return CancelToken(self, self._value)


@dataclass(frozen=True)
class CancelToken:
    source: Generation
    value: int

    @property
    def cancelled(self) -> bool:
        return self.source.value != self.value

    def check(self) -> None:
        if self.cancelled:
            raise CancelledOperation(
                f"generation {self.value} superseded by {self.source.value}"
            )
