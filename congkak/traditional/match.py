"""Multi-round match bookkeeping for traditional mode."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from ..game.board import BurnedMask, LOWER, UPPER


class EndReason(Enum):
    DOMINATION = "domination"
    CONCESSION = "concession"


@dataclass(frozen=True)
class MatchState:
    """Match-level state. ``winner`` None with ``finished`` set means a draw."""

    round: int = 1
    burned: BurnedMask = field(default_factory=BurnedMask)
    winner: Optional[int] = None
    end_reason: Optional[EndReason] = None
    finished: bool = False

    @property
    def burned_upper(self) -> List[bool]:
        return self.burned.upper

    @property
    def burned_lower(self) -> List[bool]:
        return self.burned.lower


@dataclass(frozen=True)
class RoundSummary:
    round: int
    house_upper: int
    house_lower: int
    burned_upper: int
    burned_lower: int


def check_domination(burned_upper: Sequence[bool], burned_lower: Sequence[bool]) -> Optional[int]:
    """Return the winner if either row is entirely burned."""
    if all(burned_upper):
        return LOWER
    if all(burned_lower):
        return UPPER
    return None
