"""
Board model for Congkak.

The ring holds 14 holes. Holes 0..6 belong to Upper and holes 7..13 to Lower.
Sowing runs in increasing index order: Upper's house sits between holes 6 and 7,
Lower's house between holes 13 and 0. Houses are not part of the 14-index ring.

Hole ``i`` faces hole ``13 - i``. Burned masks are indexed by local position
within a row (0..6), so local 6 is the hole nearest its owner's house for both
players.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


UPPER: int = 0
LOWER: int = 1

HOLE_COUNT: int = 14
ROW_SIZE: int = 7
SEEDS_PER_HOLE: int = 7
TOTAL_SEEDS: int = HOLE_COUNT * SEEDS_PER_HOLE  # 98
MAJORITY: int = TOTAL_SEEDS // 2  # a house strictly above this wins outright

PLAYER_NAMES = {UPPER: "UPPER", LOWER: "LOWER"}


def opponent_of(player: int) -> int:
    return LOWER if player == UPPER else UPPER


def row_start(player: int) -> int:
    return 0 if player == UPPER else ROW_SIZE


def row_indices(player: int) -> range:
    start = row_start(player)
    return range(start, start + ROW_SIZE)


def last_hole(player: int) -> int:
    """Index of the hole sown just before the player's own house."""
    return row_start(player) + ROW_SIZE - 1


def owner_of(index: int) -> int:
    return UPPER if index < ROW_SIZE else LOWER


def opposite(index: int) -> int:
    return HOLE_COUNT - 1 - index


def local_index(index: int) -> int:
    return index % ROW_SIZE


@dataclass(frozen=True)
class Move:
    player: int
    hole: int


@dataclass(frozen=True)
class Board:
    """Immutable board position.

    Attributes:
        holes: 14 seed counts, see module docstring for ownership.
        houses: [upper_house, lower_house].
    """

    holes: List[int]
    houses: List[int] = field(default_factory=lambda: [0, 0])

    # ------------------------- Construction helpers ------------------------- #
    @staticmethod
    def initial() -> "Board":
        return Board(holes=[SEEDS_PER_HOLE] * HOLE_COUNT, houses=[0, 0])

    @staticmethod
    def from_rows(upper: List[int], lower: List[int], houses: Optional[List[int]] = None) -> "Board":
        if len(upper) != ROW_SIZE or len(lower) != ROW_SIZE:
            raise ValueError("each row must hold exactly 7 holes")
        return Board(holes=list(upper) + list(lower), houses=list(houses or [0, 0]))

    def __post_init__(self) -> None:
        if len(self.holes) != HOLE_COUNT:
            raise ValueError(f"board needs {HOLE_COUNT} holes, got {len(self.holes)}")
        if len(self.houses) != 2:
            raise ValueError("board needs exactly two houses")
        if any(n < 0 for n in self.holes) or any(n < 0 for n in self.houses):
            raise ValueError("seed counts must be non-negative")

    # ----------------------------- Query methods ---------------------------- #
    @property
    def house_upper(self) -> int:
        return self.houses[UPPER]

    @property
    def house_lower(self) -> int:
        return self.houses[LOWER]

    def copy(self) -> "Board":
        return Board(holes=self.holes[:], houses=self.houses[:])

    def row(self, player: int) -> List[int]:
        start = row_start(player)
        return self.holes[start:start + ROW_SIZE]

    def row_total(self, player: int) -> int:
        return sum(self.row(player))

    def total_seeds(self) -> int:
        return sum(self.holes) + self.houses[UPPER] + self.houses[LOWER]

    def legal_moves(self, player: int, burned: Optional["BurnedMask"] = None) -> List[int]:
        """Global indices of the player's holes that may be picked."""
        return [
            i for i in row_indices(player)
            if self.holes[i] > 0 and (burned is None or not burned.is_burned(i))
        ]


@dataclass(frozen=True)
class BurnedMask:
    """Burned ("hangus") holes per player, indexed by local position 0..6."""

    upper: List[bool] = field(default_factory=lambda: [False] * ROW_SIZE)
    lower: List[bool] = field(default_factory=lambda: [False] * ROW_SIZE)

    def row(self, player: int) -> List[bool]:
        return self.upper if player == UPPER else self.lower

    def is_burned(self, index: int) -> bool:
        return self.row(owner_of(index))[local_index(index)]

    def count(self, player: int) -> int:
        return sum(1 for b in self.row(player) if b)

    def any(self) -> bool:
        return any(self.upper) or any(self.lower)

    def replace_row(self, player: int, row: List[bool]) -> "BurnedMask":
        if player == UPPER:
            return BurnedMask(upper=list(row), lower=self.lower[:])
        return BurnedMask(upper=self.upper[:], lower=list(row))
