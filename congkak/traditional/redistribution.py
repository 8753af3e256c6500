"""
Round-end redistribution for traditional Congkak (lubang hangus).

Each player refills their own row from their house, seven seeds per hole,
starting with the hole nearest the house. The first hole that cannot get a
full seven takes the remainder; every hole after the remainder runs out is
burned for the rest of the match. Burned holes never reopen: they are left
out of the fill order and stay empty, and whatever the open holes cannot hold
stays banked in the house.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..game.board import Board, BurnedMask, LOWER, PLAYER_NAMES, ROW_SIZE, SEEDS_PER_HOLE, UPPER

logger = logging.getLogger(__name__)

# Local indices, nearest the house first. Same for both players.
FILL_ORDER: Tuple[int, ...] = (6, 5, 4, 3, 2, 1, 0)


@dataclass(frozen=True)
class Redistribution:
    row: List[int]
    burned: List[bool]
    leftover: int


def redistribute(house_total: int, burned: Optional[Sequence[bool]] = None) -> Redistribution:
    """Refill one row of 7 holes from ``house_total`` seeds.

    ``burned`` is the player's current mask; those holes are skipped and stay
    burned. Without it every hole is eligible.
    """
    if house_total < 0:
        raise ValueError("house total must be non-negative")
    previously = list(burned) if burned is not None else [False] * ROW_SIZE
    if len(previously) != ROW_SIZE:
        raise ValueError("burned mask needs 7 entries")

    open_holes = [i for i in FILL_ORDER if not previously[i]]
    capacity = SEEDS_PER_HOLE * len(open_holes)
    remaining = min(house_total, capacity)
    leftover = house_total - remaining

    row = [0] * ROW_SIZE
    new_burned = previously[:]
    for local in open_holes:
        if remaining >= SEEDS_PER_HOLE:
            row[local] = SEEDS_PER_HOLE
            remaining -= SEEDS_PER_HOLE
        elif remaining > 0:
            row[local] = remaining
            remaining = 0
        else:
            new_burned[local] = True
    return Redistribution(row=row, burned=new_burned, leftover=leftover)


def combine_rows(upper: Sequence[int], lower: Sequence[int]) -> List[int]:
    return list(upper) + list(lower)


def redistribute_board(board: Board, burned: BurnedMask) -> Tuple[Board, BurnedMask]:
    """Refill both rows from the houses; rows must already be empty."""
    if board.row_total(UPPER) or board.row_total(LOWER):
        raise ValueError("redistribution needs both rows empty")
    upper = redistribute(board.houses[UPPER], burned.upper)
    lower = redistribute(board.houses[LOWER], burned.lower)
    for player, plan in ((UPPER, upper), (LOWER, lower)):
        logger.info(
            "%s redistributes: row %s, %d burned, %d kept in house",
            PLAYER_NAMES[player], plan.row, sum(plan.burned), plan.leftover,
        )
    new_board = Board(
        holes=combine_rows(upper.row, lower.row),
        houses=[upper.leftover, lower.leftover],
    )
    return new_board, BurnedMask(upper=upper.burned, lower=lower.burned)
