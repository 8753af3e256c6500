"""
Whole-board rule checks: seed conservation, match end, and turn skipping.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from .board import Board, BurnedMask, LOWER, MAJORITY, TOTAL_SEEDS, UPPER, PLAYER_NAMES
from .errors import InvariantViolation

logger = logging.getLogger(__name__)

REASON_MAJORITY = "majority"
REASON_EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class GameOutcome:
    """``winner`` is UPPER, LOWER, or None for a draw."""

    winner: Optional[int]
    reason: str


def check_conservation(board: Board, in_hand: Sequence[int] = (), context: str = "") -> None:
    """Raise InvariantViolation unless holes + houses + seeds in hand == 98."""
    holes_total = sum(board.holes)
    hand_total = sum(in_hand)
    total = holes_total + board.houses[UPPER] + board.houses[LOWER] + hand_total
    if total != TOTAL_SEEDS:
        logger.error(
            "seed count mismatch at %s: expected %d, got %d "
            "(holes: %d, upper house: %d, lower house: %d, in hand: %d)",
            context or "?", TOTAL_SEEDS, total, holes_total,
            board.houses[UPPER], board.houses[LOWER], hand_total,
        )
        raise InvariantViolation(
            f"seed count mismatch at {context or '?'}: expected {TOTAL_SEEDS}, got {total}"
        )


def decide_winner(board: Board) -> Optional[int]:
    if board.houses[UPPER] > board.houses[LOWER]:
        return UPPER
    if board.houses[LOWER] > board.houses[UPPER]:
        return LOWER
    return None


def rows_exhausted(board: Board) -> bool:
    return board.row_total(UPPER) == 0 and board.row_total(LOWER) == 0


def check_game_end(board: Board, majority_rule: bool = True) -> Optional[GameOutcome]:
    """Return the outcome if the match is over, else None.

    Only meaningful while no sow is in flight. With ``majority_rule`` a house
    above 49 ends the match at once; an exhausted board always does.
    """
    if majority_rule and (board.houses[UPPER] > MAJORITY or board.houses[LOWER] > MAJORITY):
        return GameOutcome(decide_winner(board), REASON_MAJORITY)
    if rows_exhausted(board):
        return GameOutcome(decide_winner(board), REASON_EXHAUSTED)
    return None


def has_legal_move(board: Board, player: int, burned: Optional[BurnedMask] = None) -> bool:
    return bool(board.legal_moves(player, burned))


def should_skip_turn(board: Board, player: Optional[int]) -> bool:
    """True when the player to move has nothing left on their own row."""
    if player is None:
        return False
    skip = board.row_total(player) == 0
    if skip:
        logger.info("%s row is empty, turn passes", PLAYER_NAMES[player])
    return skip
