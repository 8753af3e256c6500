"""Board model, sowing rules, and whole-board checks."""

from .board import (
    Board,
    BurnedMask,
    Move,
    UPPER,
    LOWER,
    HOLE_COUNT,
    ROW_SIZE,
    TOTAL_SEEDS,
    MAJORITY,
    opponent_of,
    opposite,
)
from .cancellation import CancelToken, Generation
from .errors import CancelledOperation, CongkakError, IllegalMove, InvariantViolation
from .rules import GameOutcome, check_conservation, check_game_end, has_legal_move, should_skip_turn
from .sowing import (
    BoardSnapshot,
    Capture,
    MAX_SOW_STEPS,
    SowResult,
    SowState,
    Sower,
    StepKind,
    apply_move,
    simulate_sow,
)

__all__ = [
    "Board",
    "BurnedMask",
    "Move",
    "UPPER",
    "LOWER",
    "HOLE_COUNT",
    "ROW_SIZE",
    "TOTAL_SEEDS",
    "MAJORITY",
    "opponent_of",
    "opposite",
    "CancelToken",
    "Generation",
    "CancelledOperation",
    "CongkakError",
    "IllegalMove",
    "InvariantViolation",
    "GameOutcome",
    "check_conservation",
    "check_game_end",
    "has_legal_move",
    "should_skip_turn",
    "BoardSnapshot",
    "Capture",
    "MAX_SOW_STEPS",
    "SowResult",
    "SowState",
    "Sower",
    "StepKind",
    "apply_move",
    "simulate_sow",
]
