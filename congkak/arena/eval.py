"""Computer-vs-computer matches for calibrating the difficulty levels."""

from __future__ import annotations

import asyncio
import logging
import random
from collections import Counter
from dataclasses import dataclass
from typing import Optional, Tuple

from congkak.coordinator import ComputerOpponent, Coordinator, CoordinatorConfig, play_out
from congkak.game.board import LOWER, PLAYER_NAMES, UPPER
from congkak.search.minimax import Difficulty

logger = logging.getLogger(__name__)


@dataclass
class ArenaConfig:
    games: int = 10
    mode: str = "quick"
    seed: Optional[int] = None
    max_moves: int = 500
    max_rounds: int = 5


def play_game(upper: Difficulty, lower: Difficulty, cfg: ArenaConfig, rng: Optional[random.Random] = None) -> int:
    """Play one match: returns 1 if Upper wins, 0 for draw, -1 if Lower wins."""
    rng = rng or random.Random(cfg.seed)
    coordinator = Coordinator(CoordinatorConfig(mode=cfg.mode))
    opponents = {
        UPPER: ComputerOpponent(coordinator, UPPER, upper, rng),
        LOWER: ComputerOpponent(coordinator, LOWER, lower, rng),
    }
    match = asyncio.run(play_out(coordinator, opponents, cfg.max_moves, cfg.max_rounds))
    if match.winner is None:
        return 0
    return 1 if match.winner == UPPER else -1


def arena(a: Difficulty, b: Difficulty, cfg: ArenaConfig) -> Tuple[int, int, int, float]:
    """Play ``cfg.games`` matches with ``a`` taking Upper on even games.

    Returns (wins, draws, losses, win_rate) from ``a``'s side; a draw counts half.
    """
    rng = random.Random(cfg.seed)
    tally: Counter = Counter()
    for game in range(cfg.games):
        seat = UPPER if game % 2 == 0 else LOWER
        upper, lower = (a, b) if seat == UPPER else (b, a)
        outcome = play_game(upper, lower, cfg, rng)
        if seat == LOWER:
            outcome = -outcome
        tally[outcome] += 1
        logger.debug("game %d: %s as %s scored %d", game, Difficulty(a).value, PLAYER_NAMES[seat], outcome)
    wins, draws, losses = tally[1], tally[0], tally[-1]
    win_rate = (wins + draws / 2) / cfg.games if cfg.games else 0.0
    logger.info("%s vs %s: %d-%d-%d", Difficulty(a).value, Difficulty(b).value, wins, draws, losses)
    return wins, draws, losses, win_rate
