"""
Computer players that drive a :class:`Coordinator` through its public API.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Dict, Optional

from ..game.board import Move, PLAYER_NAMES
from ..game.errors import CancelledOperation
from ..game.sowing import SowResult
from ..search.minimax import Difficulty, choose_move, choose_move_async
from ..traditional.match import MatchState
from .coordinator import Coordinator
from .phase import GamePhase

logger = logging.getLogger(__name__)


class ComputerOpponent:
    def __init__(
        self,
        coordinator: Coordinator,
        player: int,
        difficulty: Difficulty = Difficulty.MEDIUM,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.coordinator = coordinator
        self.player = player
        self.difficulty = Difficulty(difficulty)
        self.rng = rng or random.Random()

    @property
    def majority_rule(self) -> bool:
        return not self.coordinator.traditional

    def can_move(self) -> bool:
        return bool(self.coordinator.legal_moves(self.player))

    async def take_turn(self) -> Optional[SowResult]:
        """Pick and sow one hole. None if there was nothing to do or a reset hit."""
        if not self.can_move():
            return None
        token = self.coordinator.generation.token()
        try:
            hole = await choose_move_async(
                self.coordinator.board, self.player, self.difficulty,
                token=token, rng=self.rng, majority_rule=self.majority_rule,
            )
        except CancelledOperation:
            return None
        legal = self.coordinator.legal_moves(self.player)
        if not legal:
            return None
        if hole not in legal:
            # The other side's sow changed the row while we were thinking.
            hole = choose_move(
                self.coordinator.board, self.player, self.difficulty,
                rng=self.rng, majority_rule=self.majority_rule,
            )
        logger.debug("%s (%s) picks %d", PLAYER_NAMES[self.player], self.difficulty.value, hole)
        return await self.coordinator.submit(Move(self.player, hole))


async def _freeplay(opponent: ComputerOpponent, budget: Dict[str, int]) -> None:
    coordinator = opponent.coordinator
    while coordinator.phase is GamePhase.FREEPLAY and coordinator.machine.can_move(opponent.player):
        if budget["moves"] <= 0:
            return
        if await opponent.take_turn() is None:
            if not coordinator.machine.any_sowing():
                return
            # Nothing to pick until the other side's sow lands.
            await asyncio.sleep(0)
            continue
        budget["moves"] -= 1


async def play_out(
    coordinator: Coordinator,
    opponents: Dict[int, ComputerOpponent],
    max_moves: int = 500,
    max_rounds: int = 10,
) -> MatchState:
    """Play computer against computer until the match ends.

    Traditional matches are continued from every round end until ``max_rounds``
    rounds have been played, then ended on the houses.
    """
    budget = {"moves": max_moves}
    if coordinator.phase is GamePhase.COUNTDOWN:
        coordinator.start()
    while coordinator.phase is not GamePhase.MATCH_END and budget["moves"] > 0:
        phase = coordinator.phase
        if phase is GamePhase.FREEPLAY:
            before = budget["moves"]
            await asyncio.gather(*(_freeplay(o, budget) for o in opponents.values()))
            if budget["moves"] == before:
                budget["moves"] -= 1
        elif phase is GamePhase.TURN_SELECT:
            await opponents[coordinator.turn].take_turn()
            budget["moves"] -= 1
        elif phase is GamePhase.ROUND_END:
            if coordinator.match.round >= max_rounds:
                coordinator.end_match()
            else:
                coordinator.continue_round()
        else:
            await asyncio.sleep(0)
    if coordinator.phase is not GamePhase.MATCH_END:
        logger.warning("play_out stopped after %d moves without a result", max_moves)
    return coordinator.match
