"""
Game phase state machine and the freeplay rendezvous.

During freeplay both players sow independently. A player whose sow ends
without an extra turn starts waiting; once both have finished, the one who
finished first gets the first alternating turn. The :class:`Rendezvous` is
that two-party barrier, and :class:`PhaseMachine` applies the transitions:

    COUNTDOWN --trigger--> FREEPLAY --both finished--> TURN_SELECT
    TURN_SELECT --sow started--> TURN_SOWING --sow completed--> TURN_SELECT
    ROUND_END --trigger--> REDISTRIBUTING

The remaining phases (ROUND_END, MATCH_END, the phase after redistribution)
are entered directly by the coordinator with :meth:`PhaseMachine.enter`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

from ..game.board import LOWER, PLAYER_NAMES, UPPER, opponent_of
from ..game.errors import IllegalMove

logger = logging.getLogger(__name__)


class GamePhase(Enum):
    COUNTDOWN = "COUNTDOWN"
    FREEPLAY = "FREEPLAY"
    TURN_SELECT = "TURN_SELECT"
    TURN_SOWING = "TURN_SOWING"
    ROUND_END = "ROUND_END"
    REDISTRIBUTING = "REDISTRIBUTING"
    MATCH_END = "MATCH_END"


@dataclass(frozen=True)
class ExternalTrigger:
    """Countdown finished, or the collaborator chose to continue a round."""


@dataclass(frozen=True)
class SowStarted:
    player: int


@dataclass(frozen=True)
class SowCompleted:
    player: int
    extra_turn: bool


PhaseEvent = Union[ExternalTrigger, SowStarted, SowCompleted]


class Rendezvous:
    """Two-party barrier that turns freeplay into alternating turns."""

    def __init__(self) -> None:
        self.waiting: List[bool] = [False, False]
        self.sowing: List[bool] = [False, False]
        self.first_to_finish: Optional[int] = None

    def reset(self) -> None:
        self.waiting = [False, False]
        self.sowing = [False, False]
        self.first_to_finish = None

    def start(self, player: int) -> None:
        self.sowing[player] = True

    def finish(self, player: int, extra_turn: bool) -> Optional[int]:
        """Record the end of a freeplay sow.

        Returns the player who takes the first alternating turn once both
        players are done, otherwise None.
        """
        self.sowing[player] = False
        if extra_turn:
            return None
        other = opponent_of(player)
        if self.waiting[other] and not self.sowing[other]:
            turn = self.first_to_finish if self.first_to_finish is not None else other
            self.reset()
            return turn
        # Other player is still sowing or has not finished yet: wait for them.
        self.waiting[player] = True
        if self.first_to_finish is None:
            self.first_to_finish = player
        return None


class PhaseMachine:
    def __init__(self, phase: GamePhase = GamePhase.COUNTDOWN, turn: Optional[int] = None) -> None:
        self.phase = phase
        self.turn = turn
        self.rendezvous = Rendezvous()

    # ----------------------------- Query methods ---------------------------- #
    def is_sowing(self, player: int) -> bool:
        return self.rendezvous.sowing[player]

    def any_sowing(self) -> bool:
        return any(self.rendezvous.sowing)

    def is_waiting(self, player: int) -> bool:
        return self.rendezvous.waiting[player]

    def check_can_move(self, player: int) -> None:
        """Raise IllegalMove unless ``player`` may start a sow right now."""
        if player not in (UPPER, LOWER):
            raise IllegalMove(f"unknown player {player!r}")
        name = PLAYER_NAMES[player]
        if self.phase is GamePhase.FREEPLAY:
            if self.rendezvous.sowing[player]:
                raise IllegalMove(f"{name} is already sowing")
            if self.rendezvous.waiting[player]:
                raise IllegalMove(f"{name} is waiting for the other player")
            return
        if self.phase is GamePhase.TURN_SELECT:
            if self.turn != player:
                raise IllegalMove(f"it is not {name}'s turn")
            return
        raise IllegalMove(f"{name} cannot move during {self.phase.value}")

    def can_move(self, player: int) -> bool:
        try:
            self.check_can_move(player)
        except IllegalMove:
            return False
        return True

    # ------------------------------ Transitions ----------------------------- #
    def advance_phase(self, event: PhaseEvent) -> GamePhase:
        phase = self.phase
        if isinstance(event, ExternalTrigger):
            if phase is GamePhase.COUNTDOWN:
                self._set(GamePhase.FREEPLAY)
            elif phase is GamePhase.ROUND_END:
                self._set(GamePhase.REDISTRIBUTING)
            else:
                raise IllegalMove(f"no external trigger expected during {phase.value}")

        elif isinstance(event, SowStarted):
            self.check_can_move(event.player)
            self.rendezvous.start(event.player)
            if phase is GamePhase.TURN_SELECT:
                self._set(GamePhase.TURN_SOWING)

        elif isinstance(event, SowCompleted):
            if phase is GamePhase.FREEPLAY:
                turn = self.rendezvous.finish(event.player, event.extra_turn)
                if turn is not None:
                    logger.info("both players finished freeplay, %s moves first", PLAYER_NAMES[turn])
                    self.turn = turn
                    self._set(GamePhase.TURN_SELECT)
                elif event.extra_turn:
                    logger.info("%s landed in the house and may pick again", PLAYER_NAMES[event.player])
                else:
                    logger.info("%s finished, waiting for the other player", PLAYER_NAMES[event.player])
            elif phase is GamePhase.TURN_SOWING:
                self.rendezvous.sowing[event.player] = False
                if not event.extra_turn:
                    self.turn = opponent_of(event.player)
                self._set(GamePhase.TURN_SELECT)
            else:
                raise IllegalMove(f"no sow can complete during {phase.value}")

        return self.phase

    def skip_turn(self) -> None:
        if self.turn is not None:
            self.turn = opponent_of(self.turn)

    def enter(self, phase: GamePhase, turn: Optional[int] = None) -> None:
        self.rendezvous.reset()
        self.turn = turn
        self._set(phase)

    def _set(self, phase: GamePhase) -> None:
        if phase is not self.phase:
            logger.info("phase %s -> %s", self.phase.value, phase.value)
        self.phase = phase
