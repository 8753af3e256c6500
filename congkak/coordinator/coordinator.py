"""
Turn and phase coordinator.

The coordinator owns the live board and is the only thing that mutates it.
Each :meth:`Coordinator.submit` call is one player's sow task; during freeplay
the two players' tasks run concurrently on the same event loop. Every atomic
step is a synchronous read-modify-write of the shared board followed by a
suspension point (the ``pace`` hook), so steps interleave but never overlap.

A reset bumps the generation counter. Suspended sow tasks re-check their
token when they resume and quietly give up if it is stale.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Awaitable, Callable, Optional

from ..game.board import Board, BurnedMask, LOWER, Move, PLAYER_NAMES, UPPER, opponent_of
from ..game.cancellation import Generation
from ..game.errors import CancelledOperation, IllegalMove
from ..game.rules import check_conservation, check_game_end, decide_winner, has_legal_move, rows_exhausted, should_skip_turn
from ..game.sowing import BoardSnapshot, SowResult, Sower, StepKind
from ..traditional.match import EndReason, MatchState, RoundSummary, check_domination
from ..traditional.redistribution import redistribute_board
from .phase import ExternalTrigger, GamePhase, PhaseMachine, SowCompleted, SowStarted
from .store import BoardStore, GameSnapshot, Subscriber

logger = logging.getLogger(__name__)

QUICK = "quick"
TRADITIONAL = "traditional"

Pace = Callable[[BoardSnapshot], Awaitable[None]]


async def _yield_once(snapshot: BoardSnapshot) -> None:
    await asyncio.sleep(0)


@dataclass
class CoordinatorConfig:
    mode: str = QUICK
    start_with_countdown: bool = True
    round_start_phase: GamePhase = GamePhase.TURN_SELECT  # traditional rounds after the first
    first_turn: int = UPPER  # used when there is no countdown/freeplay

    def __post_init__(self) -> None:
        if self.mode not in (QUICK, TRADITIONAL):
            raise ValueError(f"unknown mode {self.mode!r}")
        if self.round_start_phase not in (GamePhase.TURN_SELECT, GamePhase.FREEPLAY):
            raise ValueError("rounds can only start in TURN_SELECT or FREEPLAY")
        if self.first_turn not in (UPPER, LOWER):
            raise ValueError(f"unknown player {self.first_turn!r}")


class Coordinator:
    def __init__(
        self,
        config: Optional[CoordinatorConfig] = None,
        board: Optional[Board] = None,
        pace: Optional[Pace] = None,
    ) -> None:
        self.config = config or CoordinatorConfig()
        self._initial = board or Board.initial()
        check_conservation(self._initial, context="initial board")
        self._pace = pace or _yield_once
        self.generation = Generation()
        self.store = BoardStore(self._initial)
        self.machine = PhaseMachine()
        self.match = MatchState()
        self._setup()

    # ----------------------------- Query methods ---------------------------- #
    @property
    def board(self) -> Board:
        """A copy of the live board; mutating it never reaches the store."""
        return self.store.board.copy()

    @property
    def phase(self) -> GamePhase:
        return self.machine.phase

    @property
    def turn(self) -> Optional[int]:
        return self.machine.turn

    @property
    def burned(self) -> BurnedMask:
        return self.match.burned

    @property
    def traditional(self) -> bool:
        return self.config.mode == TRADITIONAL

    def snapshot(self) -> GameSnapshot:
        r = self.machine.rendezvous
        return GameSnapshot(
            board=self.store.board.copy(),
            phase=self.machine.phase,
            turn=self.machine.turn,
            match=self.match,
            in_hand=self.store.hands,
            waiting=(r.waiting[UPPER], r.waiting[LOWER]),
            sowing=(r.sowing[UPPER], r.sowing[LOWER]),
        )

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        return self.store.subscribe(callback)

    def round_summary(self) -> RoundSummary:
        board = self.store.board
        return RoundSummary(
            round=self.match.round,
            house_upper=board.houses[UPPER],
            house_lower=board.houses[LOWER],
            burned_upper=self.match.burned.count(UPPER),
            burned_lower=self.match.burned.count(LOWER),
        )

    def legal_moves(self, player: int):
        if not self.machine.can_move(player):
            return []
        return self.store.board.legal_moves(player, self._mask())

    # ------------------------------ Lifecycle ------------------------------ #
    def start(self) -> GamePhase:
        """The countdown finished: open freeplay."""
        phase = self.machine.advance_phase(ExternalTrigger())
        self.check_idle()
        self._publish()
        return phase

    def reset(self) -> None:
        """Abort every in-flight sow and return to the pre-match board."""
        self.generation.bump()
        self.store.reset(self._initial)
        self._setup()
        logger.info("[RESET] game reset, generation %d", self.generation.value)
        self._publish()

    def restore(self, snapshot: GameSnapshot) -> None:
        """Load an idle snapshot, abandoning anything in flight."""
        self.generation.bump()
        check_conservation(snapshot.board, context="restore")
        self.store.reset(snapshot.board)
        self.match = snapshot.match
        self.machine.enter(snapshot.phase, snapshot.turn)
        self._publish()

    def _setup(self) -> None:
        self.match = MatchState()
        if self.config.start_with_countdown:
            self.machine.enter(GamePhase.COUNTDOWN)
        else:
            self.machine.enter(GamePhase.TURN_SELECT, self.config.first_turn)

    # ------------------------------- Moves --------------------------------- #
    async def submit(self, move: Move) -> Optional[SowResult]:
        """Sow ``move`` on the live board.

        Raises IllegalMove (and changes nothing) if the move is not allowed
        now. Returns the SowResult, or None if a reset abandoned the sow.
        """
        self.machine.check_can_move(move.player)
        sower = Sower(move, self.store.board.holes, self._mask())
        token = self.generation.token()
        self.machine.advance_phase(SowStarted(move.player))
        name = PLAYER_NAMES[move.player]
        logger.info("[%s] picks hole %d (%d seeds)", name, move.hole, self.store.board.holes[move.hole])
        self._publish()

        try:
            while not sower.done:
                token.check()
                holes = self.store.board.holes[:]
                houses = self.store.board.houses[:]
                kind = sower.step(holes, houses)
                in_hand = sower.state.seeds_in_hand
                board = Board(holes=holes, houses=houses)
                self.store.commit(board, move.player, in_hand, context=f"{name} {kind.value}")
                self._publish()
                await self._pace(BoardSnapshot(
                    board=board.copy(),
                    player=move.player,
                    kind=kind,
                    index=None if kind is StepKind.HOUSE else sower.state.current_index,
                    seeds_in_hand=in_hand,
                ))
            token.check()
        except CancelledOperation:
            logger.info("[%s] sow from hole %d abandoned", name, move.hole)
            return None

        result = sower.result(self.store.board.copy())
        if result.capture is not None:
            logger.info(
                "[%s] captures %d from holes %d/%d",
                name, result.capture.amount, result.capture.from_hole, result.capture.opposite_hole,
            )
        self.machine.advance_phase(SowCompleted(move.player, result.extra_turn))
        self.check_idle()
        self._publish()
        return result

    def check_idle(self) -> None:
        """Match/round end, stuck-freeplay release, and turn skip.

        Does nothing while any sow is in flight.
        """
        if self.machine.any_sowing():
            return
        phase = self.machine.phase
        if phase not in (GamePhase.FREEPLAY, GamePhase.TURN_SELECT):
            return
        board = self.store.board
        check_conservation(board, self.store.hands, context="idle")

        if self.traditional:
            if rows_exhausted(board):
                self._end_round()
                return
        else:
            outcome = check_game_end(board)
            if outcome is not None:
                self._end_match(outcome.winner, None, detail=outcome.reason)
                return

        if phase is GamePhase.FREEPLAY:
            self._release_exhausted()
        if self.machine.phase is GamePhase.TURN_SELECT and should_skip_turn(board, self.machine.turn):
            self.machine.skip_turn()

    def _release_exhausted(self) -> None:
        # A player with nothing to pick can never finish on their own.
        board = self.store.board
        for player in (UPPER, LOWER):
            if self.machine.phase is not GamePhase.FREEPLAY:
                return
            if self.machine.is_waiting(player) or self.machine.is_sowing(player):
                continue
            if not has_legal_move(board, player, self._mask()):
                logger.info("%s has no seeds to pick in freeplay", PLAYER_NAMES[player])
                self.machine.advance_phase(SowCompleted(player, extra_turn=False))

    # ---------------------------- Traditional ------------------------------ #
    def continue_round(self) -> GamePhase:
        """Redistribute after a round end and start the next round."""
        if self.machine.phase is not GamePhase.ROUND_END:
            raise IllegalMove(f"cannot continue a round during {self.machine.phase.value}")
        self.machine.advance_phase(ExternalTrigger())
        self._publish()

        board = self.store.board
        starter = decide_winner(board)
        new_board, burned = redistribute_board(board, self.match.burned)
        self.store.commit(new_board, context="redistribution")
        self.match = replace(self.match, round=self.match.round + 1, burned=burned)

        winner = check_domination(burned.upper, burned.lower)
        if winner is not None:
            self._end_match(winner, EndReason.DOMINATION)
        elif self.config.round_start_phase is GamePhase.FREEPLAY:
            self.machine.enter(GamePhase.FREEPLAY)
        else:
            self.machine.enter(GamePhase.TURN_SELECT, UPPER if starter is None else starter)
        if self.machine.phase is not GamePhase.MATCH_END:
            logger.info("round %d begins", self.match.round)
            self.check_idle()
        self._publish()
        return self.machine.phase

    def end_match(self) -> None:
        """Stop at a round end; the larger house takes the match."""
        if self.machine.phase is not GamePhase.ROUND_END:
            raise IllegalMove(f"cannot end the match during {self.machine.phase.value}")
        self._end_match(decide_winner(self.store.board), None)
        self._publish()

    def concede(self, player: int) -> None:
        if not self.traditional:
            raise IllegalMove("concession is only available in traditional mode")
        if self.machine.phase is GamePhase.MATCH_END:
            raise IllegalMove("the match is already over")
        if self.machine.any_sowing():
            raise IllegalMove("cannot concede while a sow is in progress")
        # Abandon any computer move still being searched.
        self.generation.bump()
        logger.info("%s concedes", PLAYER_NAMES[player])
        self._end_match(opponent_of(player), EndReason.CONCESSION)
        self._publish()

    def _end_round(self) -> None:
        summary = self.round_summary()
        logger.info(
            "round %d over: upper %d, lower %d", summary.round, summary.house_upper, summary.house_lower
        )
        self.machine.enter(GamePhase.ROUND_END)

    def _end_match(self, winner: Optional[int], reason: Optional[EndReason], detail: str = "") -> None:
        self.match = replace(self.match, winner=winner, end_reason=reason, finished=True)
        self.machine.enter(GamePhase.MATCH_END)
        logger.info(
            "match over: %s (%s)",
            "draw" if winner is None else PLAYER_NAMES[winner] + " wins",
            reason.value if reason else detail or "houses compared",
        )

    # ------------------------------ Internals ------------------------------ #
    def _mask(self) -> Optional[BurnedMask]:
        return self.match.burned if self.traditional else None

    def _publish(self) -> None:
        self.store.notify(self.snapshot())
