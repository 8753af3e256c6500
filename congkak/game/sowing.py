"""
Sowing engine for Congkak.

A :class:`Sower` runs one pick as a sequence of atomic steps. Each step reads
and writes plain hole/house lists, so the same rules drive three callers:

- :func:`apply_move` works on a private copy of a board, yields a
  :class:`BoardSnapshot` after every step and checks a cancellation token in
  between. Nothing leaks to the caller's board unless the sow completes.
- :func:`simulate_sow` runs a pick to completion with no snapshots, for search.
- the coordinator steps a sower against the live shared board, which may be
  changed by the other player's sow between two steps.

Rules per step, in order:
  pickup      take every seed from the chosen hole
  advance     next hole in increasing order, skipping the opponent's house
              and burned holes; after the mover's last hole comes the house
  house drop  one seed into the mover's house; ending here is an extra turn
  hole drop   one seed into the landed hole
  continue    hand empty and the hole now holds more than one: pick it all up
  capture     hand empty on an own hole that was empty, after passing the
              house at least once, with seeds opposite: bank both holes
  end         otherwise the pick is over and the turn passes
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Union

from .board import (
    Board,
    BurnedMask,
    HOLE_COUNT,
    Move,
    PLAYER_NAMES,
    TOTAL_SEEDS,
    UPPER,
    LOWER,
    last_hole,
    opposite,
    owner_of,
    row_indices,
)
from .cancellation import CancelToken
from .errors import IllegalMove, InvariantViolation
from .rules import check_conservation

logger = logging.getLogger(__name__)

# Each lap around the ring banks at least one seed, so a pick makes at most
# TOTAL_SEEDS laps of HOLE_COUNT + 1 slots, with at most one pickup per drop.
MAX_SOW_STEPS: int = 2 * (TOTAL_SEEDS + 1) * (HOLE_COUNT + 1)


class StepKind(Enum):
    PICKUP = "pickup"
    HOUSE = "house"
    HOLE = "hole"
    CONTINUE = "continue"
    CAPTURE_OWN = "capture_own"
    CAPTURE_OPPOSITE = "capture_opposite"
    CAPTURE_BANK = "capture_bank"


@dataclass
class SowState:
    player: int
    current_index: int
    seeds_in_hand: int = 0
    passed_house: int = 0
    just_deposited_house: bool = False


@dataclass(frozen=True)
class Capture:
    from_hole: int
    opposite_hole: int
    amount: int


@dataclass(frozen=True)
class SowResult:
    player: int
    final_board: Board
    extra_turn: bool
    capture: Optional[Capture] = None
    steps: int = 0


@dataclass(frozen=True)
class BoardSnapshot:
    """Board after one atomic step. ``index`` is None for house drops."""

    board: Board
    player: int
    kind: StepKind
    index: Optional[int]
    seeds_in_hand: int


def check_move(move: Move, holes: Sequence[int], burned: Optional[BurnedMask] = None) -> None:
    """Raise IllegalMove if ``move`` may not be started on ``holes``."""
    if move.player not in (UPPER, LOWER):
        raise IllegalMove(f"unknown player {move.player!r}")
    if move.hole not in row_indices(move.player):
        raise IllegalMove(
            f"Illegal move: hole {move.hole} is not on {PLAYER_NAMES[move.player]}'s row"
        )
    if burned is not None and burned.is_burned(move.hole):
        raise IllegalMove(f"Illegal move: hole {move.hole} is burned")
    if holes[move.hole] <= 0:
        raise IllegalMove(f"Illegal move: hole {move.hole} is empty")


class Sower:
    """Steppable state machine for a single pick."""

    def __init__(self, move: Move, holes: Sequence[int], burned: Optional[BurnedMask] = None) -> None:
        check_move(move, holes, burned)
        self.move = move
        self.burned = burned
        self.state = SowState(player=move.player, current_index=move.hole)
        self.steps = 0
        self.done = False
        self.extra_turn = False
        self.capture: Optional[Capture] = None
        self._pending: Optional[StepKind] = StepKind.PICKUP
        self._trace = logger.isEnabledFor(logging.DEBUG)

    # ----------------------------- Public API ------------------------------ #
    def step(self, holes: List[int], houses: List[int]) -> StepKind:
        """Apply the next atomic step to ``holes``/``houses`` in place."""
        if self.done:
            raise InvariantViolation("step() called on a finished sow")
        self.steps += 1
        if self.steps > MAX_SOW_STEPS:
            raise InvariantViolation(f"sow from hole {self.move.hole} exceeded {MAX_SOW_STEPS} steps")

        s = self.state
        p = s.player
        kind = self._pending

        if kind is StepKind.PICKUP or kind is StepKind.CONTINUE:
            s.seeds_in_hand = holes[s.current_index]
            holes[s.current_index] = 0
            if s.seeds_in_hand == 0:
                # Only reachable when a concurrent sow emptied the hole first.
                self._finish(extra_turn=False)
            else:
                self._pending = StepKind.HOLE

        elif kind is StepKind.HOLE:
            target = self._advance()
            if target is None:
                kind = StepKind.HOUSE
                houses[p] += 1
                s.seeds_in_hand -= 1
                s.passed_house += 1
                s.just_deposited_house = True
                s.current_index = last_hole(p)
                if s.seeds_in_hand == 0:
                    self._finish(extra_turn=True)
            else:
                holes[target] += 1
                s.seeds_in_hand -= 1
                s.current_index = target
                s.just_deposited_house = False
                if s.seeds_in_hand == 0:
                    self._land(holes)

        elif kind is StepKind.CAPTURE_OWN:
            s.seeds_in_hand = holes[s.current_index]
            holes[s.current_index] = 0
            self._pending = StepKind.CAPTURE_OPPOSITE

        elif kind is StepKind.CAPTURE_OPPOSITE:
            opp = opposite(s.current_index)
            s.seeds_in_hand += holes[opp]
            holes[opp] = 0
            self._pending = StepKind.CAPTURE_BANK

        elif kind is StepKind.CAPTURE_BANK:
            amount = s.seeds_in_hand
            houses[p] += amount
            s.seeds_in_hand = 0
            self.capture = Capture(s.current_index, opposite(s.current_index), amount)
            self._finish(extra_turn=False)

        if self._trace:
            logger.debug(
                "[%s] %s at %s | in hand: %d | houses: %d/%d",
                PLAYER_NAMES[p], kind.value,
                "house" if kind is StepKind.HOUSE else s.current_index,
                s.seeds_in_hand, houses[UPPER], houses[LOWER],
            )
        return kind

    def result(self, board: Board) -> SowResult:
        if not self.done:
            raise InvariantViolation("result() requested before the sow finished")
        return SowResult(
            player=self.move.player,
            final_board=board,
            extra_turn=self.extra_turn,
            capture=self.capture,
            steps=self.steps,
        )

    # ---------------------------- Core internals --------------------------- #
    def _advance(self) -> Optional[int]:
        """Next hole to drop into, or None for the mover's own house."""
        s = self.state
        last = last_hole(s.player)
        idx = s.current_index
        at_house = s.just_deposited_house
        while True:
            if at_house:
                idx = (last + 1) % HOLE_COUNT
                at_house = False
            elif idx == last:
                return None
            else:
                idx = (idx + 1) % HOLE_COUNT
            if self.burned is None or not self.burned.is_burned(idx):
                return idx

    def _land(self, holes: List[int]) -> None:
        s = self.state
        idx = s.current_index
        if holes[idx] > 1:
            self._pending = StepKind.CONTINUE
        elif self._can_capture(holes, idx):
            self._pending = StepKind.CAPTURE_OWN
        else:
            self._finish(extra_turn=False)

    def _can_capture(self, holes: List[int], idx: int) -> bool:
        s = self.state
        if holes[idx] != 1 or s.passed_house == 0 or owner_of(idx) != s.player:
            return False
        opp = opposite(idx)
        if self.burned is not None and self.burned.is_burned(opp):
            return False
        return holes[opp] > 0

    def _finish(self, extra_turn: bool) -> None:
        self.done = True
        self.extra_turn = extra_turn
        self._pending = None


def apply_move(
    board: Board,
    move: Move,
    token: Optional[CancelToken] = None,
    burned: Optional[BurnedMask] = None,
) -> Iterator[Union[BoardSnapshot, SowResult]]:
    """Stream the snapshots of one pick, terminating in its SowResult.

    The move is validated eagerly: an illegal pick raises IllegalMove here,
    before any iteration. A stale ``token`` raises CancelledOperation from the
    iterator; ``board`` itself is never modified.
    """
    sower = Sower(move, board.holes, burned)
    return _stream(sower, board, token)


def _stream(sower: Sower, board: Board, token: Optional[CancelToken]) -> Iterator[Union[BoardSnapshot, SowResult]]:
    holes = board.holes[:]
    houses = board.houses[:]
    while not sower.done:
        if token is not None:
            token.check()
        kind = sower.step(holes, houses)
        snapshot = Board(holes=holes[:], houses=houses[:])
        in_hand = sower.state.seeds_in_hand
        check_conservation(snapshot, (in_hand,), context=f"{kind.value} step")
        yield BoardSnapshot(
            board=snapshot,
            player=sower.move.player,
            kind=kind,
            index=None if kind is StepKind.HOUSE else sower.state.current_index,
            seeds_in_hand=in_hand,
        )
    if token is not None:
        token.check()
    yield sower.result(Board(holes=holes, houses=houses))


def simulate_sow(board: Board, move: Move, burned: Optional[BurnedMask] = None) -> SowResult:
    """Run a pick to completion synchronously, with no snapshots."""
    sower = Sower(move, board.holes, burned)
    holes = board.holes[:]
    houses = board.houses[:]
    while not sower.done:
        sower.step(holes, houses)
    return sower.result(Board(holes=holes, houses=houses))
