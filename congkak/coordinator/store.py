"""
Single owner of the live board.

The engine reads the board synchronously between steps; presentation code
subscribes and gets a :class:`GameSnapshot` after every change. Both go
through the same store, so there is exactly one copy of the state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..game.board import Board, BurnedMask, LOWER, UPPER
from ..game.encoding import board_from_dict, board_to_dict, burned_from_dict, burned_to_dict
from ..game.rules import check_conservation
from ..traditional.match import EndReason, MatchState
from .phase import GamePhase


@dataclass(frozen=True)
class GameSnapshot:
    board: Board
    phase: GamePhase
    turn: Optional[int]
    match: MatchState
    in_hand: Tuple[int, int] = (0, 0)
    waiting: Tuple[bool, bool] = (False, False)
    sowing: Tuple[bool, bool] = (False, False)

    @property
    def burned(self) -> BurnedMask:
        return self.match.burned


Subscriber = Callable[[GameSnapshot], None]


class BoardStore:
    def __init__(self, board: Board) -> None:
        self._board = board
        self._in_hand: List[int] = [0, 0]
        self._subscribers: List[Subscriber] = []

    @property
    def board(self) -> Board:
        return self._board

    def in_hand(self, player: int) -> int:
        return self._in_hand[player]

    @property
    def hands(self) -> Tuple[int, int]:
        return self._in_hand[UPPER], self._in_hand[LOWER]

    def commit(self, board: Board, player: Optional[int] = None, in_hand: int = 0, context: str = "") -> None:
        """Replace the board, checking conservation over both hands."""
        hands = self._in_hand[:]
        if player is not None:
            hands[player] = in_hand
        check_conservation(board, hands, context=context)
        self._board = board
        self._in_hand = hands

    def reset(self, board: Board) -> None:
        self._board = board
        self._in_hand = [0, 0]

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def notify(self, snapshot: GameSnapshot) -> None:
        for callback in list(self._subscribers):
            callback(snapshot)


# ------------------------- Persisted match snapshot ------------------------- #
def snapshot_to_dict(snapshot: GameSnapshot) -> Dict[str, Any]:
    """JSON-compatible form of {Board, GamePhase, BurnedMask x2, MatchState, turn}.

    Only idle snapshots round-trip: seeds in hand are not persisted.
    """
    match = snapshot.match
    return {
        "board": board_to_dict(snapshot.board),
        "phase": snapshot.phase.value,
        "turn": snapshot.turn,
        "burned": burned_to_dict(match.burned),
        "match": {
            "round": match.round,
            "winner": match.winner,
            "end_reason": match.end_reason.value if match.end_reason else None,
            "finished": match.finished,
        },
    }


def snapshot_from_dict(data: Dict[str, Any]) -> GameSnapshot:
    m = data["match"]
    match = MatchState(
        round=int(m["round"]),
        burned=burned_from_dict(data["burned"]),
        winner=m.get("winner"),
        end_reason=EndReason(m["end_reason"]) if m.get("end_reason") else None,
        finished=bool(m.get("finished", False)),
    )
    board = board_from_dict(data["board"])
    check_conservation(board, context="snapshot load")
    return GameSnapshot(
        board=board,
        phase=GamePhase(data["phase"]),
        turn=data.get("turn"),
        match=match,
    )
