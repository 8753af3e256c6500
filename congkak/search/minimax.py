"""
Minimax search with alpha-beta pruning for computer play.

The search runs on :func:`congkak.game.sowing.simulate_sow`, never on the
steppable path. Burned holes are ignored since they are always empty.
With ``majority_rule`` off, a house above 49 does not end the search, as in
traditional rounds.

Two deliberate approximations are kept:
- a bonus turn recurses with the same polarity but still costs one ply, so
  the horizon stays bounded;
- a side with no legal move passes (one ply, polarity flipped) unless neither
  side can move, in which case the position is scored as terminal.
"""

from __future__ import annotations

import asyncio
import math
import random
from enum import Enum
from typing import List, Optional, Tuple

from ..game.board import Board, Move, opponent_of, opposite, row_indices
from ..game.cancellation import CancelToken
from ..game.rules import check_game_end
from ..game.sowing import simulate_sow


class Difficulty(str, Enum):
    EASY = "easy"  # uniform random
    MEDIUM = "medium"
    HARD = "hard"


DEPTHS = {
    Difficulty.EASY: 0,
    Difficulty.MEDIUM: 3,
    Difficulty.HARD: 6,
}

HOUSE_WEIGHT = 10.0
CAPTURE_WEIGHT = 0.5


def legal_moves(board: Board, player: int) -> List[int]:
    return [i for i in row_indices(player) if board.holes[i] > 0]


def is_game_over(board: Board, majority_rule: bool = True) -> bool:
    return check_game_end(board, majority_rule) is not None


def evaluate(board: Board, player: int) -> float:
    """Static score from ``player``'s point of view; higher is better."""
    opp = opponent_of(player)
    score = HOUSE_WEIGHT * (board.houses[player] - board.houses[opp])
    score += board.row_total(player) - board.row_total(opp)
    # Empty own holes facing seeds are capture chances.
    for i in row_indices(player):
        if board.holes[i] == 0:
            score += CAPTURE_WEIGHT * board.holes[opposite(i)]
    return score


class Minimax:
    def __init__(self, depth: int, majority_rule: bool = True) -> None:
        if depth < 1:
            raise ValueError("minimax depth must be at least 1")
        self.depth = depth
        self.majority_rule = majority_rule  # off for traditional rounds
        self.nodes = 0

    # ----------------------------- Public API ------------------------------ #
    def search(self, board: Board, player: int) -> Tuple[float, Optional[int]]:
        """Return (score, best hole) for ``player`` to move on ``board``.

        The hole is None only when ``player`` has nothing to pick.
        """
        self.nodes = 0
        return self._minimax(board, self.depth, -math.inf, math.inf, True, player, root=True)

    # ---------------------------- Core internals --------------------------- #
    def _minimax(
        self,
        board: Board,
        depth: int,
        alpha: float,
        beta: float,
        maximizing: bool,
        ai_player: int,
        root: bool = False,
    ) -> Tuple[float, Optional[int]]:
        self.nodes += 1
        if depth == 0 or (not root and is_game_over(board, self.majority_rule)):
            return evaluate(board, ai_player), None

        mover = ai_player if maximizing else opponent_of(ai_player)
        moves = legal_moves(board, mover)

        if not moves:
            if root:
                return evaluate(board, ai_player), None
            if not legal_moves(board, opponent_of(mover)):
                return evaluate(board, ai_player), None
            return self._minimax(board, depth - 1, alpha, beta, not maximizing, ai_player)

        best_move = moves[0]
        best = -math.inf if maximizing else math.inf
        for hole in moves:
            result = simulate_sow(board, Move(mover, hole))
            # Same side again after a bonus turn.
            child_max = maximizing if result.extra_turn else not maximizing
            score, _ = self._minimax(result.final_board, depth - 1, alpha, beta, child_max, ai_player)

            if maximizing:
                if score > best:
                    best, best_move = score, hole
                alpha = max(alpha, score)
            else:
                if score < best:
                    best, best_move = score, hole
                beta = min(beta, score)
            if beta <= alpha:
                break
        return best, best_move


def choose_move(
    board: Board,
    player: int,
    difficulty: Difficulty = Difficulty.MEDIUM,
    rng: Optional[random.Random] = None,
    majority_rule: bool = True,
) -> Optional[int]:
    """Pick a hole for ``player``; None when there is nothing to pick.

    Pass ``majority_rule=False`` for traditional rounds, which only end when
    both rows are empty.
    """
    difficulty = Difficulty(difficulty)
    moves = legal_moves(board, player)
    if not moves:
        return None
    if len(moves) == 1:
        return moves[0]
    if difficulty is Difficulty.EASY:
        return (rng or random).choice(moves)
    _, move = Minimax(DEPTHS[difficulty], majority_rule).search(board, player)
    return move


async def choose_move_async(
    board: Board,
    player: int,
    difficulty: Difficulty = Difficulty.MEDIUM,
    token: Optional[CancelToken] = None,
    rng: Optional[random.Random] = None,
    majority_rule: bool = True,
) -> Optional[int]:
    """Run :func:`choose_move` off the event loop.

    The search itself cannot be interrupted; a stale ``token`` only prevents
    it from starting and discards its answer.
    """
    if token is not None:
        token.check()
    loop = asyncio.get_running_loop()
    move = await loop.run_in_executor(None, choose_move, board, player, difficulty, rng, majority_rule)
    if token is not None:
        token.check()
    return move
