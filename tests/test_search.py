import asyncio
import random

import pytest

from congkak.game import Board, CancelledOperation, Generation, LOWER, UPPER
from congkak.game.encoding import mirror_board
from congkak.search import DEPTHS, Difficulty, Minimax, choose_move, choose_move_async, evaluate


def test_depth_table():
    assert DEPTHS[Difficulty.EASY] == 0
    assert DEPTHS[Difficulty.MEDIUM] == 3
    assert DEPTHS[Difficulty.HARD] == 6


def test_evaluate_initial_is_balanced():
    b = Board.initial()
    assert evaluate(b, UPPER) == 0
    assert evaluate(b, LOWER) == 0


def test_evaluate_is_symmetric_under_mirror():
    b = Board.from_rows([0, 3, 0, 9, 1, 0, 2], [4, 0, 6, 0, 7, 1, 5], [40, 20])
    assert evaluate(b, UPPER) == evaluate(mirror_board(b), LOWER)


def test_minimax_rejects_zero_depth():
    with pytest.raises(ValueError):
        Minimax(0)


def test_minimax_takes_the_capture():
    b = Board.from_rows([0, 1, 0, 0, 0, 10, 0], [2] * 7, [39, 34])
    score, move = Minimax(1).search(b, UPPER)
    assert move == 5
    assert score > 0


def test_choose_move_is_deterministic():
    b = Board.initial()
    first = choose_move(b, UPPER, Difficulty.MEDIUM)
    assert first in range(7)
    assert choose_move(b, UPPER, Difficulty.MEDIUM) == first


def test_choose_move_mirror_symmetry():
    b = Board.from_rows([0, 8, 8, 8, 8, 8, 8], [7] * 7, [1, 0])
    up = choose_move(b, UPPER, Difficulty.MEDIUM)
    low = choose_move(mirror_board(b), LOWER, Difficulty.MEDIUM)
    assert low == up + 7


def test_choose_move_without_moves_returns_none():
    b = Board.from_rows([0] * 7, [7] * 7, [49, 0])
    assert choose_move(b, UPPER, Difficulty.HARD) is None


def test_single_legal_move_is_returned_directly():
    b = Board.from_rows([0, 0, 0, 4, 0, 0, 0], [7] * 7, [45, 0])
    assert choose_move(b, UPPER, Difficulty.HARD) == 3


def test_easy_covers_every_legal_move():
    b = Board.initial()
    rng = random.Random(0)
    seen = {choose_move(b, LOWER, Difficulty.EASY, rng=rng) for _ in range(200)}
    assert seen == set(range(7, 14))


def test_difficulty_accepts_strings():
    b = Board.initial()
    assert choose_move(b, UPPER, "easy", rng=random.Random(1)) in range(7)


def test_async_choice_matches_sync():
    b = Board.initial()
    move = asyncio.run(choose_move_async(b, LOWER, Difficulty.MEDIUM))
    assert move == choose_move(b, LOWER, Difficulty.MEDIUM)


def test_async_choice_with_stale_token_is_cancelled():
    gen = Generation()
    token = gen.token()
    gen.bump()
    with pytest.raises(CancelledOperation):
        asyncio.run(choose_move_async(Board.initial(), UPPER, Difficulty.MEDIUM, token=token))


def test_search_past_majority_in_traditional_rounds():
    # A house above 49 does not end a traditional round.
    b = Board.from_rows([0, 1, 0, 0, 0, 10, 0], [2] * 7, [60, 13])
    score, move = Minimax(6, majority_rule=False).search(b, UPPER)
    assert move in (1, 5)
    assert choose_move(b, UPPER, Difficulty.HARD, majority_rule=False) in (1, 5)


def test_root_always_has_a_move_when_one_exists():
    b = Board.from_rows([0, 1, 0, 0, 0, 10, 0], [2] * 7, [60, 13])
    assert Minimax(3).search(b, UPPER)[1] in (1, 5)
