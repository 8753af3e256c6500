import logging
import random

import pytest

from congkak.game import (
    Board,
    BurnedMask,
    Capture,
    CancelledOperation,
    Generation,
    IllegalMove,
    InvariantViolation,
    LOWER,
    MAX_SOW_STEPS,
    Move,
    SowResult,
    StepKind,
    TOTAL_SEEDS,
    UPPER,
    apply_move,
    check_conservation,
    check_game_end,
    simulate_sow,
)
from congkak.game.encoding import mirror_board
from congkak.game.rules import REASON_EXHAUSTED, REASON_MAJORITY, should_skip_turn


def capture_board():
    return Board.from_rows([0, 0, 0, 0, 0, 10, 0], [2] * 7, [40, 34])


def test_initial_board_holds_98_seeds():
    b = Board.initial()
    assert b.total_seeds() == TOTAL_SEEDS
    assert b.legal_moves(UPPER) == list(range(7))
    assert b.legal_moves(LOWER) == list(range(7, 14))


def test_first_pick_ends_in_house_for_extra_turn():
    r = simulate_sow(Board.initial(), Move(UPPER, 0))
    assert r.extra_turn
    assert r.capture is None
    assert r.final_board.row(UPPER) == [0, 8, 8, 8, 8, 8, 8]
    assert r.final_board.row(LOWER) == [7] * 7
    assert r.final_board.houses == [1, 0]


def test_lower_first_pick_ends_in_house():
    r = simulate_sow(Board.initial(), Move(LOWER, 7))
    assert r.extra_turn
    assert r.final_board.row(LOWER) == [0, 8, 8, 8, 8, 8, 8]
    assert r.final_board.houses == [0, 1]


def test_capture_after_passing_house():
    r = simulate_sow(capture_board(), Move(UPPER, 5))
    assert not r.extra_turn
    assert r.capture == Capture(from_hole=0, opposite_hole=13, amount=4)
    assert r.final_board.row(UPPER) == [0, 0, 0, 0, 0, 0, 1]
    assert r.final_board.row(LOWER) == [3, 3, 3, 3, 3, 3, 0]
    assert r.final_board.houses == [45, 34]


def test_lower_capture_mirrors_upper():
    upper = simulate_sow(capture_board(), Move(UPPER, 5))
    lower = simulate_sow(mirror_board(capture_board()), Move(LOWER, 12))
    assert lower.capture == Capture(from_hole=7, opposite_hole=6, amount=4)
    assert lower.final_board == mirror_board(upper.final_board)


def test_no_capture_before_passing_house():
    b = Board.from_rows([0, 0, 0, 2, 0, 0, 0], [7] * 7, [30, 17])
    r = simulate_sow(b, Move(UPPER, 3))
    assert r.capture is None
    assert not r.extra_turn
    assert r.final_board.row(UPPER) == [0, 0, 0, 0, 1, 1, 0]
    assert r.final_board.houses == [30, 17]


def test_landing_on_occupied_hole_continues():
    b = Board.from_rows([1, 1, 0, 0, 0, 0, 0], [7] * 7, [47, 0])
    r = simulate_sow(b, Move(UPPER, 0))
    assert r.final_board.row(UPPER) == [0, 0, 1, 1, 0, 0, 0]
    assert not r.extra_turn


def test_burned_holes_are_skipped():
    b = Board.from_rows([0, 0, 0, 0, 0, 0, 2], [0, 7, 7, 7, 7, 7, 7], [30, 24])
    burned = BurnedMask(lower=[True] + [False] * 6)
    r = simulate_sow(b, Move(UPPER, 6), burned)
    assert r.final_board.holes[7] == 0
    assert r.capture == Capture(from_hole=2, opposite_hole=11, amount=9)
    assert r.final_board.row(UPPER) == [1, 1, 0, 0, 0, 0, 0]
    assert r.final_board.row(LOWER) == [0, 0, 8, 8, 0, 8, 8]
    assert r.final_board.houses == [40, 24]


@pytest.mark.parametrize(
    "move, burned",
    [
        (Move(UPPER, 2), None),  # empty
        (Move(UPPER, 7), None),  # opponent's row
        (Move(LOWER, 3), None),
        (Move(UPPER, 0), BurnedMask(upper=[True] + [False] * 6)),
    ],
)
def test_illegal_moves_are_rejected_before_iteration(move, burned):
    b = Board.from_rows([7, 7, 0, 7, 7, 7, 7], [7] * 7, [7, 0])
    before = Board(holes=b.holes[:], houses=b.houses[:])
    with pytest.raises(IllegalMove):
        apply_move(b, move, burned=burned)
    assert b == before


def test_apply_move_streams_snapshots_then_result():
    b = Board.initial()
    items = list(apply_move(b, Move(UPPER, 3)))
    result = items[-1]
    snapshots = items[:-1]
    assert isinstance(result, SowResult)
    assert len(snapshots) == result.steps
    assert snapshots[0].kind is StepKind.PICKUP
    assert snapshots[0].seeds_in_hand == 7
    assert snapshots[-1].board == result.final_board
    for snap in snapshots:
        assert snap.board.total_seeds() + snap.seeds_in_hand == TOTAL_SEEDS
        if snap.kind is StepKind.HOUSE:
            assert snap.index is None
    assert b == Board.initial()


def test_apply_move_matches_simulate_sow():
    b = capture_board()
    result = list(apply_move(b, Move(UPPER, 5)))[-1]
    assert result == simulate_sow(b, Move(UPPER, 5))


def test_stale_token_abandons_stream_without_touching_board():
    gen = Generation()
    b = Board.initial()
    stream = apply_move(b, Move(UPPER, 0), token=gen.token())
    next(stream)
    gen.bump()
    with pytest.raises(CancelledOperation):
        next(stream)
    assert b == Board.initial()


def test_random_playouts_conserve_seeds_and_terminate():
    for seed in range(20):
        rng = random.Random(seed)
        board, player = Board.initial(), UPPER
        for _ in range(1000):
            if check_game_end(board) is not None:
                break
            if should_skip_turn(board, player):
                player = 1 - player
                continue
            for item in apply_move(board, Move(player, rng.choice(board.legal_moves(player)))):
                if isinstance(item, SowResult):
                    result = item
                else:
                    check_conservation(item.board, (item.seeds_in_hand,))
            assert result.steps <= MAX_SOW_STEPS
            board = result.final_board
            assert board.total_seeds() == TOTAL_SEEDS
            if not result.extra_turn:
                player = 1 - player
        assert check_game_end(board) is not None


def test_game_end_on_majority_and_exhaustion():
    b = Board.from_rows([1] * 7, [1] * 7, [50, 34])
    assert check_game_end(b).reason == REASON_MAJORITY
    assert check_game_end(b).winner == UPPER
    assert check_game_end(b, majority_rule=False) is None

    b = Board.from_rows([0] * 7, [0] * 7, [49, 49])
    outcome = check_game_end(b)
    assert outcome.reason == REASON_EXHAUSTED
    assert outcome.winner is None


def test_conservation_violation_is_logged(caplog):
    b = Board(holes=[7] * 14, houses=[1, 0])
    with caplog.at_level(logging.ERROR):
        with pytest.raises(InvariantViolation):
            check_conservation(b, context="test")
    assert "seed count mismatch" in caplog.text


def test_board_rejects_bad_shapes():
    with pytest.raises(ValueError):
        Board(holes=[7] * 13)
    with pytest.raises(ValueError):
        Board.from_rows([7] * 6, [7] * 7)
    with pytest.raises(ValueError):
        Board(holes=[-1] + [7] * 13)
