import json

import pytest

from congkak.game import Board, BurnedMask, LOWER, Move, UPPER, simulate_sow
from congkak.game.encoding import (
    board_from_dict,
    board_to_dict,
    burned_from_dict,
    burned_to_dict,
    deserialize_fen,
    mirror_board,
    mirror_burned,
    serialize_fen,
)


def test_serialize_initial():
    assert serialize_fen(Board.initial()) == "U|7-7-7-7-7-7-7,7-7-7-7-7-7-7|0,0"


def test_fen_roundtrip():
    b = simulate_sow(Board.initial(), Move(LOWER, 9)).final_board
    fen = serialize_fen(b, LOWER)
    b2, player = deserialize_fen(fen)
    assert b2 == b
    assert player == LOWER


@pytest.mark.parametrize(
    "fen",
    [
        "",
        "X|7-7-7-7-7-7-7,7-7-7-7-7-7-7|0,0",
        "U|7-7-7-7-7-7-7|0,0",
        "U|7-7-7-7-7-7,7-7-7-7-7-7-7|0,0",
        "U|7-7-7-7-7-7-a,7-7-7-7-7-7-7|0,0",
    ],
)
def test_malformed_fen_raises(fen):
    with pytest.raises(ValueError):
        deserialize_fen(fen)


def test_mirror_is_an_involution():
    b = Board.from_rows([1, 2, 3, 4, 5, 6, 7], [0, 0, 9, 9, 9, 9, 9], [10, 5])
    m = mirror_board(b)
    assert m.row(UPPER) == b.row(LOWER)
    assert m.row(LOWER) == b.row(UPPER)
    assert m.houses == [5, 10]
    assert mirror_board(m) == b


def test_mirror_burned_swaps_rows():
    burned = BurnedMask(upper=[True] + [False] * 6, lower=[False] * 6 + [True])
    m = mirror_burned(burned)
    assert m.upper == burned.lower
    assert m.lower == burned.upper


def test_board_and_burned_dicts_are_json_safe():
    b = Board.from_rows([0] * 7, [7] * 7, [40, 9])
    burned = BurnedMask(upper=[True] * 3 + [False] * 4)
    data = json.loads(json.dumps({"board": board_to_dict(b), "burned": burned_to_dict(burned)}))
    assert board_from_dict(data["board"]) == b
    assert burned_from_dict(data["burned"]) == burned


def test_burned_from_dict_rejects_wrong_length():
    with pytest.raises(ValueError):
        burned_from_dict({"upper": [False] * 6, "lower": [False] * 7})
