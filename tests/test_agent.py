import json
import sys

from congkak.agent import choose_move, main
from congkak.game import Board
from congkak.game.encoding import serialize_fen


def test_agent_choose_move_returns_index():
    fen = serialize_fen(Board.initial())
    action = choose_move(fen, difficulty="medium")
    assert isinstance(action, int)
    assert 0 <= action <= 6


def test_agent_plays_for_lower():
    action = choose_move("L|7-7-7-7-7-7-7,7-7-7-7-7-7-7|0,0", difficulty="easy", seed=4)
    assert 7 <= action <= 13


def test_agent_without_moves_returns_minus_one():
    assert choose_move("U|0-0-0-0-0-0-0,7-7-7-7-7-7-7|49,0") == -1


def test_agent_cli_prints_json(monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["congkak-agent", serialize_fen(Board.initial()), "--difficulty", "easy", "--seed", "1"])
    main()
    out = json.loads(capsys.readouterr().out)
    assert out["action"] in range(7)
