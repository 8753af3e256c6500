from __future__ import annotations

import argparse
import json
import logging
import random
from typing import Optional

from congkak.game.encoding import deserialize_fen
from congkak.search.minimax import Difficulty
from congkak.search.minimax import choose_move as search_move


def choose_move(fen: str, difficulty: str = "medium", seed: Optional[int] = None) -> int:
    board, player = deserialize_fen(fen)
    rng = random.Random(seed)
    hole = search_move(board, player, Difficulty(difficulty), rng=rng)
    if hole is None:
        return -1
    return hole


def main():
    parser = argparse.ArgumentParser(description="Congkak minimax agent")
    parser.add_argument("fen", type=str, help="Position string, e.g. U|7-7-7-7-7-7-7,7-7-7-7-7-7-7|0,0")
    parser.add_argument(
        "--difficulty", type=str, default="medium", choices=[d.value for d in Difficulty], help="Search level"
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for easy play")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log sowing steps")
    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    action = choose_move(args.fen, args.difficulty, args.seed)
    print(json.dumps({"action": action}))


if __name__ == "__main__":
    main()
