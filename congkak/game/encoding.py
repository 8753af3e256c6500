"""
Position strings, symmetry, and snapshot serialization for Congkak.

Position strings are compact and meant for the command line and for debugging:

    U|7-7-7-7-7-7-7,7-7-7-7-7-7-7|0,0

side to move (U or L), Upper's row (holes 0..6), Lower's row (holes 7..13),
then Upper's and Lower's houses.
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from .board import Board, BurnedMask, HOLE_COUNT, LOWER, ROW_SIZE, UPPER

_SIDES = {"U": UPPER, "L": LOWER}


def mirror_board(board: Board) -> Board:
    """Swap the roles of the two players.

    The ring is rotated by one row, so Lower's hole ``7 + i`` becomes Upper's
    hole ``i`` and facing holes stay facing. Houses swap owners.
    """
    holes = [board.holes[(i + ROW_SIZE) % HOLE_COUNT] for i in range(HOLE_COUNT)]
    return Board(holes=holes, houses=[board.houses[LOWER], board.houses[UPPER]])


def mirror_burned(burned: BurnedMask) -> BurnedMask:
    return BurnedMask(upper=burned.lower[:], lower=burned.upper[:])


def serialize_fen(board: Board, player: int = UPPER) -> str:
    parts = [
        "U" if player == UPPER else "L",
        ",".join(
            [
                "-".join(str(x) for x in board.row(UPPER)),
                "-".join(str(x) for x in board.row(LOWER)),
            ]
        ),
        f"{board.houses[UPPER]},{board.houses[LOWER]}",
    ]
    return "|".join(parts)


def deserialize_fen(s: str) -> Tuple[Board, int]:
    try:
        side, rows_s, houses_s = s.strip().split("|")
        upper_s, lower_s = rows_s.split(",")
        upper = [int(x) for x in upper_s.split("-")]
        lower = [int(x) for x in lower_s.split("-")]
        hu, hl = (int(x) for x in houses_s.split(","))
        player = _SIDES[side.upper()]
    except (KeyError, ValueError) as exc:
        raise ValueError(f"malformed position string: {s!r}") from exc
    return Board.from_rows(upper, lower, [hu, hl]), player


# ------------------------- Persisted match snapshot ------------------------- #
def burned_to_dict(burned: BurnedMask) -> Dict[str, List[bool]]:
    return {"upper": burned.upper[:], "lower": burned.lower[:]}


def burned_from_dict(data: Dict[str, List[bool]]) -> BurnedMask:
    upper = [bool(x) for x in data["upper"]]
    lower = [bool(x) for x in data["lower"]]
    if len(upper) != ROW_SIZE or len(lower) != ROW_SIZE:
        raise ValueError("burned masks need 7 entries per player")
    return BurnedMask(upper=upper, lower=lower)


def board_to_dict(board: Board) -> Dict[str, Any]:
    return {"holes": board.holes[:], "houses": board.houses[:]}


def board_from_dict(data: Dict[str, Any]) -> Board:
    return Board(holes=[int(x) for x in data["holes"]], houses=[int(x) for x in data["houses"]])
