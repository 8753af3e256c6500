from .minimax import DEPTHS, Difficulty, Minimax, choose_move, choose_move_async, evaluate, is_game_over, legal_moves

__all__ = [
    "DEPTHS",
    "Difficulty",
    "Minimax",
    "choose_move",
    "choose_move_async",
    "evaluate",
    "is_game_over",
    "legal_moves",
]
