from .match import EndReason, MatchState, RoundSummary, check_domination
from .redistribution import FILL_ORDER, Redistribution, combine_rows, redistribute, redistribute_board

__all__ = [
    "EndReason",
    "MatchState",
    "RoundSummary",
    "check_domination",
    "FILL_ORDER",
    "Redistribution",
    "combine_rows",
    "redistribute",
    "redistribute_board",
]
