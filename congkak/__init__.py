"""Congkak engine: sowing rules, turn coordination, traditional rounds, and minimax play."""

__version__ = "0.1.0"
