from __future__ import annotations

from .base import GameView
from .. import search
from ...engine.state import Move


class GreedyAgent:
    """Tier 2: lowest greedy score among the bounded candidates."""

    name = "Greedy Bot"
    is_human = False

    def __init__(self, window: int = search.DEFAULT_WINDOW, cap: int = search.DEFAULT_CAP):
        self.window = window
        self.cap = cap

    def choose_move(self, view: GameView) -> Move:
        board = view.board
        player = view.current_player()
        moves = search.candidate_moves(board, player, view.walls_remaining()[player], self.window, self.cap)
        move = search.greedy_move(board, player, moves)
        if move is None:
            raise RuntimeError("No legal moves available for greedy agent")
        return move
