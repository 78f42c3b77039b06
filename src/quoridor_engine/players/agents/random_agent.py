from __future__ import annotations
import random

from .base import GameView
from .. import search
from ...engine.state import Move


class RandomAgent:
    """Tier 1: uniform pick over pawn moves plus a bounded sample of walls."""

    name = "Random Bot"
    is_human = False

    def __init__(
        self,
        rng: random.Random | None = None,
        window: int = search.DEFAULT_WINDOW,
        cap: int = search.DEFAULT_CAP,
    ):
        self.rng = rng or random.Random()
        self.window = window
        self.cap = cap

    def choose_move(self, view: GameView) -> Move:
        player = view.current_player()
        moves = search.candidate_moves(
            view.board, player, view.walls_remaining()[player], self.window, self.cap
        )
        if not moves:
            raise RuntimeError("No legal moves available for random agent")
        return self.rng.choice(moves)
