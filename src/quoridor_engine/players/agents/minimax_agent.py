from __future__ import annotations

from .base import GameView
from .. import search
from ...engine.state import Move


class MinimaxAgent:
    """Tier 3: fixed-depth minimax with alpha-beta over copied boards."""

    name = "Minimax Bot"
    is_human = False

    def __init__(
        self,
        depth: int = search.DEFAULT_DEPTH,
        window: int = search.DEFAULT_WINDOW,
        cap: int = search.DEFAULT_CAP,
        verbose: bool = False,
    ):
        self.depth = depth
        self.window = window
        self.cap = cap
        self.verbose = verbose

    def choose_move(self, view: GameView) -> Move:
        board = view.board
        player = view.current_player()
        scored = search.score_moves(
            board, player, view.walls_remaining(), self.depth, self.window, self.cap
        )
        move, score = search.best_move(scored)
        if move is None:
            raise RuntimeError("No legal moves available for minimax agent")
        if self.verbose:
            print(
                f"SEARCH_DIAG tier=minimax player={player} depth={self.depth} "
                f"candidates={len(scored)} score={score} move={_describe(move)}"
            )
        return move


def _describe(move: Move) -> str:
    if move.kind == "wall":
        return f"wall:{move.wall.row},{move.wall.col},{move.wall.orientation}"
    return f"pawn:{move.to.row},{move.to.col}"
