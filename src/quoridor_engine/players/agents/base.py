from __future__ import annotations
from typing import Dict, List, Protocol

from ...engine.game import Game
from ...engine.state import Board, Move


class GameView:
    """Read-only adapter given to agents. The board it hands out is a copy."""

    def __init__(self, game: Game):
        self._game = game
        self._legal: List[Move] | None = None

    @property
    def board(self) -> Board:
        return self._game.board.snapshot_copy()

    @property
    def num_players(self) -> int:
        return self._game.num_players

    def current_player(self) -> int:
        return self._game.current_player

    def walls_remaining(self) -> Dict[int, int]:
        return {i: self._game.walls_remaining(i) for i in range(self._game.num_players)}

    def legal_moves(self) -> List[Move]:
        if self._legal is None:
            self._legal = self._game.legal_moves()
        return self._legal


class Agent(Protocol):
    name: str
    is_human: bool

    def choose_move(self, view: GameView) -> Move: ...
