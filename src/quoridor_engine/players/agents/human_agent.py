from __future__ import annotations
from typing import Callable, Optional, Sequence

from .base import GameView
from ...engine.state import Move, Position


class HumanAgent:
    """A seat driven by a front end: it queues the click or command, we hand it over."""

    is_human = True

    def __init__(
        self,
        name: str = "Human",
        diagonal_prompt: Callable[[Sequence[Position]], Position] | None = None,
    ):
        self.name = name
        self.pending_move: Optional[Move] = None
        # front ends plug in an interactive picker for a forked jump
        self.diagonal_prompt = diagonal_prompt

    def set_pending(self, move: Move) -> None:
        self.pending_move = move

    def choose_move(self, view: GameView) -> Move:
        if self.pending_move is None:
            raise RuntimeError(f"{self.name} has no pending move")
        move, self.pending_move = self.pending_move, None
        return move

    def choose_diagonal(self, options: Sequence[Position]) -> Position:
        if self.diagonal_prompt is None:
            return options[0]
        return self.diagonal_prompt(options)
