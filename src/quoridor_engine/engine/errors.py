from __future__ import annotations
from enum import Enum
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from .state import Position


class Reason(str, Enum):
    OUT_OF_BOUNDS = "out_of_bounds"
    WALL_BLOCKED = "wall_blocked"
    OCCUPIED = "occupied"
    OVERLAP = "overlap"
    PATH_BLOCKED = "path_blocked"
    NO_LEGAL_JUMP = "no_legal_jump"
    INVALID_FORMAT = "invalid_format"
    NO_WALLS_REMAINING = "no_walls_remaining"
    GAME_OVER = "game_over"


_DEFAULT_MESSAGES = {
    Reason.OUT_OF_BOUNDS: "Target is off the board.",
    Reason.WALL_BLOCKED: "A wall blocks that way.",
    Reason.OCCUPIED: "That square is occupied.",
    Reason.OVERLAP: "Walls cannot overlap or cross.",
    Reason.PATH_BLOCKED: "That wall would cut a player off from their goal.",
    Reason.NO_LEGAL_JUMP: "No legal jump over that pawn.",
    Reason.INVALID_FORMAT: "Invalid command.",
    Reason.NO_WALLS_REMAINING: "No walls remaining!",
    Reason.GAME_OVER: "The game is already over.",
}


class RuleViolation(ValueError):
    """An action the rules reject. The board is never touched when raised."""

    def __init__(self, reason: Reason, message: str | None = None):
        self.reason = reason
        self.message = message or _DEFAULT_MESSAGES[reason]
        super().__init__(self.message)


class AmbiguousJump(Exception):
    """Two diagonal landings are legal and nobody picked one."""

    def __init__(self, options: List["Position"]):
        self.options = list(options)
        super().__init__(
            "Diagonal jump possible: "
            + ", ".join(f"({p.row},{p.col})" for p in self.options)
        )
