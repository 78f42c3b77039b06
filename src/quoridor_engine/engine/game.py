from __future__ import annotations
import time
from dataclasses import dataclass, field
from typing import Callable, List, Sequence, Tuple

from . import rules
from .errors import AmbiguousJump, Reason, RuleViolation
from .rules import DiagonalChooser
from .state import BOARD_SIZE, WALLS_PER_PLAYER, Board, CellView, Move, WallSegment
from ..stats import StatsRecorder


@dataclass(frozen=True)
class AwaitingAction:
    player: int


@dataclass(frozen=True)
class GameOver:
    winner: int | None = None
    draw: bool = False
    aborted: bool = False

    @property
    def outcome(self) -> str:
        if self.aborted:
            return "aborted"
        if self.draw:
            return "draw"
        return "winner"


@dataclass
class TurnState:
    current_player: int
    walls_remaining: List[int]
    action_count: int = 0
    player_actions: List[int] = field(default_factory=list)


class Game:
    """Turn engine. Owns the live board; every action is validated before it lands.

    A rejected action raises RuleViolation (or AmbiguousJump) and leaves the
    board and the turn untouched, so the same player simply tries again.
    """

    def __init__(
        self,
        num_players: int = 2,
        size: int = BOARD_SIZE,
        names: Sequence[str] | None = None,
        diagonal_choice: DiagonalChooser | None = None,
        stats: StatsRecorder | None = None,
        max_actions: int = 0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.board = Board.new(num_players, size)
        per = WALLS_PER_PLAYER[num_players]
        self.turn = TurnState(
            current_player=0,
            walls_remaining=[per] * num_players,
            player_actions=[0] * num_players,
        )
        if names is None:
            names = [f"Player {i + 1}" for i in range(num_players)]
        if len(names) != num_players:
            raise ValueError("One name per player required")
        self.names = list(names)
        self.diagonal_choice = diagonal_choice
        self.stats = stats
        self.max_actions = max_actions
        self.status: AwaitingAction | GameOver = AwaitingAction(0)
        self.history: List[Tuple[int, Move]] = []
        self.last_rejection: RuleViolation | None = None
        self._clock = clock
        self._started = clock()

    # ----------------------------------------------------------- queries
    @property
    def num_players(self) -> int:
        return self.board.num_players

    @property
    def current_player(self) -> int:
        return self.turn.current_player

    @property
    def is_over(self) -> bool:
        return isinstance(self.status, GameOver)

    @property
    def winner(self) -> int | None:
        return self.status.winner if isinstance(self.status, GameOver) else None

    def walls_remaining(self, player: int) -> int:
        return self.turn.walls_remaining[player]

    def elapsed_ms(self) -> int:
        return int((self._clock() - self._started) * 1000)

    def board_snapshot(self) -> List[CellView]:
        return self.board.cells()

    def legal_moves(self) -> List[Move]:
        if self.is_over:
            return []
        player = self.current_player
        return rules.legal_moves(self.board, player, self.walls_remaining(player))

    # ----------------------------------------------------------- actions
    def play(self, move: Move) -> Move:
        if self.is_over:
            raise RuleViolation(Reason.GAME_OVER)
        player = self.current_player
        resolved = rules.resolve(
            self.board, player, move, self.walls_remaining(player), self.diagonal_choice
        )
        # validation is complete; nothing below can fail
        rules.apply_move(self.board, player, resolved)
        if resolved.kind == "wall":
            self.turn.walls_remaining[player] -= 1
        self.turn.action_count += 1
        self.turn.player_actions[player] += 1
        self.history.append((player, resolved))

        if rules.has_won(self.board, player):
            self._finish(GameOver(winner=player))
        elif self.max_actions and self.turn.action_count >= self.max_actions:
            self._finish(GameOver(draw=True))
        else:
            self._advance()
        return resolved

    def attempt(self, move: Move) -> bool:
        try:
            self.play(move)
        except RuleViolation as e:
            self.last_rejection = e
            return False
        except AmbiguousJump as e:
            self.last_rejection = RuleViolation(Reason.INVALID_FORMAT, str(e))
            return False
        self.last_rejection = None
        return True

    def abort(self) -> None:
        if not self.is_over:
            self._finish(GameOver(aborted=True))

    # ----------------------------------------------------------- internals
    def _can_act(self, player: int) -> bool:
        if rules.legal_pawn_moves(self.board, player):
            return True
        if self.walls_remaining(player) <= 0:
            return False
        for r in range(self.board.size - 1):
            for c in range(self.board.size - 1):
                for horizontal in (True, False):
                    if rules.can_place_wall(self.board, WallSegment(r, c, horizontal)):
                        return True
        return False

    def _advance(self) -> None:
        n = self.num_players
        for offset in range(1, n + 1):
            nxt = (self.current_player + offset) % n
            if self._can_act(nxt):
                self.turn.current_player = nxt
                self.status = AwaitingAction(nxt)
                return
        self._finish(GameOver(draw=True))

    def _finish(self, outcome: GameOver) -> None:
        self.status = outcome
        if self.stats is None:
            return
        elapsed = self.elapsed_ms()
        for i, name in enumerate(self.names):
            self.stats.record_game(name, outcome.winner == i, self.turn.player_actions[i], elapsed)

    def to_dict(self) -> dict:
        status = (
            {"state": "awaiting_action", "player": self.status.player}
            if isinstance(self.status, AwaitingAction)
            else {"state": "game_over", "outcome": self.status.outcome, "winner": self.status.winner}
        )
        return {
            "board": self.board.to_dict(),
            "current_player": self.current_player,
            "walls_remaining": list(self.turn.walls_remaining),
            "action_count": self.turn.action_count,
            "status": status,
        }
