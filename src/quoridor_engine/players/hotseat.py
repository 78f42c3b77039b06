from __future__ import annotations
import json
from typing import List

from ..engine import rules
from ..engine.game import Game
from ..engine.state import Move


class HotseatController:
    """Simple controller abstraction that the front ends use.
    It caches the legal-action set for the seat to move and pushes actions
    through the game, which does the actual validation.
    """

    def __init__(self, game: Game, print_snapshot: bool = False):
        self.game = game
        self.print_snapshot = print_snapshot
        self._cached_moves: List[Move] = []
        self.turn: int = 0  # increments whenever the seat to move changes
        self._last_player: int = game.current_player
        self._players_meta: List[dict] = [
            {"id": i, "name": name, "role": "unknown"} for i, name in enumerate(game.names)
        ]

    def set_player_identities(self, metas: List[dict]) -> None:
        # Expect each meta to have id,name,role
        self._players_meta = metas

    def refresh_moves(self) -> None:
        self._cached_moves = self.game.legal_moves()
        if not self.game.is_over and self.game.current_player != self._last_player:
            self.turn += 1
            self._last_player = self.game.current_player
        if self.print_snapshot:
            print("TURN_STATE_BEGIN")
            print(json.dumps(self.snapshot(), separators=(",", ":")))
            print("TURN_STATE_END")

    @property
    def legal_moves(self) -> List[Move]:
        return self._cached_moves

    def is_legal(self, move: Move) -> bool:
        return any(move.same_action(m) for m in self._cached_moves)

    def attempt_move(self, move: Move) -> bool:
        if not self.game.attempt(move):
            return False
        self.refresh_moves()
        return True

    def _name(self, player: int) -> str:
        if player < len(self._players_meta):
            return self._players_meta[player]["name"]
        return f"Player {player + 1}"

    def snapshot(self) -> dict:
        """Deterministic JSON-ready view of the current turn."""
        game = self.game
        board = game.board
        current = game.current_player
        serialized_moves = []
        for idx, m in enumerate(self._cached_moves):
            mid = f"M{idx}"
            if m.kind == "pawn" and m.to:
                src = board.pawn_position(current)
                serialized_moves.append(
                    {
                        "id": mid,
                        "action": "move_pawn",
                        "piece": self._name(current),
                        "from": {"row": src.row, "col": src.col},
                        "to": {"row": m.to.row, "col": m.to.col},
                    }
                )
            elif m.kind == "wall" and m.wall:
                serialized_moves.append(
                    {
                        "id": mid,
                        "action": "place_wall",
                        "anchor": {"row": m.wall.row, "col": m.wall.col},
                        "orientation": m.wall.orientation,
                    }
                )
        players = []
        goals = []
        for pid, pos in sorted(board.pawns.items()):
            players.append(
                {
                    "id": pid,
                    "name": self._name(pid),
                    "row": pos.row,
                    "col": pos.col,
                    "walls_remaining": game.walls_remaining(pid),
                }
            )
            goal = rules.board_goal(board, pid)
            goals.append({"id": pid, "name": self._name(pid), goal.axis: goal.line})

        winner_entry = (
            None
            if game.winner is None
            else {"id": game.winner, "name": self._name(game.winner)}
        )
        return {
            "schema": "quoridor.v1",
            "turn": self.turn,
            "current_player": {"id": current, "name": self._name(current)},
            "board": {
                "size": board.size,
                "walls": board.to_dict()["walls"],
            },
            "players": players,
            "goals": goals,
            "status": game.to_dict()["status"],
            "winner": winner_entry,
            "legal_moves": serialized_moves,
        }
