from __future__ import annotations
import json
import os
import re
from typing import List, Optional, Tuple

from .base import GameView
from .. import search
from ...engine import rules
from ...engine.paths import shortest_distance
from ...engine.state import Board, Move

_openai_client: Optional["OpenAI"] = None  # lazy init
_openai_init_error: Optional[str] = None


def _ensure_client() -> None:
    global _openai_client, _openai_init_error
    if _openai_client is not None or _openai_init_error is not None:
        return
    from openai import OpenAI

    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        _openai_init_error = "missing_api_key"
        return
    _openai_client = OpenAI(api_key=api_key)


SYSTEM_PROMPT = (
    "You are an expert Quoridor player. You must choose a single legal move "
    "that maximizes strategic advantage. Respond ONLY with a compact JSON object: "
    '{"rationale": "<one sentence>", "move_id": "Mx"}. Do not add commentary.'
)

_FENCED = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL)


class LLMAgent:
    name = "LLM Bot"
    is_human = False

    def __init__(self, model: str | None = None, max_attempts: int = 3):
        self.model = model or os.getenv("OPENAI_MODEL", "gpt-4o-mini")
        self.max_attempts = max_attempts
        self.last_raw_response: str | None = None
        self.last_rationale: str | None = None

    # ------------------------------------------------------------ notation
    def _to_algebraic(self, row: int, col: int, size: int = 9) -> str:
        """(0, 0) is the top-left square, a9 on a 9x9 board."""
        return f"{chr(ord('a') + col)}{size - row}"

    def _format_legal_moves(self, moves: List[Move], size: int) -> List[dict]:
        formatted = []
        for idx, m in enumerate(moves):
            mid = f"M{idx}"
            if m.kind == "pawn" and m.to:
                formatted.append(
                    {
                        "id": mid,
                        "action": "move_pawn",
                        "to": self._to_algebraic(m.to.row, m.to.col, size),
                    }
                )
            elif m.kind == "wall" and m.wall:
                formatted.append(
                    {
                        "id": mid,
                        "action": "place_wall",
                        "anchor": self._to_algebraic(m.wall.row, m.wall.col, size),
                        "orientation": m.wall.orientation,
                    }
                )
        return formatted

    def _generate_dense_ascii_board(self, board: Board) -> str:
        n = board.size
        dim = 2 * n - 1
        grid = [[" "] * dim for _ in range(dim)]
        for r in range(n):
            for c in range(n):
                grid[2 * r][2 * c] = "."
        for player, pos in board.pawns.items():
            grid[2 * pos.row][2 * pos.col] = str(player + 1)
        for w in board.walls:
            if w.horizontal:
                for gc in range(2 * w.col, 2 * w.col + 3):
                    grid[2 * w.row + 1][gc] = "-"
            else:
                for gr in range(2 * w.row, 2 * w.row + 3):
                    grid[gr][2 * w.col + 1] = "|"
        header = "   " + " ".join(chr(ord("a") + c) for c in range(n))
        lines = [header]
        for gr, cells in enumerate(grid):
            label = str(n - gr // 2) if gr % 2 == 0 else ""
            lines.append(f"{label:>2} {''.join(cells)} {label}".rstrip())
        lines.append(header)
        return "\n".join(lines)

    def _get_goals_description(self, num_players: int, size: int = 9) -> str:
        lines = []
        for player in range(num_players):
            goal = rules.goal_for(player, num_players, size)
            if goal.axis == "row":
                target = f"Row {size - goal.line}"
            else:
                target = f"Col {chr(ord('a') + goal.line)}"
            lines.append(f"P{player + 1}: Reach {target}")
        return "\n".join(lines)

    def _get_rules_summary(self, num_players: int) -> str:
        parts = [
            "Be the FIRST to move your pawn onto your goal edge.",
            "Each turn: move one square orthogonally, or place one wall.",
            "Jump straight over an adjacent pawn; if that is blocked, jump diagonally.",
            "Walls cover two squares, cannot overlap or cross, and may never cut anyone off.",
        ]
        if num_players == 4:
            parts.append("No double jumps over two pawns in a row.")
        return "\n".join(f"- {p}" for p in parts)

    # ------------------------------------------------------------ llm io
    def _call_llm(self, prompt: str) -> str | None:
        _ensure_client()
        if _openai_client is None:
            print(f"LLM_DIAG no_client reason={_openai_init_error or 'unknown'}")
            return None  # signal fallback
        try:
            resp = _openai_client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=0.2,
            )
        except Exception as e:  # pragma: no cover
            self.last_raw_response = f"ERROR: {e}"
            print(f"LLM_DIAG api_error={e}")
            return None
        content = (resp.choices[0].message.content or "").strip()
        self.last_raw_response = content
        return content

    def _parse_response(self, text: str) -> Tuple[str | None, str | None]:
        match = _FENCED.search(text)
        candidate = match.group(1) if match else text.strip()
        try:
            obj = json.loads(candidate)
        except json.JSONDecodeError:
            return None, None
        if not isinstance(obj, dict) or not isinstance(obj.get("move_id"), str):
            return None, None
        rationale = obj.get("rationale")
        return obj["move_id"].strip(), rationale if isinstance(rationale, str) else None

    def _build_prompt(self, view: GameView, moves: List[Move]) -> str:
        board = view.board
        player = view.current_player()
        walls = view.walls_remaining()
        distances = {
            f"P{p + 1}": shortest_distance(board, pos, rules.board_goal(board, p).reached)
            for p, pos in sorted(board.pawns.items())
        }
        return (
            f"You are P{player + 1}.\n"
            + "Board:\n" + self._generate_dense_ascii_board(board)
            + "\nGoals:\n" + self._get_goals_description(view.num_players, board.size)
            + "\nRules:\n" + self._get_rules_summary(view.num_players)
            + "\nWalls remaining:" + json.dumps({f"P{p + 1}": n for p, n in walls.items()})
            + "\nShortest path lengths:" + json.dumps(distances)
            + "\nLegal moves (array):"
            + json.dumps(self._format_legal_moves(moves, board.size), separators=(",", ":"))
            + '\nSelect one by its id. Respond only with {"rationale":"...","move_id":"Mx"}.'
        )

    def choose_move(self, view: GameView) -> Move:
        moves = list(view.legal_moves())
        if not moves:
            raise RuntimeError("No legal moves available for LLM agent")
        prompt = self._build_prompt(view, moves)
        for attempt in range(1, self.max_attempts + 1):
            raw = self._call_llm(prompt)
            if raw is None:
                break  # fallback
            move_id, rationale = self._parse_response(raw)
            if move_id is None:
                print(f"LLM_DIAG unparsable_response attempt={attempt} raw={raw}")
                continue
            idx = int(move_id[1:]) if re.fullmatch(r"M\d+", move_id) else -1
            if 0 <= idx < len(moves):
                self.last_rationale = rationale
                print(f"LLM_CHOSEN move_id={move_id} rationale={rationale}")
                return moves[idx]
            print(f"LLM_DIAG unknown_move_id attempt={attempt} move_id={move_id}")
        # Fallback: greedy tier over the same legal set
        fallback = search.greedy_move(view.board, view.current_player(), moves)
        print(f"LLM_FALLBACK move_kind={fallback.kind} auto_selected reason=no_valid_llm")
        return fallback
