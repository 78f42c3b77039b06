from __future__ import annotations
import argparse
import re
from typing import Callable, List, Sequence

from ..config import DIAGONAL_POLICIES, Settings, load_settings
from ..engine import rules
from ..engine.errors import Reason, RuleViolation
from ..engine.game import Game, GameOver
from ..engine.state import Board, Move, Position
from ..players.agents.base import Agent, GameView
from ..players.agents.human_agent import HumanAgent
from ..players.factory import AgentFactory
from ..stats import MatchStatistics

MAX_NAME_LENGTH = 15

HELP_TEXT = """\
=== Quoridor Help ===
OBJECTIVE: Be the first to reach the opposite side of the board.

COMMANDS:
  M <dir>       - Move pawn (N/S/E/W)
  W <r> <c> <o> - Place wall at intersection row r, column c (o = H/V)
  H             - Show this help
  Q             - Quit game

RULES:
- Pawns move one space orthogonally
- Jump over adjacent pawns; if the jump is blocked, step diagonally around them
- Walls are 2 segments long; they cannot overlap, cross, or cut anyone off
- 10 walls each with 2 players, 5 each with 4 players"""


def sanitize_name(raw: str, default: str) -> str:
    name = raw.strip() or default
    name = name[:MAX_NAME_LENGTH]
    return re.sub(r"[^A-Za-z0-9_]", "_", name)


def unique_names(names: Sequence[str]) -> List[str]:
    """Names must differ case-insensitively; later duplicates get a seat suffix."""
    seen = set()
    out = []
    for i, name in enumerate(names):
        if name.lower() in seen:
            name = f"{name[:MAX_NAME_LENGTH - 2]}_{i + 1}"
        seen.add(name.lower())
        out.append(name)
    return out


def parse_command(raw: str) -> Move | str:
    """Turn a command line into a Move, or 'help' / 'quit'."""
    tok = raw.split()
    if not tok:
        raise RuleViolation(Reason.INVALID_FORMAT, "Enter a command (H for help).")
    action = tok[0].upper()
    if action in ("Q", "QUIT"):
        return "quit"
    if action in ("H", "HELP"):
        return "help"
    if action.startswith("M"):
        if len(tok) != 2:
            raise RuleViolation(Reason.INVALID_FORMAT, "Move format: M <direction> (N/S/E/W)")
        return Move.step(tok[1])
    if action.startswith("W"):
        if len(tok) != 4:
            raise RuleViolation(Reason.INVALID_FORMAT, "Wall format: W <row> <col> <H/V>")
        try:
            r, c = int(tok[1]), int(tok[2])
        except ValueError:
            raise RuleViolation(Reason.INVALID_FORMAT, "Row/Col must be numbers.")
        return Move.place(r, c, tok[3][:1])
    raise RuleViolation(Reason.INVALID_FORMAT, "Invalid command. Use M for move or W for wall (or H/Q).")


def render_board(board: Board) -> str:
    n = board.size
    lines = ["    " + "".join(f"{c:<4}" for c in range(n)).rstrip()]
    for r in range(n):
        top = "  "
        row = f"{r} "
        for c in range(n):
            sides = board.blocked_sides(Position(r, c))
            top += "+" + ("===" if "N" in sides else "---")
            occupant = board.occupant(Position(r, c))
            row += ("‖" if "W" in sides else "|") + (f" {occupant + 1} " if occupant is not None else "   ")
        lines.append(top + "+")
        lines.append(row + "|")
    lines.append("  " + "+---" * n + "+")
    return "\n".join(lines)


def describe(move: Move) -> str:
    if move.kind == "wall":
        return f"places a wall at ({move.wall.row}, {move.wall.col}) {move.wall.orientation}"
    return f"moves to ({move.to.row}, {move.to.col})"


class ConsoleMatch:
    """Line-based front end: one prompt per action, same seat until it is legal."""

    def __init__(
        self,
        agents: Sequence[Agent],
        settings: Settings,
        stats: MatchStatistics | None = None,
        input_fn: Callable[[str], str] = input,
        output: Callable[[str], None] = print,
    ):
        self.agents = list(agents)
        self.settings = settings
        self.stats = stats
        self.input = input_fn
        self.output = output
        chooser = rules.first_option if settings.diagonal_policy == "first" else self._prompt_diagonal
        self.game = Game(
            num_players=len(self.agents),
            size=settings.board_size,
            names=unique_names([a.name for a in self.agents]),
            diagonal_choice=chooser,
            stats=stats,
            max_actions=settings.max_actions,
        )

    def _prompt_diagonal(self, options: Sequence[Position]) -> Position:
        agent = self.agents[self.game.current_player]
        if isinstance(agent, HumanAgent) and agent.diagonal_prompt is not None:
            return agent.choose_diagonal(options)
        labels = " or ".join(f"[{i + 1}] ({p.row},{p.col})" for i, p in enumerate(options))
        while True:
            choice = self.input(f"Diagonal jump possible: {labels}\n> ").strip()
            if choice in ("1", "2"):
                return options[int(choice) - 1]
            self.output("Enter 1 or 2.")

    def display(self) -> None:
        game = self.game
        self.output("\n" + render_board(game.board))
        self.output("Game Status:")
        for i, name in enumerate(game.names):
            marker = "->" if i == game.current_player and not game.is_over else "  "
            self.output(
                f"{marker} {name} (P{i + 1}): Walls: {game.walls_remaining(i)}, "
                f"Actions: {game.turn.player_actions[i]}"
            )

    def _human_turn(self) -> None:
        game = self.game
        player = game.current_player
        self.output(f"\n{game.names[player]}'s turn (Player {player + 1})")
        self.output("Enter: [M]ove <dir>, [W]all <r> <c> <H/V>, [H]elp, [Q]uit")
        try:
            command = parse_command(self.input("> "))
            if command == "quit":
                game.abort()
            elif command == "help":
                self.output(HELP_TEXT)
            else:
                game.play(command)
        except RuleViolation as e:
            self.output(f"Rejected ({e.reason.value}): {e.message}")

    def _agent_turn(self, agent: Agent) -> None:
        move = agent.choose_move(GameView(self.game))
        resolved = self.game.play(move)
        self.output(f"{agent.name} {describe(resolved)}")

    def run(self) -> GameOver:
        self.output(f"Each player gets {self.game.walls_remaining(0)} walls. Type 'h' for help.")
        try:
            while not self.game.is_over:
                self.display()
                agent = self.agents[self.game.current_player]
                if agent.is_human:
                    self._human_turn()
                else:
                    self._agent_turn(agent)
        except (EOFError, KeyboardInterrupt):
            self.game.abort()
        return self._report()

    def _report(self) -> GameOver:
        outcome = self.game.status
        self.display()
        if outcome.winner is not None:
            name = self.game.names[outcome.winner]
            actions = self.game.turn.player_actions[outcome.winner]
            self.output(f"\n{name} wins! Victory in {actions} actions!")
        elif outcome.draw:
            self.output("\nGame drawn.")
        else:
            self.output("\nGame ended.")
        if self.stats is not None:
            self.output("\nFinal Statistics:")
            self.output(self.stats.report())
        return outcome


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Quoridor (console)")
    parser.add_argument(
        "players", nargs="*",
        help="Player specs, 2 or 4 (e.g. human:Alice ai:3 random greedy minimax:2 llm)",
    )
    parser.add_argument("--size", type=int, help="Board size (odd)")
    parser.add_argument("--seed", type=int, help="Seed for AI randomness")
    parser.add_argument("--depth", type=int, help="Minimax depth")
    parser.add_argument("--diagonal", choices=DIAGONAL_POLICIES, help="Forked jump policy")
    parser.add_argument("--max-actions", type=int, help="Declare a draw after this many actions")
    return parser


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    if args.size is not None:
        settings.board_size = args.size
    if args.seed is not None:
        settings.seed = args.seed
    if args.depth is not None:
        settings.ai_depth = args.depth
    if args.diagonal is not None:
        settings.diagonal_policy = args.diagonal
    if args.max_actions is not None:
        settings.max_actions = args.max_actions
    return settings.validate()


def create_agents(specs: Sequence[str], settings: Settings) -> List[Agent]:
    agents = []
    for i, spec in enumerate(specs):
        agent = AgentFactory.create(spec, settings)
        default = f"P{i + 1}"
        if agent.is_human:
            agent.name = sanitize_name("" if agent.name == "Human" else agent.name, default)
        agents.append(agent)
    return agents


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    specs = args.players or ["human", "human"]
    if len(specs) not in (2, 4):
        parser.error("Quoridor needs 2 or 4 players")
    try:
        settings = apply_overrides(load_settings(), args)
        agents = create_agents(specs, settings)
    except ValueError as e:
        parser.error(str(e))
    stats = MatchStatistics()
    ConsoleMatch(agents, settings, stats).run()


if __name__ == "__main__":
    main()
