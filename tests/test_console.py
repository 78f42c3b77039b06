import random
import unittest

from quoridor_engine.config import Settings
from quoridor_engine.engine.errors import Reason, RuleViolation
from quoridor_engine.engine.game import GameOver
from quoridor_engine.engine.state import Board, Move, Position, WallSegment
from quoridor_engine.players.agents.human_agent import HumanAgent
from quoridor_engine.players.agents.random_agent import RandomAgent
from quoridor_engine.render.console import (
    ConsoleMatch, create_agents, parse_command, render_board, sanitize_name, unique_names,
)
from quoridor_engine.stats import MatchStatistics


class Script:
    """Feeds canned lines to the console and raises EOFError once they run out."""

    def __init__(self, *lines):
        self.lines = list(lines)

    def __call__(self, prompt=""):
        if not self.lines:
            raise EOFError
        return self.lines.pop(0)


class TestCommands(unittest.TestCase):
    def test_parse_move_and_wall(self):
        self.assertEqual(parse_command("m s"), Move.step("S"))
        wall = parse_command("W 3 4 v")
        self.assertEqual(wall.kind, "wall")
        self.assertEqual(wall.wall, WallSegment(3, 4, False))
        self.assertEqual(parse_command("q"), "quit")
        self.assertEqual(parse_command("HELP"), "help")

    def test_parse_rejects_garbage(self):
        for raw in ("", "X", "M", "M Q", "W 1 two H", "W 1 1 D", "W 1 1"):
            with self.assertRaises(RuleViolation) as ctx:
                parse_command(raw)
            self.assertEqual(ctx.exception.reason, Reason.INVALID_FORMAT)

    def test_names(self):
        self.assertEqual(sanitize_name("  ", "P1"), "P1")
        self.assertEqual(sanitize_name("Ann Lee!", "P1"), "Ann_Lee_")
        self.assertEqual(len(sanitize_name("x" * 40, "P1")), 15)
        self.assertEqual(unique_names(["Bob", "bob", "Eve"]), ["Bob", "bob_2", "Eve"])

    def test_create_agents_names_humans(self):
        agents = create_agents(["human", "human:Zed", "random", "ai:2"], Settings())
        self.assertEqual([a.name for a in agents[:2]], ["P1", "Zed"])
        self.assertFalse(agents[2].is_human)

    def test_render_board(self):
        board = Board.new(2)
        board.place_wall_segment(WallSegment(0, 3, True))
        art = render_board(board)
        self.assertIn(" 1 ", art)
        self.assertIn(" 2 ", art)
        self.assertIn("===", art)


class TestConsoleMatch(unittest.TestCase):
    def make_match(self, agents, *lines, **settings):
        out = []
        match = ConsoleMatch(
            agents, Settings(**settings), MatchStatistics(), input_fn=Script(*lines), output=out.append
        )
        return match, out

    def test_quit_aborts(self):
        match, out = self.make_match([HumanAgent("Ann"), HumanAgent("Bob")], "q")
        self.assertEqual(match.run(), GameOver(aborted=True))
        self.assertIn("\nGame ended.", out)
        self.assertIsNotNone(match.stats.totals("Ann"))

    def test_rejection_keeps_seat(self):
        match, out = self.make_match(
            [HumanAgent("Ann"), HumanAgent("Bob")], "x", "M N", "M S", "h", "M N", "q"
        )
        match.run()
        self.assertTrue(any(line.startswith("Rejected (invalid_format)") for line in out))
        self.assertTrue(any(line.startswith("Rejected (out_of_bounds)") for line in out))
        self.assertEqual(match.game.board.pawn_position(0), Position(1, 4))
        self.assertEqual(match.game.board.pawn_position(1), Position(7, 4))

    def test_end_of_input_aborts(self):
        match, _ = self.make_match([HumanAgent("Ann"), HumanAgent("Bob")])
        self.assertEqual(match.run().outcome, "aborted")

    def test_diagonal_prompt(self):
        match, out = self.make_match(
            [HumanAgent("Ann"), HumanAgent("Bob")], "M S", "3", "2", "q"
        )
        board = match.game.board
        board.move_pawn(0, Position(4, 4))
        board.move_pawn(1, Position(5, 4))
        board.place_wall_segment(WallSegment(5, 3, True))
        match.run()
        self.assertIn("Enter 1 or 2.", out)
        self.assertEqual(board.pawn_position(0), Position(5, 5))

    def test_diagonal_policy_first(self):
        match, _ = self.make_match(
            [HumanAgent("Ann"), HumanAgent("Bob")], "M S", "q", diagonal_policy="first"
        )
        board = match.game.board
        board.move_pawn(0, Position(4, 4))
        board.move_pawn(1, Position(5, 4))
        board.place_wall_segment(WallSegment(5, 3, True))
        match.run()
        self.assertEqual(board.pawn_position(0), Position(5, 3))

    def test_bots_play_until_draw(self):
        agents = [RandomAgent(rng=random.Random(1)), RandomAgent(rng=random.Random(2))]
        match, out = self.make_match(agents, max_actions=6)
        outcome = match.run()
        self.assertEqual(outcome, GameOver(draw=True))
        self.assertEqual(match.game.names, ["Random Bot", "Random Bot_2"])
        self.assertIn("\nGame drawn.", out)
        self.assertEqual(match.stats.totals("Random Bot").games, 1)

    def test_win_is_reported(self):
        match, out = self.make_match([HumanAgent("Ann"), HumanAgent("Bob")], "M S")
        match.game.board.move_pawn(0, Position(7, 0))
        outcome = match.run()
        self.assertEqual(outcome.winner, 0)
        self.assertIn("\nAnn wins! Victory in 1 actions!", out)


if __name__ == '__main__':
    unittest.main()
