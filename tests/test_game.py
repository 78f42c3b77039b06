import unittest

from quoridor_engine.engine import rules
from quoridor_engine.engine.errors import AmbiguousJump, Reason, RuleViolation
from quoridor_engine.engine.game import AwaitingAction, Game, GameOver
from quoridor_engine.engine.state import Move, Position, WallSegment


class RecordingStats:
    def __init__(self):
        self.calls = []

    def record_game(self, name, won, action_count, elapsed_ms):
        self.calls.append((name, won, action_count, elapsed_ms))


class FakeClock:
    def __init__(self, *times):
        self.times = list(times)

    def __call__(self):
        return self.times.pop(0) if len(self.times) > 1 else self.times[0]


class TestTurnEngine(unittest.TestCase):
    def test_initial_state(self):
        game = Game(2)
        self.assertEqual(game.status, AwaitingAction(0))
        self.assertEqual([game.walls_remaining(i) for i in range(2)], [10, 10])
        game4 = Game(4)
        self.assertEqual([game4.walls_remaining(i) for i in range(4)], [5, 5, 5, 5])
        self.assertEqual(game4.names, ["Player 1", "Player 2", "Player 3", "Player 4"])

    def test_move_advances_turn(self):
        game = Game(2)
        resolved = game.play(Move.step("S"))
        self.assertEqual(resolved.to, Position(1, 4))
        self.assertEqual(game.board.pawn_position(0), Position(1, 4))
        self.assertEqual(game.status, AwaitingAction(1))
        self.assertEqual(game.turn.action_count, 1)
        game.play(Move.step("N"))
        self.assertEqual(game.current_player, 0)

    def test_round_robin_four_players(self):
        game = Game(4)
        order = []
        for direction in ("S", "N", "E", "W", "S"):
            order.append(game.current_player)
            game.play(Move.step(direction))
        self.assertEqual(order, [0, 1, 2, 3, 0])

    def test_rejected_action_keeps_turn(self):
        game = Game(2)
        game.play(Move.place(3, 3, "H"))
        self.assertEqual(game.current_player, 1)
        with self.assertRaises(RuleViolation) as ctx:
            game.play(Move.place(3, 3, "V"))
        self.assertEqual(ctx.exception.reason, Reason.OVERLAP)
        self.assertEqual(game.current_player, 1)
        self.assertEqual(game.turn.action_count, 1)
        self.assertEqual(game.walls_remaining(1), 10)
        self.assertEqual(len(game.board.walls), 1)

    def test_attempt_reports_reason(self):
        game = Game(2)
        self.assertFalse(game.attempt(Move.step("N")))
        self.assertEqual(game.last_rejection.reason, Reason.OUT_OF_BOUNDS)
        self.assertTrue(game.attempt(Move.step("S")))
        self.assertIsNone(game.last_rejection)

    def test_wall_uses_budget_and_records_owner(self):
        game = Game(2)
        game.play(Move.step("S"))
        resolved = game.play(Move.place(5, 5, "V"))
        self.assertEqual(resolved.wall.owner, 1)
        self.assertEqual(game.walls_remaining(1), 9)
        self.assertEqual(game.board.walls[0].owner, 1)

    def test_no_walls_remaining(self):
        game = Game(2)
        game.turn.walls_remaining[0] = 0
        with self.assertRaises(RuleViolation) as ctx:
            game.play(Move.place(2, 2, "H"))
        self.assertEqual(ctx.exception.reason, Reason.NO_WALLS_REMAINING)
        self.assertEqual(game.current_player, 0)

    def test_win_ends_game(self):
        stats = RecordingStats()
        game = Game(2, names=["Ann", "Bob"], stats=stats, clock=FakeClock(10.0, 10.5))
        game.board.move_pawn(0, Position(7, 0))
        game.play(Move.step("S"))
        self.assertEqual(game.status, GameOver(winner=0))
        self.assertTrue(game.is_over)
        self.assertEqual(game.winner, 0)
        self.assertEqual(stats.calls, [("Ann", True, 1, 500), ("Bob", False, 0, 500)])
        self.assertEqual(game.legal_moves(), [])
        with self.assertRaises(RuleViolation) as ctx:
            game.play(Move.step("N"))
        self.assertEqual(ctx.exception.reason, Reason.GAME_OVER)

    def test_abort(self):
        stats = RecordingStats()
        game = Game(2, stats=stats)
        game.play(Move.step("S"))
        game.abort()
        self.assertEqual(game.status, GameOver(aborted=True))
        self.assertEqual(game.status.outcome, "aborted")
        self.assertIsNone(game.winner)
        game.abort()
        self.assertEqual(len(stats.calls), 2)
        self.assertFalse(any(won for _, won, _, _ in stats.calls))

    def test_draw_after_action_limit(self):
        game = Game(2, max_actions=2)
        game.play(Move.step("S"))
        game.play(Move.step("N"))
        self.assertEqual(game.status, GameOver(draw=True))

    def test_ambiguous_jump_is_deferred(self):
        game = Game(2)
        game.board.move_pawn(0, Position(4, 4))
        game.board.move_pawn(1, Position(5, 4))
        game.board.place_wall_segment(WallSegment(5, 3, True))
        with self.assertRaises(AmbiguousJump) as ctx:
            game.play(Move.step("S"))
        self.assertEqual(ctx.exception.options, [Position(5, 3), Position(5, 5)])
        self.assertEqual(game.board.pawn_position(0), Position(4, 4))
        self.assertEqual(game.current_player, 0)
        game.play(Move.pawn(Position(5, 5)))
        self.assertEqual(game.board.pawn_position(0), Position(5, 5))

    def test_diagonal_policy_first(self):
        game = Game(2, diagonal_choice=rules.first_option)
        game.board.move_pawn(0, Position(4, 4))
        game.board.move_pawn(1, Position(5, 4))
        game.board.place_wall_segment(WallSegment(5, 3, True))
        game.play(Move.step("S"))
        self.assertEqual(game.board.pawn_position(0), Position(5, 3))

    def test_stuck_player_is_skipped(self):
        game = Game(2)
        game.board.move_pawn(1, Position(8, 0))
        game.board.place_wall_segment(WallSegment(7, 0, True))
        game.board.place_wall_segment(WallSegment(7, 0, False))
        game.turn.walls_remaining[1] = 0
        game.play(Move.step("S"))
        self.assertEqual(game.status, AwaitingAction(0))

    def test_legal_moves_query(self):
        game = Game(2)
        moves = game.legal_moves()
        self.assertEqual(sum(1 for m in moves if m.kind == "pawn"), 3)
        self.assertEqual(sum(1 for m in moves if m.kind == "wall"), 128)

    def test_snapshot_queries(self):
        game = Game(2)
        game.play(Move.place(0, 3, "H"))
        cells = {c.position: c for c in game.board_snapshot()}
        self.assertEqual(cells[Position(0, 4)].blocked, frozenset({"S"}))
        data = game.to_dict()
        self.assertEqual(data["walls_remaining"], [9, 10])
        self.assertEqual(data["status"], {"state": "awaiting_action", "player": 1})
        self.assertEqual(data["board"]["walls"][0]["orientation"], "H")

    def test_names_must_match_players(self):
        with self.assertRaises(ValueError):
            Game(2, names=["solo"])


if __name__ == '__main__':
    unittest.main()
