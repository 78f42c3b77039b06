import unittest
from quoridor_engine.engine.errors import Reason
from quoridor_engine.engine.game import Game
from quoridor_engine.engine.state import Move, Position
from quoridor_engine.players.hotseat import HotseatController


class TestHotseat(unittest.TestCase):
    def test_4_player_setup(self):
        controller = HotseatController(Game(4))
        metas = [
            {"id": 0, "name": "P1", "role": "human"},
            {"id": 1, "name": "P2", "role": "bot"},
            {"id": 2, "name": "P3", "role": "bot"},
            {"id": 3, "name": "P4", "role": "bot"},
        ]
        controller.set_player_identities(metas)
        controller.refresh_moves()
        snap = controller.snapshot()
        self.assertEqual(len(snap["players"]), 4)
        self.assertEqual(snap["goals"][2], {"id": 2, "name": "P3", "col": 8})
        self.assertEqual(snap["goals"][1], {"id": 1, "name": "P2", "row": 0})
        self.assertEqual(snap["players"][3]["walls_remaining"], 5)

    def test_2_player_turns(self):
        controller = HotseatController(Game(2, names=["Alice", "Bob"]))
        controller.refresh_moves()
        self.assertTrue(controller.is_legal(Move.pawn(Position(1, 4))))
        self.assertFalse(controller.is_legal(Move.pawn(Position(2, 4))))
        self.assertTrue(controller.attempt_move(Move.pawn(Position(1, 4))))
        self.assertEqual(controller.turn, 1)
        snap = controller.snapshot()
        self.assertEqual(snap["schema"], "quoridor.v1")
        self.assertEqual(snap["current_player"], {"id": 1, "name": "Bob"})
        self.assertIsNone(snap["winner"])
        pawn_moves = [m for m in snap["legal_moves"] if m["action"] == "move_pawn"]
        self.assertTrue(all(m["from"] == {"row": 8, "col": 4} for m in pawn_moves))

    def test_rejected_move_keeps_cache(self):
        game = Game(2)
        controller = HotseatController(game)
        controller.refresh_moves()
        cached = list(controller.legal_moves)
        self.assertFalse(controller.attempt_move(Move.place(8, 8, "H")))
        self.assertEqual(game.last_rejection.reason, Reason.OUT_OF_BOUNDS)
        self.assertEqual(controller.legal_moves, cached)
        self.assertEqual(controller.turn, 0)


if __name__ == '__main__':
    unittest.main()
