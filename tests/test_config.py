import os
import tempfile
import unittest
from unittest import mock

from quoridor_engine.config import Settings, load_settings


class TestSettings(unittest.TestCase):
    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            settings = load_settings(env_file=os.devnull)
        self.assertEqual(settings, Settings())
        self.assertEqual(settings.diagonal_policy, "prompt")
        self.assertIsNone(settings.seed)

    def test_environment_overrides(self):
        env = {
            "QUORIDOR_BOARD_SIZE": "7",
            "QUORIDOR_DIAGONAL_POLICY": "FIRST",
            "QUORIDOR_AI_DEPTH": "2",
            "QUORIDOR_SEED": "11",
            "PRINT_SEARCH": "true",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            settings = load_settings(env_file=os.devnull)
        self.assertEqual(settings.board_size, 7)
        self.assertEqual(settings.diagonal_policy, "first")
        self.assertEqual(settings.ai_depth, 2)
        self.assertEqual(settings.seed, 11)
        self.assertTrue(settings.print_search)
        self.assertFalse(settings.print_snapshot)

    def test_env_file_loaded_but_environment_wins(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, ".env")
            with open(path, "w") as f:
                f.write("QUORIDOR_CANDIDATE_CAP=20\nQUORIDOR_AI_DEPTH=4\n")
            with mock.patch.dict(os.environ, {"QUORIDOR_AI_DEPTH": "1"}, clear=True):
                settings = load_settings(env_file=path)
        self.assertEqual(settings.candidate_cap, 20)
        self.assertEqual(settings.ai_depth, 1)

    def test_invalid_values(self):
        for env in (
            {"QUORIDOR_BOARD_SIZE": "8"},
            {"QUORIDOR_BOARD_SIZE": "nine"},
            {"QUORIDOR_DIAGONAL_POLICY": "random"},
            {"QUORIDOR_AI_DEPTH": "0"},
        ):
            with mock.patch.dict(os.environ, env, clear=True):
                with self.assertRaises(ValueError):
                    load_settings(env_file=os.devnull)


if __name__ == '__main__':
    unittest.main()
