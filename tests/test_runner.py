import json
import os
import random
import tempfile
import unittest
from dataclasses import asdict
from unittest import mock

from mastermind.console import ConsolePlayer
from mastermind.game import Configuration
from mastermind.main import main, parse_secret
from mastermind.errors import ConfigurationError
from mastermind.runner import GameRunner


class ScriptedPlayer:
    """Plays a fixed list of guesses; None ends the game early."""

    def __init__(self, guesses):
        self.guesses = list(guesses)
        self.rejections = []
        self.finished = None

    def get_next_guess(self, session):
        if not self.guesses:
            return None
        return self.guesses.pop(0)

    def reject(self, message):
        self.rejections.append(message)

    def game_over(self, session):
        self.finished = session.status


class TestGameRunner(unittest.TestCase):
    """
    Tests for `GameRunner.run`: outcome, recorded turns, retry of rejected
    guesses and the JSON-serializable `GameResult`.
    """

    def setUp(self):
        self.cfg = Configuration(color_count=6, hole_count=4, guess_limit=3)

    def test_win(self):
        player = ScriptedPlayer([[1, 1, 2, 3], [1, 2, 3, 4]])
        result = GameRunner(self.cfg, player, secret=[1, 2, 3, 4]).run()
        self.assertEqual(result.outcome, "win")
        self.assertEqual(result.total_turns, 2)
        self.assertEqual(result.secret, [1, 2, 3, 4])
        self.assertEqual(result.turns[0], {"turn_number": 1, "guess": [1, 1, 2, 3],
                                           "black": 1, "white": 2})
        self.assertEqual(result.turns[1]["black"], 4)
        self.assertIsNotNone(player.finished)

    def test_loss(self):
        player = ScriptedPlayer([[5, 5, 5, 5]] * 3)
        result = GameRunner(self.cfg, player, secret=[1, 2, 3, 4]).run()
        self.assertEqual(result.outcome, "loss")
        self.assertEqual(result.total_turns, 3)

    def test_rejected_guess_is_retried_not_recorded(self):
        player = ScriptedPlayer([[1, 2], [1, 2, 3, 9], [1, 2, 3, 4]])
        result = GameRunner(self.cfg, player, secret=[1, 2, 3, 4]).run()
        self.assertEqual(len(player.rejections), 2)
        self.assertEqual(result.total_turns, 1)
        self.assertEqual(result.outcome, "win")

    def test_quit(self):
        player = ScriptedPlayer([[5, 5, 5, 5]])
        result = GameRunner(self.cfg, player, secret=[1, 2, 3, 4]).run()
        self.assertEqual(result.outcome, "quit")
        self.assertEqual(result.total_turns, 1)
        self.assertIsNone(player.finished)

    def test_interrupt_ends_game_as_quit(self):
        class InterruptedPlayer(ScriptedPlayer):
            def get_next_guess(self, session):
                if not self.guesses:
                    raise KeyboardInterrupt
                return self.guesses.pop(0)

        player = InterruptedPlayer([[5, 5, 5, 5]])
        result = GameRunner(self.cfg, player, secret=[1, 2, 3, 4]).run()
        self.assertEqual(result.outcome, "quit")
        self.assertEqual(result.total_turns, 1)
        self.assertEqual(result.turns[0]["guess"], [5, 5, 5, 5])
        self.assertIsNone(player.finished)

    def test_random_secret_with_seed(self):
        player = ScriptedPlayer([])
        result = GameRunner(self.cfg, player, rng=random.Random(1)).run()
        self.assertEqual(len(result.secret), 4)

    def test_result_serializes(self):
        result = GameRunner(self.cfg, ScriptedPlayer([[1, 2, 3, 4]]), secret=[1, 2, 3, 4]).run()
        data = json.loads(json.dumps(asdict(result)))
        self.assertEqual(data["config"]["hole_count"], 4)
        self.assertTrue(data["timestamp"].endswith("Z"))


class TestMain(unittest.TestCase):

    def test_parse_secret(self):
        cfg = Configuration(color_count=6, hole_count=4)
        self.assertEqual(parse_secret("1, 2,3,4", cfg), [1, 2, 3, 4])
        for bad in ("1,2,3", "1,2,3,0", "a,b,c,d"):
            with self.assertRaises(ConfigurationError):
                parse_secret(bad, cfg)

    def test_plays_and_records_a_game(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            output = os.path.join(tmpdir, "games.jsonl")
            argv = ["--colors", "6", "--holes", "4", "--guesses", "5",
                    "--secret", "1,2,3,4", "--output", output,
                    "--env-file", os.path.join(tmpdir, "missing.env")]
            with mock.patch.dict(os.environ, {}, clear=True), \
                    mock.patch("builtins.input", side_effect=["6 6 6 6", "1 2 3 4"]), \
                    mock.patch("builtins.print"):
                main(argv)

            with open(output) as f:
                records = [json.loads(line) for line in f]

        self.assertEqual(len(records), 1)
        self.assertEqual(records[0]["outcome"], "win")
        self.assertEqual(records[0]["total_turns"], 2)
        self.assertEqual(records[0]["config"]["guess_limit"], 5)

    def test_flags_override_environment_and_runs_are_summarized(self):
        env = {"MASTERMIND_NUM_COLORS": "6", "MASTERMIND_NUM_HOLES": "4",
               "MASTERMIND_NUM_GUESSES": "3", "MASTERMIND_DIAG": "true"}
        with tempfile.TemporaryDirectory() as tmpdir:
            output = os.path.join(tmpdir, "games.jsonl")
            argv = ["--guesses", "5", "--runs", "2", "--secret", "1,2,3,4",
                    "--output", output, "--env-file", os.path.join(tmpdir, "missing.env")]
            with mock.patch.dict(os.environ, env, clear=True), \
                    mock.patch("mastermind.main.ConsolePlayer", wraps=ConsolePlayer) as player_cls, \
                    mock.patch("builtins.input", side_effect=["1234", "1 2 3 4"]), \
                    mock.patch("builtins.print") as fake_print:
                main(argv)

            with open(output) as f:
                records = [json.loads(line) for line in f]

        self.assertTrue(player_cls.call_args.kwargs["reveal"])
        self.assertEqual(len(records), 2)
        for record in records:
            self.assertEqual(record["config"]["color_count"], 6)
            self.assertEqual(record["config"]["guess_limit"], 5)
            self.assertEqual(record["outcome"], "win")
        fake_print.assert_any_call("SUMMARY")
        fake_print.assert_any_call("Games: 2")
        fake_print.assert_any_call("Wins: 2 (100.0%)")

    def test_diag_flag_reveals_secret(self):
        argv = ["--colors", "6", "--holes", "4", "--secret", "1,2,3,4", "--diag",
                "--no-record", "--env-file", "does-not-exist.env"]
        with mock.patch.dict(os.environ, {}, clear=True), \
                mock.patch("mastermind.main.ConsolePlayer", wraps=ConsolePlayer) as player_cls, \
                mock.patch("builtins.input", side_effect=["quit"]), \
                mock.patch("builtins.print"):
            main(argv)
        self.assertTrue(player_cls.call_args.kwargs["reveal"])

    def test_impossible_configuration_exits(self):
        argv = ["--colors", "6", "--holes", "7", "--no-duplicates", "--no-record",
                "--env-file", "does-not-exist.env"]
        with mock.patch.dict(os.environ, {}, clear=True), \
                mock.patch("builtins.print"):
            with self.assertRaises(SystemExit) as ctx:
                main(argv)
        self.assertEqual(ctx.exception.code, 1)


if __name__ == '__main__':
    unittest.main()
