"""Unit tests for the command-line interface."""

import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

from hand_recorder.cli import HandRecorderCLI
from hand_recorder.config import ConfigManager
from hand_recorder.core import (
    ActionType, HandRecord, HandSession, Position, Street, TableConfig,
    load_hand_record, save_hand_record,
)


class TestCLI(unittest.TestCase):
    """Test cases for HandRecorderCLI."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.base = Path(self.temp_dir.name)
        self.settings = self.base / "missing_settings.yaml"

        session = HandSession(TableConfig(small_blind=1, big_blind=2))
        session.execute(ActionType.RAISE, 6)
        for _ in range(4):
            session.execute(ActionType.FOLD)
        session.execute(ActionType.CALL, 4)
        session.advance_street()
        session.execute(ActionType.CHECK)
        session.execute(ActionType.BET, 8)

        self.hand_path = self.base / "hand.yaml"
        save_hand_record(HandRecord(
            table=session.config,
            actions=session.log,
            hero_position=Position.UNDER_THE_GUN,
            hero_cards=['Ah', 'Kh'],
            flop_cards=['Ad', '7c', '2h'],
            hand_result='won',
            pot_size=21,
            hand_id='HAND_1',
        ), self.hand_path)

    def tearDown(self):
        self.temp_dir.cleanup()

    def run_cli(self, *args, inputs=None) -> str:
        answers = iter(inputs or [])

        def fake_input(prompt):
            try:
                return next(answers)
            except StopIteration:
                raise EOFError from None

        cli = HandRecorderCLI(input_func=fake_input)
        out = io.StringIO()
        with redirect_stdout(out):
            cli.run(['--settings', str(self.settings), *args])
        return out.getvalue()

    def test_replay(self):
        output = self.run_cli('replay', str(self.hand_path))

        self.assertIn("FLOP  Board: Ad 7c 2h", output)
        self.assertIn("Pot: $21  Current bet: $8", output)
        self.assertIn("Action on: BB", output)
        self.assertIn("YOU: raises to $6", output)
        self.assertIn("BB: checks", output)

    def test_replay_earlier_street(self):
        output = self.run_cli('replay', str(self.hand_path), '--street', 'preflop')

        self.assertIn("PREFLOP", output)
        self.assertIn("Pot: $13", output)
        self.assertIn("Action closed", output)

    def test_analyze(self):
        output = self.run_cli('analyze', str(self.hand_path))

        self.assertIn("Hero contribution: $14", output)
        self.assertIn("Made One Pair on the flop", output)
        # Won a 21 pot after putting in 14
        self.assertIn("Net: $7 (3.5 bb)", output)

    def test_benchmark(self):
        output = self.run_cli('benchmark', str(self.hand_path), '-n', '3')

        self.assertIn("Reconstructions: 3", output)

    def test_benchmark_json(self):
        output = self.run_cli('benchmark', str(self.hand_path), '-n', '2', '--json')

        data = json.loads(output)
        self.assertEqual(len(data['runs']), 2)
        self.assertEqual(data['runs'][0]['operation'], 'reconstruction')
        self.assertEqual(data['summary']['operations']['reconstruction']['count'], 2)

    def test_missing_hand_exits(self):
        with self.assertRaises(SystemExit) as ctx:
            self.run_cli('replay', str(self.base / "missing.yaml"))
        self.assertEqual(ctx.exception.code, 1)

    def test_record(self):
        """Test an interactive session saved to disk."""
        table_path = self.base / "table.yaml"
        ConfigManager.save_table_config(TableConfig(small_blind=1, big_blind=2), table_path)
        output_path = self.base / "recorded.json"

        output = self.run_cli(
            'record', '--config', str(table_path), '--output', str(output_path),
            inputs=[
                'raise 6', 'fold', 'fold', 'fold', 'fold',
                'check',
                'call',
                'next', 'Ad 7c 2h',
                'bet 8', 'undo',
                'save', 'quit',
            ],
        )

        self.assertIn("UTG raises to $6", output)
        self.assertIn("Cannot check. Must call $4 or fold", output)
        self.assertIn("BB calls $4", output)

        record = load_hand_record(output_path)
        self.assertEqual(record.pot_size, 13)
        self.assertEqual(record.flop_cards, ['Ad', '7c', '2h'])
        self.assertEqual(record.actions.discretionary_count(Street.PREFLOP), 6)
        self.assertEqual(record.actions.street_actions(Street.FLOP), [])

    def record_table(self) -> Path:
        table_path = self.base / "table.yaml"
        ConfigManager.save_table_config(TableConfig(small_blind=1, big_blind=2), table_path)
        return table_path

    def test_record_raise_menu_shows_raise_to(self):
        """Test the raise range in the menu is accepted by `raise N`."""
        output = self.run_cli(
            'record', '--config', str(self.record_table()),
            '--output', str(self.base / "recorded.json"),
            inputs=['raise 4', 'quit'],
        )

        self.assertIn("raise to $4-$100", output)
        self.assertIn("UTG raises to $4", output)
        self.assertNotIn("Invalid action", output)
        # MP faces a raise of 2, so the next minimum is 6
        self.assertIn("raise to $6-$100", output)

    def test_record_input_ends_at_board_prompt(self):
        output_path = self.base / "recorded.json"

        output = self.run_cli(
            'record', '--config', str(self.record_table()), '--output', str(output_path),
            inputs=['call', 'fold', 'fold', 'fold', 'call', 'check', 'next'],
        )

        self.assertIn("BB checks", output)
        self.assertFalse(output_path.exists())

    def test_config_create_defaults(self):
        cwd = os.getcwd()
        os.chdir(self.base)
        try:
            self.run_cli('config', '--create-defaults')
        finally:
            os.chdir(cwd)
        self.assertTrue((self.base / "configs" / "table_config.yaml").exists())


if __name__ == '__main__':
    unittest.main()
