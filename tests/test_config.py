"""Unit tests for table setup, configuration files, validators and hand files."""

import json
import tempfile
import unittest
from pathlib import Path

from hand_recorder.config import ConfigManager, RecorderConfig
from hand_recorder.core import (
    Action, ActionLog, ActionType, HandRecord, HandSession, Position, Straddle, Street,
    TableConfig, load_hand_record, save_hand_record,
)
from hand_recorder.utils import ActionLogValidator, TableConfigValidator

SB = Position.SMALL_BLIND
BB = Position.BIG_BLIND
UTG = Position.UNDER_THE_GUN
CO = Position.CUTOFF


class TestTableConfig(unittest.TestCase):
    """Test cases for TableConfig."""

    def test_defaults(self):
        config = TableConfig(small_blind=1, big_blind=2)
        self.assertEqual(len(config.active_positions), 6)
        self.assertEqual(config.starting_stack(CO), 100)
        self.assertFalse(config.has_straddle)

    def test_custom_stacks(self):
        config = TableConfig(small_blind=1, big_blind=2, custom_stacks={CO: 250, UTG: 0})
        self.assertEqual(config.starting_stack(CO), 250)
        # Zero means "not set"
        self.assertEqual(config.starting_stack(UTG), 100)

    def test_dict_roundtrip(self):
        config = TableConfig(
            small_blind=0.5, big_blind=1,
            active_positions=[SB, BB, UTG, CO],
            effective_stack=200,
            straddle=Straddle(UTG, 2),
            custom_stacks={CO: 150},
        )
        data = config.to_dict()

        self.assertEqual(data['active_positions'], ['SB', 'BB', 'UTG', 'CO'])
        self.assertEqual(data['straddle'], {'position': 'UTG', 'amount': 2})
        self.assertEqual(TableConfig.from_dict(data), config)

    def test_from_dict_uses_table_size(self):
        config = TableConfig.from_dict({'small_blind': 1, 'big_blind': 2}, table_size='9-max')
        self.assertEqual(len(config.active_positions), 9)
        self.assertEqual(config.effective_stack, 100)


class TestConfigManager(unittest.TestCase):
    """Test cases for ConfigManager."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.base = Path(self.temp_dir.name)

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_recorder_config_roundtrip(self):
        config = RecorderConfig(table_size='6-max', small_blind=0.5, big_blind=1)
        for name in ('settings.yaml', 'settings.json'):
            path = self.base / name
            ConfigManager.save_config(config, path)
            self.assertEqual(ConfigManager.load_config(path), config)

    def test_unsupported_and_missing_files(self):
        with self.assertRaises(ValueError):
            ConfigManager.save_config(RecorderConfig(), self.base / "settings.txt")
        with self.assertRaises(FileNotFoundError):
            ConfigManager.load_config(self.base / "missing.yaml")

    def test_table_config_filled_from_defaults(self):
        path = self.base / "table.json"
        path.write_text(json.dumps({'effective_stack': 300}))

        config = ConfigManager.load_table_config(path, RecorderConfig(small_blind=2, big_blind=5))

        self.assertEqual(config.small_blind, 2)
        self.assertEqual(config.big_blind, 5)
        self.assertEqual(config.effective_stack, 300)
        self.assertEqual(len(config.active_positions), 9)

    def test_create_default_configs(self):
        ConfigManager.create_default_configs(self.base)

        self.assertTrue((self.base / "recorder_config.yaml").exists())
        table = ConfigManager.load_table_config(self.base / "table_config.yaml")
        self.assertEqual(table.big_blind, 2)
        self.assertEqual(len(table.active_positions), 9)


class TestValidators(unittest.TestCase):
    """Test cases for the table and action log validators."""

    def setUp(self):
        self.table_validator = TableConfigValidator()
        self.log_validator = ActionLogValidator()

    def test_valid_table(self):
        config = TableConfig(small_blind=1, big_blind=2, straddle=Straddle(UTG, 4))
        self.assertEqual(self.table_validator.validate(config), [])

    def test_invalid_tables(self):
        cases = [
            (TableConfig(small_blind=0, big_blind=2), "Small blind must be greater than 0"),
            (TableConfig(small_blind=3, big_blind=2), "Small blind cannot exceed big blind"),
            (TableConfig(small_blind=1, big_blind=2, active_positions=(SB,)),
             "At least two active positions are required"),
            (TableConfig(small_blind=1, big_blind=2, active_positions=(SB, UTG, CO)),
             "BB must be an active position"),
            (TableConfig(small_blind=1, big_blind=2, active_positions=(SB, BB, BB)),
             "Duplicate positions: BB"),
            (TableConfig(small_blind=1, big_blind=2, straddle=Straddle(UTG, 1)),
             "Straddle must be at least the big blind"),
            (TableConfig(small_blind=1, big_blind=2, active_positions=(SB, BB, UTG),
                         straddle=Straddle(CO, 4)),
             "Straddle position CO is not active"),
            (TableConfig(small_blind=1, big_blind=2, custom_stacks={UTG: -5}),
             "Stack for UTG cannot be negative"),
        ]
        for config, message in cases:
            self.assertIn(message, self.table_validator.validate(config))

    def test_valid_log(self):
        session = HandSession(TableConfig(small_blind=1, big_blind=2))
        session.execute(ActionType.CALL, 2)
        self.assertEqual(self.log_validator.validate(session.log, session.config), [])

    def test_invalid_log(self):
        log = ActionLog.from_dict({
            'flop': [
                {'position': 'BB', 'type': 'check', 'street': 'turn'},
                {'position': 'SB', 'type': 'post_blind', 'amount': 1, 'street': 'flop'},
                {'position': 'UTG+2', 'type': 'check', 'street': 'flop'},
            ],
        })
        config = TableConfig(small_blind=1, big_blind=2)

        errors = self.log_validator.validate(log, config)

        self.assertEqual(len(errors), 3)
        self.assertIn("flop action #1 (BB checks) is tagged turn", errors)
        self.assertIn("flop action #2 (SB posts blind $1) posts a blind after preflop", errors)
        self.assertIn("flop action #3 (UTG+2 checks) is from inactive position UTG+2", errors)


class TestHandRecord(unittest.TestCase):
    """Test cases for HandRecord persistence."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.base = Path(self.temp_dir.name)

        session = HandSession(TableConfig(small_blind=1, big_blind=2))
        session.execute(ActionType.RAISE, 6)
        self.record = HandRecord(
            table=session.config,
            actions=session.log,
            hero_position=UTG,
            hero_cards=['Ah', 'Kh'],
            flop_cards=['Ad', '7c', '2h'],
            tags=['3-bet pot'],
            villain_type='Loose aggressive',
            session_notes='Table running deep',
            rake_structure='percentage_capped',
            rake_percentage=5,
            rake_cap=4.5,
            hand_result='won',
            amount_won=12,
            hand_id='HAND_1',
        )

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_save_and_load(self):
        for name in ('hand.yaml', 'hand.json'):
            path = self.base / name
            save_hand_record(self.record, path)
            loaded = load_hand_record(path)

            self.assertEqual(loaded.to_dict(), self.record.to_dict())
            self.assertEqual(loaded.actions, self.record.actions)
            self.assertEqual(loaded.hero_position, UTG)
            self.assertEqual(loaded.villain_type, 'Loose aggressive')
            self.assertEqual(loaded.session_notes, 'Table running deep')
            self.assertEqual(loaded.rake_structure, 'percentage_capped')
            self.assertEqual(loaded.rake_percentage, 5)
            self.assertEqual(loaded.rake_cap, 4.5)
            self.assertEqual(loaded.rake_amount, 0)

    def test_rake_defaults_for_older_files(self):
        data = self.record.to_dict()
        for key in ('rake_structure', 'rake_percentage', 'rake_cap', 'rake_amount',
                    'villain_type', 'session_notes'):
            del data[key]

        record = HandRecord.from_dict(data)

        self.assertEqual(record.rake_structure, 'percentage_capped')
        self.assertEqual(record.rake_cap, 0)
        self.assertEqual(record.villain_type, '')
        self.assertEqual(record.validate_rake(), [])

    def test_validate_rake(self):
        self.assertEqual(self.record.validate_rake(), [])

        self.record.rake_structure = 'fixed'
        self.record.rake_amount = 2
        self.assertEqual(self.record.validate_rake(), [
            "rake_percentage does not apply to fixed rake",
            "rake_cap does not apply to fixed rake",
        ])

        self.record.rake_structure = 'percentage_only'
        self.record.rake_percentage = 120
        self.record.rake_cap = -1
        self.record.rake_amount = 0
        errors = self.record.validate_rake()
        self.assertIn("rake_cap cannot be negative", errors)
        self.assertIn("rake_percentage cannot exceed 100", errors)

        self.record.rake_structure = 'per_hour'
        self.assertEqual(self.record.validate_rake(), ["Unknown rake structure: per_hour"])

    def test_load_errors(self):
        with self.assertRaises(FileNotFoundError):
            load_hand_record(self.base / "missing.yaml")
        with self.assertRaises(ValueError):
            save_hand_record(self.record, self.base / "hand.csv")
        with self.assertRaises(ValueError):
            HandRecord.from_dict({'hero_cards': ['Ah', 'Kh']})

    def test_board(self):
        self.assertEqual(self.record.board_for(Street.PREFLOP), [])
        self.assertEqual(self.record.board_for(Street.FLOP), ['Ad', '7c', '2h'])
        self.record.turn_card = 'Kd'
        self.assertEqual(self.record.board_for(Street.RIVER), ['Ad', '7c', '2h', 'Kd'])
        self.assertEqual(self.record.last_street, Street.PREFLOP)

    def test_validate_cards(self):
        self.assertEqual(self.record.validate_cards(), [])

        self.record.turn_card = 'Ah'
        self.record.hand_result = 'folded'
        errors = self.record.validate_cards()
        self.assertEqual(len(errors), 2)
        self.assertIn("Unknown hand result: folded", errors)

    def test_last_street(self):
        self.record.actions.append(Action(BB, ActionType.CHECK, street=Street.TURN))
        self.assertEqual(self.record.last_street, Street.TURN)


if __name__ == '__main__':
    unittest.main()
