"""Command-line interface for the hand recorder.

Replays, reviews and records hands from YAML or JSON files.
"""

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional
import logging

from hand_recorder.analysis.hand_analysis import (
    calculate_hero_contribution, get_equity_estimate, get_hand_stats,
    get_hand_strength_progression, infer_amount_from_result,
)
from hand_recorder.config.config import ConfigManager, RecorderConfig
from hand_recorder.core.action import ActionType, format_chips, round_chips
from hand_recorder.core.game_state import GameState
from hand_recorder.core.hand_record import HandRecord, load_hand_record, save_hand_record
from hand_recorder.core.replay import HandSession, reconstruct_from_log
from hand_recorder.core.street import Street
from hand_recorder.core.table import TableConfig
from hand_recorder.utils.logging_utils import SessionLogger, setup_logging
from hand_recorder.utils.performance import PerformanceMonitor
from hand_recorder.utils.validation import ActionLogValidator, TableConfigValidator

RECORD_HELP = """Commands:
  fold | check | call | bet N | raise N (raise to N) | allin
  undo | clear | end (force end street) | next (next street)
  save | quit | help"""


class HandRecorderCLI:
    """Command-line interface for the hand recorder."""

    def __init__(self, input_func: Callable[[str], str] = input):
        """Initialize CLI.

        Args:
            input_func: Prompt function for the interactive recorder
        """
        self.parser = self._create_parser()
        self.logger = None
        self.performance_monitor = None
        self._input = input_func

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create argument parser with subcommands."""
        parser = argparse.ArgumentParser(
            prog='hand-recorder',
            description='Hand Recorder - rebuild and review no-limit hold\'em hands',
            formatter_class=argparse.RawDescriptionHelpFormatter
        )

        parser.add_argument(
            '--verbose', '-v',
            action='store_true',
            help='Enable verbose logging'
        )
        parser.add_argument(
            '--settings', '-s',
            type=Path,
            default=ConfigManager.get_default_config_path(),
            help='Recorder settings file'
        )

        subparsers = parser.add_subparsers(
            dest='command',
            help='Available commands'
        )

        # Replay command
        replay_parser = subparsers.add_parser(
            'replay',
            help='Rebuild a recorded hand and show its state'
        )
        replay_parser.add_argument(
            'hand',
            type=Path,
            help='Hand file (YAML or JSON)'
        )
        replay_parser.add_argument(
            '--street',
            choices=[s.value for s in Street],
            help='Street to rebuild (defaults to the last street with actions)'
        )

        # Analyze command
        analyze_parser = subparsers.add_parser(
            'analyze',
            help='Show hero contribution, hand strength and result'
        )
        analyze_parser.add_argument(
            'hand',
            type=Path,
            help='Hand file (YAML or JSON)'
        )

        # Record command
        record_parser = subparsers.add_parser(
            'record',
            help='Record a hand interactively'
        )
        record_parser.add_argument(
            '--config', '-c',
            type=Path,
            help='Table configuration file'
        )
        record_parser.add_argument(
            '--output', '-o',
            type=Path,
            default=Path('hand.yaml'),
            help='Where to save the hand'
        )

        # Benchmark command
        bench_parser = subparsers.add_parser(
            'benchmark',
            help='Measure reconstruction time for a hand'
        )
        bench_parser.add_argument(
            'hand',
            type=Path,
            help='Hand file (YAML or JSON)'
        )
        bench_parser.add_argument(
            '--iterations', '-n',
            type=int,
            default=100,
            help='Number of reconstructions'
        )
        bench_parser.add_argument(
            '--json',
            action='store_true',
            help='Print per-run metrics and the summary as JSON'
        )

        # Config command
        config_parser = subparsers.add_parser(
            'config',
            help='Configuration management'
        )
        config_parser.add_argument(
            '--create-defaults',
            action='store_true',
            help='Create default configuration files'
        )
        config_parser.add_argument(
            '--show',
            type=Path,
            help='Show configuration from file'
        )

        return parser

    def run(self, args: Optional[list] = None):
        """Run the CLI.

        Args:
            args: Command line arguments (defaults to sys.argv)
        """
        parsed_args = self.parser.parse_args(args)

        self.settings = RecorderConfig()
        if parsed_args.settings.exists():
            self.settings = ConfigManager.load_config(parsed_args.settings, RecorderConfig)

        # Setup logging
        log_level = logging.DEBUG if parsed_args.verbose else logging.INFO
        self.logger = setup_logging(
            log_dir=Path(self.settings.log_dir),
            level=log_level,
            file=self.settings.log_to_file,
        )
        self.performance_monitor = PerformanceMonitor(self.logger)

        # Dispatch to command handler
        if not parsed_args.command:
            self.parser.print_help()
            return

        command_map = {
            'replay': self._handle_replay,
            'analyze': self._handle_analyze,
            'record': self._handle_record,
            'benchmark': self._handle_benchmark,
            'config': self._handle_config,
        }

        handler = command_map.get(parsed_args.command)
        if handler:
            try:
                handler(parsed_args)
            except Exception as e:
                self.logger.error(f"Error: {e}", exc_info=parsed_args.verbose)
                sys.exit(1)
        else:
            self.parser.print_help()

    def _load_hand(self, path: Path) -> HandRecord:
        """Load a hand and refuse one whose table or log is malformed."""
        record = load_hand_record(path)

        errors = TableConfigValidator(self.logger).validate(record.table)
        errors += ActionLogValidator(self.logger).validate(record.actions, record.table)
        for error in record.validate_rake():
            self.logger.warning(f"Invalid rake: {error}")
            errors.append(error)
        if errors:
            raise ValueError(f"{path} is not a valid hand ({len(errors)} problems)")

        return record

    def _handle_replay(self, args):
        """Handle replay command."""
        record = self._load_hand(args.hand)
        street = Street.from_value(args.street) if args.street else record.last_street

        self.logger.info(f"Rebuilding {args.hand} at {street}")
        engine = reconstruct_from_log(record.table, record.actions, street)
        state = engine.get_game_state()

        print_timeline(state, record)
        print_state(state, record)

    def _handle_analyze(self, args):
        """Handle analyze command."""
        record = self._load_hand(args.hand)
        actions = record.actions.all_actions()

        contribution = calculate_hero_contribution(actions, record.hero_position)
        engine = reconstruct_from_log(record.table, record.actions, record.last_street)
        pot = record.pot_size or engine.pot

        print(f"\nHand Review: {record.hand_id or args.hand}")
        print("=" * 50)
        print(f"Hero: {record.hero_position or 'Unknown'} {' '.join(record.hero_cards)}")
        print(f"Board: {' '.join(record.board) or '-'}")
        print(f"Pot: {format_chips(pot)}")
        print(f"Hero contribution: {format_chips(contribution)}")

        progression = get_hand_strength_progression(record)
        if progression:
            print("\nHand Strength:")
            for entry in progression:
                print(f"  {entry.street.value.capitalize():8} {' '.join(entry.cards):20} {entry.description}")
            final = progression[-1].strength
            if len(progression) > 1:
                print(f"  Estimated equity: {get_equity_estimate(final)}%")

        amount_won = record.amount_won
        if not amount_won and record.hand_result:
            amount_won = infer_amount_from_result(record.hand_result, pot, contribution)

        stats = get_hand_stats(record, amount_won)
        print("\nResult:")
        print(f"  Outcome: {record.hand_result or 'unknown'}")
        print(f"  Net: {format_chips(stats['net_result'])} ({stats['bb_won_lost']} bb)")
        if record.tags:
            print(f"  Tags: {', '.join(record.tags)}")

    def _handle_benchmark(self, args):
        """Handle benchmark command."""
        record = self._load_hand(args.hand)
        street = record.last_street

        self.logger.info(f"Rebuilding {args.hand} {args.iterations} times")
        for _ in range(args.iterations):
            with self.performance_monitor.measure("reconstruction", actions=len(record.actions)):
                reconstruct_from_log(record.table, record.actions, street)

        if args.json:
            print(json.dumps({
                'runs': [m.to_dict() for m in self.performance_monitor.metrics_history],
                'summary': self.performance_monitor.get_summary(),
            }, indent=2))
            return

        summary = self.performance_monitor.get_summary()['operations']['reconstruction']
        print("\nBenchmark Results:")
        print("-" * 40)
        print(f"Actions replayed: {len(record.actions)}")
        print(f"Reconstructions: {summary['count']}")
        print(f"Mean time: {summary['avg_duration'] * 1000:.3f}ms")
        print(f"P95 time: {summary['p95_duration'] * 1000:.3f}ms")
        print(f"Memory: {summary['avg_memory_mb']:.1f}MB")

    def _handle_record(self, args):
        """Handle record command."""
        if args.config:
            table = ConfigManager.load_table_config(args.config, self.settings)
        else:
            table = TableConfig.from_dict(
                {'small_blind': self.settings.small_blind, 'big_blind': self.settings.big_blind},
                table_size=self.settings.table_size,
                default_stack=self.settings.default_effective_stack,
            )
        if TableConfigValidator(self.logger).validate(table):
            raise ValueError("Table configuration is not valid")

        record = HandRecord(table=table, hand_id=datetime.now().strftime("HAND_%Y%m%d_%H%M%S"))
        recorder = InteractiveRecorder(record, args.output, self._input, self.logger)
        recorder.run()

    def _handle_config(self, args):
        """Handle config command."""
        if args.create_defaults:
            self.logger.info("Creating default configuration files...")
            ConfigManager.create_default_configs()
            self.logger.info("Default configurations created in configs/")

        elif args.show:
            # Load and display config
            import yaml

            with open(args.show, 'r') as f:
                config = yaml.safe_load(f)

            print(f"\nConfiguration from {args.show}:")
            print("-" * 40)
            print(yaml.dump(config, default_flow_style=False))

        else:
            print("Use --create-defaults or --show <file>")


class InteractiveRecorder:
    """Line-based recording loop over a ``HandSession``."""

    def __init__(self, record: HandRecord, output: Path,
                 input_func: Callable[[str], str], logger: logging.Logger):
        self.record = record
        self.output = output
        self._input = input_func
        self.session = HandSession(record.table)
        self.session_logger = SessionLogger(logger)
        self.logger = logger
        self.saved = False

    def run(self):
        self.session_logger.start_hand(self.record.hand_id)
        print(RECORD_HELP)
        self.session_logger.log_street(self.session.street, self.session.game_state.pot)

        while True:
            state = self.session.game_state
            print_state(state, self.record)
            prompt = f"[{state.street}] {state.action_position or 'closed'}> "
            try:
                line = self._input(prompt)
            except EOFError:
                break
            if not self.handle(line.strip()):
                break

        self.session_logger.end_hand(self.saved)

    def handle(self, line: str) -> bool:
        """Process one command; False ends the loop."""
        if not line:
            return True
        command, *rest = line.split()
        command = command.lower()

        if command in ('quit', 'exit'):
            return False
        if command == 'help':
            print(RECORD_HELP)
        elif command == 'undo':
            if not self.session.undo():
                print("Nothing to undo on this street")
        elif command == 'clear':
            print(f"Removed {self.session.clear_street()} actions")
        elif command == 'end':
            if not self.session.force_end_street():
                print("Action is already closed")
        elif command == 'next':
            return self._next_street()
        elif command == 'save':
            self._save()
        else:
            self._act(command, rest)
        return True

    def _act(self, command: str, rest):
        aliases = {'allin': ActionType.ALL_IN, 'all-in': ActionType.ALL_IN}
        try:
            action_type = aliases.get(command) or ActionType(command)
        except ValueError:
            print(f"Unknown command: {command}. Type 'help' for commands.")
            return

        engine = self.session.engine
        if action_type == ActionType.CALL and not rest and engine.action_position:
            amount = engine.call_amount(engine.action_position)
        elif rest:
            try:
                amount = float(rest[0])
            except ValueError:
                print(f"Invalid amount: {rest[0]}")
                return
            if amount.is_integer():
                amount = int(amount)
        else:
            amount = 0

        result = self.session.execute(action_type, amount)
        if result.success:
            print(self.session.log.last_action.describe())
        else:
            print("Invalid action:\n  " + "\n  ".join(result.errors))

    def _next_street(self) -> bool:
        """Move to the next street and read its board cards; False on end of input."""
        if self.session.street.next_street is None:
            print("The river is the last street; use 'save'")
            return True
        if self.session.game_state.is_hand_over:
            print("Only one player is left in the hand")
            return True

        state = self.session.advance_street()
        street = state.street
        cards_needed = {Street.FLOP: 3, Street.TURN: 1, Street.RIVER: 1}[street]
        try:
            line = self._input(f"{street.value.capitalize()} card(s) ({cards_needed}): ").split()
        except EOFError:
            return False
        if street == Street.FLOP:
            self.record.flop_cards = line[:3]
        elif street == Street.TURN:
            self.record.turn_card = line[0] if line else None
        else:
            self.record.river_card = line[0] if line else None
        self.session_logger.log_street(street, state.pot)
        return True

    def _save(self):
        self.record.actions = self.session.log
        self.record.pot_size = self.session.game_state.pot
        save_hand_record(self.record, self.output)
        self.saved = True
        self.logger.info(f"Hand saved to {self.output}")


def print_state(state: GameState, record: Optional[HandRecord] = None):
    """Print pot, action pointer and the legal-action menu."""
    board = record.board_for(state.street) if record else []
    print(f"\n{state.street.value.upper()}  Board: {' '.join(board) or '-'}")
    print(f"Pot: {format_chips(state.pot)}  Current bet: {format_chips(state.current_bet)}")

    if state.action_closed:
        print("Action closed")
        return

    print(f"Action on: {state.action_position}")
    player = state.players[state.action_position]
    options = []
    for option in state.available_actions:
        if option.amount is not None:
            options.append(f"{option.action_type.value} {format_chips(option.amount)}")
        elif option.action_type == ActionType.RAISE:
            # Menu bounds are increments; `raise N` takes the raise-to total
            low = round_chips(state.current_bet + option.min_amount)
            high = round_chips(player.contributed + player.stack)
            options.append(f"raise to {format_chips(low)}-{format_chips(high)}")
        elif option.min_amount is not None:
            options.append(
                f"{option.action_type.value} {format_chips(option.min_amount)}"
                f"-{format_chips(option.max_amount)}"
            )
        else:
            options.append(option.action_type.value)
    print(f"Options: {' | '.join(options)}")


def print_timeline(state: GameState, record: Optional[HandRecord] = None):
    """Print the logged actions grouped by street."""
    hero = record.hero_position if record else None
    print("\nAction Timeline")
    for street in Street:
        actions = state.street_actions(street)
        if not actions:
            continue
        print(f"{street.value.capitalize()}:")
        for action in actions:
            who = 'YOU' if action.position == hero else action.position.abbreviation
            print(f"  {who}: {action.describe(include_position=False)}")


def main():
    """Main entry point for CLI."""
    cli = HandRecorderCLI()
    cli.run()


if __name__ == '__main__':
    main()
