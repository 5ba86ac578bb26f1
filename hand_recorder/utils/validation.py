"""Caller-side checks for table setups and action logs.

The betting engine trusts its configuration; these validators run before a
config or a loaded log is handed to it.
"""

from typing import List, Optional
from collections import Counter
import logging

from hand_recorder.core.action import ActionLog
from hand_recorder.core.position import Position
from hand_recorder.core.street import Street
from hand_recorder.core.table import TableConfig


class TableConfigValidator:
    """Validates a table setup before any engine is built from it."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def validate(self, config: TableConfig) -> List[str]:
        """Validate a table configuration.

        Args:
            config: Table setup

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not config.small_blind or config.small_blind <= 0:
            errors.append("Small blind must be greater than 0")
        if not config.big_blind or config.big_blind <= 0:
            errors.append("Big blind must be greater than 0")
        elif config.small_blind and config.small_blind > config.big_blind:
            errors.append("Small blind cannot exceed big blind")

        positions = list(config.active_positions)
        if len(positions) < 2:
            errors.append("At least two active positions are required")
        duplicates = [p.abbreviation for p, n in Counter(positions).items() if n > 1]
        if duplicates:
            errors.append(f"Duplicate positions: {', '.join(duplicates)}")
        for blind in (Position.SMALL_BLIND, Position.BIG_BLIND):
            if positions and blind not in positions:
                errors.append(f"{blind} must be an active position")

        if config.straddle is not None:
            if config.straddle.position not in positions:
                errors.append(f"Straddle position {config.straddle.position} is not active")
            if config.big_blind and config.straddle.amount < config.big_blind:
                errors.append("Straddle must be at least the big blind")

        if not config.effective_stack or config.effective_stack <= 0:
            errors.append("Effective stack must be greater than 0")
        for position, stack in (config.custom_stacks or {}).items():
            if position not in positions:
                errors.append(f"Custom stack given for inactive position {position}")
            elif stack is not None and stack < 0:
                errors.append(f"Stack for {position} cannot be negative")

        for error in errors:
            self.logger.warning(f"Invalid table config: {error}")

        return errors


class ActionLogValidator:
    """Structural checks on a loaded action log."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def validate(self, log: ActionLog, config: Optional[TableConfig] = None) -> List[str]:
        """Validate filing and positions of every logged action.

        Replay legality is checked by reconstruction itself.

        Args:
            log: Action log as loaded from disk
            config: Table setup, to check positions against

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        for street in Street:
            for index, action in enumerate(log.street_actions(street)):
                label = f"{street} action #{index + 1} ({action.describe()})"
                if action.street != street:
                    errors.append(f"{label} is tagged {action.street}")
                if action.action_type.is_forced and street != Street.PREFLOP:
                    errors.append(f"{label} posts a blind after preflop")
                if config is not None and action.position not in config.active_positions:
                    errors.append(f"{label} is from inactive position {action.position}")

        for error in errors:
            self.logger.warning(f"Invalid action log: {error}")

        return errors
