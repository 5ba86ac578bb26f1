"""
Rebuilding engine state by replaying the action log.

No engine lives across streets. Every time the recorder needs a state
(opening a street, after undo or clear, when moving to the next street) a
fresh engine is built from the table config and the logged actions are
replayed through it in order, with a street transition between streets.
"""

import logging
import time
from typing import Callable, Dict, List, Optional, Sequence, Union

from .action import Action, ActionLog, ActionType, Chips
from .betting_engine import BettingEngine
from .game_state import ActionResult, GameState
from .street import Street
from .table import TableConfig

logger = logging.getLogger(__name__)


class ReconstructionError(Exception):
    """A logged action was rejected while replaying; the log is inconsistent."""

    def __init__(self, street: Street, index: int, action: Action, errors: List[str]):
        self.street = street
        self.index = index
        self.action = action
        self.errors = list(errors)
        super().__init__(
            f"Replay of {street} action #{index + 1} ({action.describe()}) failed: "
            + "; ".join(self.errors)
        )


def _replay_street(engine: BettingEngine, street: Street, actions: Sequence[Action]):
    """Replay the discretionary entries of one street into ``engine``."""
    voluntary = [a for a in actions if not a.action_type.is_forced]
    logger.debug("Replaying %d %s actions", len(voluntary), street)

    for index, action in enumerate(voluntary):
        result = engine.execute_action(
            action.position,
            action.action_type,
            action.replay_amount,
            timestamp=action.timestamp,
        )
        if not result.success:
            error = ReconstructionError(street, index, action, result.errors)
            logger.error(str(error))
            raise error


def reconstruct_engine(
    config: TableConfig,
    preflop_actions: Sequence[Action],
    flop_actions: Optional[Sequence[Action]] = None,
    turn_actions: Optional[Sequence[Action]] = None,
    river_actions: Optional[Sequence[Action]] = None,
    target_street: Union[Street, str] = Street.PREFLOP,
    clock: Callable[[], float] = time.time,
) -> BettingEngine:
    """Build an engine at ``target_street`` from config and logged actions.

    Blinds and straddle are posted by the engine itself, so posting entries
    in the logs are skipped. Streets after ``target_street`` are ignored.

    Raises:
        ReconstructionError: If any logged action is rejected during replay
    """
    target_street = Street.from_value(target_street)
    per_street: Dict[Street, Sequence[Action]] = {
        Street.PREFLOP: preflop_actions or [],
        Street.FLOP: flop_actions or [],
        Street.TURN: turn_actions or [],
        Street.RIVER: river_actions or [],
    }

    engine = BettingEngine(config, clock=clock)
    for street in Street:
        if street.index > target_street.index:
            break
        if street != Street.PREFLOP:
            engine.transition_to_street(street)
        _replay_street(engine, street, per_street[street])

    return engine


def reconstruct_from_log(config: TableConfig, log: ActionLog,
                         target_street: Union[Street, str] = Street.PREFLOP,
                         clock: Callable[[], float] = time.time) -> BettingEngine:
    """``reconstruct_engine`` for an ``ActionLog``."""
    return reconstruct_engine(
        config,
        log.street_actions(Street.PREFLOP),
        log.street_actions(Street.FLOP),
        log.street_actions(Street.TURN),
        log.street_actions(Street.RIVER),
        target_street=target_street,
        clock=clock,
    )


class HandSession:
    """Recording state for one hand: config, log, current street and engine.

    Undo, clear and street changes all rebuild the engine from the log. A
    failed rebuild raises ``ReconstructionError`` and leaves the session as
    it was.
    """

    def __init__(self, config: TableConfig, log: Optional[ActionLog] = None,
                 street: Union[Street, str] = Street.PREFLOP,
                 clock: Callable[[], float] = time.time):
        self.config = config
        self._clock = clock
        self._log = log.copy() if log is not None else ActionLog()
        self._street = Street.from_value(street)
        self._engine: Optional[BettingEngine] = None
        self.initialize()

    @property
    def street(self) -> Street:
        return self._street

    @property
    def log(self) -> ActionLog:
        return self._log.copy()

    @property
    def engine(self) -> BettingEngine:
        return self._engine

    @property
    def game_state(self) -> GameState:
        return self._engine.get_game_state()

    def _rebuild(self, log: ActionLog, street: Street) -> BettingEngine:
        engine = reconstruct_from_log(self.config, log, street, clock=self._clock)
        # Keep the blinds the engine posted so the stored log mirrors the engine
        if not any(a.action_type.is_forced for a in log.street_actions(Street.PREFLOP)):
            forced = [a for a in engine.actions if a.action_type.is_forced]
            log = ActionLog.from_actions(forced + log.all_actions())
        self._log = log
        self._street = street
        self._engine = engine
        return engine

    def initialize(self, street: Union[Street, str, None] = None) -> GameState:
        """(Re)build the engine at ``street`` from the full log."""
        street = self._street if street is None else Street.from_value(street)
        self._rebuild(self._log.copy(), street)
        logger.debug("Initialized %s: pot %s, action on %s",
                     street, self._engine.pot, self._engine.action_position)
        return self.game_state

    def execute(self, action_type: Union[ActionType, str], amount: Chips = 0) -> ActionResult:
        """Apply an action for the position on the clock and log it."""
        engine = self._engine
        if engine.action_position is None:
            return ActionResult(False, ['Action is closed for this street'])

        logged_before = len(engine.actions)
        result = engine.execute_action(engine.action_position, action_type, amount)
        if result.success:
            for action in engine.actions[logged_before:]:
                self._log.append(action)
        else:
            logger.info("Rejected %s for %s: %s", action_type, engine.action_position,
                        "; ".join(result.errors))
        return result

    def undo(self) -> bool:
        """Remove the last action of the current street and replay the rest.

        Blinds and earlier streets are never touched.

        Returns:
            False if there was nothing to undo
        """
        if self._log.discretionary_count(self._street) == 0:
            logger.debug("Nothing to undo on %s", self._street)
            return False

        self._rebuild(self._drop_later_streets(self._log.without_last(self._street)), self._street)
        logger.info("Undid last %s action", self._street)
        return True

    def clear_street(self) -> int:
        """Remove every action of the current street and replay.

        Returns:
            Number of actions removed
        """
        removed = self._log.discretionary_count(self._street)
        if removed == 0:
            return 0

        self._rebuild(self._log.without_street(self._street), self._street)
        logger.info("Cleared %d %s actions", removed, self._street)
        return removed

    def force_end_street(self) -> bool:
        """End betting on the current street without replaying."""
        return self._engine.force_end_street()

    def advance_street(self) -> GameState:
        """Rebuild at the next street.

        Raises:
            ValueError: After the river
        """
        next_street = self._street.next_street
        if next_street is None:
            raise ValueError("The river is the last street")
        if not self._engine.action_closed:
            logger.warning("Leaving %s with action still open on %s",
                           self._street, self._engine.action_position)

        self._rebuild(self._log.copy(), next_street)
        return self.game_state

    def _drop_later_streets(self, log: ActionLog) -> ActionLog:
        """Later streets were recorded on top of the old history and cannot be kept."""
        next_street = self._street.next_street
        if next_street is None:
            return log
        return log.without_street(next_street)
