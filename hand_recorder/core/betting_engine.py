"""
No-limit hold'em betting engine.

One engine instance tracks a single hand from the blinds onward, one street
at a time: whose turn it is, what they may legally do, and the resulting pot
and stacks. Engines are cheap and disposable; the replay driver builds a new
one whenever an earlier state has to be recovered.
"""

import logging
import time
from copy import copy
from typing import Callable, Dict, List, Optional, Union

from .action import Action, ActionType, Chips, format_chips, round_chips
from .game_state import ActionResult, AvailableAction, GameState, ValidationResult
from .player import PlayerState
from .position import Position
from .street import Street, first_postflop_position
from .table import TableConfig

logger = logging.getLogger(__name__)

PositionLike = Union[Position, str]
ActionTypeLike = Union[ActionType, str]


class BettingEngine:
    """Enforces betting rules for a fixed set of positions."""

    def __init__(self, config: TableConfig, clock: Callable[[], float] = time.time):
        """Seat every active position and post the blinds.

        Args:
            config: Table setup for the hand
            clock: Source of timestamps for newly logged actions
        """
        self.config = config
        self._clock = clock
        self.positions: List[Position] = list(config.active_positions)
        self.players: Dict[Position, PlayerState] = self._initialize_players()
        self.actions: List[Action] = []

        self.street = Street.PREFLOP
        self.current_bet: Chips = 0
        self.last_raise_amount: Chips = 0
        self.pot: Chips = 0
        self.street_start_pot: Chips = 0
        self.action_position: Optional[Position] = None
        self.action_closed = False

        self._initialize_preflop()

    def _initialize_players(self) -> Dict[Position, PlayerState]:
        players = {}
        for position in self.positions:
            stack = self.config.starting_stack(position)
            players[position] = PlayerState(
                position=position, stack=stack, starting_stack=stack
            )
        return players

    def _initialize_preflop(self):
        """Post blinds and straddle, then put action on the first player."""
        self._post(Position.SMALL_BLIND, self.config.small_blind, ActionType.POST_BLIND)
        self._post(Position.BIG_BLIND, self.config.big_blind, ActionType.POST_BLIND)

        straddle = self.config.straddle
        straddled = self.config.has_straddle and self._post(
            straddle.position, straddle.amount, ActionType.POST_STRADDLE
        )

        self.current_bet = straddle.amount if straddled else self.config.big_blind
        self.last_raise_amount = self.current_bet

        if straddled:
            anchor = straddle.position
        elif Position.BIG_BLIND in self.players:
            anchor = Position.BIG_BLIND
        else:
            anchor = None

        if anchor is None:
            start = self.positions[0]
        else:
            start = self._seat_after(anchor)

        self.action_position = self._first_live_from(start)
        if self.action_position is None:
            self._close_action()

    def _post(self, position: Position, amount: Chips, action_type: ActionType) -> bool:
        """Post a forced bet. Posting does not count as acting."""
        player = self.players.get(position)
        if player is None:
            return False

        posted = player.commit_chips(amount)
        self.pot = round_chips(self.pot + posted)
        self._record(player, action_type, posted)
        return True

    # Seat navigation

    def _seat_after(self, position: Position) -> Position:
        index = self.positions.index(position)
        return self.positions[(index + 1) % len(self.positions)]

    def _first_live_from(self, start: Position) -> Optional[Position]:
        """First live position at or after ``start`` in seating order."""
        index = self.positions.index(start)
        for offset in range(len(self.positions)):
            position = self.positions[(index + offset) % len(self.positions)]
            if self.players[position].is_live:
                return position
        return None

    def _next_live_after(self, position: Position) -> Optional[Position]:
        return self._first_live_from(self._seat_after(position))

    # Queries

    def player(self, position: PositionLike) -> PlayerState:
        return self.players[Position.from_abbreviation(position)]

    def call_amount(self, position: PositionLike) -> Chips:
        """Chips ``position`` must add to stay in, capped by its stack."""
        player = self.player(position)
        return min(player.owed(self.current_bet), player.stack)

    def live_positions(self) -> List[Position]:
        return [p for p in self.positions if self.players[p].is_live]

    def is_action_complete(self) -> bool:
        """Whether the betting on this street is over."""
        active = self.live_positions()

        if not active:
            return True

        if len(active) == 1:
            # The last live player still answers a bet they have not matched
            last = self.players[active[0]]
            return last.has_acted and last.contributed == self.current_bet

        return all(
            self.players[p].has_acted and self.players[p].contributed == self.current_bet
            for p in active
        )

    def get_available_actions(self, position: PositionLike) -> List[AvailableAction]:
        """Legal-action menu for the position on the clock.

        Advisory only: ``execute_action`` validates independently.
        """
        try:
            position = Position.from_abbreviation(position)
        except ValueError:
            return []
        if self.action_closed or position != self.action_position:
            return []

        player = self.players[position]
        owed = player.owed(self.current_bet)
        actions = [AvailableAction(ActionType.FOLD)]

        if owed == 0:
            actions.append(AvailableAction(ActionType.CHECK))
        elif owed <= player.stack:
            actions.append(AvailableAction(ActionType.CALL, amount=owed))

        if self.current_bet == 0 and player.stack > 0:
            actions.append(AvailableAction(ActionType.BET, min_amount=1, max_amount=player.stack))

        if self.current_bet > 0 and player.stack > owed:
            max_raise = round_chips(player.stack - owed)
            if max_raise >= self.last_raise_amount:
                actions.append(AvailableAction(
                    ActionType.RAISE,
                    min_amount=self.last_raise_amount,
                    max_amount=max_raise,
                ))

        if player.stack > 0:
            actions.append(AvailableAction(ActionType.ALL_IN, amount=player.stack))

        return actions

    def get_game_state(self) -> GameState:
        """Snapshot of the engine; later actions do not change it."""
        return GameState(
            street=self.street,
            pot=self.pot,
            current_bet=self.current_bet,
            last_raise_amount=self.last_raise_amount,
            action_position=self.action_position,
            action_closed=self.action_closed,
            players={p: copy(state) for p, state in self.players.items()},
            actions=tuple(self.actions),
            available_actions=(
                self.get_available_actions(self.action_position)
                if self.action_position is not None else []
            ),
        )

    # Validation

    def validate_action(self, position: PositionLike, action_type: ActionTypeLike,
                        amount: Chips = 0) -> ValidationResult:
        """Check an action against the current state without changing it.

        For a raise, ``amount`` is the raise-to total. For a call it must be
        the exact call amount.
        """
        try:
            position = Position.from_abbreviation(position)
        except ValueError:
            return ValidationResult(False, [f"{position} is not active in current table setup"])

        if position not in self.players:
            return ValidationResult(False, [f"{position} is not active in current table setup"])

        if self.action_closed:
            return ValidationResult(False, ['Action is closed for this street'])

        if position != self.action_position:
            return ValidationResult(False, [
                f"Not {position}'s turn to act. Current action on {self.action_position}"
            ])

        player = self.players[position]
        if player.folded:
            return ValidationResult(False, [f"{position} has already folded"])
        if player.all_in:
            return ValidationResult(False, [f"{position} is already all-in"])

        try:
            action_type = ActionType(action_type)
        except ValueError:
            return ValidationResult(False, ['Invalid action type'])

        sized = (ActionType.CALL, ActionType.BET, ActionType.RAISE)
        if action_type in sized and (
            isinstance(amount, bool) or not isinstance(amount, (int, float))
        ):
            return ValidationResult(False, ['Amount is required'])

        validators = {
            ActionType.FOLD: lambda: ValidationResult(True),
            ActionType.CHECK: lambda: self._validate_check(player),
            ActionType.CALL: lambda: self._validate_call(player, amount),
            ActionType.BET: lambda: self._validate_bet(player, amount),
            ActionType.RAISE: lambda: self._validate_raise(player, amount),
            ActionType.ALL_IN: lambda: self._validate_all_in(player),
        }
        validator = validators.get(action_type)
        if validator is None:
            return ValidationResult(False, ['Invalid action type'])
        return validator()

    def _validate_check(self, player: PlayerState) -> ValidationResult:
        owed = player.owed(self.current_bet)
        if owed > 0:
            return ValidationResult(False, [f"Cannot check. Must call {format_chips(owed)} or fold"])
        return ValidationResult(True)

    def _validate_call(self, player: PlayerState, amount: Chips) -> ValidationResult:
        owed = player.owed(self.current_bet)
        if owed == 0:
            return ValidationResult(False, ['Cannot call when there is no bet. Use check instead'])

        max_call = min(owed, player.stack)
        if round_chips(amount) != max_call:
            return ValidationResult(False, [f"Must call exactly {format_chips(max_call)}"])
        return ValidationResult(True)

    def _validate_bet(self, player: PlayerState, amount: Chips) -> ValidationResult:
        if self.current_bet > 0:
            return ValidationResult(False, ['Cannot bet when there is already a bet. Use raise instead'])

        errors = []
        if amount > player.stack:
            errors.append(
                f"Insufficient stack. Has {format_chips(player.stack)}, "
                f"trying to bet {format_chips(amount)}"
            )
        if amount <= 0:
            errors.append('Bet amount must be greater than 0')
        return ValidationResult(not errors, errors)

    def _validate_raise(self, player: PlayerState, raise_to: Chips) -> ValidationResult:
        if self.current_bet == 0:
            return ValidationResult(False, ['Cannot raise when there is no bet. Use bet instead'])

        errors = []
        required = round_chips(raise_to - player.contributed)
        if required > player.stack:
            errors.append(
                f"Insufficient stack. Has {format_chips(player.stack)}, "
                f"needs {format_chips(required)}"
            )

        # A short raise is allowed only when it puts the raiser all-in
        min_raise_to = round_chips(self.current_bet + self.last_raise_amount)
        if raise_to < min_raise_to and required < player.stack:
            errors.append(
                f"Minimum raise to {format_chips(min_raise_to)}. "
                f"Current raise to {format_chips(raise_to)} is too small"
            )

        if raise_to <= self.current_bet:
            errors.append(f"Raise must be higher than current bet of {format_chips(self.current_bet)}")

        return ValidationResult(not errors, errors)

    def _validate_all_in(self, player: PlayerState) -> ValidationResult:
        if player.stack <= 0:
            return ValidationResult(False, ['Player has no chips to go all-in with'])
        return ValidationResult(True)

    # Execution

    def execute_action(self, position: PositionLike, action_type: ActionTypeLike,
                       amount: Chips = 0, timestamp: Optional[float] = None) -> ActionResult:
        """Validate and apply an action; the engine is unchanged on failure.

        Args:
            position: Position on the clock
            action_type: Action to take
            amount: Bet size, exact call amount, or raise-to total
            timestamp: Timestamp to log (replays pass the original one)
        """
        validation = self.validate_action(position, action_type, amount)
        if not validation.valid:
            return ActionResult(False, list(validation.errors))

        player = self.players[Position.from_abbreviation(position)]
        action_type = ActionType(action_type)

        if action_type == ActionType.FOLD:
            player.folded = True
            player.has_acted = True
            self._record(player, ActionType.FOLD, 0, timestamp=timestamp)
        elif action_type == ActionType.CHECK:
            player.has_acted = True
            self._record(player, ActionType.CHECK, 0, timestamp=timestamp)
        elif action_type == ActionType.CALL:
            self._apply_call(player, timestamp)
        elif action_type == ActionType.BET:
            self._apply_bet(player, amount, timestamp)
        elif action_type == ActionType.RAISE:
            self._apply_raise(player, amount, timestamp)
        else:
            self._apply_all_in(player, timestamp)

        self.advance_action()
        return ActionResult(True)

    def _apply_call(self, player: PlayerState, timestamp: Optional[float]):
        paid = player.commit_chips(player.owed(self.current_bet))
        self.pot = round_chips(self.pot + paid)
        player.has_acted = True
        self._record(player, ActionType.CALL, paid, timestamp=timestamp)

    def _apply_bet(self, player: PlayerState, amount: Chips, timestamp: Optional[float]):
        self.current_bet = round_chips(player.contributed + amount)
        self.last_raise_amount = amount

        paid = player.commit_chips(amount)
        self.pot = round_chips(self.pot + paid)
        player.has_acted = True
        self._record(player, ActionType.BET, paid, timestamp=timestamp)
        self._reopen_action(player.position)

    def _apply_raise(self, player: PlayerState, raise_to: Chips, timestamp: Optional[float]):
        required = round_chips(raise_to - player.contributed)
        previous_bet = self.current_bet
        self.current_bet = raise_to
        self.last_raise_amount = round_chips(raise_to - previous_bet)

        paid = player.commit_chips(required)
        self.pot = round_chips(self.pot + paid)
        player.has_acted = True
        self._record(player, ActionType.RAISE, paid, raise_to=raise_to, timestamp=timestamp)
        self._reopen_action(player.position)

    def _apply_all_in(self, player: PlayerState, timestamp: Optional[float]):
        """Resolve an all-in into the bet, raise or call it amounts to."""
        stack = player.stack
        if stack > player.owed(self.current_bet):
            if self.current_bet == 0:
                self._apply_bet(player, stack, timestamp)
            else:
                self._apply_raise(player, round_chips(player.contributed + stack), timestamp)
        else:
            self._apply_call(player, timestamp)

    def _record(self, player: PlayerState, action_type: ActionType, amount: Chips,
                raise_to: Optional[Chips] = None, timestamp: Optional[float] = None):
        action = Action(
            position=player.position,
            action_type=action_type,
            amount=amount,
            raise_to=raise_to,
            street=self.street,
            timestamp=self._clock() if timestamp is None else timestamp,
        )
        self.actions.append(action)
        player.last_action = action
        logger.debug("Logged: %s", action.describe())

    def _reopen_action(self, aggressor: Position):
        """Everyone still live, except the aggressor, must act again."""
        logger.debug("Reopening action after %s, current bet %s", aggressor, self.current_bet)
        for position, player in self.players.items():
            if player.is_live and position != aggressor:
                player.has_acted = False

    def advance_action(self):
        """Pass the action on, or close the street."""
        next_position = self._next_live_after(self.action_position)
        complete = self.is_action_complete()

        if next_position is None or complete:
            self._close_action()
        else:
            logger.debug("Action moves from %s to %s", self.action_position, next_position)
            self.action_position = next_position

    def _close_action(self):
        logger.debug("Closing %s action with pot %s", self.street, self.pot)
        self.action_closed = True
        self.action_position = None

    def force_end_street(self) -> bool:
        """Operator override: end betting although it is not naturally complete.

        Returns:
            False if the street was already closed
        """
        if self.action_closed:
            return False
        logger.info("Forcing end of %s with action on %s", self.street, self.action_position)
        self._close_action()
        return True

    # Street transitions

    def transition_to_street(self, street: Union[Street, str]):
        """Reset per-street state and hand the action to the first postflop seat.

        Raises:
            ValueError: If ``street`` does not directly follow the current one
        """
        street = Street.from_value(street)
        if street != self.street.next_street:
            raise ValueError(f"Cannot move from {self.street} to {street}")

        self.action_closed = False
        self.current_bet = 0
        # Minimum raise on a new street is one big blind
        self.last_raise_amount = self.config.big_blind
        for player in self.players.values():
            player.reset_for_new_street()

        self.street = street
        self.street_start_pot = self.pot
        self.action_position = first_postflop_position(
            self.positions,
            folded={p for p, s in self.players.items() if s.folded},
            all_in={p for p, s in self.players.items() if s.all_in},
        )
        if self.action_position is None:
            self._close_action()

        logger.debug("Transitioned to %s, first to act %s", street, self.action_position)
