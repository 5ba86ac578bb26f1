from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Union

from .position import Position
from .street import Street

Chips = Union[int, float]


def round_chips(amount: Chips) -> Chips:
    """Round to cents so fractional blinds replay deterministically."""
    return round(amount, 2)


def format_chips(amount: Chips) -> str:
    """Render an amount as '$6' or '$0.25'."""
    if float(amount).is_integer():
        return f"${int(amount)}"
    return f"${amount:.2f}"


class ActionType(Enum):
    POST_BLIND = "post_blind"
    POST_STRADDLE = "post_straddle"
    FOLD = "fold"
    CHECK = "check"
    CALL = "call"
    BET = "bet"
    RAISE = "raise"
    ALL_IN = "all_in"

    def __str__(self) -> str:
        return self.value

    @property
    def is_forced(self) -> bool:
        """Blind and straddle posts are not decisions and cannot be undone."""
        return self in (ActionType.POST_BLIND, ActionType.POST_STRADDLE)


@dataclass(frozen=True)
class Action:
    """One entry of the action log.

    ``amount`` is the chips this action moved into the pot. For a raise it is
    the incremental amount and ``raise_to`` holds the new total street
    contribution, which is what a replay must feed back into the engine.
    """

    position: Position
    action_type: ActionType
    amount: Chips = 0
    raise_to: Optional[Chips] = None
    street: Street = Street.PREFLOP
    timestamp: float = 0.0

    def __post_init__(self):
        self._validate()

    def _validate(self):
        """Validate that the fields match the action variant."""
        kind = self.action_type
        if kind in (ActionType.FOLD, ActionType.CHECK):
            if self.amount != 0:
                raise ValueError(f"{kind.value} action cannot have non-zero amount")
        elif kind.is_forced:
            if self.amount < 0:
                raise ValueError(f"{kind.value} action cannot have negative amount")
        elif self.amount <= 0:
            raise ValueError(f"{kind.value} action must have positive amount")

        if kind == ActionType.RAISE:
            if self.raise_to is None or self.raise_to <= 0:
                raise ValueError("raise action must have a positive raise_to")
        elif self.raise_to is not None:
            raise ValueError(f"{kind.value} action cannot have raise_to")

    @property
    def replay_amount(self) -> Chips:
        """Amount to pass back to the engine when replaying this entry."""
        if self.action_type == ActionType.RAISE:
            return self.raise_to
        return self.amount

    def describe(self, include_position: bool = True) -> str:
        """Human-readable form, e.g. 'UTG raises to $6'."""
        kind = self.action_type
        if kind == ActionType.POST_BLIND:
            text = f"posts blind {format_chips(self.amount)}"
        elif kind == ActionType.POST_STRADDLE:
            text = f"posts straddle {format_chips(self.amount)}"
        elif kind == ActionType.FOLD:
            text = "folds"
        elif kind == ActionType.CHECK:
            text = "checks"
        elif kind == ActionType.CALL:
            text = f"calls {format_chips(self.amount)}"
        elif kind == ActionType.BET:
            text = f"bets {format_chips(self.amount)}"
        elif kind == ActionType.RAISE:
            text = f"raises to {format_chips(self.raise_to)}"
        else:
            text = f"goes all-in for {format_chips(self.amount)}"

        if include_position:
            return f"{self.position.abbreviation} {text}"
        return text

    def __str__(self) -> str:
        return self.describe()

    def to_dict(self) -> dict:
        """Convert to dictionary for storage/serialization."""
        data = {
            'position': self.position.abbreviation,
            'type': self.action_type.value,
            'amount': self.amount,
            'street': self.street.value,
            'timestamp': self.timestamp,
        }
        if self.raise_to is not None:
            data['raise_to'] = self.raise_to
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'Action':
        return cls(
            position=Position.from_abbreviation(data['position']),
            action_type=ActionType(data['type']),
            amount=data.get('amount', 0) or 0,
            raise_to=data.get('raise_to'),
            street=Street.from_value(data.get('street', Street.PREFLOP)),
            timestamp=data.get('timestamp', 0.0),
        )


@dataclass
class ActionLog:
    """Ordered per-street record of a hand; the source of truth for replay."""

    _streets: Dict[Street, List[Action]] = field(
        default_factory=lambda: {street: [] for street in Street}
    )

    def append(self, action: Action):
        """Add an action to the end of its street."""
        self._streets[action.street].append(action)

    def street_actions(self, street: Street) -> List[Action]:
        return list(self._streets[street])

    def all_actions(self) -> List[Action]:
        """All entries, preflop through river."""
        return [action for street in Street for action in self._streets[street]]

    def discretionary_count(self, street: Street) -> int:
        return sum(1 for a in self._streets[street] if not a.action_type.is_forced)

    @property
    def last_action(self) -> Optional[Action]:
        actions = self.all_actions()
        return actions[-1] if actions else None

    def without_last(self, street: Street) -> 'ActionLog':
        """Copy of the log minus the last discretionary entry of ``street``.

        Blind and straddle posts are never removed; when the street holds no
        discretionary entry the copy equals this log.
        """
        copy = self.copy()
        entries = copy._streets[street]
        for index in range(len(entries) - 1, -1, -1):
            if not entries[index].action_type.is_forced:
                del entries[index]
                break
        return copy

    def without_street(self, street: Street) -> 'ActionLog':
        """Copy of the log with ``street`` and every later street emptied.

        Blind and straddle posts survive a cleared preflop.
        """
        copy = self.copy()
        for other in Street:
            if other.index >= street.index:
                copy._streets[other] = [
                    a for a in copy._streets[other] if a.action_type.is_forced
                ]
        return copy

    def copy(self) -> 'ActionLog':
        return ActionLog({street: list(actions) for street, actions in self._streets.items()})

    @classmethod
    def from_actions(cls, actions: Iterable[Action]) -> 'ActionLog':
        log = cls()
        for action in actions:
            log.append(action)
        return log

    def to_dict(self) -> dict:
        return {
            street.value: [action.to_dict() for action in self._streets[street]]
            for street in Street
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'ActionLog':
        """Load a log keyed by street name.

        Entries are filed under the key they appear in; an entry whose own
        street disagrees is kept as written so validators can report it.
        """
        log = cls()
        for street in Street:
            for entry in (data or {}).get(street.value, None) or []:
                log._streets[street].append(Action.from_dict(entry))
        return log

    def __len__(self) -> int:
        return sum(len(actions) for actions in self._streets.values())

    def __iter__(self) -> Iterator[Action]:
        return iter(self.all_actions())
