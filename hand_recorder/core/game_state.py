from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .action import Action, ActionType, Chips
from .player import PlayerState
from .position import Position
from .street import Street


@dataclass(frozen=True)
class AvailableAction:
    """One button of the legal-action menu.

    ``amount`` is fixed for call and all-in; bet and raise carry a range.
    Raise bounds are increments over the call amount.
    """
    action_type: ActionType
    amount: Optional[Chips] = None
    min_amount: Optional[Chips] = None
    max_amount: Optional[Chips] = None


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.valid


@dataclass(frozen=True)
class ActionResult:
    success: bool
    errors: List[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.success


@dataclass(frozen=True)
class GameState:
    """Read-only snapshot of a betting engine."""

    street: Street
    pot: Chips
    current_bet: Chips
    last_raise_amount: Chips
    action_position: Optional[Position]
    action_closed: bool
    players: Dict[Position, PlayerState]
    actions: Tuple[Action, ...]
    available_actions: List[AvailableAction]

    @property
    def players_in_hand(self) -> List[Position]:
        return [p for p, state in self.players.items() if not state.folded]

    @property
    def is_hand_over(self) -> bool:
        """Everyone but one player has folded."""
        return len(self.players_in_hand) < 2

    def street_actions(self, street: Street) -> List[Action]:
        return [a for a in self.actions if a.street == street]

    def available(self, action_type: ActionType) -> Optional[AvailableAction]:
        """Menu entry for ``action_type`` if it is on offer."""
        for option in self.available_actions:
            if option.action_type == action_type:
                return option
        return None
