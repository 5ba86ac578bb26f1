from dataclasses import dataclass
from typing import Optional

from .action import Action, Chips, round_chips
from .position import Position


@dataclass
class PlayerState:
    """Chips and flags of one seat inside a betting engine."""

    position: Position
    stack: Chips
    starting_stack: Chips = 0
    contributed: Chips = 0  # current street only
    invested: Chips = 0  # whole hand
    folded: bool = False
    all_in: bool = False
    has_acted: bool = False
    last_action: Optional[Action] = None

    @property
    def is_live(self) -> bool:
        """Still able to make decisions."""
        return not self.folded and not self.all_in

    def owed(self, current_bet: Chips) -> Chips:
        """Chips needed to match the current bet."""
        return round_chips(max(current_bet - self.contributed, 0))

    def commit_chips(self, amount: Chips) -> Chips:
        """Move chips from the stack into the pot, returns amount committed."""
        actual_amount = min(amount, self.stack)
        self.stack = round_chips(self.stack - actual_amount)
        self.contributed = round_chips(self.contributed + actual_amount)
        self.invested = round_chips(self.invested + actual_amount)

        if self.stack == 0:
            self.all_in = True

        return actual_amount

    def reset_for_new_street(self):
        """Clear per-street contribution; live players must act again."""
        self.contributed = 0
        if self.is_live:
            self.has_acted = False
