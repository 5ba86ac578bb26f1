"""Streets of a hold'em hand and the postflop first-to-act rule."""

from enum import Enum
from typing import AbstractSet, Iterable, Optional

from .position import Position, PositionManager


class Street(Enum):
    """Betting rounds in dealing order."""
    PREFLOP = "preflop"
    FLOP = "flop"
    TURN = "turn"
    RIVER = "river"

    def __str__(self) -> str:
        return self.value

    @property
    def index(self) -> int:
        return list(Street).index(self)

    @property
    def next_street(self) -> Optional['Street']:
        """Street that follows this one, or None after the river."""
        streets = list(Street)
        if self.index + 1 < len(streets):
            return streets[self.index + 1]
        return None

    @classmethod
    def from_value(cls, value) -> 'Street':
        if isinstance(value, Street):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown street: {value}") from None


def first_postflop_position(
    positions: Iterable[Position],
    folded: AbstractSet[Position],
    all_in: AbstractSet[Position],
) -> Optional[Position]:
    """First position in canonical order (starting at SB) that can still act.

    Postflop action always starts from the small blind side, whoever posted
    blinds or a straddle preflop.
    """
    for position in PositionManager.sort_canonical(positions):
        if position not in folded and position not in all_in:
            return position
    return None
