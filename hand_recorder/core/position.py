from enum import Enum
from typing import Iterable, List, Dict


class Position(Enum):
    """Table positions, declared in canonical seating order."""
    SMALL_BLIND = ("SB", "Small Blind")
    BIG_BLIND = ("BB", "Big Blind")
    UNDER_THE_GUN = ("UTG", "Under the Gun")
    UNDER_THE_GUN_PLUS_ONE = ("UTG+1", "Under the Gun +1")
    UNDER_THE_GUN_PLUS_TWO = ("UTG+2", "Under the Gun +2")
    MIDDLE_POSITION = ("MP", "Middle Position")
    MIDDLE_POSITION_PLUS_ONE = ("MP+1", "Middle Position +1")
    CUTOFF = ("CO", "Cutoff")
    BUTTON = ("BTN", "Button")

    def __init__(self, abbreviation: str, full_name: str):
        self.abbreviation = abbreviation
        self.full_name = full_name

    def __str__(self) -> str:
        return self.abbreviation

    @classmethod
    def from_abbreviation(cls, label: str) -> 'Position':
        """Parse a position label such as 'UTG+1' or 'btn'."""
        if isinstance(label, Position):
            return label
        normalized = str(label).strip().upper()
        for position in cls:
            if position.abbreviation == normalized:
                return position
        raise ValueError(f"Unknown position: {label}")


class PositionManager:
    """Table size presets and ordering helpers."""

    CANONICAL_ORDER: List[Position] = list(Position)

    TABLE_SIZES: Dict[str, List[Position]] = {
        '6-max': [
            Position.SMALL_BLIND, Position.BIG_BLIND, Position.UNDER_THE_GUN,
            Position.MIDDLE_POSITION, Position.CUTOFF, Position.BUTTON,
        ],
        '9-max': list(Position),
    }

    @classmethod
    def get_positions_for_table_size(cls, table_size: str) -> List[Position]:
        """Get ordered list of positions for a table size preset."""
        if table_size not in cls.TABLE_SIZES:
            raise ValueError(f"Unsupported table size: {table_size}")
        return cls.TABLE_SIZES[table_size].copy()

    @classmethod
    def sort_canonical(cls, positions: Iterable[Position]) -> List[Position]:
        """Sort positions into SB, BB, UTG, ..., BTN order."""
        return sorted(positions, key=cls.CANONICAL_ORDER.index)

    @classmethod
    def parse_positions(cls, labels: Iterable) -> List[Position]:
        return [Position.from_abbreviation(label) for label in labels]
