from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple

from .action import Chips
from .position import Position, PositionManager


@dataclass(frozen=True)
class Straddle:
    """Voluntary blind posted before the cards are dealt."""
    position: Position
    amount: Chips


@dataclass(frozen=True)
class TableConfig:
    """Per-hand table setup, fixed once the hand starts.

    Every engine built for the hand is constructed from the same instance.
    """
    small_blind: Chips
    big_blind: Chips
    active_positions: Tuple[Position, ...] = field(
        default_factory=lambda: tuple(PositionManager.get_positions_for_table_size('6-max'))
    )
    effective_stack: Chips = 100
    straddle: Optional[Straddle] = None
    custom_stacks: Optional[Mapping[Position, Chips]] = None

    def __post_init__(self):
        # Accept lists and plain dicts but store immutable copies
        object.__setattr__(self, 'active_positions', tuple(self.active_positions))
        if self.custom_stacks is not None:
            object.__setattr__(self, 'custom_stacks', dict(self.custom_stacks))

    def starting_stack(self, position: Position) -> Chips:
        """Custom stack when one is set (and non-zero), else the effective stack."""
        if self.custom_stacks and self.custom_stacks.get(position):
            return self.custom_stacks[position]
        return self.effective_stack

    @property
    def has_straddle(self) -> bool:
        return self.straddle is not None and self.straddle.position in self.active_positions

    def to_dict(self) -> dict:
        """Convert to a YAML/JSON friendly dictionary."""
        data = {
            'small_blind': self.small_blind,
            'big_blind': self.big_blind,
            'effective_stack': self.effective_stack,
            'active_positions': [p.abbreviation for p in self.active_positions],
            'straddle': None,
            'custom_stacks': None,
        }
        if self.straddle is not None:
            data['straddle'] = {
                'position': self.straddle.position.abbreviation,
                'amount': self.straddle.amount,
            }
        if self.custom_stacks:
            data['custom_stacks'] = {
                p.abbreviation: amount for p, amount in self.custom_stacks.items()
            }
        return data

    @classmethod
    def from_dict(cls, data: dict, table_size: str = '6-max',
                  default_stack: Chips = 100) -> 'TableConfig':
        """Build a config from a dictionary as written by ``to_dict``.

        Missing ``active_positions`` falls back to the ``table_size`` preset.
        """
        positions = data.get('active_positions')
        if positions:
            active = PositionManager.parse_positions(positions)
        else:
            active = PositionManager.get_positions_for_table_size(
                data.get('table_size', table_size)
            )

        straddle = None
        if data.get('straddle'):
            straddle = Straddle(
                position=Position.from_abbreviation(data['straddle']['position']),
                amount=data['straddle']['amount'],
            )

        custom_stacks: Optional[Dict[Position, Chips]] = None
        if data.get('custom_stacks'):
            custom_stacks = {
                Position.from_abbreviation(label): amount
                for label, amount in data['custom_stacks'].items()
            }

        return cls(
            small_blind=data.get('small_blind', 0),
            big_blind=data.get('big_blind', 0),
            active_positions=tuple(active),
            effective_stack=data.get('effective_stack') or default_stack,
            straddle=straddle,
            custom_stacks=custom_stacks,
        )
