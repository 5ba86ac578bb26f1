"""The finished artifact of a recording session."""

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import yaml

from .action import ActionLog, Chips
from .card import parse_cards
from .position import Position
from .street import Street
from .table import TableConfig

HAND_RESULTS = ('won', 'lost', 'chopped')
RAKE_STRUCTURES = ('percentage_capped', 'fixed', 'percentage_only')


@dataclass
class HandRecord:
    """A played hand with its table setup, actions, board and review notes."""

    table: TableConfig
    actions: ActionLog = field(default_factory=ActionLog)
    hero_position: Optional[Position] = None
    hero_cards: List[str] = field(default_factory=list)
    villain_position: Optional[Position] = None
    villain_cards: List[str] = field(default_factory=list)
    villain_type: str = ''

    flop_cards: List[str] = field(default_factory=list)
    turn_card: Optional[str] = None
    river_card: Optional[str] = None

    stake_level: str = ''
    game_type: str = 'cash'
    casino: str = ''
    location: str = ''
    general_notes: str = ''
    session_notes: str = ''

    rake_structure: str = 'percentage_capped'
    rake_percentage: Chips = 0
    rake_cap: Chips = 0
    rake_amount: Chips = 0

    tags: List[str] = field(default_factory=list)
    summary_notes: str = ''
    lessons_learned: str = ''
    hand_result: str = ''
    amount_won: Chips = 0
    pot_size: Chips = 0

    hand_id: Optional[str] = None
    date_created: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def board(self) -> List[str]:
        """Flop, turn and river cards dealt so far."""
        board = list(self.flop_cards)
        if self.turn_card:
            board.append(self.turn_card)
        if self.river_card:
            board.append(self.river_card)
        return board

    def board_for(self, street: Street) -> List[str]:
        """Board cards visible on ``street``."""
        count = {Street.PREFLOP: 0, Street.FLOP: 3, Street.TURN: 4, Street.RIVER: 5}[street]
        return self.board[:count]

    @property
    def last_street(self) -> Street:
        """Latest street with a recorded action."""
        last = Street.PREFLOP
        for street in Street:
            if self.actions.street_actions(street):
                last = street
        return last

    def validate_cards(self) -> List[str]:
        """Problems with the hero, villain and board cards."""
        errors = []
        known = list(self.hero_cards) + list(self.villain_cards) + self.board
        try:
            parse_cards(known)
        except ValueError as e:
            errors.append(str(e))
        if self.hero_cards and len(self.hero_cards) != 2:
            errors.append(f"Hero must hold 2 cards, got {len(self.hero_cards)}")
        if self.flop_cards and len(self.flop_cards) != 3:
            errors.append(f"Flop must have 3 cards, got {len(self.flop_cards)}")
        if self.hand_result and self.hand_result not in HAND_RESULTS:
            errors.append(f"Unknown hand result: {self.hand_result}")
        return errors

    def validate_rake(self) -> List[str]:
        """Problems with the rake structure and its amounts.

        A percentage structure uses ``rake_percentage`` (and ``rake_cap`` when
        capped); a fixed structure uses ``rake_amount`` only.
        """
        if self.rake_structure not in RAKE_STRUCTURES:
            return [f"Unknown rake structure: {self.rake_structure}"]

        errors = []
        values = {
            'rake_percentage': self.rake_percentage,
            'rake_cap': self.rake_cap,
            'rake_amount': self.rake_amount,
        }
        for name, value in values.items():
            if value < 0:
                errors.append(f"{name} cannot be negative")
        if self.rake_percentage > 100:
            errors.append("rake_percentage cannot exceed 100")

        used = {
            'percentage_capped': ('rake_percentage', 'rake_cap'),
            'fixed': ('rake_amount',),
            'percentage_only': ('rake_percentage',),
        }[self.rake_structure]
        for name, value in values.items():
            if name not in used and value:
                errors.append(f"{name} does not apply to {self.rake_structure} rake")
        return errors

    def to_dict(self) -> dict:
        return {
            'hand_id': self.hand_id,
            'date_created': self.date_created,
            'stake_level': self.stake_level,
            'game_type': self.game_type,
            'casino': self.casino,
            'location': self.location,
            'general_notes': self.general_notes,
            'session_notes': self.session_notes,
            'rake_structure': self.rake_structure,
            'rake_percentage': self.rake_percentage,
            'rake_cap': self.rake_cap,
            'rake_amount': self.rake_amount,
            'table': self.table.to_dict(),
            'hero_position': self.hero_position.abbreviation if self.hero_position else None,
            'hero_cards': list(self.hero_cards),
            'villain_position': self.villain_position.abbreviation if self.villain_position else None,
            'villain_cards': list(self.villain_cards),
            'villain_type': self.villain_type,
            'flop_cards': list(self.flop_cards),
            'turn_card': self.turn_card,
            'river_card': self.river_card,
            'actions': self.actions.to_dict(),
            'tags': list(self.tags),
            'summary_notes': self.summary_notes,
            'lessons_learned': self.lessons_learned,
            'hand_result': self.hand_result,
            'amount_won': self.amount_won,
            'pot_size': self.pot_size,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'HandRecord':
        if 'table' not in data:
            raise ValueError("Hand record is missing its table configuration")

        def position(label):
            return Position.from_abbreviation(label) if label else None

        return cls(
            table=TableConfig.from_dict(data['table']),
            actions=ActionLog.from_dict(data.get('actions') or {}),
            hero_position=position(data.get('hero_position')),
            hero_cards=list(data.get('hero_cards') or []),
            villain_position=position(data.get('villain_position')),
            villain_cards=list(data.get('villain_cards') or []),
            villain_type=data.get('villain_type', ''),
            flop_cards=list(data.get('flop_cards') or []),
            turn_card=data.get('turn_card'),
            river_card=data.get('river_card'),
            stake_level=data.get('stake_level', ''),
            game_type=data.get('game_type', 'cash'),
            casino=data.get('casino', ''),
            location=data.get('location', ''),
            general_notes=data.get('general_notes', ''),
            session_notes=data.get('session_notes', ''),
            rake_structure=data.get('rake_structure') or 'percentage_capped',
            rake_percentage=data.get('rake_percentage', 0),
            rake_cap=data.get('rake_cap', 0),
            rake_amount=data.get('rake_amount', 0),
            tags=list(data.get('tags') or []),
            summary_notes=data.get('summary_notes', ''),
            lessons_learned=data.get('lessons_learned', ''),
            hand_result=data.get('hand_result', ''),
            amount_won=data.get('amount_won', 0),
            pot_size=data.get('pot_size', 0),
            hand_id=data.get('hand_id'),
            date_created=data.get('date_created') or datetime.now().isoformat(),
        )


def load_hand_record(path: Path) -> HandRecord:
    """Load a hand record from YAML or JSON.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the suffix is not supported
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Hand file not found: {path}")

    if path.suffix in ['.yaml', '.yml']:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    elif path.suffix == '.json':
        with open(path, 'r') as f:
            data = json.load(f)
    else:
        raise ValueError(f"Unsupported hand format: {path.suffix}")

    return HandRecord.from_dict(data or {})


def save_hand_record(record: HandRecord, path: Path):
    """Save a hand record as YAML or JSON, chosen by suffix."""
    path = Path(path)
    data = record.to_dict()

    if path.suffix in ['.yaml', '.yml']:
        with open(path, 'w') as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
    elif path.suffix == '.json':
        with open(path, 'w') as f:
            json.dump(data, f, indent=2)
    else:
        raise ValueError(f"Unsupported hand format: {path.suffix}")
