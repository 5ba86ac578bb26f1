"""
Post-hoc hand review helpers.

The strength evaluator is a quick heuristic over rank counts, suit counts and
rank runs. It does not build best five-card hands and does not split pots.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Union

from ..core.action import Action, ActionType, Chips
from ..core.card import parse_cards
from ..core.hand_record import HandRecord
from ..core.position import Position
from ..core.street import Street

CONTRIBUTING_TYPES = (
    ActionType.BET, ActionType.CALL, ActionType.RAISE,
    ActionType.POST_BLIND, ActionType.POST_STRADDLE, ActionType.ALL_IN,
)

EQUITY_ESTIMATES = {
    'High Card': '35',
    'One Pair': '55',
    'Two Pair': '75',
    'Three of a Kind': '85',
    'Straight': '90',
    'Flush': '92',
    'Full House': '96',
    'Four of a Kind': '99',
    'Straight Flush': '99.5',
    'Royal Flush': '100',
}


@dataclass(frozen=True)
class HandStrength:
    strength: str
    rank: int


@dataclass(frozen=True)
class StreetStrength:
    """Hero's made hand on one street."""
    street: Street
    cards: List[str]
    strength: str
    description: str


def calculate_hero_contribution(actions: Iterable[Action],
                                hero_position: Optional[Union[Position, str]]) -> Chips:
    """Total chips the hero put in over the whole hand."""
    if not hero_position:
        return 0
    hero_position = Position.from_abbreviation(hero_position)
    return sum(
        action.amount for action in actions
        if action.position == hero_position and action.action_type in CONTRIBUTING_TYPES
    )


def _is_straight(rank_values: List[int]) -> bool:
    """Five consecutive distinct ranks, counting the wheel."""
    values = set(rank_values)
    if {14, 5, 4, 3, 2} <= values:
        return True
    return any(all(top - step in values for step in range(5)) for top in values)


def calculate_hand_strength(cards: Iterable[str]) -> HandStrength:
    """Classify five or more cards, e.g. ``['As', 'Kh', ...]``.

    Flush and straight are detected independently of each other.
    """
    parsed = parse_cards(cards)
    if len(parsed) < 5:
        return HandStrength('Incomplete', 0)

    counts = sorted(Counter(card.rank for card in parsed).values(), reverse=True)
    is_flush = max(Counter(card.suit for card in parsed).values()) >= 5
    rank_values = [card.rank.value for card in parsed]
    is_straight = _is_straight(rank_values)

    if is_straight and is_flush:
        if max(rank_values) == 14:
            return HandStrength('Royal Flush', 10)
        return HandStrength('Straight Flush', 9)
    if counts[0] == 4:
        return HandStrength('Four of a Kind', 8)
    if counts[0] == 3 and len(counts) > 1 and counts[1] == 2:
        return HandStrength('Full House', 7)
    if is_flush:
        return HandStrength('Flush', 6)
    if is_straight:
        return HandStrength('Straight', 5)
    if counts[0] == 3:
        return HandStrength('Three of a Kind', 4)
    if counts[0] == 2 and counts[1] == 2:
        return HandStrength('Two Pair', 3)
    if counts[0] == 2:
        return HandStrength('One Pair', 2)
    return HandStrength('High Card', 1)


def get_hand_strength_progression(record: HandRecord) -> Optional[List[StreetStrength]]:
    """Hero's hand strength street by street, or None without hero cards."""
    hero_cards = list(record.hero_cards)
    if len(hero_cards) < 2:
        return None

    position = record.hero_position.abbreviation if record.hero_position else 'Unknown'
    progression = [StreetStrength(
        Street.PREFLOP, hero_cards, 'Hole Cards',
        f"{''.join(hero_cards)} in {position} position",
    )]

    if len(record.flop_cards) == 3:
        cards = hero_cards + record.board_for(Street.FLOP)
        strength = calculate_hand_strength(cards).strength
        progression.append(StreetStrength(
            Street.FLOP, cards, strength, f"Made {strength} on the flop"
        ))

        if record.turn_card:
            cards = hero_cards + record.board_for(Street.TURN)
            strength = calculate_hand_strength(cards).strength
            progression.append(StreetStrength(
                Street.TURN, cards, strength, f"{strength} after turn"
            ))

            if record.river_card:
                cards = hero_cards + record.board_for(Street.RIVER)
                strength = calculate_hand_strength(cards).strength
                progression.append(StreetStrength(
                    Street.RIVER, cards, strength, f"Final hand: {strength}"
                ))

    return progression


def get_equity_estimate(strength: str) -> str:
    """Rough equity percentage for a made-hand class."""
    return EQUITY_ESTIMATES.get(strength, '50')


def get_hand_stats(record: HandRecord, amount_won: Union[str, Chips]) -> Dict[str, object]:
    """Pot, big blinds won or lost, and net result."""
    try:
        net = float(amount_won)
    except (TypeError, ValueError):
        net = 0.0
    big_blind = record.table.big_blind or 1
    return {
        'total_pot': record.pot_size or 0,
        'bb_won_lost': f"{net / big_blind:.1f}",
        'net_result': net,
    }


def infer_amount_from_result(hand_result: str, pot_size: Chips,
                             hero_contribution: Chips) -> Chips:
    """Net result implied by the outcome; a chop assumes two ways."""
    if hand_result == 'won':
        return pot_size - hero_contribution
    if hand_result == 'lost':
        return -hero_contribution
    if hand_result == 'chopped':
        return pot_size / 2 - hero_contribution
    return 0


def group_actions_by_street(actions: Iterable[Action]) -> Dict[Street, List[Action]]:
    grouped = {street: [] for street in Street}
    for action in actions:
        grouped[action.street].append(action)
    return grouped


def get_all_actions(record: HandRecord) -> List[Action]:
    return record.actions.all_actions()
