"""Hand review heuristics."""

from .hand_analysis import (
    HandStrength, StreetStrength,
    calculate_hero_contribution, calculate_hand_strength,
    get_hand_strength_progression, get_equity_estimate, get_hand_stats,
    infer_amount_from_result, group_actions_by_street, get_all_actions,
)

__all__ = [
    'HandStrength', 'StreetStrength',
    'calculate_hero_contribution', 'calculate_hand_strength',
    'get_hand_strength_progression', 'get_equity_estimate', 'get_hand_stats',
    'infer_amount_from_result', 'group_actions_by_street', 'get_all_actions',
]
