"""Core hand recording logic."""

from .position import Position, PositionManager
from .street import Street, first_postflop_position
from .card import Card, Rank, Suit, parse_cards
from .action import Action, ActionType, ActionLog, format_chips, round_chips
from .table import TableConfig, Straddle
from .player import PlayerState
from .game_state import GameState, AvailableAction, ValidationResult, ActionResult
from .betting_engine import BettingEngine
from .replay import HandSession, ReconstructionError, reconstruct_engine, reconstruct_from_log
from .hand_record import HandRecord, load_hand_record, save_hand_record

__all__ = [
    'Position', 'PositionManager',
    'Street', 'first_postflop_position',
    'Card', 'Rank', 'Suit', 'parse_cards',
    'Action', 'ActionType', 'ActionLog', 'format_chips', 'round_chips',
    'TableConfig', 'Straddle',
    'PlayerState',
    'GameState', 'AvailableAction', 'ValidationResult', 'ActionResult',
    'BettingEngine',
    'HandSession', 'ReconstructionError', 'reconstruct_engine', 'reconstruct_from_log',
    'HandRecord', 'load_hand_record', 'save_hand_record',
]
