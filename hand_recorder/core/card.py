"""Card representation for hero hole cards and board cards."""

from enum import Enum
from typing import Iterable, List


class Suit(Enum):
    """Card suits."""
    HEARTS = "h"
    DIAMONDS = "d"
    CLUBS = "c"
    SPADES = "s"


class Rank(Enum):
    """Card ranks with numeric values."""
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    @property
    def symbol(self) -> str:
        """Get symbol representation of rank."""
        _symbols = {
            2: "2", 3: "3", 4: "4", 5: "5", 6: "6", 7: "7", 8: "8", 9: "9",
            10: "T", 11: "J", 12: "Q", 13: "K", 14: "A"
        }
        return _symbols[self.value]

    @classmethod
    def from_symbol(cls, symbol: str) -> 'Rank':
        """Create Rank from symbol.

        Args:
            symbol: Single character rank symbol

        Returns:
            Rank enum value

        Raises:
            ValueError: If symbol is invalid
        """
        for rank in cls:
            if rank.symbol == symbol:
                return rank
        raise ValueError(f"Invalid rank symbol: {symbol}")


class Card:
    """A playing card such as 'As' or 'Th'."""

    __slots__ = ('rank', 'suit')

    def __init__(self, rank: Rank, suit: Suit):
        self.rank = rank
        self.suit = suit

    def __str__(self) -> str:
        return f"{self.rank.symbol}{self.suit.value}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Card):
            return False
        return self.rank == other.rank and self.suit == other.suit

    def __hash__(self) -> int:
        return hash((self.rank.value, self.suit.value))

    @classmethod
    def from_string(cls, card_str: str) -> 'Card':
        """Create card from string notation.

        Args:
            card_str: String like 'As', 'Kh', etc.

        Returns:
            Card instance

        Raises:
            ValueError: If string format is invalid
        """
        if not isinstance(card_str, str) or len(card_str) != 2:
            raise ValueError(f"Invalid card string: {card_str}")

        rank = Rank.from_symbol(card_str[0].upper())
        try:
            suit = Suit(card_str[1].lower())
        except ValueError:
            raise ValueError(f"Invalid suit symbol: {card_str[1]}") from None

        return cls(rank, suit)


def parse_cards(card_strs: Iterable[str]) -> List[Card]:
    """Parse card strings, rejecting duplicates."""
    cards = [Card.from_string(s) for s in card_strs]
    if len(set(cards)) != len(cards):
        raise ValueError(f"Duplicate cards in {[str(c) for c in cards]}")
    return cards
