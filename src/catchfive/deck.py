"""
Catch Five deck: 52 cards (4 suits × 13 ranks).
Trick order is 2 (lowest) .. Ace (highest). Game-count values: A=4, K=3, Q=2, J=1, 10=10.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Iterable, Optional


class Suit(IntEnum):
    """Hearts, Diamonds, Clubs, Spades. Order is the deck generation order."""
    HEARTS = 0
    DIAMONDS = 1
    CLUBS = 2
    SPADES = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @property
    def symbol(self) -> str:
        return "♥♦♣♠"[self]

    @classmethod
    def from_label(cls, label: str) -> "Suit":
        try:
            return cls[label.upper()]
        except KeyError:
            raise ValueError(f"Unknown suit: {label!r}") from None


class Rank(IntEnum):
    """Value is the trick strength (2 lowest, Ace highest)."""
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
    def label(self) -> str:
        return _RANK_LABELS.get(self) or str(int(self))

    @classmethod
    def from_label(cls, label: str) -> "Rank":
        for rank in cls:
            if rank.label == label:
                return rank
        raise ValueError(f"Unknown rank: {label!r}")


_RANK_LABELS = {Rank.JACK: "J", Rank.QUEEN: "Q", Rank.KING: "K", Rank.ACE: "A"}

# Game count: summed over every captured card regardless of suit.
GAME_COUNT_VALUES = {
    Rank.ACE: 4,
    Rank.KING: 3,
    Rank.QUEEN: 2,
    Rank.JACK: 1,
    Rank.TEN: 10,
}

# Dealer draw: Ace counts low, ties broken by suit (Clubs lowest).
DEALER_DRAW_SUIT_ORDER = {
    Suit.CLUBS: 0,
    Suit.DIAMONDS: 1,
    Suit.HEARTS: 2,
    Suit.SPADES: 3,
}


class DeckColor(str, Enum):
    """Card-back colour. Presentation only; carried through state untouched."""
    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    PURPLE = "purple"
    GOLD = "gold"
    BLACK = "black"


@dataclass(frozen=True)
class Card:
    """A single playing card. Two cards are equal iff their ids are equal."""

    rank: Rank
    suit: Suit

    def __post_init__(self) -> None:
        if not isinstance(self.rank, Rank):
            raise ValueError(f"Bad rank: {self.rank!r}")
        if not isinstance(self.suit, Suit):
            raise ValueError(f"Bad suit: {self.suit!r}")

    @property
    def id(self) -> str:
        return f"{self.rank.label}-{self.suit.label}"

    def game_count(self) -> int:
        return GAME_COUNT_VALUES.get(self.rank, 0)

    def ace_low_rank(self) -> int:
        return 1 if self.rank == Rank.ACE else int(self.rank)

    def is_trump(self, trump_suit: Optional[Suit]) -> bool:
        return trump_suit is not None and self.suit == trump_suit

    def __str__(self) -> str:
        return f"{self.rank.label}{self.suit.symbol}"

    def __repr__(self) -> str:
        return str(self)


def make_card(rank: Rank | int, suit: Suit | int) -> Card:
    return Card(rank=Rank(rank), suit=Suit(suit))


def card_from_id(card_id: str) -> Card:
    """Parse a card id such as ``"10-Hearts"`` or ``"A-Spades"``."""
    if not isinstance(card_id, str) or "-" not in card_id:
        raise ValueError(f"Bad card id: {card_id!r}")
    rank_label, suit_label = card_id.split("-", 1)
    return Card(rank=Rank.from_label(rank_label), suit=Suit.from_label(suit_label))


def make_deck() -> list[Card]:
    """Build the full 52-card deck in a fixed order (suit-major, 2..A)."""
    deck: list[Card] = []
    for s in Suit:
        for rank in Rank:
            deck.append(Card(rank=rank, suit=s))
    return deck


def shuffle_deck(deck: Iterable[Card], rng: random.Random | None = None) -> list[Card]:
    """Return a shuffled copy of ``deck``; the input is never mutated."""
    if rng is None:
        rng = random.Random()
    shuffled = list(deck)
    rng.shuffle(shuffled)
    return shuffled


def cards_of_suit(cards: Iterable[Card], suit: Optional[Suit]) -> list[Card]:
    return [c for c in cards if suit is not None and c.suit == suit]


def highest(cards: Iterable[Card]) -> Card:
    return max(cards, key=lambda c: c.rank)


def lowest(cards: Iterable[Card]) -> Card:
    return min(cards, key=lambda c: c.rank)
