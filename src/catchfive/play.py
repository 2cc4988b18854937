"""
Trick-taking: legal moves and trick winner.
Follow the lead suit if able; trump may always be played as a ruff; any trump beats any non-trump.
"""
from __future__ import annotations

from typing import Optional, Sequence

from .deck import Card, Suit
from .state import TrickCard


def lead_suit(trick: Sequence[TrickCard]) -> Optional[Suit]:
    return trick[0].card.suit if trick else None


def has_suit(hand: Sequence[Card], suit: Suit) -> bool:
    return any(c.suit == suit for c in hand)


def _beats(card: Card, other: Card, trump_suit: Optional[Suit], led: Suit) -> bool:
    """True if ``card`` beats the currently winning ``other``."""
    card_trump = card.is_trump(trump_suit)
    other_trump = other.is_trump(trump_suit)
    if card_trump or other_trump:
        if card_trump and not other_trump:
            return True
        if other_trump and not card_trump:
            return False
        return card.rank > other.rank
    if card.suit == led and other.suit == led:
        return card.rank > other.rank
    return card.suit == led and other.suit != led


def current_trick_leader(trick: Sequence[TrickCard], trump_suit: Optional[Suit]) -> Optional[TrickCard]:
    """The play currently winning a (possibly partial) trick, or None if empty."""
    if not trick:
        return None
    led = trick[0].card.suit
    best = trick[0]
    for tc in trick[1:]:
        if _beats(tc.card, best.card, trump_suit, led):
            best = tc
    return best


def trick_winner(trick: Sequence[TrickCard], trump_suit: Optional[Suit]) -> str:
    """
    Player id of the winning play. Highest trump wins; otherwise highest card of the lead suit.
    Off-suit non-trump plays can never win. An empty trick returns "".
    """
    best = current_trick_leader(trick, trump_suit)
    return best.player_id if best is not None else ""


def can_play_card(
    card: Card,
    hand: Sequence[Card],
    trick: Sequence[TrickCard],
    trump_suit: Optional[Suit],
) -> bool:
    if not trick:
        return True
    led = trick[0].card.suit
    if card.suit == led:
        return True
    # Trump is always playable, even while holding the lead suit.
    if card.is_trump(trump_suit):
        return True
    return not has_suit(hand, led)


def legal_plays(
    hand: Sequence[Card],
    trick: Sequence[TrickCard],
    trump_suit: Optional[Suit],
) -> list[Card]:
    """Cards in ``hand`` that may legally be played on ``trick``."""
    return [c for c in hand if can_play_card(c, hand, trick, trump_suit)]
