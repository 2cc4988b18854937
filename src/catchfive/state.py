"""
Game state values.

Every class here is a frozen dataclass with tuple-valued collections: a
transition builds a new ``GameState`` with ``dataclasses.replace`` and never
touches the one it was given.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Iterator, Mapping, Optional

from .deck import Card, DeckColor, Suit

if TYPE_CHECKING:  # pragma: no cover - import cycle guard for type checking only
    from .scoring import RoundScoreDetails

NUM_SEATS = 4


class Phase(str, Enum):
    SETUP = "setup"
    DEALER_DRAW = "dealer-draw"
    DEALING = "dealing"
    BIDDING = "bidding"
    TRUMP_SELECTION = "trump-selection"
    PURGE_DRAW = "purge-draw"
    DISCARD_TRUMP = "discard-trump"
    PLAYING = "playing"
    SCORING = "scoring"
    GAME_OVER = "game-over"


@dataclass(frozen=True)
class Player:
    id: str
    name: str
    is_human: bool
    team_id: str
    hand: tuple[Card, ...] = ()
    bid: Optional[int] = None  # None = not yet bid, 0 = pass
    tricks_won: tuple[Card, ...] = ()

    def holds(self, card: Card) -> bool:
        return card in self.hand


@dataclass(frozen=True)
class Team:
    id: str
    name: str
    score: int = 0
    player_ids: tuple[str, str] = ("", "")


@dataclass(frozen=True)
class TrickCard:
    player_id: str
    card: Card


@dataclass(frozen=True)
class DealerDrawCard:
    player_id: str
    card: Card


@dataclass(frozen=True)
class GameState:
    """Single source of truth for one game. Owned by the caller between transitions."""

    phase: Phase
    players: tuple[Player, ...]
    teams: tuple[Team, ...]
    current_player_index: int = 0
    dealer_index: int = 0
    trump_suit: Optional[Suit] = None
    high_bid: int = 0
    bidder_id: Optional[str] = None
    current_trick: tuple[TrickCard, ...] = ()
    trick_number: int = 1
    lead_player_index: int = 0
    round_scores: Mapping[str, int] = field(default_factory=dict)
    round_score_details: Optional["RoundScoreDetails"] = None
    deck_color: DeckColor = DeckColor.BLUE
    stock: tuple[Card, ...] = ()
    discard_pile: tuple[Card, ...] = ()
    target_score: int = 25
    last_trick: tuple[TrickCard, ...] = ()
    last_trick_winner_id: Optional[str] = None
    slept_cards: tuple[Card, ...] = ()
    dealer_draw_cards: tuple[DealerDrawCard, ...] = ()
    players_needing_discard: tuple[int, ...] = ()
    auto_claimer_id: Optional[str] = None
    # Set and cleared by the caller's turn timer; never read by the engine.
    turn_start_time: Optional[float] = None

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_index]


def next_seat(index: int) -> int:
    return (index + 1) % NUM_SEATS


def partner_seat(index: int) -> int:
    return (index + 2) % NUM_SEATS


def seat_of(state: GameState, player_id: Optional[str]) -> int:
    """Seat index of ``player_id``, or -1 if unknown."""
    for i, p in enumerate(state.players):
        if p.id == player_id:
            return i
    return -1


def team_of(state: GameState, player_id: Optional[str]) -> Optional[Team]:
    seat = seat_of(state, player_id)
    if seat < 0:
        return None
    team_id = state.players[seat].team_id
    for t in state.teams:
        if t.id == team_id:
            return t
    return None


def with_player(players: tuple[Player, ...], index: int, **changes) -> tuple[Player, ...]:
    """Copy of ``players`` with seat ``index`` replaced by an updated Player."""
    updated = list(players)
    updated[index] = replace(players[index], **changes)
    return tuple(updated)


def iter_zone_cards(state: GameState) -> Iterator[tuple[str, Card]]:
    """Yield (zone name, card) for every zone that owns cards this round."""
    for p in state.players:
        for c in p.hand:
            yield f"hand:{p.id}", c
        for c in p.tricks_won:
            yield f"won:{p.id}", c
    for tc in state.current_trick:
        yield "trick", tc.card
    for c in state.stock:
        yield "stock", c
    for c in state.discard_pile:
        yield "discard", c
    for c in state.slept_cards:
        yield "slept", c


def all_cards_in_play(state: GameState) -> list[Card]:
    return [c for _, c in iter_zone_cards(state)]
