"""
Typed player actions and the boundary between loosely-typed messages and the pure engine.

``parse_action`` turns a transport message such as ``{"action": "bid", "data": {"amount": 6}}``
into one of the action dataclasses below, raising InvalidAction for anything malformed.
``apply_action`` routes a parsed action for a seat into the matching transition.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from .bidding import process_bid, validate_bid
from .deal import deal_cards, discard_trump_card, finalize_dealer_draw, perform_purge_and_draw, start_dealer_draw
from .deck import Card, Suit, card_from_id
from .errors import InvalidAction, NotYourTurn
from .game import apply_auto_claim, continue_game, play_card, select_trump, sort_hand, validate_no_duplicates
from .state import NUM_SEATS, GameState, Phase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StartGame:
    pass


@dataclass(frozen=True)
class FinalizeDealerDraw:
    pass


@dataclass(frozen=True)
class Bid:
    amount: int


@dataclass(frozen=True)
class SelectTrump:
    suit: Suit


@dataclass(frozen=True)
class DiscardTrump:
    card: Card


@dataclass(frozen=True)
class PurgeDrawComplete:
    pass


@dataclass(frozen=True)
class PlayCard:
    card: Card


@dataclass(frozen=True)
class SortHand:
    pass


@dataclass(frozen=True)
class ClaimRemainingTricks:
    pass


@dataclass(frozen=True)
class Continue:
    pass


Action = Union[
    StartGame,
    FinalizeDealerDraw,
    Bid,
    SelectTrump,
    DiscardTrump,
    PurgeDrawComplete,
    PlayCard,
    SortHand,
    ClaimRemainingTricks,
    Continue,
]

# Turn-gated actions and the phase each one belongs to. A claim is not gated: the claimer
# holds every trump left, so the remaining tricks are theirs whoever is to lead.
TURN_GATED_PHASES = {
    Bid: Phase.BIDDING,
    SelectTrump: Phase.TRUMP_SELECTION,
    DiscardTrump: Phase.DISCARD_TRUMP,
    PlayCard: Phase.PLAYING,
}

_SIMPLE_ACTIONS = {
    "start_game": StartGame,
    "finalize_dealer_draw": FinalizeDealerDraw,
    "purge_draw_complete": PurgeDrawComplete,
    "sort_hand": SortHand,
    "claim_remaining": ClaimRemainingTricks,
    "continue": Continue,
}


def _parse_suit(value: Any) -> Suit:
    if isinstance(value, Suit):
        return value
    if isinstance(value, str):
        try:
            return Suit.from_label(value)
        except ValueError:
            pass
    raise InvalidAction(f"Invalid trump suit: {value!r}")


def _parse_card(value: Any) -> Card:
    if isinstance(value, Card):
        return value
    card_id = value.get("id") if isinstance(value, Mapping) else value
    try:
        return card_from_id(card_id)
    except ValueError:
        raise InvalidAction(f"Invalid card: {value!r}") from None


def parse_action(message: Mapping[str, Any]) -> Action:
    """Validate a ``{"action": name, "data": {...}}`` message into a typed action."""
    if not isinstance(message, Mapping):
        raise InvalidAction("Invalid message format")
    name = message.get("action")
    if not name or not isinstance(name, str):
        raise InvalidAction("Invalid action")
    data = message.get("data") or {}
    if not isinstance(data, Mapping):
        raise InvalidAction(f"Invalid data for {name}")

    if name in _SIMPLE_ACTIONS:
        return _SIMPLE_ACTIONS[name]()
    if name == "bid":
        return Bid(amount=validate_bid(data.get("amount")))
    if name == "select_trump":
        return SelectTrump(suit=_parse_suit(data.get("suit")))
    if name == "discard_trump":
        return DiscardTrump(card=_parse_card(data.get("card")))
    if name == "play_card":
        return PlayCard(card=_parse_card(data.get("card")))
    raise InvalidAction(f"Unknown action: {name}")


def apply_action(
    state: GameState,
    action: Action,
    seat: Optional[int] = None,
    rng: random.Random | None = None,
    check_invariants: bool = False,
) -> GameState:
    """
    Apply ``action`` on behalf of ``seat`` (None = whoever is to act).

    Turn-gated actions from the wrong seat raise NotYourTurn. Actions for another phase return
    ``state`` unchanged. With ``check_invariants`` the result is run through validate_no_duplicates.
    """
    if seat is not None and (isinstance(seat, bool) or not isinstance(seat, int) or not 0 <= seat < NUM_SEATS):
        raise InvalidAction(f"No such seat: {seat!r}")
    acting = state.current_player_index if seat is None else seat
    gated_phase = TURN_GATED_PHASES.get(type(action))
    if gated_phase is not None and state.phase == gated_phase and acting != state.current_player_index:
        raise NotYourTurn(acting, state.current_player_index)

    if isinstance(action, StartGame):
        new_state = start_dealer_draw(state, rng)
    elif isinstance(action, FinalizeDealerDraw):
        new_state = finalize_dealer_draw(state)
        if new_state is not state:
            new_state = deal_cards(new_state, rng)
    elif isinstance(action, Bid):
        new_state = process_bid(state, action.amount)
    elif isinstance(action, SelectTrump):
        new_state = select_trump(state, action.suit)
    elif isinstance(action, DiscardTrump):
        new_state = discard_trump_card(state, action.card, rng)
    elif isinstance(action, PurgeDrawComplete):
        new_state = perform_purge_and_draw(state, rng)
    elif isinstance(action, PlayCard):
        new_state = play_card(state, action.card)
    elif isinstance(action, SortHand):
        new_state = sort_hand(state, acting)
    elif isinstance(action, ClaimRemainingTricks):
        new_state = apply_auto_claim(state, state.players[acting].id)
    elif isinstance(action, Continue):
        new_state = continue_game(state, rng)
    else:
        raise InvalidAction(f"Unknown action: {action!r}")

    if new_state is not state:
        logger.debug("Seat %d %s: %s -> %s", acting, type(action).__name__, state.phase.value, new_state.phase.value)
    if check_invariants:
        validate_no_duplicates(new_state, f"after action: {type(action).__name__}")
    return new_state
