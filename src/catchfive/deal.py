"""
Dealer draw, the deal, and purge-and-draw.
Deal: 9 cards each, 16 to the stock. After trump is named every non-trump card is purged
and each seat draws back up to 6, bidder first, clockwise.
"""
from __future__ import annotations

import logging
import random
from dataclasses import replace
from typing import Sequence

from .deck import DEALER_DRAW_SUIT_ORDER, Card, make_deck, shuffle_deck
from .errors import InvalidAction
from .state import NUM_SEATS, DealerDrawCard, GameState, Phase, Player, next_seat, seat_of, with_player

logger = logging.getLogger(__name__)

INITIAL_HAND_SIZE = 9
FINAL_HAND_SIZE = 6
TOTAL_TRICKS = 6

# A fresh deal may start from setup (no dealer draw), after the dealer draw, or after scoring.
DEAL_PHASES = frozenset({Phase.SETUP, Phase.DEALING, Phase.SCORING})


def next_dealer(dealer: int) -> int:
    """Dealer rotates clockwise (0 -> 1 -> 2 -> 3 -> 0)."""
    return next_seat(dealer)


def first_to_bid(dealer: int) -> int:
    """Player to the left of the dealer speaks first."""
    return next_seat(dealer)


def seats_from(start: int) -> list[int]:
    return [(start + i) % NUM_SEATS for i in range(NUM_SEATS)]


def dealer_draw_value(card: Card) -> int:
    """Lower deals. Ace is low; equal ranks are split by suit (Clubs lowest)."""
    return card.ace_low_rank() * 10 + DEALER_DRAW_SUIT_ORDER[card.suit]


def start_dealer_draw(state: GameState, rng: random.Random | None = None) -> GameState:
    """Show each seat one card from a separately shuffled deck."""
    if state.phase != Phase.SETUP:
        logger.warning("Ignoring start_dealer_draw in phase %s", state.phase.value)
        return state
    deck = shuffle_deck(make_deck(), rng)
    draw = tuple(DealerDrawCard(player_id=p.id, card=deck[i]) for i, p in enumerate(state.players))
    return replace(state, phase=Phase.DEALER_DRAW, dealer_draw_cards=draw)


def finalize_dealer_draw(state: GameState) -> GameState:
    """Lowest draw card deals. Outside the dealer-draw phase this is a no-op."""
    if state.phase != Phase.DEALER_DRAW:
        logger.warning("Ignoring finalize_dealer_draw in phase %s", state.phase.value)
        return state
    if not state.dealer_draw_cards:
        return replace(state, phase=Phase.DEALING, dealer_index=0)
    lowest = min(state.dealer_draw_cards, key=lambda d: dealer_draw_value(d.card))
    dealer = seat_of(state, lowest.player_id)
    logger.debug("Dealer draw: %s deals with %s", state.players[dealer].name, lowest.card)
    return replace(state, phase=Phase.DEALING, dealer_index=dealer)


def deal_cards(state: GameState, rng: random.Random | None = None) -> GameState:
    """Fresh shuffle, 9 cards to each seat, rest to stock, and reset every per-round field."""
    if state.phase not in DEAL_PHASES:
        logger.warning("Ignoring deal_cards in phase %s", state.phase.value)
        return state
    deck = shuffle_deck(make_deck(), rng)
    players = tuple(
        replace(
            p,
            hand=tuple(deck[i * INITIAL_HAND_SIZE:(i + 1) * INITIAL_HAND_SIZE]),
            bid=None,
            tricks_won=(),
        )
        for i, p in enumerate(state.players)
    )
    first = first_to_bid(state.dealer_index)
    return replace(
        state,
        phase=Phase.BIDDING,
        players=players,
        current_player_index=first,
        lead_player_index=first,
        trump_suit=None,
        high_bid=0,
        bidder_id=None,
        current_trick=(),
        trick_number=1,
        round_scores={},
        round_score_details=None,
        stock=tuple(deck[NUM_SEATS * INITIAL_HAND_SIZE:]),
        discard_pile=(),
        slept_cards=(),
        last_trick=(),
        last_trick_winner_id=None,
        players_needing_discard=(),
        auto_claimer_id=None,
    )


def _draw_to_full(
    state: GameState,
    players: Sequence[Player],
    discard: Sequence[Card],
    rng: random.Random | None,
) -> GameState:
    """Every seat draws up to FINAL_HAND_SIZE, bidder first; undrawn stock is slept."""
    bidder_seat = seat_of(state, state.bidder_id)
    hands = [list(p.hand) for p in players]
    stock = list(state.stock)
    discard = list(discard)
    for seat in seats_from(bidder_seat):
        while len(hands[seat]) < FINAL_HAND_SIZE:
            if not stock and discard:
                stock = shuffle_deck(discard, rng)
                discard = []
            if not stock:
                break
            hands[seat].append(stock.pop())

    new_players = tuple(replace(p, hand=tuple(hands[i])) for i, p in enumerate(players))
    logger.debug("Purge-and-draw done: %d cards slept", len(stock))
    return replace(
        state,
        phase=Phase.PLAYING,
        players=new_players,
        stock=(),
        discard_pile=tuple(discard),
        slept_cards=tuple(stock),
        players_needing_discard=(),
        current_player_index=bidder_seat,
        lead_player_index=bidder_seat,
        trick_number=1,
    )


def perform_purge_and_draw(state: GameState, rng: random.Random | None = None) -> GameState:
    """
    Purge non-trump cards from every hand, then draw back to 6.
    A seat left holding more than 6 trumps must shed the excess first (discard-trump phase).
    """
    if state.phase != Phase.PURGE_DRAW:
        logger.warning("Ignoring duplicate purge_draw_complete, phase is %s", state.phase.value)
        return state
    trump = state.trump_suit
    discard = list(state.discard_pile)
    players = []
    for p in state.players:
        discard.extend(c for c in p.hand if c.suit != trump)
        players.append(replace(p, hand=tuple(c for c in p.hand if c.suit == trump)))

    needing = tuple(i for i, p in enumerate(players) if len(p.hand) > FINAL_HAND_SIZE)
    if needing:
        logger.debug("Seats %s hold more than %d trumps", needing, FINAL_HAND_SIZE)
        return replace(
            state,
            phase=Phase.DISCARD_TRUMP,
            players=tuple(players),
            discard_pile=tuple(discard),
            players_needing_discard=needing,
            current_player_index=needing[0],
        )
    return _draw_to_full(state, players, discard, rng)


def discard_trump_card(state: GameState, card: Card, rng: random.Random | None = None) -> GameState:
    """Current seat sheds one excess trump; once nobody is above 6 the draw completes."""
    if state.phase != Phase.DISCARD_TRUMP:
        logger.debug("Ignoring discard_trump in phase %s", state.phase.value)
        return state
    seat = state.current_player_index
    player = state.players[seat]
    if not player.holds(card):
        raise InvalidAction(f"Card {card} is not in {player.name}'s hand")
    if card.suit != state.trump_suit:
        raise InvalidAction(f"Card {card} is not a trump")

    players = with_player(state.players, seat, hand=tuple(c for c in player.hand if c != card))
    discard = state.discard_pile + (card,)
    remaining = tuple(i for i in state.players_needing_discard if len(players[i].hand) > FINAL_HAND_SIZE)
    if remaining:
        return replace(
            state,
            players=players,
            discard_pile=discard,
            players_needing_discard=remaining,
            current_player_index=remaining[0],
        )
    return _draw_to_full(state, players, discard, rng)
