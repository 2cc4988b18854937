"""
Bidding for 4 players.
First to speak = left of dealer; each seat speaks exactly once; 0 is a pass.
If everyone passes the dealer is forced to take the minimum bid.
"""
from __future__ import annotations

import logging
from dataclasses import replace

from .errors import InvalidAction
from .state import GameState, Phase, next_seat, seat_of, with_player

logger = logging.getLogger(__name__)

MIN_BID = 5
MAX_BID = 9
PASS = 0


def validate_bid(amount: object) -> int:
    """Return ``amount`` as a bid, or raise InvalidAction if it is not 0 or MIN_BID..MAX_BID."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAction(f"Invalid bid amount: {amount!r}")
    if amount != PASS and not MIN_BID <= amount <= MAX_BID:
        raise InvalidAction(f"Bid must be {PASS} or between {MIN_BID} and {MAX_BID}, got {amount}")
    return amount


def is_legal_bid(state: GameState, amount: int) -> bool:
    """Pass is always legal; otherwise outbid the high bid (the dealer may match a standing MAX_BID)."""
    if amount == PASS:
        return True
    if amount > state.high_bid:
        return True
    is_dealer = state.current_player_index == state.dealer_index
    return is_dealer and amount == MAX_BID and state.high_bid == MAX_BID


def legal_bids(state: GameState) -> list[int]:
    return [b for b in [PASS, *range(MIN_BID, MAX_BID + 1)] if is_legal_bid(state, b)]


def was_forced_bid(state: GameState) -> bool:
    """True if the contract fell to the dealer because the other three seats passed."""
    passes = sum(1 for p in state.players if p.bid == PASS)
    return state.high_bid == MIN_BID and passes == 3


def process_bid(state: GameState, amount: int) -> GameState:
    """Record the current seat's bid and advance; after the fourth bid move to trump selection."""
    if state.phase != Phase.BIDDING:
        logger.debug("Ignoring bid in phase %s", state.phase.value)
        return state
    amount = validate_bid(amount)
    if not is_legal_bid(state, amount):
        raise InvalidAction(f"Bid {amount} does not beat the high bid of {state.high_bid}")

    seat = state.current_player_index
    bidder = state.players[seat]
    if bidder.bid is not None:
        raise InvalidAction(f"{bidder.name} has already bid this round")
    players = with_player(state.players, seat, bid=amount)

    high_bid = state.high_bid
    bidder_id = state.bidder_id
    if amount != PASS:
        high_bid = amount
        bidder_id = bidder.id
    logger.debug("%s bids %s (high bid %s)", bidder.name, amount or "pass", high_bid)

    if any(p.bid is None for p in players):
        return replace(
            state,
            players=players,
            high_bid=high_bid,
            bidder_id=bidder_id,
            current_player_index=next_seat(seat),
        )

    if high_bid == PASS:
        dealer = players[state.dealer_index]
        high_bid = MIN_BID
        bidder_id = dealer.id
        players = with_player(players, state.dealer_index, bid=MIN_BID)
        logger.info("All passed: %s is forced to bid %d", dealer.name, MIN_BID)

    new_state = replace(state, players=players, high_bid=high_bid, bidder_id=bidder_id)
    bidder_seat = seat_of(new_state, bidder_id)
    return replace(
        new_state,
        phase=Phase.TRUMP_SELECTION,
        current_player_index=bidder_seat,
        lead_player_index=bidder_seat,
    )
