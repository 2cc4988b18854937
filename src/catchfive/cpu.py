"""
CPU decision heuristics for non-human seats.

Each function sees only what a real player at that seat would: its own hand, the trick so far,
and public information (bids, bidder id, seating). None of them look at other hands, the stock
or slept cards. Every result is legal: bids are 0 or MIN_BID..MAX_BID and cards pass
``can_play_card``.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional, Sequence

from .bidding import MAX_BID, MIN_BID, PASS
from .deck import Card, Rank, Suit, cards_of_suit, highest, lowest
from .play import can_play_card, current_trick_leader, legal_plays
from .state import NUM_SEATS, TrickCard

# Trumps that score on capture. The Ace also wins High, but it cannot be captured.
POINT_RANKS = frozenset({Rank.FIVE, Rank.JACK, Rank.TWO, Rank.ACE})
_CAPTURE_PRIORITY = {Rank.FIVE: 0, Rank.JACK: 1, Rank.TWO: 2, Rank.ACE: 3}

# Trump choice: one per card of the suit plus these bonuses.
TRUMP_CHOICE_BONUS = {Rank.FIVE: 6, Rank.ACE: 4, Rank.JACK: 2, Rank.KING: 2, Rank.QUEEN: 1}
# Forced bidder with no suit scoring above this calls a void suit and redraws.
DESPERATE_DIG_THRESHOLD = 2

# Discard order when shedding excess trump (lowest value goes first).
_DISCARD_KEEP_VALUE = {Rank.FIVE: 100, Rank.JACK: 50, Rank.ACE: 40, Rank.TWO: 30, Rank.KING: 20, Rank.QUEEN: 15}


@dataclass(frozen=True)
class SuitStrength:
    suit: Suit
    trump_count: int
    has_ace: bool
    has_king: bool
    has_queen: bool
    has_jack: bool
    has_five: bool
    has_deuce: bool
    points_available: int
    estimated_bid: int


def evaluate_suit_strength(hand: Sequence[Card], suit: Suit) -> SuitStrength:
    """How many points ``hand`` could expect to make with ``suit`` as trump, as a bid (0 = pass)."""
    ranks = {c.rank for c in hand if c.suit == suit}
    count = sum(1 for c in hand if c.suit == suit)
    has = ranks.__contains__
    ace, king, five = has(Rank.ACE), has(Rank.KING), has(Rank.FIVE)

    if count == 0:
        bid = 0
    elif count == 1:
        bid = 5 if ace else 0
    elif count == 2:
        if ace and (king or five):
            bid = 6
        elif ace or (king and five):
            bid = 5
        else:
            bid = 0
    elif count == 3:
        if ace and (five or king):
            bid = 7
        elif ace or (king and five):
            bid = 6
        else:
            bid = 5
    else:
        if ace and (five or king):
            bid = 8
        elif ace or five:
            bid = 7
        else:
            bid = 6

    if bid and (has(Rank.JACK) or has(Rank.TWO)):
        bid = min(MAX_BID, bid + 1)
    if not ace and bid >= 8:
        bid = 7
    # A Five without the Ace in a short suit is likely to be caught.
    if five and not ace and count <= 2 and bid > 5:
        bid = 5

    points = 5 * five + has(Rank.JACK) + has(Rank.TWO) + ace
    return SuitStrength(
        suit=suit,
        trump_count=count,
        has_ace=ace,
        has_king=king,
        has_queen=has(Rank.QUEEN),
        has_jack=has(Rank.JACK),
        has_five=five,
        has_deuce=has(Rank.TWO),
        points_available=points,
        estimated_bid=bid,
    )


def get_cpu_bid(
    hand: Sequence[Card],
    high_bid: int,
    is_dealer: bool,
    all_others_passed: bool,
    rng: random.Random | None = None,
) -> int:
    """Bid for the seat holding ``hand``: 0 (pass) or a legal amount above ``high_bid``."""
    if is_dealer and all_others_passed:
        return MIN_BID
    if rng is None:
        rng = random.Random()

    strength = max(evaluate_suit_strength(hand, s).estimated_bid for s in Suit)
    if strength == 0:
        return PASS

    if is_dealer:
        if high_bid == MAX_BID and strength >= MAX_BID:
            return MAX_BID
        if strength > high_bid:
            return max(high_bid + 1, MIN_BID)
        return PASS

    if strength > high_bid:
        confidence = (strength - high_bid) / 4
        if rng.random() < 0.5 + confidence:
            return strength
    return PASS


def get_cpu_trump_choice(
    hand: Sequence[Card],
    was_forced_bid: bool = False,
    rng: random.Random | None = None,
) -> Suit:
    """Suit with the best count-plus-honours score; a hopeless forced bidder calls a void suit."""
    scores = {s: 0 for s in Suit}
    for c in hand:
        scores[c.suit] += 1 + TRUMP_CHOICE_BONUS.get(c.rank, 0)

    if was_forced_bid and max(scores.values()) <= DESPERATE_DIG_THRESHOLD:
        void = [s for s in Suit if not any(c.suit == s for c in hand)]
        if void:
            return (rng or random.Random()).choice(void)

    return max(Suit, key=lambda s: scores[s])


def get_cpu_trump_to_discard(hand: Sequence[Card], trump_suit: Suit) -> Card:
    """Least valuable trump to shed, keeping 5, J, A, 2, K, Q in that order of preference."""
    trumps = cards_of_suit(hand, trump_suit)
    if not trumps:
        raise ValueError("No trump in hand to discard")
    return min(trumps, key=lambda c: _DISCARD_KEEP_VALUE.get(c.rank, int(c.rank)))


def _is_safe(card: Card) -> bool:
    """Not a point card that would be given away if the trick is lost (Ace cannot be captured)."""
    return card.rank not in POINT_RANKS or card.rank == Rank.ACE


def _find(cards: Sequence[Card], rank: Rank) -> Optional[Card]:
    return next((c for c in cards if c.rank == rank), None)


def _choose_lead(hand: Sequence[Card], trumps: list[Card], is_bidder: bool) -> Card:
    if not trumps:
        return highest(hand)
    if is_bidder:
        ace = _find(trumps, Rank.ACE)
        if ace:
            return ace
        king = _find(trumps, Rank.KING)
        if king and len(trumps) >= 2:
            return king
    safe = [c for c in trumps if c.rank not in (Rank.FIVE, Rank.TWO, Rank.JACK)]
    if safe:
        return highest(safe) if is_bidder else lowest(safe)
    desperate = [c for c in trumps if c.rank not in (Rank.FIVE, Rank.TWO)]
    if desperate:
        return highest(desperate)
    return lowest(trumps)


def _choose_follow(
    hand: Sequence[Card],
    trick: Sequence[TrickCard],
    trump_suit: Optional[Suit],
    player_id: Optional[str],
    player_ids: Sequence[str],
) -> Card:
    led = trick[0].card.suit
    follow = [c for c in hand if c.suit == led]
    trumps = cards_of_suit(hand, trump_suit)

    seat = player_ids.index(player_id) if player_id in player_ids else None
    partner_id = player_ids[(seat + 2) % NUM_SEATS] if seat is not None else None
    played = {tc.player_id for tc in trick}
    after_me = (
        [player_ids[(seat + i) % NUM_SEATS] for i in range(1, NUM_SEATS)] if seat is not None else []
    )
    opponents_after = [pid for pid in after_me if pid not in played and pid != partner_id]

    leader = current_trick_leader(trick, trump_suit)
    partner_winning = leader is not None and partner_id is not None and leader.player_id == partner_id
    point_plays = sorted(
        (tc for tc in trick if tc.card.suit == trump_suit and tc.card.rank in POINT_RANKS),
        key=lambda tc: _CAPTURE_PRIORITY[tc.card.rank],
    )
    point_in_trick = point_plays[0] if point_plays else None
    top_trump = max((int(tc.card.rank) for tc in trick if tc.card.suit == trump_suit), default=0)

    # Partner has the trick and nobody can overtake: feed it points.
    if partner_winning and not opponents_after:
        for rank in (Rank.FIVE, Rank.TWO):
            c = _find(trumps, rank)
            if c and can_play_card(c, hand, trick, trump_suit):
                return c

    # An opponent's point card is on the table: try to capture it.
    if point_in_trick and point_in_trick.player_id != partner_id:
        if follow and led == trump_suit:
            winners = [c for c in follow if c.rank > leader.card.rank]
            if winners:
                return lowest([c for c in winners if _is_safe(c)] or winners)
        if not follow and trumps:
            winners = [c for c in trumps if c.rank > top_trump]
            if winners:
                return lowest([c for c in winners if _is_safe(c)] or winners)

    if follow:
        safe_follow = [c for c in follow if _is_safe(c)]
        if led != trump_suit:
            return lowest(follow) if partner_winning else highest(follow)
        if leader and not partner_winning:
            winners = [c for c in safe_follow if c.rank > leader.card.rank]
            if winners:
                return lowest(winners)
        if safe_follow:
            return lowest(safe_follow)
        if partner_winning and not opponents_after:
            five = _find(follow, Rank.FIVE)
            if five:
                return five
        for rank in (Rank.TWO, Rank.JACK, Rank.FIVE):
            c = _find(follow, rank)
            if c:
                return c
        return lowest(follow)

    if trumps:
        should_protect = (
            _find(trumps, Rank.FIVE) is None
            and point_in_trick is None
            and led != trump_suit
            and bool(opponents_after)
            and not partner_winning
        )
        if should_protect:
            protective = [c for c in trumps if Rank.FIVE < c.rank < Rank.ACE and c.rank > top_trump]
            if protective:
                return lowest(protective)
            ace = _find(trumps, Rank.ACE)
            if ace:
                return ace
        non_point = [c for c in trumps if c.rank not in POINT_RANKS]
        if non_point:
            return lowest(non_point)
        return _find(trumps, Rank.ACE) or lowest(trumps)

    return lowest(hand)


def get_cpu_card_to_play(
    hand: Sequence[Card],
    trick: Sequence[TrickCard],
    trump_suit: Optional[Suit],
    player_id: Optional[str] = None,
    player_ids: Sequence[str] = (),
    bidder_id: Optional[str] = None,
) -> Card:
    """
    Pick a card for the seat ``player_id`` (seated per ``player_ids``).

    Leading: the bidder pulls trump from the top, others lead low safe trump. Following: feed points to
    a partner who has the trick locked, capture an opponent's point card when possible, otherwise
    follow cheaply or ruff with a non-point trump.
    """
    if not hand:
        raise ValueError("Cannot choose a card from an empty hand")
    if trick:
        choice = _choose_follow(hand, trick, trump_suit, player_id, list(player_ids))
    else:
        is_bidder = player_id is not None and player_id == bidder_id
        choice = _choose_lead(hand, cards_of_suit(hand, trump_suit), is_bidder)
    if can_play_card(choice, hand, trick, trump_suit):
        return choice
    return lowest(legal_plays(hand, trick, trump_suit))
