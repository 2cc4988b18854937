"""Tests for dealer draw, the deal and purge-and-draw."""
import random
from dataclasses import replace

import pytest

from catchfive.deal import (
    FINAL_HAND_SIZE,
    INITIAL_HAND_SIZE,
    deal_cards,
    dealer_draw_value,
    discard_trump_card,
    finalize_dealer_draw,
    perform_purge_and_draw,
    start_dealer_draw,
)
from catchfive.deck import Rank, Suit, make_card, make_deck
from catchfive.errors import InvalidAction
from catchfive.game import initialize_game, validate_no_duplicates
from catchfive.state import DealerDrawCard, Phase


def C(rank, suit):
    return make_card(rank, suit)


def purge_state(hands, trump=Suit.HEARTS, bidder="player1"):
    """PURGE_DRAW state with the given hands; every other card goes to the stock."""
    gs = initialize_game()
    used = {c for h in hands for c in h}
    stock = tuple(c for c in make_deck() if c not in used)
    players = tuple(replace(p, hand=tuple(h)) for p, h in zip(gs.players, hands))
    return replace(
        gs,
        phase=Phase.PURGE_DRAW,
        players=players,
        stock=stock,
        trump_suit=trump,
        high_bid=6,
        bidder_id=bidder,
    )


def test_dealer_draw_lowest_card_deals():
    gs = start_dealer_draw(initialize_game(), random.Random(3))
    assert gs.phase == Phase.DEALER_DRAW
    assert len({d.card.id for d in gs.dealer_draw_cards}) == 4

    draw = (
        DealerDrawCard("player1", C(Rank.KING, Suit.HEARTS)),
        DealerDrawCard("player2", C(Rank.ACE, Suit.SPADES)),
        DealerDrawCard("player3", C(Rank.ACE, Suit.CLUBS)),
        DealerDrawCard("player4", C(Rank.TWO, Suit.CLUBS)),
    )
    gs = finalize_dealer_draw(replace(gs, dealer_draw_cards=draw))
    assert gs.phase == Phase.DEALING
    # Aces are low; clubs break the tie.
    assert gs.dealer_index == 2


def test_dealer_draw_value_orders_suits():
    assert dealer_draw_value(C(Rank.FOUR, Suit.CLUBS)) < dealer_draw_value(C(Rank.FOUR, Suit.SPADES))
    assert dealer_draw_value(C(Rank.ACE, Suit.SPADES)) < dealer_draw_value(C(Rank.TWO, Suit.CLUBS))


def test_finalize_outside_dealer_draw_is_ignored():
    gs = initialize_game()
    assert finalize_dealer_draw(gs) is gs


def test_deal_counts():
    gs = deal_cards(initialize_game(), random.Random(11))
    assert gs.phase == Phase.BIDDING
    assert all(len(p.hand) == INITIAL_HAND_SIZE for p in gs.players)
    assert len(gs.stock) == 16
    assert gs.trick_number == 1
    assert gs.high_bid == 0 and gs.bidder_id is None and gs.trump_suit is None
    validate_no_duplicates(gs, "after deal")


def test_purge_and_draw_fills_hands():
    gs = deal_cards(initialize_game(), random.Random(5))
    gs = replace(gs, phase=Phase.PURGE_DRAW, trump_suit=Suit.SPADES, high_bid=6, bidder_id="player3")
    after = perform_purge_and_draw(gs, random.Random(6))
    assert after.phase == Phase.PLAYING
    assert all(len(p.hand) == FINAL_HAND_SIZE for p in after.players)
    assert after.stock == ()
    assert after.current_player_index == 2
    assert after.lead_player_index == 2
    # every trump dealt stays in its hand
    for before, now in zip(gs.players, after.players):
        for c in before.hand:
            if c.suit == Suit.SPADES:
                assert c in now.hand
    validate_no_duplicates(after, "after purge")


def test_bidder_draws_first():
    hearts = [C(r, Suit.HEARTS) for r in Rank]
    clubs = [C(r, Suit.CLUBS) for r in Rank]
    hands = [clubs[0:9], hearts[0:1] + clubs[9:13] + [C(r, Suit.DIAMONDS) for r in list(Rank)[:4]],
             [C(r, Suit.DIAMONDS) for r in list(Rank)[4:13]], [C(r, Suit.SPADES) for r in list(Rank)[:9]]]
    gs = purge_state(hands, trump=Suit.HEARTS, bidder="player2")
    top_of_stock = gs.stock[-FINAL_HAND_SIZE + 1:]
    after = perform_purge_and_draw(gs, random.Random(0))
    # player2 kept one trump and drew the top five cards of the stock
    assert set(after.players[1].hand) == set(hearts[0:1]) | set(top_of_stock)
    validate_no_duplicates(after)


def test_purge_ignored_in_wrong_phase():
    gs = deal_cards(initialize_game(), random.Random(5))
    assert perform_purge_and_draw(gs) is gs


def test_excess_trumps_must_be_discarded():
    hearts = [C(r, Suit.HEARTS) for r in Rank]
    others = [c for c in make_deck() if c.suit != Suit.HEARTS]
    hands = [hearts[:8] + others[:1], others[1:10], others[10:19], others[19:28]]
    gs = purge_state(hands)
    gs = perform_purge_and_draw(gs, random.Random(1))
    assert gs.phase == Phase.DISCARD_TRUMP
    assert gs.players_needing_discard == (0,)
    assert gs.current_player_index == 0
    assert len(gs.players[0].hand) == 8
    validate_no_duplicates(gs)

    with pytest.raises(InvalidAction):
        discard_trump_card(gs, others[30])

    gs = discard_trump_card(gs, hearts[0], random.Random(2))
    assert gs.phase == Phase.DISCARD_TRUMP
    gs = discard_trump_card(gs, hearts[1], random.Random(2))
    assert gs.phase == Phase.PLAYING
    assert all(len(p.hand) == FINAL_HAND_SIZE for p in gs.players)
    # the shed trumps were reshuffled into the draw: each ends up drawn, slept or still discarded
    elsewhere = list(gs.discard_pile) + list(gs.slept_cards) + [c for p in gs.players for c in p.hand]
    assert hearts[0] in elsewhere and hearts[1] in elsewhere
    validate_no_duplicates(gs, "after trump discard")


def test_discard_outside_phase_is_ignored():
    gs = deal_cards(initialize_game(), random.Random(5))
    assert discard_trump_card(gs, gs.players[0].hand[0]) is gs


def test_deal_and_dealer_draw_ignored_mid_round():
    gs = deal_cards(initialize_game(), random.Random(5))
    assert deal_cards(gs, random.Random(6)) is gs
    assert start_dealer_draw(gs, random.Random(6)) is gs
    playing = replace(gs, phase=Phase.PLAYING, trump_suit=Suit.CLUBS)
    assert deal_cards(playing) is playing
