"""Tests for action parsing and routing."""
import random

import pytest

from catchfive.actions import (
    Bid,
    ClaimRemainingTricks,
    Continue,
    DiscardTrump,
    FinalizeDealerDraw,
    PlayCard,
    PurgeDrawComplete,
    SelectTrump,
    SortHand,
    StartGame,
    apply_action,
    parse_action,
)
from catchfive.deck import Rank, Suit, make_card
from catchfive.errors import InvalidAction, NotYourTurn
from catchfive.game import initialize_game
from catchfive.play import legal_plays
from catchfive.state import Phase


def started(seed=0):
    rng = random.Random(seed)
    gs = apply_action(initialize_game(), StartGame(), rng=rng)
    return apply_action(gs, FinalizeDealerDraw(), rng=rng, check_invariants=True)


def test_parse_simple_actions():
    assert parse_action({"action": "start_game"}) == StartGame()
    assert parse_action({"action": "continue", "data": {}}) == Continue()
    assert parse_action({"action": "purge_draw_complete"}) == PurgeDrawComplete()
    assert parse_action({"action": "sort_hand"}) == SortHand()
    assert parse_action({"action": "claim_remaining"}) == ClaimRemainingTricks()


def test_parse_payload_actions():
    assert parse_action({"action": "bid", "data": {"amount": 6}}) == Bid(6)
    assert parse_action({"action": "bid", "data": {"amount": 0}}) == Bid(0)
    assert parse_action({"action": "select_trump", "data": {"suit": "Spades"}}) == SelectTrump(Suit.SPADES)
    card = make_card(Rank.TEN, Suit.HEARTS)
    assert parse_action({"action": "play_card", "data": {"card": {"id": "10-Hearts"}}}) == PlayCard(card)
    assert parse_action({"action": "play_card", "data": {"card": "10-Hearts"}}) == PlayCard(card)
    assert parse_action({"action": "discard_trump", "data": {"card": "10-Hearts"}}) == DiscardTrump(card)


@pytest.mark.parametrize(
    "message",
    [
        None,
        "bid",
        {},
        {"action": ""},
        {"action": 7},
        {"action": "fold"},
        {"action": "bid", "data": "6"},
        {"action": "bid", "data": {"amount": 4}},
        {"action": "bid", "data": {"amount": "6"}},
        {"action": "bid", "data": {}},
        {"action": "select_trump", "data": {"suit": "Stars"}},
        {"action": "select_trump", "data": {"suit": 2}},
        {"action": "play_card", "data": {"card": {"id": "1-Hearts"}}},
        {"action": "play_card", "data": {}},
    ],
)
def test_parse_rejects_malformed(message):
    with pytest.raises(InvalidAction):
        parse_action(message)


def test_start_and_deal():
    gs = started()
    assert gs.phase == Phase.BIDDING
    assert len(gs.stock) == 16
    assert gs.current_player_index == (gs.dealer_index + 1) % 4


def test_out_of_turn_bid_raises():
    gs = started()
    wrong = (gs.current_player_index + 1) % 4
    with pytest.raises(NotYourTurn):
        apply_action(gs, Bid(0), seat=wrong)
    after = apply_action(gs, Bid(0), seat=gs.current_player_index)
    assert after.players[gs.current_player_index].bid == 0


def test_phase_mismatch_returns_same_state():
    gs = started()
    assert apply_action(gs, SelectTrump(Suit.HEARTS)) is gs
    assert apply_action(gs, PurgeDrawComplete()) is gs
    assert apply_action(gs, Continue()) is gs
    assert apply_action(gs, StartGame()) is gs
    # out-of-phase actions from any seat are ignored, not NotYourTurn
    assert apply_action(gs, PlayCard(gs.players[0].hand[0]), seat=0) is gs


def test_sort_hand_any_phase():
    gs = started()
    seat = 2
    after = apply_action(gs, SortHand(), seat=seat)
    assert sorted(c.id for c in after.players[seat].hand) == sorted(c.id for c in gs.players[seat].hand)


def test_full_round_through_actions():
    rng = random.Random(4)
    gs = started(4)
    for _ in range(4):
        gs = apply_action(gs, Bid(0), rng=rng, check_invariants=True)
    assert gs.phase == Phase.TRUMP_SELECTION
    gs = apply_action(gs, SelectTrump(Suit.CLUBS), rng=rng, check_invariants=True)
    gs = apply_action(gs, PurgeDrawComplete(), rng=rng, check_invariants=True)
    while gs.phase == Phase.DISCARD_TRUMP:
        trump = next(c for c in gs.current_player.hand if c.suit == Suit.CLUBS)
        gs = apply_action(gs, DiscardTrump(trump), rng=rng, check_invariants=True)
    assert gs.phase == Phase.PLAYING
    while gs.phase == Phase.PLAYING:
        card = legal_plays(gs.current_player.hand, gs.current_trick, gs.trump_suit)[0]
        gs = apply_action(gs, PlayCard(card), rng=rng, check_invariants=True)
    assert gs.phase == Phase.SCORING
    gs = apply_action(gs, Continue(), rng=rng, check_invariants=True)
    assert gs.phase == Phase.BIDDING


@pytest.mark.parametrize("seat", [4, -1, 9, True, "0"])
def test_unknown_seat_rejected(seat):
    gs = started()
    for action in (ClaimRemainingTricks(), Bid(0), SortHand(), StartGame()):
        with pytest.raises(InvalidAction):
            apply_action(gs, action, seat=seat)
    with pytest.raises(InvalidAction):
        apply_action(initialize_game(), StartGame(), seat=seat)
