"""
Game state machine: setup → dealer-draw → dealing → bidding → trump-selection → purge-draw
(→ discard-trump) → playing → scoring → next round, or game-over once a team reaches the target.

Every transition is a pure function ``(state, input) -> state``. Phase-mismatched inputs return the
given state unchanged; malformed payloads raise InvalidAction.
"""
from __future__ import annotations

import logging
import random
from collections import Counter
from dataclasses import replace
from typing import NamedTuple, Optional, Sequence

from .bidding import process_bid
from .deal import (
    TOTAL_TRICKS,
    deal_cards,
    discard_trump_card,
    finalize_dealer_draw,
    next_dealer,
    perform_purge_and_draw,
    start_dealer_draw,
)
from .deck import Card, DeckColor, Suit, make_deck
from .errors import InvalidAction, InvariantViolation
from .play import can_play_card, trick_winner
from .scoring import apply_set_penalty, bid_made, calculate_round_scores
from .state import (
    NUM_SEATS,
    GameState,
    Phase,
    Player,
    Team,
    TrickCard,
    iter_zone_cards,
    next_seat,
    seat_of,
    team_of,
    with_player,
)

logger = logging.getLogger(__name__)

DEFAULT_TARGET_SCORE = 25
DEFAULT_PLAYER_NAMES = ("You", "CPU 1", "Partner", "CPU 2")
DEFAULT_TEAM_NAMES = ("Your Team", "Opponents")

# Phases in which all 52 cards must be somewhere in the round's zones.
ROUND_PHASES = frozenset({
    Phase.BIDDING,
    Phase.TRUMP_SELECTION,
    Phase.PURGE_DRAW,
    Phase.DISCARD_TRUMP,
    Phase.PLAYING,
    Phase.SCORING,
    Phase.GAME_OVER,
})

# Hand sort: trump first, then these suit groups, ranks descending.
SORT_SUIT_ORDER = {Suit.SPADES: 0, Suit.HEARTS: 1, Suit.CLUBS: 2, Suit.DIAMONDS: 3}

__all__ = [
    "DEFAULT_TARGET_SCORE",
    "AutoClaim",
    "initialize_game",
    "start_dealer_draw",
    "finalize_dealer_draw",
    "deal_cards",
    "process_bid",
    "select_trump",
    "perform_purge_and_draw",
    "discard_trump_card",
    "play_card",
    "start_new_round",
    "continue_game",
    "check_game_over",
    "get_winning_team",
    "is_players_turn",
    "sort_hand",
    "check_auto_claim",
    "apply_auto_claim",
    "validate_no_duplicates",
]


def initialize_game(
    deck_color: DeckColor = DeckColor.BLUE,
    target_score: int = DEFAULT_TARGET_SCORE,
    names: Sequence[str] = DEFAULT_PLAYER_NAMES,
    human_seats: Sequence[int] = (0,),
) -> GameState:
    """Fresh game in ``setup``: seats 0 and 2 form team1, seats 1 and 3 form team2."""
    if isinstance(target_score, bool) or not isinstance(target_score, int) or target_score <= 0:
        raise InvalidAction(f"Target score must be a positive integer, got {target_score!r}")
    if len(names) != NUM_SEATS:
        raise InvalidAction(f"Expected {NUM_SEATS} player names, got {len(names)}")
    players = tuple(
        Player(
            id=f"player{i + 1}",
            name=names[i],
            is_human=i in human_seats,
            team_id="team1" if i % 2 == 0 else "team2",
        )
        for i in range(NUM_SEATS)
    )
    teams = (
        Team(id="team1", name=DEFAULT_TEAM_NAMES[0], score=0, player_ids=("player1", "player3")),
        Team(id="team2", name=DEFAULT_TEAM_NAMES[1], score=0, player_ids=("player2", "player4")),
    )
    return GameState(
        phase=Phase.SETUP,
        players=players,
        teams=teams,
        deck_color=DeckColor(deck_color),
        target_score=target_score,
    )


def select_trump(state: GameState, suit: Suit) -> GameState:
    if state.phase != Phase.TRUMP_SELECTION:
        logger.debug("Ignoring select_trump in phase %s", state.phase.value)
        return state
    if not isinstance(suit, Suit):
        raise InvalidAction(f"Invalid trump suit: {suit!r}")
    logger.debug("%s names %s trump", state.current_player.name, suit.label)
    return replace(state, trump_suit=suit, phase=Phase.PURGE_DRAW)


def _score_round(state: GameState, players: tuple[Player, ...], **changes) -> GameState:
    """Score captured cards, apply the set penalty and move to scoring or game-over."""
    details = calculate_round_scores(players, state.teams, state.trump_suit)
    bidder_team = team_of(state, state.bidder_id)
    bidder_team_id = bidder_team.id if bidder_team else None
    deltas = apply_set_penalty(details.team_points, bidder_team_id, state.high_bid)
    teams = tuple(replace(t, score=t.score + deltas.get(t.id, 0)) for t in state.teams)

    scored = replace(
        state,
        players=players,
        teams=teams,
        round_scores=dict(details.team_points),
        round_score_details=details,
        **changes,
    )
    phase = Phase.GAME_OVER if check_game_over(scored) else Phase.SCORING
    if bidder_team_id is not None and not bid_made(details.team_points, bidder_team_id, state.high_bid):
        logger.info("%s set on a bid of %d", bidder_team_id, state.high_bid)
    logger.info(
        "Round scored: %s -> %s",
        dict(details.team_points),
        {t.id: t.score for t in teams},
    )
    return replace(scored, phase=phase)


def play_card(state: GameState, card: Card) -> GameState:
    """Current seat plays ``card``; a fourth card closes the trick, the sixth trick closes the round."""
    if state.phase != Phase.PLAYING:
        logger.debug("Ignoring play_card in phase %s", state.phase.value)
        return state
    seat = state.current_player_index
    player = state.players[seat]
    if not player.holds(card):
        raise InvalidAction(f"Card {card} is not in {player.name}'s hand")
    if not can_play_card(card, player.hand, state.current_trick, state.trump_suit):
        raise InvalidAction(f"{player.name} must follow suit and cannot play {card}")

    players = with_player(state.players, seat, hand=tuple(c for c in player.hand if c != card))
    trick = state.current_trick + (TrickCard(player_id=player.id, card=card),)

    if len(trick) < NUM_SEATS:
        return replace(state, players=players, current_trick=trick, current_player_index=next_seat(seat))

    winner_id = trick_winner(trick, state.trump_suit)
    winner_seat = seat_of(state, winner_id)
    winner = players[winner_seat]
    players = with_player(players, winner_seat, tricks_won=winner.tricks_won + tuple(tc.card for tc in trick))
    trick_number = state.trick_number + 1
    logger.debug("Trick %d won by %s", state.trick_number, winner.name)

    changes = dict(
        current_trick=(),
        last_trick=trick,
        last_trick_winner_id=winner_id,
        trick_number=trick_number,
        current_player_index=winner_seat,
        lead_player_index=winner_seat,
    )
    if trick_number > TOTAL_TRICKS:
        return _score_round(state, players, **changes)
    return replace(state, players=players, **changes)


def start_new_round(state: GameState, rng: random.Random | None = None) -> GameState:
    """Rotate the dealer and deal again; team scores carry forward. Only valid after scoring."""
    if state.phase != Phase.SCORING:
        logger.warning("Ignoring start_new_round in phase %s", state.phase.value)
        return state
    dealer = next_dealer(state.dealer_index)
    players = tuple(replace(p, tricks_won=(), bid=None) for p in state.players)
    return deal_cards(replace(state, dealer_index=dealer, players=players), rng)


def continue_game(state: GameState, rng: random.Random | None = None) -> GameState:
    """After scoring: next round, or a brand-new game (same seats) once the game is over."""
    if state.phase not in (Phase.SCORING, Phase.GAME_OVER):
        logger.warning("Ignoring continue in phase %s", state.phase.value)
        return state
    if check_game_over(state):
        logger.info("Starting a new game")
        return initialize_game(
            deck_color=state.deck_color,
            target_score=state.target_score,
            names=[p.name for p in state.players],
            human_seats=[i for i, p in enumerate(state.players) if p.is_human],
        )
    return start_new_round(state, rng)


def check_game_over(state: GameState) -> bool:
    return any(t.score >= state.target_score for t in state.teams)


def get_winning_team(state: GameState) -> Optional[Team]:
    """
    One team at the target wins. If both are, the bidder's team wins iff it made its bid this round;
    otherwise the higher score wins, with the non-bidding team taking a tie. With nobody at the target
    the strictly higher score leads, and a tie has no winner.
    """
    at_target = [t for t in state.teams if t.score >= state.target_score]
    if not at_target:
        best = max(t.score for t in state.teams)
        leaders = [t for t in state.teams if t.score == best]
        return leaders[0] if len(leaders) == 1 else None
    if len(at_target) == 1:
        return at_target[0]

    bidder_team = team_of(state, state.bidder_id)
    bidder_at_target = next((t for t in at_target if bidder_team and t.id == bidder_team.id), None)
    other = next((t for t in at_target if not bidder_team or t.id != bidder_team.id), None)
    if bidder_at_target and bid_made(state.round_scores, bidder_at_target.id, state.high_bid):
        return bidder_at_target
    if bidder_at_target and other:
        return bidder_at_target if bidder_at_target.score > other.score else other
    return max(at_target, key=lambda t: t.score)


def is_players_turn(state: GameState, player_id: str) -> bool:
    return state.current_player.id == player_id


def sort_hand(state: GameState, seat: int) -> GameState:
    """Presentation only: trump first, then Spades, Hearts, Clubs, Diamonds, high to low."""
    if not 0 <= seat < NUM_SEATS:
        raise InvalidAction(f"No such seat: {seat!r}")
    trump = state.trump_suit

    def key(c: Card) -> tuple[int, int, int]:
        return (0 if c.is_trump(trump) else 1, SORT_SUIT_ORDER[c.suit], -int(c.rank))

    hand = tuple(sorted(state.players[seat].hand, key=key))
    return replace(state, players=with_player(state.players, seat, hand=hand))


class AutoClaim(NamedTuple):
    claimer_id: str
    remaining_tricks: int


def check_auto_claim(
    players: Sequence[Player],
    trump_suit: Optional[Suit],
    stock: Sequence[Card] = (),
) -> Optional[AutoClaim]:
    """
    A player can claim the rest of the round when the stock is empty and they hold every trump
    still in hands and nothing else: they win each remaining trick by leading trump.
    """
    if trump_suit is None or stock:
        return None
    total_trumps = sum(1 for p in players for c in p.hand if c.suit == trump_suit)
    if total_trumps == 0:
        return None
    for p in players:
        if p.hand and len(p.hand) == total_trumps and all(c.suit == trump_suit for c in p.hand):
            return AutoClaim(claimer_id=p.id, remaining_tricks=len(p.hand))
    return None


def apply_auto_claim(state: GameState, claimer_id: str) -> GameState:
    """Give every card left in hands to the claimer and score the round."""
    if state.phase != Phase.PLAYING or state.current_trick:
        logger.debug("Ignoring auto-claim in phase %s", state.phase.value)
        return state
    claim = check_auto_claim(state.players, state.trump_suit, state.stock)
    if claim is None or claim.claimer_id != claimer_id:
        raise InvalidAction(f"{claimer_id} cannot claim the remaining tricks")

    remaining = tuple(c for p in state.players for c in p.hand)
    players = tuple(
        replace(p, hand=(), tricks_won=p.tricks_won + remaining if p.id == claimer_id else p.tricks_won)
        for p in state.players
    )
    logger.info("%s claims the last %d tricks", claimer_id, claim.remaining_tricks)
    return _score_round(
        state,
        players,
        trick_number=TOTAL_TRICKS + 1,
        auto_claimer_id=claimer_id,
    )


def validate_no_duplicates(state: GameState, context: str = "") -> None:
    """
    Raise InvariantViolation unless every card id appears at most once across the round's zones
    and, once cards are dealt, all 52 are present. ``context`` tags the error for diagnostics.
    """
    problems: list[str] = []
    zones: dict[str, list[str]] = {}
    for zone, card in iter_zone_cards(state):
        zones.setdefault(card.id, []).append(zone)
    for card_id, where in sorted(zones.items()):
        if len(where) > 1:
            problems.append(f"{card_id} appears {len(where)} times ({', '.join(where)})")

    if state.phase in ROUND_PHASES:
        missing = sorted(c.id for c in make_deck() if c.id not in zones)
        if missing:
            problems.append(f"missing {len(missing)} cards: {', '.join(missing)}")

    replay = Counter(tc.card.id for tc in state.last_trick)
    if any(n > 1 for n in replay.values()):
        problems.append("duplicate card in last trick")
    captured = {c.id for p in state.players for c in p.tricks_won}
    stray = sorted(card_id for card_id in replay if card_id not in captured)
    if stray:
        problems.append(f"last trick cards not captured: {', '.join(stray)}")

    drawn = Counter(d.card.id for d in state.dealer_draw_cards)
    if any(n > 1 for n in drawn.values()):
        problems.append("duplicate card in dealer draw")

    if problems:
        raise InvariantViolation(context, problems)
