"""
Round scoring: High, Low, Jack, Game and Five, plus the bidder's set penalty.
Points come only from cards in ``tricks_won``; a trump never captured awards nothing.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

from .deck import Card, Rank, Suit
from .state import Player, Team

HIGH_POINTS = 1
LOW_POINTS = 1
JACK_POINTS = 1
GAME_POINTS = 1
FIVE_POINTS = 5
MAX_ROUND_POINTS = HIGH_POINTS + LOW_POINTS + JACK_POINTS + GAME_POINTS + FIVE_POINTS


@dataclass(frozen=True)
class RoundScoreDetails:
    """Category winners (team ids, None if unawarded) and the resulting points per team."""

    high: Optional[str]
    low: Optional[str]
    jack: Optional[str]
    five: Optional[str]
    game: Optional[str]
    high_card: Optional[Card] = None
    low_card: Optional[Card] = None
    game_counts: Mapping[str, int] = field(default_factory=dict)
    team_points: Mapping[str, int] = field(default_factory=dict)
    details: Mapping[str, tuple[str, ...]] = field(default_factory=dict)


def game_count(cards: Sequence[Card]) -> int:
    """Sum of game-count values (A=4, K=3, Q=2, J=1, 10=10) over any suits."""
    return sum(c.game_count() for c in cards)


def captured_by_team(players: Sequence[Player], teams: Sequence[Team]) -> dict[str, list[Card]]:
    captured: dict[str, list[Card]] = {t.id: [] for t in teams}
    for p in players:
        captured.setdefault(p.team_id, []).extend(p.tricks_won)
    return captured


def calculate_round_scores(
    players: Sequence[Player],
    teams: Sequence[Team],
    trump_suit: Suit,
) -> RoundScoreDetails:
    captured = captured_by_team(players, teams)
    points = {team_id: 0 for team_id in captured}
    lines: dict[str, list[str]] = {team_id: [] for team_id in captured}

    trumps = [(team_id, c) for team_id, cards in captured.items() for c in cards if c.suit == trump_suit]

    high = low = jack = five = None
    high_card = low_card = None
    if trumps:
        high, high_card = max(trumps, key=lambda tc: tc[1].rank)
        low, low_card = min(trumps, key=lambda tc: tc[1].rank)
        points[high] += HIGH_POINTS
        lines[high].append(f"Won High with {high_card} (+{HIGH_POINTS})")
        points[low] += LOW_POINTS
        lines[low].append(f"Won Low with {low_card} (+{LOW_POINTS})")
    for team_id, c in trumps:
        if c.rank == Rank.JACK:
            jack = team_id
            points[team_id] += JACK_POINTS
            lines[team_id].append(f"Won the Jack (+{JACK_POINTS})")
        elif c.rank == Rank.FIVE:
            five = team_id
            points[team_id] += FIVE_POINTS
            lines[team_id].append(f"Caught the 5! (+{FIVE_POINTS})")

    counts = {team_id: game_count(cards) for team_id, cards in captured.items()}
    game = None
    best = max(counts.values(), default=0)
    leaders = [team_id for team_id, n in counts.items() if n == best]
    # A tie awards Game to nobody.
    if len(leaders) == 1:
        game = leaders[0]
        points[game] += GAME_POINTS
        lines[game].append(f"Won Game ({best} pts) (+{GAME_POINTS})")

    return RoundScoreDetails(
        high=high,
        low=low,
        jack=jack,
        five=five,
        game=game,
        high_card=high_card,
        low_card=low_card,
        game_counts=counts,
        team_points=points,
        details={team_id: tuple(ls) for team_id, ls in lines.items()},
    )


def bid_made(team_points: Mapping[str, int], bidder_team_id: Optional[str], high_bid: int) -> bool:
    if bidder_team_id is None:
        return False
    return team_points.get(bidder_team_id, 0) >= high_bid


def apply_set_penalty(
    team_points: Mapping[str, int],
    bidder_team_id: Optional[str],
    high_bid: int,
) -> dict[str, int]:
    """
    Per-team score deltas for the round. A bidder team short of its bid gets exactly -high_bid,
    whatever it earned; every other team keeps what it earned.
    """
    deltas = dict(team_points)
    if bidder_team_id is not None and not bid_made(team_points, bidder_team_id, high_bid):
        deltas[bidder_team_id] = -high_bid
    return deltas
