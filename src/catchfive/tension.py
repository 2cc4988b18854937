"""
Tension estimator: a scalar in [0, 1] saying how close and contested the game is right now.

Advisory only (music, pacing, UI effects); nothing here feeds back into legality or scoring.

Signals, each in [0, 1]:

- score closeness: teams level, weighted by how deep into the game they are
- match point: one (0.6) or both (1.0) teams can reach the target this round
- bid height: MIN_BID -> 0, MAX_BID -> 1
- trick progress: trick 1 -> 0, last trick -> 1
- bid in danger: bidder behind the pace of their bid, weighted by lateness
- desperation: a trailing team bidding high

The weighted sum goes through a power curve (stretching mid-high values) and is clamped.
"""
from __future__ import annotations

from dataclasses import astuple, dataclass
from typing import Sequence

import numpy as np

from .bidding import MAX_BID, MIN_BID
from .deal import TOTAL_TRICKS
from .deck import Card, Rank, Suit
from .scoring import MAX_ROUND_POINTS
from .state import GameState, Phase, Player, team_of

ACTIVE_PHASES = frozenset({
    Phase.BIDDING,
    Phase.TRUMP_SELECTION,
    Phase.PURGE_DRAW,
    Phase.DISCARD_TRUMP,
    Phase.PLAYING,
    Phase.SCORING,
    Phase.GAME_OVER,
})
_PLAY_PHASES = frozenset({Phase.PLAYING, Phase.SCORING, Phase.GAME_OVER})


@dataclass(frozen=True)
class TensionWeights:
    """Signal weights (should sum to 1.0) and the output power curve."""

    score_closeness: float = 0.28
    match_point: float = 0.28
    bid_height: float = 0.17
    trick_progress: float = 0.12
    bid_in_danger: float = 0.10
    desperation: float = 0.05
    power_curve: float = 0.6

    def vector(self) -> np.ndarray:
        return np.array(astuple(self)[:-1], dtype=float)


DEFAULT_WEIGHTS = TensionWeights()


def _progress(trick_number: int) -> float:
    if trick_number <= 0:
        return 0.0
    return min((trick_number - 1) / (TOTAL_TRICKS - 1), 1.0)


def estimate_running_points(players: Sequence[Player], team_id: str, trump_suit: Suit) -> int:
    """
    Points ``team_id`` holds so far this round from High, Low, Jack and Five among captured trump.
    Game is left out: it cannot be judged until every card is captured.
    """
    team_trumps = [c for p in players if p.team_id == team_id for c in p.tricks_won if c.suit == trump_suit]
    all_trumps: list[Card] = [c for p in players for c in p.tricks_won if c.suit == trump_suit]
    points = 0
    if all_trumps:
        high = max(all_trumps, key=lambda c: c.rank)
        low = min(all_trumps, key=lambda c: c.rank)
        points += high in team_trumps
        points += low in team_trumps
    if any(c.rank == Rank.JACK for c in team_trumps):
        points += 1
    if any(c.rank == Rank.FIVE for c in team_trumps):
        points += 5
    return points


def _bid_in_danger(gs: GameState) -> float:
    if not gs.bidder_id or gs.high_bid <= 0 or gs.trump_suit is None:
        return 0.0
    if gs.phase not in _PLAY_PHASES:
        return 0.0
    team = team_of(gs, gs.bidder_id)
    if team is None:
        return 0.0
    estimated = estimate_running_points(gs.players, team.id, gs.trump_suit)
    progress = _progress(gs.trick_number)
    expected = gs.high_bid * progress
    if estimated >= expected:
        return 0.0
    deficit = (expected - estimated) / gs.high_bid
    return float(np.clip(deficit * progress, 0.0, 1.0))


def _desperation(gs: GameState) -> float:
    if not gs.bidder_id or gs.high_bid <= 0:
        return 0.0
    team = team_of(gs, gs.bidder_id)
    if team is None:
        return 0.0
    other = max((t.score for t in gs.teams if t.id != team.id), default=team.score)
    if team.score >= other:
        return 0.0
    trailing_gap = (other - team.score) / gs.target_score
    aggression = (gs.high_bid - MIN_BID) / (MAX_BID - MIN_BID)
    return float(np.clip(trailing_gap * aggression, 0.0, 1.0))


def tension_signals(gs: GameState) -> np.ndarray:
    """The six raw signals, in TensionWeights field order."""
    target = gs.target_score
    scores = [t.score for t in gs.teams]
    s1, s2 = (scores + [0, 0])[:2]

    max_score = max(s1, s2, 1)
    closeness = 1 - min(abs(s1 - s2) / target, 1)
    depth = min(max_score / target, 1)

    can_win = [s >= target - MAX_ROUND_POINTS for s in (s1, s2)]
    match_point = 1.0 if all(can_win) else 0.6 if any(can_win) else 0.0

    bid_height = min((gs.high_bid - MIN_BID) / (MAX_BID - MIN_BID), 1.0) if gs.high_bid > 0 else 0.0

    return np.array([
        closeness * depth,
        match_point,
        max(bid_height, 0.0),
        _progress(gs.trick_number),
        _bid_in_danger(gs),
        _desperation(gs),
    ])


def compute_tension(gs: GameState, weights: TensionWeights = DEFAULT_WEIGHTS) -> float:
    """Tension in [0, 1]; 0 outside active-round phases (setup, dealer-draw, dealing)."""
    if gs.phase not in ACTIVE_PHASES:
        return 0.0
    raw = float(np.dot(weights.vector(), tension_signals(gs)))
    return float(np.clip(max(raw, 0.0) ** weights.power_curve, 0.0, 1.0))
