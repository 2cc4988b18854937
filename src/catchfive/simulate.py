"""
Headless game runner: four agents play one full game to the target score.

Usage (from project root, after installing in editable mode):
    python -m catchfive.cli simulate --games 10 --seed 42
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .actions import ClaimRemainingTricks, Continue, FinalizeDealerDraw, PurgeDrawComplete, StartGame, apply_action
from .agents import Agent, HeuristicAgent
from .config import GameConfig
from .game import check_auto_claim, get_winning_team
from .scoring import bid_made
from .state import NUM_SEATS, GameState, Phase, seat_of, team_of
from .tension import compute_tension

logger = logging.getLogger(__name__)

# Upper bound on transitions per round (bids, trump, discards, 24 plays, control steps).
_MAX_STEPS_PER_ROUND = 200


@dataclass
class RoundSummary:
    dealer_index: int
    bidder_id: Optional[str]
    high_bid: int
    trump: Optional[str]
    points: Dict[str, int]
    made: bool
    auto_claimed: bool


@dataclass
class GameResult:
    winner_team_id: Optional[str]
    scores: Dict[str, int]
    rounds: List[RoundSummary] = field(default_factory=list)
    max_tension: float = 0.0
    final_state: Optional[GameState] = None

    @property
    def num_rounds(self) -> int:
        return len(self.rounds)

    @property
    def sets(self) -> int:
        return sum(1 for r in self.rounds if not r.made)


def _summarize_round(state: GameState) -> RoundSummary:
    team = team_of(state, state.bidder_id)
    made = team is not None and bid_made(state.round_scores, team.id, state.high_bid)
    return RoundSummary(
        dealer_index=state.dealer_index,
        bidder_id=state.bidder_id,
        high_bid=state.high_bid,
        trump=state.trump_suit.label if state.trump_suit is not None else None,
        points=dict(state.round_scores),
        made=made,
        auto_claimed=state.auto_claimer_id is not None,
    )


def _next_action(state: GameState, agents: Sequence[Agent]):
    """(action, seat) for the next transition of an all-agent table."""
    if state.phase == Phase.PURGE_DRAW:
        return PurgeDrawComplete(), None
    if state.phase == Phase.PLAYING and not state.current_trick:
        claim = check_auto_claim(state.players, state.trump_suit, state.stock)
        if claim is not None:
            return ClaimRemainingTricks(), seat_of(state, claim.claimer_id)
    return agents[state.current_player_index].act(state), state.current_player_index


def run_game(
    agents: Sequence[Agent] | None = None,
    config: GameConfig | None = None,
    seed: int | None = None,
    validate: bool = False,
) -> GameResult:
    """
    Play one game with ``agents`` (default: four HeuristicAgents) and return the result.

    ``seed`` overrides ``config.seed``. With ``validate`` every transition is followed by the
    card-conservation check, which raises InvariantViolation on failure.
    """
    cfg = config or GameConfig()
    seed = cfg.seed if seed is None else seed
    rng = random.Random(seed)
    if agents is None:
        agents = [HeuristicAgent(seed=rng.randrange(2**31)) for _ in range(NUM_SEATS)]
    if len(agents) != NUM_SEATS:
        raise ValueError(f"Expected {NUM_SEATS} agents, got {len(agents)}")

    state = cfg.new_game()
    state = apply_action(state, StartGame(), rng=rng, check_invariants=validate)
    state = apply_action(state, FinalizeDealerDraw(), rng=rng, check_invariants=validate)

    result = GameResult(winner_team_id=None, scores={})
    steps = 0
    while state.phase != Phase.GAME_OVER:
        if state.phase == Phase.SCORING:
            result.rounds.append(_summarize_round(state))
            if result.num_rounds >= cfg.max_rounds:
                logger.warning("Stopping after %d rounds without a winner", result.num_rounds)
                break
            state = apply_action(state, Continue(), rng=rng, check_invariants=validate)
            steps = 0
            continue

        steps += 1
        if steps > _MAX_STEPS_PER_ROUND:
            raise RuntimeError(f"Round did not finish within {_MAX_STEPS_PER_ROUND} steps (phase {state.phase.value})")
        action, seat = _next_action(state, agents)
        state = apply_action(state, action, seat=seat, rng=rng, check_invariants=validate)
        result.max_tension = max(result.max_tension, compute_tension(state))

    if state.phase == Phase.GAME_OVER:
        result.rounds.append(_summarize_round(state))
    winner = get_winning_team(state)
    result.winner_team_id = winner.id if winner else None
    result.scores = {t.id: t.score for t in state.teams}
    result.final_state = state
    logger.info("Game over after %d rounds: %s, winner %s", result.num_rounds, result.scores, result.winner_team_id)
    return result


__all__ = ["GameResult", "RoundSummary", "run_game"]
