"""
Seat policies and the generic agent interface.

An agent is asked for an action only when its seat is to act in a turn-gated phase (bidding,
trump selection, trump discard, play). It must return a legal action. Control steps such as
dealing or continuing are the caller's job.

The ``Agent`` protocol: ``act(state) -> Action``.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Protocol

from .actions import Action, Bid, DiscardTrump, PlayCard, SelectTrump
from .bidding import PASS, legal_bids, was_forced_bid
from .cpu import get_cpu_bid, get_cpu_card_to_play, get_cpu_trump_choice, get_cpu_trump_to_discard
from .deck import Suit, cards_of_suit
from .play import legal_plays
from .state import GameState, Phase


class Agent(Protocol):
    """Decision policy for one seat."""

    def act(self, state: GameState) -> Action:
        """Choose a legal action for ``state.current_player``."""


def legal_actions(state: GameState) -> List[Action]:
    """Every legal action for the seat to act in a turn-gated phase."""
    player = state.current_player
    if state.phase == Phase.BIDDING:
        return [Bid(b) for b in legal_bids(state)]
    if state.phase == Phase.TRUMP_SELECTION:
        return [SelectTrump(s) for s in Suit]
    if state.phase == Phase.DISCARD_TRUMP:
        return [DiscardTrump(c) for c in cards_of_suit(player.hand, state.trump_suit)]
    if state.phase == Phase.PLAYING:
        return [PlayCard(c) for c in legal_plays(player.hand, state.current_trick, state.trump_suit)]
    return []


@dataclass
class RandomAgent:
    """
    Baseline policy that samples uniformly among legal actions.

    Usage:
        agent = RandomAgent(seed=42)
        action = agent.act(state)
    """

    seed: int | None = None

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)

    def act(self, state: GameState) -> Action:
        options = legal_actions(state)
        if not options:
            raise ValueError(f"No legal actions for RandomAgent in phase {state.phase.value}")
        return self._rng.choice(options)


@dataclass
class HeuristicAgent:
    """CPU seat driven by the heuristics in ``catchfive.cpu``."""

    seed: int | None = None

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)

    def act(self, state: GameState) -> Action:
        player = state.current_player
        if state.phase == Phase.BIDDING:
            is_dealer = state.current_player_index == state.dealer_index
            all_others_passed = sum(1 for p in state.players if p.bid == PASS) == 3
            return Bid(get_cpu_bid(player.hand, state.high_bid, is_dealer, all_others_passed, self._rng))
        if state.phase == Phase.TRUMP_SELECTION:
            return SelectTrump(get_cpu_trump_choice(player.hand, was_forced_bid(state), self._rng))
        if state.phase == Phase.DISCARD_TRUMP:
            return DiscardTrump(get_cpu_trump_to_discard(player.hand, state.trump_suit))
        if state.phase == Phase.PLAYING:
            return PlayCard(
                get_cpu_card_to_play(
                    player.hand,
                    state.current_trick,
                    state.trump_suit,
                    player.id,
                    [p.id for p in state.players],
                    state.bidder_id,
                )
            )
        raise ValueError(f"HeuristicAgent cannot act in phase {state.phase.value}")


__all__ = ["Agent", "HeuristicAgent", "RandomAgent", "legal_actions"]
