"""Catch Five rules engine (4 players, 2 partnerships, bid and capture trump points)."""

__version__ = "0.1.0"

from .deck import Card, DeckColor, Rank, Suit, make_deck, shuffle_deck
from .errors import GameException, InvalidAction, InvariantViolation, NotYourTurn
from .state import GameState, Phase, Player, Team, TrickCard
from .play import can_play_card, legal_plays, trick_winner
from .scoring import RoundScoreDetails, apply_set_penalty, calculate_round_scores
from .bidding import MAX_BID, MIN_BID, process_bid
from .deal import deal_cards, discard_trump_card, finalize_dealer_draw, perform_purge_and_draw, start_dealer_draw
from .game import (
    apply_auto_claim,
    check_auto_claim,
    check_game_over,
    continue_game,
    get_winning_team,
    initialize_game,
    is_players_turn,
    play_card,
    select_trump,
    sort_hand,
    start_new_round,
    validate_no_duplicates,
)
from .cpu import get_cpu_bid, get_cpu_card_to_play, get_cpu_trump_choice, get_cpu_trump_to_discard
from .tension import TensionWeights, compute_tension
from .actions import apply_action, parse_action
