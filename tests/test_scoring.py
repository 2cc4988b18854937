"""Tests for round scoring and the set penalty."""
from catchfive.deck import Rank, Suit, make_card
from catchfive.scoring import MAX_ROUND_POINTS, apply_set_penalty, bid_made, calculate_round_scores
from catchfive.state import Player, Team


def C(rank, suit):
    return make_card(rank, suit)


TEAMS = (
    Team(id="team1", name="A", player_ids=("player1", "player3")),
    Team(id="team2", name="B", player_ids=("player2", "player4")),
)


def players_with(won1=(), won2=(), won3=(), won4=()):
    return tuple(
        Player(id=f"player{i + 1}", name=f"P{i + 1}", is_human=False, team_id="team1" if i % 2 == 0 else "team2",
               tricks_won=tuple(w))
        for i, w in enumerate((won1, won2, won3, won4))
    )


def test_worked_example():
    # Hearts trump. Team1 takes A, J of trump and the most game; team2 takes 2 and 5 of trump.
    won1 = [C(Rank.ACE, Suit.HEARTS), C(Rank.JACK, Suit.HEARTS), C(Rank.TEN, Suit.CLUBS), C(Rank.TEN, Suit.SPADES)]
    won2 = [C(Rank.TWO, Suit.HEARTS), C(Rank.FIVE, Suit.HEARTS), C(Rank.KING, Suit.CLUBS)]
    details = calculate_round_scores(players_with(won1, won2), TEAMS, Suit.HEARTS)
    assert details.high == "team1"
    assert details.low == "team2"
    assert details.jack == "team1"
    assert details.five == "team2"
    assert details.game == "team1"
    assert details.team_points == {"team1": 3, "team2": 6}
    assert details.game_counts == {"team1": 25, "team2": 3}


def test_game_tie_awards_nobody():
    won1 = [C(Rank.TEN, Suit.CLUBS), C(Rank.ACE, Suit.HEARTS)]
    won2 = [C(Rank.TEN, Suit.SPADES), C(Rank.ACE, Suit.CLUBS)]
    details = calculate_round_scores(players_with(won1, won2), TEAMS, Suit.HEARTS)
    assert details.game is None
    # team1 holds the only trump: High and Low together
    assert details.team_points == {"team1": 2, "team2": 0}


def test_uncaptured_points_award_nothing():
    details = calculate_round_scores(players_with(), TEAMS, Suit.DIAMONDS)
    assert details.high is None and details.low is None and details.jack is None and details.five is None
    assert details.team_points == {"team1": 0, "team2": 0}


def test_partners_pool_captures():
    won1 = [C(Rank.JACK, Suit.SPADES)]
    won3 = [C(Rank.FIVE, Suit.SPADES)]
    details = calculate_round_scores(players_with(won1=won1, won3=won3), TEAMS, Suit.SPADES)
    assert details.team_points["team1"] == 1 + 1 + 1 + 5 + 1


def test_max_round_points():
    assert MAX_ROUND_POINTS == 9
    every_card = [make_card(r, s) for s in Suit for r in Rank]
    details = calculate_round_scores(players_with(won2=every_card), TEAMS, Suit.CLUBS)
    assert details.team_points == {"team1": 0, "team2": MAX_ROUND_POINTS}


def test_set_penalty_replaces_earned_points():
    deltas = apply_set_penalty({"team1": 4, "team2": 5}, "team1", 7)
    assert deltas == {"team1": -7, "team2": 5}


def test_made_bid_keeps_points():
    deltas = apply_set_penalty({"team1": 7, "team2": 2}, "team1", 7)
    assert deltas == {"team1": 7, "team2": 2}
    assert bid_made({"team1": 7}, "team1", 7)
    assert not bid_made({"team1": 6}, "team1", 7)


def test_spades_example():
    won1 = [C(Rank.ACE, Suit.SPADES), C(Rank.JACK, Suit.SPADES), C(Rank.TEN, Suit.DIAMONDS)]
    won2 = [C(Rank.TWO, Suit.SPADES), C(Rank.FIVE, Suit.SPADES)]
    details = calculate_round_scores(players_with(won1, won2), TEAMS, Suit.SPADES)
    assert details.team_points == {"team1": 3, "team2": 6}
