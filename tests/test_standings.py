"""
Tests for the static league views: standings ordering, schedule, teams.
"""
from pathlib import Path

import pytest

import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from league_hub.league_data import DEFAULT_LEAGUE, Game, LeagueSnapshot, TeamStanding
from league_hub.router import ViewState
from league_hub.schedule import ScheduleModule
from league_hub.standings import StandingsModule, rank_teams
from league_hub.teams import TeamsModule


@pytest.fixture
def state():
    return ViewState(league=DEFAULT_LEAGUE)


def test_rank_teams_wins_then_points_for():
    teams = [
        TeamStanding(1, "A", "Alice", wins=1, points_for=120),
        TeamStanding(2, "B", "Bob", wins=0, points_for=95),
        TeamStanding(3, "C", "Charlie", wins=1, points_for=115),
        TeamStanding(4, "D", "Diana", wins=0, points_for=88),
    ]
    assert [team.name for team in rank_teams(teams)] == ["A", "C", "B", "D"]


def test_rank_teams_is_stable_for_full_ties():
    teams = [
        TeamStanding(1, "First", "x", wins=2, points_for=100),
        TeamStanding(2, "Second", "y", wins=2, points_for=100),
        TeamStanding(3, "Third", "z", wins=3, points_for=50),
    ]
    assert [team.name for team in rank_teams(teams)] == ["Third", "First", "Second"]


def test_rank_teams_does_not_mutate_input():
    teams = list(DEFAULT_LEAGUE.teams)
    rank_teams(teams)
    assert teams == list(DEFAULT_LEAGUE.teams)


def test_standings_table(state):
    df = StandingsModule().build(state)
    assert list(df.columns) == ['Rank', 'Team Name', 'Manager', 'W', 'L', 'T', 'PF', 'PA']
    assert df['Team Name'].tolist() == ["Team A", "Team C", "Team B", "Team D"]
    assert df['Rank'].tolist() == [1, 2, 3, 4]
    assert df.iloc[0]['Manager'] == "Alice"


def test_standings_table_empty_league():
    df = StandingsModule().build(ViewState(league=LeagueSnapshot(name="Empty", current_week=1)))
    assert df.empty
    assert 'Team Name' in df.columns


def test_schedule_table(state):
    df = ScheduleModule().build(state)
    assert len(df) == 2
    first = df.iloc[0]
    assert (first['Home Team'], first['Home Score'], first['Away Team'], first['Away Score']) == \
        ("Team A", 120, "Team B", 95)


def test_team_cards(state):
    cards = TeamsModule().build(state)
    assert [card['name'] for card in cards] == ["Team A", "Team B", "Team C", "Team D"]
    assert cards[0]['record'] == "1-0-0"
    assert cards[1]['points_against'] == 110


def test_schedule_must_reference_known_teams():
    with pytest.raises(ValueError, match="Team Z"):
        LeagueSnapshot(
            name="Broken",
            current_week=1,
            teams=[TeamStanding(1, "Team A", "Alice")],
            schedule=[Game(week=1, home_team="Team A", away_team="Team Z", home_score=0, away_score=0)]
        )


def test_games_in_week():
    assert len(DEFAULT_LEAGUE.games_in_week(1)) == 2
    assert DEFAULT_LEAGUE.games_in_week(2) == []
