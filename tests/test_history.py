"""
Tests for the league history view.
"""
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from league_hub.history import HistoryModule, rank_season
from league_hub.league_data import DEFAULT_LEAGUE
from league_hub.router import ViewState
from league_hub.schemas import HistoricalSeason, TeamRecord


def _season(doc_id, data):
    return HistoricalSeason.from_document(doc_id, data)


def test_season_sorted_by_wins_only_keeping_backend_order_on_ties():
    standings = [
        TeamRecord("Low", "a", wins=3),
        TeamRecord("TiedFirst", "b", wins=8),
        TeamRecord("TiedSecond", "c", wins=8),
        TeamRecord("Top", "d", wins=11),
    ]
    assert [team.name for team in rank_season(standings)] == ["Top", "TiedFirst", "TiedSecond", "Low"]


def test_missing_ties_renders_as_zero():
    season = _season("2020", {
        'year': 2020,
        'standings': [{'name': "Ponies", 'manager': "You", 'wins': 9, 'losses': 4}],
    })
    table = HistoryModule().build_season_table(season.standings)
    assert table.iloc[0]['T'] == 0


def test_build_lists_seasons_with_champions():
    seasons = [
        _season("2023", {'year': 2023, 'championshipTeam': "Ponies", 'standings': [
            {'name': "Gurus", 'manager': "Alex", 'wins': 9, 'losses': 4},
            {'name': "Ponies", 'manager': "You", 'wins': 10, 'losses': 3, 'championship': True},
        ]}),
        _season("2022", {'year': 2022, 'standings': [
            {'name': "Gurus", 'manager': "Alex", 'wins': 11, 'losses': 2},
        ]}),
    ]
    model = HistoryModule().build(ViewState(league=DEFAULT_LEAGUE, history=seasons))

    assert [season['year'] for season in model['seasons']] == [2023, 2022]
    assert model['seasons'][0]['champion'] == "Ponies"
    assert model['seasons'][0]['table']['Team Name'].tolist() == ["Ponies", "Gurus"]
    assert model['seasons'][1]['champion'] is None
    assert model['champions'].to_dict('records') == [{'Year': 2023, 'Champion': "Ponies"}]


def test_all_time_wins_by_manager():
    seasons = [
        _season("2023", {'year': 2023, 'standings': [
            {'name': "Ponies", 'manager': "You", 'wins': 10, 'championship': True},
            {'name': "Gurus", 'manager': "Alex", 'wins': 9},
        ]}),
        _season("2022", {'year': 2022, 'standings': [
            {'name': "Gurus", 'manager': "Alex", 'wins': 11, 'championship': True},
            {'name': "Ponies", 'manager': "You", 'wins': 7},
        ]}),
    ]
    df = HistoryModule().build_all_time_wins(seasons)
    assert df.to_dict('records') == [
        {'Manager': "Alex", 'Wins': 20, 'Titles': 1},
        {'Manager': "You", 'Wins': 17, 'Titles': 1},
    ]


def test_empty_history():
    model = HistoryModule().build(ViewState(league=DEFAULT_LEAGUE))
    assert model['seasons'] == []
    assert model['champions'].empty
    assert model['all_time'].empty
