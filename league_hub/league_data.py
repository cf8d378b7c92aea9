from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class TeamStanding:
    id: int
    name: str
    manager: str
    wins: int = 0
    losses: int = 0
    ties: int = 0
    points_for: float = 0
    points_against: float = 0

    @property
    def record(self) -> str:
        return f"{self.wins}-{self.losses}-{self.ties}"


@dataclass(frozen=True)
class Game:
    week: int
    home_team: str
    away_team: str
    home_score: float
    away_score: float


@dataclass(frozen=True)
class LeagueSnapshot:
    """Current-season league data. Not persisted and not editable from the UI."""
    name: str
    current_week: int
    teams: List[TeamStanding] = field(default_factory=list)
    schedule: List[Game] = field(default_factory=list)

    def __post_init__(self):
        team_names = {team.name for team in self.teams}
        for game in self.schedule:
            unknown = {game.home_team, game.away_team} - team_names
            if unknown:
                raise ValueError(
                    f"Week {game.week} game references unknown team(s): {', '.join(sorted(unknown))}"
                )

    def games_in_week(self, week: int) -> List[Game]:
        return [game for game in self.schedule if game.week == week]


DEFAULT_LEAGUE = LeagueSnapshot(
    name="Party Ponies FF League",
    current_week=1,
    teams=[
        TeamStanding(1, "Team A", "Alice", wins=1, losses=0, ties=0, points_for=120, points_against=90),
        TeamStanding(2, "Team B", "Bob", wins=0, losses=1, ties=0, points_for=95, points_against=110),
        TeamStanding(3, "Team C", "Charlie", wins=1, losses=0, ties=0, points_for=115, points_against=85),
        TeamStanding(4, "Team D", "Diana", wins=0, losses=1, ties=0, points_for=88, points_against=105),
    ],
    schedule=[
        Game(week=1, home_team="Team A", away_team="Team B", home_score=120, away_score=95),
        Game(week=1, home_team="Team C", away_team="Team D", home_score=115, away_score=88),
    ]
)
