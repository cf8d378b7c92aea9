import streamlit as st
import pandas as pd
import plotly.express as px
from typing import Dict, List

from league_hub.schemas import TeamRecord

EXAMPLE_SEASON_DOCUMENT = """{
  "year": 2023,
  "standings": [
    { "name": "Party Ponies", "manager": "You", "wins": 10, "losses": 3, "ties": 0, "championship": true },
    { "name": "Gridiron Gurus", "manager": "Alex", "wins": 9, "losses": 4, "ties": 0, "championship": false }
  ],
  "championshipTeam": "Party Ponies"
}"""


def rank_season(standings: List[TeamRecord]) -> List[TeamRecord]:
    """Wins descending only; ties keep the order the backend delivered"""
    return sorted(standings, key=lambda team: -team.wins)


class HistoryModule:
    """Past seasons' final standings, most recent first"""

    def __init__(self, app_id: str = "default-app-id"):
        self.app_id = app_id

    def build_season_table(self, standings: List[TeamRecord]) -> pd.DataFrame:
        rows = [{
            'Rank': rank,
            'Team Name': team.name,
            'Manager': team.manager,
            'W': team.wins,
            'L': team.losses,
            'T': team.ties
        } for rank, team in enumerate(rank_season(standings), start=1)]

        return pd.DataFrame(rows, columns=['Rank', 'Team Name', 'Manager', 'W', 'L', 'T'])

    def build_all_time_wins(self, seasons) -> pd.DataFrame:
        """Total wins and titles per manager across every season"""
        rows = []
        for season in seasons:
            for team in season.standings:
                rows.append({
                    'Manager': team.manager or team.name,
                    'Wins': team.wins,
                    'Titles': int(team.championship)
                })

        if not rows:
            return pd.DataFrame(columns=['Manager', 'Wins', 'Titles'])

        df = pd.DataFrame(rows).groupby('Manager', as_index=False, sort=False).sum()
        return df.sort_values('Wins', ascending=False, kind='stable').reset_index(drop=True)

    def build(self, state) -> Dict:
        return {
            'seasons': [{
                'id': season.id,
                'year': season.year,
                'champion': season.championship_team,
                'table': self.build_season_table(season.standings)
            } for season in state.history],
            'champions': pd.DataFrame(
                [{'Year': season.year, 'Champion': season.championship_team}
                 for season in state.history if season.championship_team],
                columns=['Year', 'Champion']
            ),
            'all_time': self.build_all_time_wins(state.history)
        }

    def render_instructions(self):
        with st.expander("How to Add Historical Data"):
            st.markdown(
                "Historical standings are authored outside the dashboard. Add documents to the "
                f"`artifacts/{self.app_id}/public/data/historicalStandings` collection, either in the "
                "Firebase Console or with `python seed_history.py seasons.json`. "
                "Each document represents one year and holds an array of team objects."
            )
            st.markdown("**Example document for a year (e.g. \"2023\"):**")
            st.code(EXAMPLE_SEASON_DOCUMENT, language="json")

    def render_all_time_chart(self, df: pd.DataFrame):
        if df.empty:
            return

        fig = px.bar(
            df,
            x='Manager',
            y='Wins',
            text='Wins',
            hover_data=['Titles'],
            title='All-Time Wins by Manager'
        )
        fig.update_layout(height=400)

        st.plotly_chart(fig, use_container_width=True)

    def render(self, state):
        st.header("League History (Past Standings)")
        self.render_instructions()

        model = self.build(state)
        if not model['seasons']:
            st.info("No historical standings found. Add some via the Firebase Console!")
            return

        if not model['champions'].empty:
            st.subheader("Champions")
            st.dataframe(model['champions'], use_container_width=True, hide_index=True)

        self.render_all_time_chart(model['all_time'])

        for season in model['seasons']:
            st.markdown("---")
            title = f"{season['year']} Season"
            if season['champion']:
                title += f" · Champion: {season['champion']}"
            st.subheader(title)
            st.dataframe(season['table'], use_container_width=True, hide_index=True)
