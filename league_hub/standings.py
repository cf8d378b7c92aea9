import streamlit as st
import pandas as pd
import plotly.graph_objects as go
from typing import List

from league_hub.league_data import TeamStanding


def rank_teams(teams: List[TeamStanding]) -> List[TeamStanding]:
    """Wins descending, then points for descending; equal teams keep their order"""
    return sorted(teams, key=lambda team: (-team.wins, -team.points_for))


class StandingsModule:

    def build(self, state) -> pd.DataFrame:
        """Current standings table, ranked"""
        rows = []
        for rank, team in enumerate(rank_teams(state.league.teams), start=1):
            rows.append({
                'Rank': rank,
                'Team Name': team.name,
                'Manager': team.manager,
                'W': team.wins,
                'L': team.losses,
                'T': team.ties,
                'PF': team.points_for,
                'PA': team.points_against
            })

        return pd.DataFrame(rows, columns=['Rank', 'Team Name', 'Manager', 'W', 'L', 'T', 'PF', 'PA'])

    def render_points_chart(self, df: pd.DataFrame):
        """Points for vs points against, in standings order"""
        fig = go.Figure()

        fig.add_trace(go.Bar(
            name='Points For',
            x=df['Team Name'],
            y=df['PF'],
            marker_color='lightblue',
            text=df['PF'],
            textposition='auto'
        ))

        fig.add_trace(go.Bar(
            name='Points Against',
            x=df['Team Name'],
            y=df['PA'],
            marker_color='orange',
            text=df['PA'],
            textposition='auto'
        ))

        fig.update_layout(
            height=400,
            title="Points For vs Points Against",
            xaxis_title="Team",
            yaxis_title="Points",
            barmode='group'
        )

        st.plotly_chart(fig, use_container_width=True)

    def render(self, state):
        st.header("Current League Standings")

        df = self.build(state)
        if df.empty:
            st.warning("No standings data available")
            return

        st.dataframe(df, use_container_width=True, hide_index=True)

        st.markdown("---")
        self.render_points_chart(df)
