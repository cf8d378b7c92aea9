import streamlit as st
import pandas as pd


class ScheduleModule:

    def build(self, state) -> pd.DataFrame:
        rows = [{
            'Week': game.week,
            'Home Team': game.home_team,
            'Home Score': game.home_score,
            'Away Team': game.away_team,
            'Away Score': game.away_score
        } for game in state.league.schedule]

        return pd.DataFrame(rows, columns=['Week', 'Home Team', 'Home Score', 'Away Team', 'Away Score'])

    def render(self, state):
        st.header("Current Schedule & Results")

        df = self.build(state)
        if df.empty:
            st.info("No games scheduled yet")
            return

        st.dataframe(df, use_container_width=True, hide_index=True)
