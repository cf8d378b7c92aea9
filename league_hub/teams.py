import streamlit as st
from typing import Dict, List


class TeamsModule:

    def build(self, state) -> List[Dict]:
        """One card per team, in league order"""
        return [{
            'name': team.name,
            'manager': team.manager,
            'record': team.record,
            'points_for': team.points_for,
            'points_against': team.points_against
        } for team in state.league.teams]

    def render(self, state):
        st.header("Teams & Managers")

        cards = self.build(state)
        columns = st.columns(3)

        for i, card in enumerate(cards):
            with columns[i % 3]:
                with st.container(border=True):
                    st.subheader(card['name'])
                    st.markdown(f"Manager: **{card['manager']}**")
                    st.caption(f"Record: {card['record']}")
                    st.caption(f"Points For: {card['points_for']}, Points Against: {card['points_against']}")
