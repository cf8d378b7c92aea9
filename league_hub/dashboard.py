import streamlit as st
from typing import Callable, Dict

LATEST_NEWS_COUNT = 3


def format_date(timestamp) -> str:
    return timestamp.strftime('%m/%d/%Y') if timestamp else 'N/A'


class DashboardModule:
    """League overview: headline numbers and the most recent news"""

    def __init__(self, on_view_all_news: Callable[[], None] = None):
        self.on_view_all_news = on_view_all_news

    def build(self, state) -> Dict:
        league = state.league
        return {
            'current_week': league.current_week,
            'total_teams': len(league.teams),
            'games_this_week': len(league.games_in_week(league.current_week)),
            'latest_news': [{
                'id': item.id,
                'title': item.title,
                'content': item.content,
                'date': format_date(item.created_at)
            } for item in state.news[:LATEST_NEWS_COUNT]],
            'more_news': len(state.news) > LATEST_NEWS_COUNT
        }

    def render(self, state):
        st.header("League Dashboard")

        model = self.build(state)

        col1, col2, col3 = st.columns(3)
        with col1:
            st.metric("Current Week", model['current_week'])
        with col2:
            st.metric("Total Teams", model['total_teams'])
        with col3:
            st.metric("Upcoming Games", model['games_this_week'])

        st.markdown("---")
        st.subheader("Latest News & Updates")

        if not model['latest_news']:
            st.info("No news updates yet. Be the first to add one!")
            return

        for item in model['latest_news']:
            st.markdown(f"- **{item['title']}:** {item['content']} ({item['date']})")

        if model['more_news']:
            st.button("View all news...", key="view_all_news", on_click=self.on_view_all_news)
