import streamlit as st
from typing import Dict

from league_hub.mutations import NewsComposer

TITLE_KEY = "news_title"
CONTENT_KEY = "news_content"


def format_timestamp(timestamp) -> str:
    return timestamp.strftime('%m/%d/%Y %I:%M %p') if timestamp else 'N/A'


class NewsModule:
    """League news feed with a composer for new items"""

    def __init__(self, composer: NewsComposer):
        self.composer = composer

    def build(self, state) -> Dict:
        return {
            'user_id': state.user_id,
            'items': [{
                'id': item.id,
                'title': item.title,
                'content': item.content,
                'published': format_timestamp(item.created_at)
            } for item in state.news]
        }

    def _sync_draft(self):
        self.composer.title = st.session_state.get(TITLE_KEY, "")
        self.composer.content = st.session_state.get(CONTENT_KEY, "")

    def _publish(self):
        """Button callback: copy the widgets into the draft, publish, write the draft back"""
        self._sync_draft()
        self.composer.publish()
        st.session_state[TITLE_KEY] = self.composer.title
        st.session_state[CONTENT_KEY] = self.composer.content

    def render_composer(self):
        # The draft outlives the widgets, which lose their keys when another tab is shown
        if TITLE_KEY not in st.session_state:
            st.session_state[TITLE_KEY] = self.composer.title
        if CONTENT_KEY not in st.session_state:
            st.session_state[CONTENT_KEY] = self.composer.content

        with st.container(border=True):
            st.subheader("Add New News Item")
            st.text_input("News Title", key=TITLE_KEY, placeholder="News Title",
                          on_change=self._sync_draft)
            st.text_area("News Content", key=CONTENT_KEY, placeholder="News Content", height=120,
                         on_change=self._sync_draft)
            st.button("Publish News", key="publish_news", on_click=self._publish,
                      use_container_width=True, type="primary")

    def render(self, state):
        st.header("League News & Updates")

        model = self.build(state)
        if model['user_id']:
            st.caption(f"Current User ID: `{model['user_id']}`")

        self.render_composer()

        st.markdown("---")
        if not model['items']:
            st.info("No news items found. Add one above!")
            return

        for item in model['items']:
            with st.container(border=True):
                st.subheader(item['title'])
                st.write(item['content'])
                st.caption(f"Published: {item['published']}")
