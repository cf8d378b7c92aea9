import streamlit as st
import atexit
import logging

from league_hub.config import DashboardConfig
from league_hub.constitution import ConstitutionModule
from league_hub.dashboard import DashboardModule
from league_hub.errors import ConfigError
from league_hub.history import HistoryModule
from league_hub.league_data import DEFAULT_LEAGUE, LeagueSnapshot
from league_hub.mutations import ConstitutionEditor, NewsComposer
from league_hub.news import NewsModule
from league_hub.router import DEFAULT_TAB, TABS, ViewRouter, ViewState
from league_hub.schedule import ScheduleModule
from league_hub.session import LeagueSession
from league_hub.standings import StandingsModule
from league_hub.teams import TeamsModule

# Page configuration
st.set_page_config(
    page_title=DEFAULT_LEAGUE.name,
    page_icon="🏈",
    layout="wide",
    initial_sidebar_state="expanded"
)

logger = logging.getLogger(__name__)


def configure_logging(config: DashboardConfig):
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(config.log_file),
            logging.StreamHandler()
        ]
    )


def load_config() -> DashboardConfig:
    """Read the [league_hub] table from Streamlit secrets"""
    try:
        raw = st.secrets.get("league_hub", {})
    except FileNotFoundError:
        raw = {}
    return DashboardConfig.from_mapping(raw)


@st.cache_resource(show_spinner="Connecting to the league backend...")
def get_league_session(config: DashboardConfig) -> LeagueSession:
    """One backend session per server process, released at exit"""
    configure_logging(config)
    session = LeagueSession(config).start()
    atexit.register(session.close)
    logger.info(f"League session started for app {config.app_id} (ready={session.ready})")
    return session


def show_news_tab():
    st.session_state.active_tab = 'news'


class LeagueDashboard:
    def __init__(self, session: LeagueSession, league: LeagueSnapshot = DEFAULT_LEAGUE):
        self.session = session
        self.league = league
        self.init_session_state()

        self.router = ViewRouter({
            'dashboard': DashboardModule(on_view_all_news=show_news_tab),
            'standings': StandingsModule(),
            'schedule': ScheduleModule(),
            'teams': TeamsModule(),
            'news': NewsModule(st.session_state.news_composer),
            'history': HistoryModule(session.config.app_id),
            'constitution': ConstitutionModule(st.session_state.constitution_editor),
        }, initial=st.session_state.active_tab)

    def init_session_state(self):
        """Initialize per-browser-session state"""
        if 'active_tab' not in st.session_state:
            st.session_state.active_tab = DEFAULT_TAB
        if 'news_composer' not in st.session_state:
            st.session_state.news_composer = NewsComposer(self.session)
        if 'constitution_editor' not in st.session_state:
            st.session_state.constitution_editor = ConstitutionEditor(self.session)

    def render_sidebar(self) -> str:
        """Render navigation and session info, return the selected tab"""
        st.sidebar.title(f"🏈 {self.league.name}")

        selected = st.sidebar.radio(
            "Navigate",
            list(TABS),
            format_func=TABS.get,
            key="active_tab"
        )

        with st.sidebar.expander("📊 Session Info"):
            mode = "Local (in-memory)" if self.session.config.local_mode else "Firebase"
            st.info(f"**Backend**: {mode}")
            st.info(f"**App ID**: {self.session.config.app_id}")
            if self.session.ready:
                st.success(f"**User**: {self.session.user_id}")
                feeds = self.session.feeds
                st.info(f"**News items**: {len(feeds.news)}")
                st.info(f"**Seasons**: {len(feeds.history)}")
            else:
                st.warning("Not signed in")

        st.sidebar.button("🔄 Refresh", help="Re-render with the latest live data")

        return selected

    def render_header(self):
        st.title(f"🏈 {self.league.name}")
        st.caption(f"Week {self.league.current_week}")

        if not self.session.ready:
            st.warning(
                "Not connected to the league backend. News, history and the constitution "
                "show their last known state and cannot be edited."
            )

    def run(self):
        """Main dashboard execution"""
        self.session.feeds.check()
        selected = self.render_sidebar()
        self.router.select(selected)

        self.render_header()

        state = ViewState.from_session(self.league, self.session)
        self.router.render(state)


def main():
    """Main entry point"""
    try:
        config = load_config()
    except ConfigError as e:
        st.error(f"🚨 Invalid configuration in `.streamlit/secrets.toml`: {e}")
        st.stop()

    session = get_league_session(config)
    dashboard = LeagueDashboard(session)
    dashboard.run()


if __name__ == "__main__":
    main()
