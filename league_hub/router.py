import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from league_hub.league_data import LeagueSnapshot
from league_hub.schemas import ConstitutionDocument, HistoricalSeason, NewsItem, display_constitution

logger = logging.getLogger(__name__)

# Tab id -> navigation label, in display order
TABS: Dict[str, str] = {
    'dashboard': "Dashboard",
    'standings': "Current Standings",
    'schedule': "Current Schedule",
    'teams': "Teams & Managers",
    'news': "League News",
    'history': "League History",
    'constitution': "Constitution",
}

DEFAULT_TAB = 'dashboard'


@dataclass(frozen=True)
class ViewState:
    """Everything a view may read: the static league plus the latest feed snapshots"""
    league: LeagueSnapshot
    news: List[NewsItem] = field(default_factory=list)
    history: List[HistoricalSeason] = field(default_factory=list)
    constitution: Optional[ConstitutionDocument] = None
    constitution_loaded: bool = True
    user_id: Optional[str] = None

    @property
    def constitution_text(self) -> str:
        if not self.constitution_loaded:
            return ""
        return display_constitution(self.constitution)

    @classmethod
    def from_session(cls, league: LeagueSnapshot, session) -> "ViewState":
        feeds = session.feeds
        return cls(
            league=league,
            news=list(feeds.news),
            history=list(feeds.history),
            constitution=feeds.constitution,
            constitution_loaded=feeds.constitution_loaded,
            user_id=session.user_id
        )


class ViewRouter:
    """
    Maps the selected tab to its view module.

    The active tab only changes through select(); building or rendering a
    view never changes it.
    """

    def __init__(self, modules: Dict[str, object], initial: str = DEFAULT_TAB):
        missing = [tab for tab in TABS if tab not in modules]
        if missing:
            raise ValueError(f"No view registered for: {', '.join(missing)}")
        self.modules = modules
        self.active_tab = initial if initial in TABS else DEFAULT_TAB

    def select(self, tab: str) -> str:
        if tab not in TABS:
            logger.warning(f"Unknown tab {tab!r}, showing {DEFAULT_TAB}")
            tab = DEFAULT_TAB
        self.active_tab = tab
        return tab

    @property
    def label(self) -> str:
        return TABS[self.active_tab]

    def build(self, state: ViewState, tab: str = None):
        """View model for a tab (the active one by default)"""
        return self.modules[tab or self.active_tab].build(state)

    def render(self, state: ViewState):
        self.modules[self.active_tab].render(state)
