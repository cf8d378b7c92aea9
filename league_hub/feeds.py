import logging
from typing import Callable, List, Optional, Tuple

from league_hub.errors import SubscriptionError
from league_hub.schemas import ConstitutionDocument, HistoricalSeason, NewsItem, display_constitution
from league_hub.store import LeagueStore, Subscription

logger = logging.getLogger(__name__)


class LeagueFeeds:
    """
    Live read-through caches for news, historical standings and the constitution.

    Each feed owns its own attribute and replaces it wholesale on every
    delivery. A failed delivery is logged and the previous snapshot stays.
    """

    def __init__(self):
        self.news: List[NewsItem] = []
        self.history: List[HistoricalSeason] = []
        self.constitution: Optional[ConstitutionDocument] = None
        self.constitution_loaded = False
        self._subscriptions: List[Tuple[Subscription, Callable[[Exception], None]]] = []

    @property
    def is_open(self) -> bool:
        return any(sub.active for sub, _ in self._subscriptions)

    @property
    def constitution_text(self) -> str:
        if not self.constitution_loaded:
            return ""
        return display_constitution(self.constitution)

    def open(self, store: LeagueStore):
        """Start the three live queries; a second call while open is a no-op"""
        if self.is_open:
            logger.debug("Feeds already open")
            return

        self.close()
        logger.info("Opening league feeds")
        self._subscriptions = [
            (store.watch_news(self._on_news, self._on_news_error), self._on_news_error),
            (store.watch_history(self._on_history, self._on_history_error), self._on_history_error),
            (store.watch_constitution(self._on_constitution, self._on_constitution_error),
             self._on_constitution_error),
        ]

    def check(self) -> int:
        """
        Report live queries the backend has shut down.

        Each terminated query is logged through its feed's error handler once
        and released; its feed keeps the last snapshot. Returns how many were
        found.
        """
        stopped = 0
        for subscription, on_error in self._subscriptions:
            if subscription.terminated:
                on_error(SubscriptionError(f"{subscription.name} listener stopped"))
                subscription.unsubscribe()
                stopped += 1
        return stopped

    def close(self):
        for subscription, _ in self._subscriptions:
            subscription.unsubscribe()
        if self._subscriptions:
            logger.info("Closed league feeds")
        self._subscriptions = []

    def _on_news(self, items: List[NewsItem]):
        self.news = list(items)

    def _on_history(self, seasons: List[HistoricalSeason]):
        self.history = list(seasons)

    def _on_constitution(self, document: Optional[ConstitutionDocument]):
        self.constitution = document
        self.constitution_loaded = True

    def _on_news_error(self, error: Exception):
        logger.error(f"Error fetching news: {error}")

    def _on_history_error(self, error: Exception):
        logger.error(f"Error fetching historical standings: {error}")

    def _on_constitution_error(self, error: Exception):
        logger.error(f"Error fetching constitution: {error}")
