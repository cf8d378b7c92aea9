"""
Write paths: publishing news and saving the constitution.

Both hold the user's draft. Precondition failures are logged no-ops; backend
failures are logged and leave the draft untouched so it can be retried.
"""
import logging
from typing import Optional

from league_hub.schemas import ConstitutionDocument

logger = logging.getLogger(__name__)


def _writable(session) -> bool:
    if session is None or not session.ready or session.store is None or not session.user_id:
        logger.info("Backend not initialized or user not authenticated.")
        return False
    return True


class NewsComposer:
    """Draft title/content for a new news item"""

    def __init__(self, session):
        self.session = session
        self.title = ""
        self.content = ""

    def publish(self) -> Optional[str]:
        """Append a news item; returns its id, or None when nothing was written"""
        if not self.title or not self.content:
            logger.info("Title and content cannot be empty.")
            return None
        if not _writable(self.session):
            return None

        try:
            news_id = self.session.store.add_news(self.title, self.content, self.session.user_id)
        except Exception as e:
            logger.error(f"Error adding news: {e}")
            return None

        self.title = ""
        self.content = ""
        logger.info(f"News {news_id} added successfully")
        return news_id


class ConstitutionEditor:
    """Edit-mode state and buffer for the league constitution"""

    def __init__(self, session):
        self.session = session
        self.editing = False
        self.buffer = ""

    @staticmethod
    def _saved_content(current: Optional[ConstitutionDocument]) -> str:
        return current.content if current is not None else ""

    def begin(self, current: Optional[ConstitutionDocument]):
        self.buffer = self._saved_content(current)
        self.editing = True

    def cancel(self, current: Optional[ConstitutionDocument]):
        """Leave edit mode, discarding the draft in favour of the saved content"""
        self.buffer = self._saved_content(current)
        self.editing = False

    def save(self) -> bool:
        """Replace the whole constitution document with the buffer"""
        if not _writable(self.session):
            return False

        try:
            self.session.store.save_constitution(self.buffer, self.session.user_id)
        except Exception as e:
            logger.error(f"Error saving constitution: {e}")
            return False

        self.editing = False
        logger.info("Constitution saved successfully")
        return True
