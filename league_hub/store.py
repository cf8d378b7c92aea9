"""
Document store access for news, historical standings and the constitution.

Every watch_* call returns a Subscription; whoever opens it owns it and must
unsubscribe on teardown. Each delivery carries the full, parsed snapshot.
"""
import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from google.cloud import firestore

from league_hub.errors import SchemaError
from league_hub.schemas import ConstitutionDocument, HistoricalSeason, NewsItem

logger = logging.getLogger(__name__)

NEWS_COLLECTION = "news"
HISTORY_COLLECTION = "historicalStandings"
CONSTITUTION_DOCUMENT = "leagueConstitution/document"

ErrorHandler = Callable[[Exception], None]


def _log_delivery_error(error: Exception):
    logger.error(f"Subscription delivery failed: {error}")


class Subscription:
    """
    Disposable handle for one live query.

    ``alive`` reports whether the backend is still delivering; a listener the
    backend has shut down is held but no longer active.
    """

    def __init__(self, release: Callable[[], None], name: str = "",
                 alive: Optional[Callable[[], bool]] = None):
        self.name = name
        self._release = release
        self._alive = alive

    @property
    def held(self) -> bool:
        return self._release is not None

    @property
    def active(self) -> bool:
        return self.held and (self._alive is None or self._alive())

    @property
    def terminated(self) -> bool:
        """Still held by its owner, but the backend stopped delivering"""
        return self.held and not self.active

    def unsubscribe(self):
        release, self._release = self._release, None
        if release is not None:
            release()
            logger.debug(f"Released {self.name or 'subscription'}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.unsubscribe()
        return False


def parse_news(documents) -> List[NewsItem]:
    """Parse (id, data) pairs, skipping malformed documents"""
    items = []
    for doc_id, data in documents:
        try:
            items.append(NewsItem.from_document(doc_id, data))
        except SchemaError as e:
            logger.warning(f"Skipping news item {doc_id}: {e}")
    return items


def parse_seasons(documents) -> List[HistoricalSeason]:
    """Parse (id, data) pairs, skipping malformed documents"""
    seasons = []
    for doc_id, data in documents:
        try:
            seasons.append(HistoricalSeason.from_document(doc_id, data))
        except SchemaError as e:
            logger.warning(f"Skipping season {doc_id}: {e}")
    return seasons


class LeagueStore(ABC):
    """
    Abstract backend handle for the league's persisted data.

    Subclasses provide the three live queries and the three writes; paths
    under ``data_root`` are shared.
    """

    def __init__(self, data_root: str):
        self.data_root = data_root.rstrip('/')

    @property
    def news_path(self) -> str:
        return f"{self.data_root}/{NEWS_COLLECTION}"

    @property
    def history_path(self) -> str:
        return f"{self.data_root}/{HISTORY_COLLECTION}"

    @property
    def constitution_path(self) -> str:
        return f"{self.data_root}/{CONSTITUTION_DOCUMENT}"

    @abstractmethod
    def watch_news(self, on_items: Callable[[List[NewsItem]], None],
                   on_error: ErrorHandler = _log_delivery_error) -> Subscription:
        pass

    @abstractmethod
    def watch_history(self, on_seasons: Callable[[List[HistoricalSeason]], None],
                      on_error: ErrorHandler = _log_delivery_error) -> Subscription:
        pass

    @abstractmethod
    def watch_constitution(self, on_document: Callable[[Optional[ConstitutionDocument]], None],
                           on_error: ErrorHandler = _log_delivery_error) -> Subscription:
        pass

    @abstractmethod
    def add_news(self, title: str, content: str, author_id: str) -> str:
        pass

    @abstractmethod
    def save_constitution(self, content: str, updated_by: str):
        pass

    @abstractmethod
    def put_season(self, season: HistoricalSeason) -> str:
        pass

    def close(self):
        pass


class FirestoreLeagueStore(LeagueStore):
    """League data in Cloud Firestore, read through realtime snapshot listeners"""

    def __init__(self, client: firestore.Client, data_root: str):
        super().__init__(data_root)
        self.client = client

    @classmethod
    def connect(cls, project_id: str, credentials, data_root: str) -> "FirestoreLeagueStore":
        logger.info(f"Connecting to Firestore project {project_id}")
        return cls(firestore.Client(project=project_id, credentials=credentials), data_root)

    @staticmethod
    def _deliver(build: Callable[[], Any], on_value: Callable[[Any], None], on_error: ErrorHandler):
        # Runs on the watch thread; an exception escaping here would stop the listener
        try:
            value = build()
        except Exception as e:
            on_error(e)
            return
        on_value(value)

    def watch_news(self, on_items, on_error=_log_delivery_error) -> Subscription:
        query = self.client.collection(self.news_path).order_by(
            'timestamp', direction=firestore.Query.DESCENDING
        )

        def handle(docs, changes, read_time):
            self._deliver(lambda: parse_news((doc.id, doc.to_dict() or {}) for doc in docs),
                          on_items, on_error)

        watch = query.on_snapshot(handle)
        return Subscription(watch.unsubscribe, name="news", alive=lambda: watch.is_active)

    def watch_history(self, on_seasons, on_error=_log_delivery_error) -> Subscription:
        query = self.client.collection(self.history_path).order_by(
            'year', direction=firestore.Query.DESCENDING
        )

        def handle(docs, changes, read_time):
            self._deliver(lambda: parse_seasons((doc.id, doc.to_dict() or {}) for doc in docs),
                          on_seasons, on_error)

        watch = query.on_snapshot(handle)
        return Subscription(watch.unsubscribe, name="historicalStandings", alive=lambda: watch.is_active)

    def watch_constitution(self, on_document, on_error=_log_delivery_error) -> Subscription:
        doc_ref = self.client.document(self.constitution_path)

        def build(docs):
            snapshot = docs[0] if docs else None
            if snapshot is None or not snapshot.exists:
                return None
            return ConstitutionDocument.from_document(snapshot.to_dict() or {})

        def handle(docs, changes, read_time):
            self._deliver(lambda: build(docs), on_document, on_error)

        watch = doc_ref.on_snapshot(handle)
        return Subscription(watch.unsubscribe, name="leagueConstitution", alive=lambda: watch.is_active)

    def add_news(self, title: str, content: str, author_id: str) -> str:
        _, doc_ref = self.client.collection(self.news_path).add({
            'title': title,
            'content': content,
            'timestamp': firestore.SERVER_TIMESTAMP,
            'authorId': author_id,
        })
        return doc_ref.id

    def save_constitution(self, content: str, updated_by: str):
        # set() without merge replaces the whole document
        self.client.document(self.constitution_path).set({
            'content': content,
            'lastUpdated': firestore.SERVER_TIMESTAMP,
            'updatedBy': updated_by,
        })

    def put_season(self, season: HistoricalSeason) -> str:
        doc_id = season.id or str(season.year)
        self.client.collection(self.history_path).document(doc_id).set(season.to_document())
        return doc_id

    def close(self):
        self.client.close()


class InMemoryLeagueStore(LeagueStore):
    """
    Process-local store with the same push semantics as Firestore.

    Watchers get the current snapshot immediately and again, synchronously,
    after every write to their collection.
    """

    def __init__(self, data_root: str = "artifacts/default-app-id/public/data",
                 clock: Callable[[], datetime] = None):
        super().__init__(data_root)
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.news: Dict[str, Dict[str, Any]] = {}
        self.seasons: Dict[str, Dict[str, Any]] = {}
        self.constitution: Optional[Dict[str, Any]] = None
        self.write_count = 0
        self._watchers: Dict[str, List[Callable[[], None]]] = {
            NEWS_COLLECTION: [],
            HISTORY_COLLECTION: [],
            CONSTITUTION_DOCUMENT: [],
        }

    def _watch(self, key: str, push: Callable[[], None], name: str) -> Subscription:
        self._watchers[key].append(push)
        push()

        def release():
            if push in self._watchers[key]:
                self._watchers[key].remove(push)

        return Subscription(release, name=name)

    def _notify(self, key: str):
        for push in list(self._watchers[key]):
            push()

    def watcher_count(self) -> int:
        return sum(len(watchers) for watchers in self._watchers.values())

    def _news_snapshot(self) -> List[NewsItem]:
        ordered = sorted(self.news.items(), key=lambda entry: entry[1]['timestamp'], reverse=True)
        return parse_news(ordered)

    def _history_snapshot(self) -> List[HistoricalSeason]:
        ordered = sorted(self.seasons.items(), key=lambda entry: entry[1].get('year', 0), reverse=True)
        return parse_seasons(ordered)

    def watch_news(self, on_items, on_error=_log_delivery_error) -> Subscription:
        def push():
            try:
                items = self._news_snapshot()
            except Exception as e:
                on_error(e)
                return
            on_items(items)
        return self._watch(NEWS_COLLECTION, push, "news")

    def watch_history(self, on_seasons, on_error=_log_delivery_error) -> Subscription:
        def push():
            try:
                seasons = self._history_snapshot()
            except Exception as e:
                on_error(e)
                return
            on_seasons(seasons)
        return self._watch(HISTORY_COLLECTION, push, "historicalStandings")

    def watch_constitution(self, on_document, on_error=_log_delivery_error) -> Subscription:
        def push():
            try:
                document = (ConstitutionDocument.from_document(self.constitution)
                            if self.constitution is not None else None)
            except Exception as e:
                on_error(e)
                return
            on_document(document)
        return self._watch(CONSTITUTION_DOCUMENT, push, "leagueConstitution")

    def add_news(self, title: str, content: str, author_id: str) -> str:
        doc_id = uuid.uuid4().hex[:20]
        self.news[doc_id] = {
            'title': title,
            'content': content,
            'timestamp': self.clock(),
            'authorId': author_id,
        }
        self.write_count += 1
        self._notify(NEWS_COLLECTION)
        return doc_id

    def save_constitution(self, content: str, updated_by: str):
        self.constitution = {
            'content': content,
            'lastUpdated': self.clock(),
            'updatedBy': updated_by,
        }
        self.write_count += 1
        self._notify(CONSTITUTION_DOCUMENT)

    def put_raw_season(self, doc_id: str, data: Dict[str, Any]):
        """Store an unvalidated season document, as an external author would"""
        self.seasons[doc_id] = dict(data)
        self._notify(HISTORY_COLLECTION)

    def put_season(self, season: HistoricalSeason) -> str:
        doc_id = season.id or str(season.year)
        self.put_raw_season(doc_id, season.to_document())
        return doc_id

    def close(self):
        for watchers in self._watchers.values():
            watchers.clear()
