import logging
from typing import Callable, Optional

from league_hub.auth import AuthUser, FirebaseAuthClient, FirebaseUserCredentials, LocalAuth
from league_hub.config import DashboardConfig
from league_hub.feeds import LeagueFeeds
from league_hub.store import FirestoreLeagueStore, InMemoryLeagueStore, LeagueStore

logger = logging.getLogger(__name__)


class SessionBootstrapper:
    """
    Connects to the backend and establishes an identity once per process.

    The store handle is built first, then a single identity listener is
    registered. When that listener sees no user it signs in, with the
    pre-provisioned token if one is configured and anonymously otherwise.
    Any failure is logged and leaves ``ready`` False; nothing is retried.
    """

    def __init__(self, config: DashboardConfig, auth=None,
                 store_factory: Callable[..., LeagueStore] = None,
                 on_ready: Callable[[LeagueStore], None] = None,
                 on_lost: Callable[[], None] = None):
        self.config = config
        self.auth = auth
        self.store_factory = store_factory
        self.on_ready = on_ready
        self.on_lost = on_lost

        self.store: Optional[LeagueStore] = None
        self.user_id: Optional[str] = None
        self.ready = False
        self._started = False
        self._unsubscribe_auth: Optional[Callable[[], None]] = None

    def _build_auth(self):
        if self.config.local_mode:
            logger.warning("No Firebase settings found, using local in-memory backend")
            return LocalAuth()
        return FirebaseAuthClient(self.config.firebase)

    def _build_store(self) -> LeagueStore:
        if self.store_factory is not None:
            return self.store_factory(self.auth)
        if self.config.local_mode:
            return InMemoryLeagueStore(self.config.data_root)
        return FirestoreLeagueStore.connect(
            self.config.firebase.project_id,
            FirebaseUserCredentials(self.auth),
            self.config.data_root
        )

    def start(self) -> "SessionBootstrapper":
        if self._started:
            return self
        self._started = True

        try:
            if self.auth is None:
                self.auth = self._build_auth()
            self.store = self._build_store()
        except Exception as e:
            logger.error(f"Failed to initialize backend: {e}")
            return self

        self._unsubscribe_auth = self.auth.on_auth_state_changed(self._handle_auth_state)
        return self

    def _handle_auth_state(self, user: Optional[AuthUser]):
        if user is not None:
            self.user_id = user.uid
            if not self.ready:
                self.ready = True
                logger.info(f"Session ready for user {user.uid}")
                self._notify_ready()
            return

        if self.ready:
            logger.warning("Signed-in identity lost")
            self.ready = False
            self.user_id = None
            if self.on_lost:
                self.on_lost()

        try:
            if self.config.initial_auth_token:
                self.auth.sign_in_with_custom_token(self.config.initial_auth_token)
            else:
                self.auth.sign_in_anonymously()
        except Exception as e:
            logger.error(f"Authentication error: {e}")

    def _notify_ready(self):
        if self.on_ready is None:
            return
        try:
            self.on_ready(self.store)
        except Exception as e:
            logger.error(f"Failed to start subscriptions: {e}")

    def close(self):
        if self._unsubscribe_auth is not None:
            self._unsubscribe_auth()
            self._unsubscribe_auth = None

        if self.store is not None:
            try:
                self.store.close()
            except Exception as e:
                logger.error(f"Error closing backend: {e}")
            self.store = None

        self.ready = False
        self.user_id = None


class LeagueSession:
    """Composition root for the backend side: bootstrapper plus live feeds"""

    def __init__(self, config: DashboardConfig, auth=None, store_factory=None):
        self.config = config
        self.feeds = LeagueFeeds()
        self.bootstrapper = SessionBootstrapper(
            config,
            auth=auth,
            store_factory=store_factory,
            on_ready=self.feeds.open,
            on_lost=self.feeds.close
        )

    @property
    def ready(self) -> bool:
        return self.bootstrapper.ready

    @property
    def user_id(self) -> Optional[str]:
        return self.bootstrapper.user_id

    @property
    def store(self) -> Optional[LeagueStore]:
        return self.bootstrapper.store

    def start(self) -> "LeagueSession":
        self.bootstrapper.start()
        return self

    def close(self):
        self.feeds.close()
        self.bootstrapper.close()
        logger.info("League session closed")

    def __enter__(self):
        return self.start()

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
