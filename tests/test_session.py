"""
Tests for session bootstrap: identity, readiness gating, failure policy, teardown.
"""
from pathlib import Path

import pytest

import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from league_hub.auth import LocalAuth
from league_hub.config import DashboardConfig
from league_hub.errors import AuthError
from league_hub.session import LeagueSession, SessionBootstrapper
from league_hub.store import InMemoryLeagueStore


class FailingAuth(LocalAuth):
    def sign_in_anonymously(self):
        raise AuthError("sign-in disabled")


@pytest.fixture
def auth():
    return LocalAuth()


def test_anonymous_session_becomes_ready(auth):
    with LeagueSession(DashboardConfig(), auth=auth) as session:
        assert session.ready
        assert session.user_id.startswith("local-")
        assert auth.current_user.anonymous
        assert session.feeds.is_open
        assert isinstance(session.store, InMemoryLeagueStore)
        assert session.store.data_root == "artifacts/default-app-id/public/data"


def test_token_session_uses_custom_token(auth):
    config = DashboardConfig(initial_auth_token="pre-provisioned")
    with LeagueSession(config, auth=auth) as session:
        assert session.ready
        assert auth.current_user.anonymous is False


def test_single_identity_listener(auth):
    session = LeagueSession(DashboardConfig(), auth=auth).start()
    session.start()
    assert auth.listener_count == 1
    session.close()


def test_close_releases_listener_and_feeds(auth):
    session = LeagueSession(DashboardConfig(), auth=auth).start()
    store = session.store
    session.close()

    assert auth.listener_count == 0
    assert not session.feeds.is_open
    assert store.watcher_count() == 0
    assert not session.ready
    assert session.user_id is None


def test_sign_in_failure_leaves_session_not_ready(caplog):
    auth = FailingAuth()
    session = LeagueSession(DashboardConfig(), auth=auth).start()

    assert not session.ready
    assert session.user_id is None
    assert not session.feeds.is_open
    assert "Authentication error" in caplog.text
    session.close()


def test_backend_init_failure_leaves_session_not_ready(auth, caplog):
    def broken_store(_auth):
        raise RuntimeError("no backend")

    bootstrapper = SessionBootstrapper(DashboardConfig(), auth=auth, store_factory=broken_store).start()

    assert not bootstrapper.ready
    assert auth.listener_count == 0
    assert "Failed to initialize backend" in caplog.text


def test_subscriptions_wait_for_readiness(auth):
    opened = []
    bootstrapper = SessionBootstrapper(
        DashboardConfig(),
        auth=FailingAuth(),
        on_ready=opened.append
    ).start()

    assert opened == []
    bootstrapper.close()


def test_lost_identity_closes_feeds_then_signs_back_in(auth):
    session = LeagueSession(DashboardConfig(), auth=auth).start()
    first_user = session.user_id

    auth.sign_out()

    assert session.ready
    assert session.user_id != first_user
    assert session.feeds.is_open
    assert session.store.watcher_count() == 3
    session.close()


def test_feed_reflects_writes_through_session(auth):
    with LeagueSession(DashboardConfig(), auth=auth) as session:
        session.store.add_news("Hello", "World", session.user_id)
        assert [item.title for item in session.feeds.news] == ["Hello"]
