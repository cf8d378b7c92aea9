"""
Tests for the live feeds: snapshot replacement, error retention, teardown.
"""
from datetime import datetime, timedelta, timezone
from itertools import count
from pathlib import Path

import pytest

import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from league_hub.feeds import LeagueFeeds
from league_hub.schemas import CONSTITUTION_PLACEHOLDER
from league_hub.store import InMemoryLeagueStore, LeagueStore, Subscription


@pytest.fixture
def store():
    ticks = count()
    start = datetime(2024, 9, 1, tzinfo=timezone.utc)
    return InMemoryLeagueStore(clock=lambda: start + timedelta(minutes=next(ticks)))


@pytest.fixture
def feeds(store):
    feeds = LeagueFeeds()
    feeds.open(store)
    yield feeds
    feeds.close()


def test_open_delivers_initial_snapshots(feeds, store):
    assert feeds.is_open
    assert store.watcher_count() == 3
    assert feeds.news == []
    assert feeds.history == []
    assert feeds.constitution is None
    assert feeds.constitution_text == CONSTITUTION_PLACEHOLDER


def test_news_newest_first_and_replaced_on_each_write(feeds, store):
    store.add_news("First", "one", "u1")
    before = feeds.news
    store.add_news("Second", "two", "u1")

    assert [item.title for item in feeds.news] == ["Second", "First"]
    assert feeds.news is not before
    assert [item.title for item in before] == ["First"]


def test_history_ordered_by_year_descending(feeds, store):
    store.put_raw_season("2021", {'year': 2021, 'standings': []})
    store.put_raw_season("2023", {'year': 2023, 'standings': []})
    store.put_raw_season("2022", {'year': 2022, 'standings': []})
    assert [season.year for season in feeds.history] == [2023, 2022, 2021]


def test_malformed_season_is_skipped(feeds, store):
    store.put_raw_season("2023", {'year': 2023, 'standings': []})
    store.put_raw_season("bad", {'year': 2022, 'standings': [{'name': "X", 'wins': "lots"}]})
    assert [season.year for season in feeds.history] == [2023]


def test_delivery_error_keeps_last_snapshot(feeds, store, caplog):
    store.put_raw_season("2023", {'year': 2023, 'standings': []})
    # Mixed year types cannot be ordered, so the whole delivery fails
    store.put_raw_season("odd", {'year': "twenty-twenty", 'standings': []})

    assert [season.year for season in feeds.history] == [2023]
    assert "Error fetching historical standings" in caplog.text


def test_constitution_updates(feeds, store):
    store.save_constitution("Rule 1", "u1")
    assert feeds.constitution.content == "Rule 1"
    assert feeds.constitution_text == "Rule 1"


def test_close_releases_all_subscriptions(store):
    feeds = LeagueFeeds()
    feeds.open(store)
    feeds.close()

    assert not feeds.is_open
    assert store.watcher_count() == 0

    store.add_news("After close", "ignored", "u1")
    assert feeds.news == []
    feeds.close()


def test_open_twice_does_not_duplicate_subscriptions(feeds, store):
    feeds.open(store)
    assert store.watcher_count() == 3


class DroppingStore(InMemoryLeagueStore):
    """In-memory store whose listeners can be shut down from the backend side"""

    def __init__(self):
        super().__init__()
        self.alive = True

    def _watch(self, key, push, name):
        subscription = super()._watch(key, push, name)
        return Subscription(subscription.unsubscribe, name=name, alive=lambda: self.alive)


def test_check_is_quiet_while_listeners_run(store, caplog):
    feeds = LeagueFeeds()
    feeds.open(store)
    assert feeds.check() == 0
    assert "Error fetching" not in caplog.text
    feeds.close()


def test_terminated_listeners_are_logged_once(caplog):
    store = DroppingStore()
    feeds = LeagueFeeds()
    feeds.open(store)
    store.save_constitution("Rule 1", "u1")

    store.alive = False
    assert not feeds.is_open
    assert feeds.check() == 3
    assert "Error fetching news: news listener stopped" in caplog.text
    assert "Error fetching historical standings" in caplog.text
    assert "Error fetching constitution" in caplog.text
    assert store.watcher_count() == 0
    assert feeds.constitution.content == "Rule 1"

    caplog.clear()
    assert feeds.check() == 0
    assert caplog.text == ""


def test_reopen_after_termination(caplog):
    store = DroppingStore()
    feeds = LeagueFeeds()
    feeds.open(store)
    store.alive = False
    feeds.check()

    store.alive = True
    feeds.open(store)
    assert feeds.is_open
    assert store.watcher_count() == 3
    feeds.close()


def test_league_store_is_abstract():
    with pytest.raises(TypeError):
        LeagueStore("artifacts/x/public/data")
