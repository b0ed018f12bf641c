"""Shared pytest fixtures for feelscrawl tests."""

import sys
from datetime import datetime
from pathlib import Path

import pytest

# Add the package to the path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from feelscrawl.cli._console import console  # noqa: E402
from feelscrawl.db import get_connection, init_db, upsert_tracked_account  # noqa: E402
from feelscrawl.models import (  # noqa: E402
    PartialError,
    ProfileLookupResult,
    RemoteTweet,
    RemoteUser,
    TweetFetchResult,
)


class FakeTweetSource:
    """In-memory stand-in for ``XApiClient``.

    ``timelines`` maps a remote user id to the tweets returned for it, or to
    an exception raised by ``fetch_items``.
    """

    def __init__(self, users=None, timelines=None, profile_errors=None, item_errors=None, profile_exc=None):
        self.users: list[RemoteUser] = list(users or [])
        self.timelines: dict[str, list[RemoteTweet] | Exception] = dict(timelines or {})
        self.profile_errors: list[PartialError] = list(profile_errors or [])
        self.item_errors: dict[str, list[PartialError]] = dict(item_errors or {})
        self.profile_exc = profile_exc
        self.profile_calls: list[list[str]] = []
        self.item_calls: list[tuple[str, datetime]] = []
        self.closed = False

    def fetch_profiles(self, usernames):
        self.profile_calls.append(list(usernames))
        if self.profile_exc is not None:
            raise self.profile_exc
        wanted = {name.lower() for name in usernames}
        return ProfileLookupResult(
            users=[u for u in self.users if u.username.lower() in wanted],
            errors=self.profile_errors,
        )

    def fetch_items(self, user_id, start_time):
        self.item_calls.append((user_id, start_time))
        timeline = self.timelines.get(user_id, [])
        if isinstance(timeline, Exception):
            raise timeline
        return TweetFetchResult(tweets=timeline, errors=self.item_errors.get(user_id, []), pages=1)

    def close(self):
        self.closed = True


def remote_user(username: str, user_id: str, name: str | None = None, followers: int = 10) -> RemoteUser:
    return RemoteUser.model_validate(
        {
            "id": user_id,
            "name": name or username.title(),
            "username": username,
            "profile_image_url": f"https://pbs.example/{username}.jpg",
            "public_metrics": {"followers_count": followers, "following_count": 5},
        }
    )


def remote_tweet(tweet_id: str, created_at: str, text: str = "hello", references=()) -> RemoteTweet:
    return RemoteTweet.model_validate(
        {
            "id": tweet_id,
            "text": text,
            "created_at": created_at,
            "public_metrics": {"like_count": 3, "retweet_count": 1, "reply_count": 0, "quote_count": 0},
            "referenced_tweets": [{"type": ref, "id": f"ref-{tweet_id}"} for ref in references] or None,
        }
    )


@pytest.fixture
def make_user():
    return remote_user


@pytest.fixture
def make_tweet():
    return remote_tweet


@pytest.fixture
def fake_source():
    return FakeTweetSource


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "feelscrawl_test.db"
    init_db(path)
    return path


@pytest.fixture
def conn(db_path):
    with get_connection(db_path) as connection:
        yield connection


@pytest.fixture
def account_id(conn):
    """Internal id of an active tracked account ``alice``."""
    account = upsert_tracked_account(conn, "alice")
    conn.commit()
    return account


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    """Point config, data dir and credentials at ``tmp_path`` for CLI tests."""
    monkeypatch.setenv("FEELSCRAWL_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    # Wide enough that Rich never wraps paths or table cells
    monkeypatch.setattr(console, "_width", 250)
    for name in (
        "DATABASE_URL",
        "CRAWL_INTERVAL_HOURS",
        "HISTORY_DEPTH_DAYS",
        "RATE_LIMIT_PER_15MIN",
        "TWITTER_BEARER_TOKEN",
        "FEELSCRAWL_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    return tmp_path
