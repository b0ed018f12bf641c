"""CLI tests for the crawl and run commands."""

import logging
from datetime import timedelta

import pytest
from click.testing import CliRunner

import feelscrawl.cli.crawl_cmd as crawl_mod
from feelscrawl.cli import cli
from feelscrawl.db import get_checkpoint, get_connection, get_recent_runs, utc_now
from feelscrawl.errors import AuthenticationError


@pytest.fixture
def runner(cli_env, monkeypatch):
    monkeypatch.setattr(crawl_mod, "setup_logging", lambda *args, **kwargs: logging.INFO)
    return CliRunner()


def _stamp(hours: int) -> str:
    return (utc_now() - timedelta(hours=hours)).strftime("%Y-%m-%dT%H:%M:%SZ")


def test_crawl_once_ingests_tweets(runner, monkeypatch, fake_source, make_user, make_tweet):
    source = fake_source(
        users=[make_user("alice", "u-1")],
        timelines={"u-1": [make_tweet("1", _stamp(3)), make_tweet("2", _stamp(2))]},
    )
    monkeypatch.setattr(crawl_mod, "build_client_or_exit", lambda settings: source)

    assert runner.invoke(cli, ["accounts", "add", "@alice"]).exit_code == 0
    result = runner.invoke(cli, ["crawl"])

    assert result.exit_code == 0, result.output
    assert "completed" in result.output
    assert "Tweets fetched: 2" in result.output
    assert "Jobs queued: 2" in result.output
    assert source.closed

    with get_connection() as conn:
        assert get_checkpoint(conn, 1) is not None


def test_crawl_exits_nonzero_on_aborted_cycle(runner, monkeypatch, fake_source, make_user):
    source = fake_source(
        users=[make_user("alice", "u-1")],
        timelines={"u-1": AuthenticationError("Twitter auth error at /2/users/:id/tweets")},
    )
    monkeypatch.setattr(crawl_mod, "build_client_or_exit", lambda settings: source)
    runner.invoke(cli, ["accounts", "add", "alice"])

    result = runner.invoke(cli, ["crawl"])

    assert result.exit_code == 1
    assert "Crawl cycle failed: Twitter auth error" in result.output
    with get_connection() as conn:
        assert get_recent_runs(conn)[0].status.value == "failed"


def test_crawl_reports_unresolved_accounts(runner, monkeypatch, fake_source):
    source = fake_source()
    monkeypatch.setattr(crawl_mod, "build_client_or_exit", lambda settings: source)
    runner.invoke(cli, ["accounts", "add", "ghost"])

    result = runner.invoke(cli, ["crawl"])

    # ghost is never resolved, which is recorded but does not fail the run
    assert result.exit_code == 0
    assert "Twitter user not found: @ghost" in result.output


def test_crawl_requires_bearer_token(runner):
    result = runner.invoke(cli, ["crawl"])

    assert result.exit_code == 1
    assert "TWITTER_BEARER_TOKEN is required" in result.output


def test_crawl_rejects_invalid_quota(runner, monkeypatch):
    monkeypatch.setenv("TWITTER_BEARER_TOKEN", "token")
    monkeypatch.setenv("RATE_LIMIT_PER_15MIN", "0")

    result = runner.invoke(cli, ["crawl"])

    assert result.exit_code == 1
    assert "rate_limit_per_15min must be greater than zero" in result.output


def test_run_once_uses_scheduler(runner, monkeypatch, fake_source, make_user):
    source = fake_source(users=[make_user("alice", "u-1")])
    monkeypatch.setattr(crawl_mod, "build_client_or_exit", lambda settings: source)
    runner.invoke(cli, ["accounts", "add", "alice"])

    result = runner.invoke(cli, ["run", "--once", "--interval-hours", "2"])

    assert result.exit_code == 0, result.output
    assert source.item_calls and source.item_calls[0][0] == "u-1"
    assert source.closed


def test_run_rejects_non_positive_interval(runner):
    result = runner.invoke(cli, ["run", "--interval-hours", "0"])

    assert result.exit_code == 2
