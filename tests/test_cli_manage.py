"""CLI tests for account, model, reanalysis and inspection commands."""

import json

import pytest
from click.testing import CliRunner

from feelscrawl.cli import cli
from feelscrawl.config import get_config_path
from feelscrawl.db import finish_run, get_connection, log_api_error, start_run
from feelscrawl.errors import ErrorKind
from feelscrawl.models import ApiErrorDetail, RunStatus


@pytest.fixture
def runner(cli_env):
    runner = CliRunner()
    result = runner.invoke(cli, ["init"])
    assert result.exit_code == 0, result.output
    return runner


def test_init_creates_config_and_database(runner, cli_env):
    assert get_config_path().exists()
    assert (cli_env / "data" / "twitter_feels.db").exists()

    again = runner.invoke(cli, ["init"])
    assert "Config already exists" in again.output


def test_accounts_add_list_remove_activate(runner):
    assert runner.invoke(cli, ["accounts", "add", "@Alice", "--name", "Alice A"]).exit_code == 0
    assert runner.invoke(cli, ["accounts", "add", "bob"]).exit_code == 0

    listed = runner.invoke(cli, ["accounts", "list"])
    assert "@Alice" in listed.output
    assert "@bob" in listed.output

    removed = runner.invoke(cli, ["accounts", "remove", "bob"])
    assert removed.exit_code == 0
    assert "Deactivated @bob" in removed.output
    assert "@bob" not in runner.invoke(cli, ["accounts", "list"]).output
    assert "@bob" in runner.invoke(cli, ["accounts", "list", "--all"]).output

    assert runner.invoke(cli, ["accounts", "activate", "bob"]).exit_code == 0
    assert "@bob" in runner.invoke(cli, ["accounts", "list"]).output


def test_accounts_remove_unknown_handle_fails(runner):
    result = runner.invoke(cli, ["accounts", "remove", "nobody"])

    assert result.exit_code == 1
    assert "Unknown account" in result.output


def test_models_lifecycle(runner):
    assert "No models registered" in runner.invoke(cli, ["models", "list"]).output

    added = runner.invoke(cli, ["models", "add", "roberta", "--enable"])
    assert added.exit_code == 0
    assert "enabled" in added.output

    assert runner.invoke(cli, ["models", "disable", "roberta"]).exit_code == 0
    with get_connection() as conn:
        row = conn.execute("SELECT is_enabled FROM llm_models WHERE name = 'roberta'").fetchone()
    assert row["is_enabled"] == 0

    assert runner.invoke(cli, ["models", "enable", "missing"]).exit_code == 1


def test_reanalyze_commands_queue_requests(runner):
    runner.invoke(cli, ["accounts", "add", "alice"])

    assert "request #1" in runner.invoke(cli, ["reanalyze", "item", "7"]).output
    assert "request #2 for @alice" in runner.invoke(cli, ["reanalyze", "account", "alice"]).output
    assert "request #3" in runner.invoke(cli, ["reanalyze", "all", "--yes"]).output
    assert runner.invoke(cli, ["reanalyze", "account", "nobody"]).exit_code == 1

    with get_connection() as conn:
        rows = conn.execute(
            "SELECT request_type, tweet_id, twitter_user_id, status FROM reanalysis_requests ORDER BY id"
        ).fetchall()
    assert [tuple(r) for r in rows] == [
        ("tweet", 7, None, "pending"),
        ("user", None, 1, "pending"),
        ("all", None, None, "pending"),
    ]

    queue = runner.invoke(cli, ["queue"])
    assert queue.exit_code == 0
    assert "pending" in queue.output


def test_runs_table_and_markdown(runner):
    assert "No crawl runs recorded" in runner.invoke(cli, ["runs"]).output

    with get_connection() as conn:
        run_id = start_run(conn)
        finish_run(
            conn,
            run_id,
            RunStatus.COMPLETED,
            5,
            10,
            [ApiErrorDetail(error_type=ErrorKind.NETWORK, message="Failed fetching tweets for @bob")],
        )
        conn.commit()

    table = runner.invoke(cli, ["runs"])
    assert table.exit_code == 0
    assert "completed" in table.output

    markdown = runner.invoke(cli, ["runs", "--markdown"])
    lines = markdown.output.strip().splitlines()
    assert lines[0].startswith("|")
    assert "fetched" in lines[0]
    assert "| completed" in lines[2]


def test_errors_list_stats_resolve(runner):
    with get_connection() as conn:
        log_api_error(conn, ErrorKind.AUTH, "Twitter auth error at /2/users/by", endpoint="/2/users/by")
        log_api_error(conn, ErrorKind.API_CHANGE, "Twitter user not found: @ghost")
        conn.commit()

    listed = runner.invoke(cli, ["errors", "list", "--kind", "auth"])
    assert "Twitter auth error" in listed.output
    assert "ghost" not in listed.output

    stats = runner.invoke(cli, ["errors", "stats"])
    assert "api_change" in stats.output

    resolved = runner.invoke(cli, ["errors", "resolve"])
    assert "Resolved 2 error(s)" in resolved.output
    assert "No errors found" in runner.invoke(cli, ["errors", "list"]).output

    assert runner.invoke(cli, ["errors", "list", "--kind", "bogus"]).exit_code == 2


def test_config_set_validates_and_saves(runner):
    ok = runner.invoke(cli, ["config", "set", "crawler.history_depth_days", "30"])
    assert ok.exit_code == 0
    assert json.loads(get_config_path().read_text())["crawler"]["history_depth_days"] == 30

    bad = runner.invoke(cli, ["config", "set", "crawler.interval_hours", "0"])
    assert bad.exit_code == 1
    assert json.loads(get_config_path().read_text())["crawler"]["interval_hours"] == 1


def test_config_set_mentions_env_override(runner):
    result = runner.invoke(cli, ["config", "set", "api.rate_limit_per_15min", "300"])

    assert "RATE_LIMIT_PER_15MIN overrides" in result.output


def test_db_path_and_init(runner, cli_env):
    path = runner.invoke(cli, ["db", "path"])
    assert "twitter_feels.db" in path.output

    init = runner.invoke(cli, ["db", "init"])
    assert init.exit_code == 0
    assert "(0 tweets)" in init.output


def test_doctor_reports_missing_token(runner):
    result = runner.invoke(cli, ["doctor"])

    assert result.exit_code == 1
    assert "TWITTER_BEARER_TOKEN not set" in result.output


def test_doctor_passes_with_token(runner, monkeypatch):
    monkeypatch.setenv("TWITTER_BEARER_TOKEN", "token")
    runner.invoke(cli, ["accounts", "add", "alice"])

    result = runner.invoke(cli, ["doctor"])

    assert result.exit_code == 0, result.output
    assert "1 active account(s)" in result.output
