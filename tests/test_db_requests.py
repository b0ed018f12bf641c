"""Tests for the reanalysis request queue, crawl runs and the error log."""

from datetime import timedelta

import pytest

from feelscrawl.db import (
    claim_pending_requests,
    create_reanalysis_request,
    finish_run,
    get_error_counts_by_kind,
    get_recent_api_errors,
    get_recent_runs,
    get_request_counts,
    get_run,
    log_api_error,
    mark_reanalysis_completed,
    mark_reanalysis_processing,
    parse_request_type,
    requeue_stale_requests,
    resolve_api_errors,
    start_run,
    utc_now,
)
from feelscrawl.errors import ConfigurationError, ErrorKind
from feelscrawl.models import ApiErrorDetail, RequestType, RunStatus


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("tweet", RequestType.ITEM),
        ("item", RequestType.ITEM),
        ("user", RequestType.ACCOUNT),
        ("Account", RequestType.ACCOUNT),
        (" all ", RequestType.ALL),
    ],
)
def test_parse_request_type_aliases(raw, expected):
    assert parse_request_type(raw) is expected


def test_parse_request_type_rejects_unknown():
    with pytest.raises(ConfigurationError, match="Unknown reanalysis request type: bogus"):
        parse_request_type("bogus")


def test_create_request_validates_required_ids(conn):
    with pytest.raises(ConfigurationError, match="Missing tweet_id"):
        create_reanalysis_request(conn, "item")
    with pytest.raises(ConfigurationError, match="Missing twitter_user_id"):
        create_reanalysis_request(conn, "account")


def test_create_request_stores_canonical_type(conn, account_id):
    request_id = create_reanalysis_request(conn, "account", twitter_user_id=account_id)

    row = conn.execute("SELECT * FROM reanalysis_requests WHERE id = ?", (request_id,)).fetchone()
    assert row["request_type"] == "user"
    assert row["status"] == "pending"


def test_claim_returns_oldest_pending_first(conn):
    ids = [create_reanalysis_request(conn, "all") for _ in range(3)]
    mark_reanalysis_processing(conn, ids[0])

    claimed = claim_pending_requests(conn, limit=1)

    assert [r.id for r in claimed] == [ids[1]]
    assert claimed[0].status == "pending"


def test_request_lifecycle(conn):
    request_id = create_reanalysis_request(conn, "all")

    mark_reanalysis_processing(conn, request_id)
    row = conn.execute("SELECT * FROM reanalysis_requests WHERE id = ?", (request_id,)).fetchone()
    assert row["status"] == "processing"
    assert row["claimed_at"] is not None

    mark_reanalysis_completed(conn, request_id)
    row = conn.execute("SELECT * FROM reanalysis_requests WHERE id = ?", (request_id,)).fetchone()
    assert row["status"] == "completed"
    assert row["processed_at"] is not None
    assert get_request_counts(conn) == {"completed": 1}


def test_requeue_stale_processing_requests(conn):
    stale = create_reanalysis_request(conn, "all")
    fresh = create_reanalysis_request(conn, "all")
    legacy = create_reanalysis_request(conn, "all")
    mark_reanalysis_processing(conn, stale)
    mark_reanalysis_processing(conn, fresh)
    conn.execute("UPDATE reanalysis_requests SET status = 'processing' WHERE id = ?", (legacy,))
    conn.execute(
        "UPDATE reanalysis_requests SET claimed_at = ? WHERE id = ?",
        ((utc_now() - timedelta(hours=2)).isoformat(), stale),
    )

    requeued = requeue_stale_requests(conn, utc_now() - timedelta(minutes=30))

    assert requeued == 2
    statuses = {
        r["id"]: r["status"] for r in conn.execute("SELECT id, status FROM reanalysis_requests").fetchall()
    }
    assert statuses == {stale: "pending", fresh: "processing", legacy: "pending"}


def test_run_lifecycle_persists_error_details(conn):
    run_id = start_run(conn)
    assert get_run(conn, run_id).status is RunStatus.RUNNING

    errors = [ApiErrorDetail(error_type=ErrorKind.API_CHANGE, message="Twitter user not found: @ghost")]
    finish_run(conn, run_id, RunStatus.COMPLETED, 2, 3, errors)

    run = get_run(conn, run_id)
    assert run.status is RunStatus.COMPLETED
    assert (run.tweets_fetched, run.tweets_analyzed, run.errors_count) == (2, 3, 1)
    assert run.error_details[0].error_type is ErrorKind.API_CHANGE
    assert run.error_details[0].message == "Twitter user not found: @ghost"
    assert run.completed_at is not None
    assert [r.id for r in get_recent_runs(conn)] == [run_id]


def test_run_without_errors_has_empty_details(conn):
    run_id = start_run(conn)
    finish_run(conn, run_id, RunStatus.FAILED, 0, 0, [])

    run = get_run(conn, run_id)
    assert run.status is RunStatus.FAILED
    assert run.error_details == []


def test_error_log_filtering_and_resolution(conn):
    log_api_error(conn, ErrorKind.AUTH, "Twitter auth error at /2/users/by", endpoint="/2/users/by")
    log_api_error(conn, ErrorKind.API_CHANGE, "Not Found Error: gone", code="about:blank")
    log_api_error(conn, ErrorKind.API_CHANGE, "Not Found Error: also gone")

    assert len(get_recent_api_errors(conn)) == 3
    assert len(get_recent_api_errors(conn, error_type="auth")) == 1
    assert get_error_counts_by_kind(conn) == {"api_change": 2, "auth": 1}
    assert get_error_counts_by_kind(conn, since_hours=1) == {"api_change": 2, "auth": 1}

    assert resolve_api_errors(conn, error_type="api_change") == 2
    assert [r["error_type"] for r in get_recent_api_errors(conn)] == ["auth"]
    assert len(get_recent_api_errors(conn, include_resolved=True)) == 3
