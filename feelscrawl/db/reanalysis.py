"""Reanalysis request queue: pending -> processing -> completed."""

import sqlite3
from datetime import datetime

from ..errors import ConfigurationError
from ..models import ReanalysisRequest, RequestType
from ..time_utils import to_rfc3339, utc_now

# Accepted spellings for each request type; the admin backend stores the
# first form, the CLI accepts either.
_TYPE_ALIASES: dict[str, RequestType] = {
    "tweet": RequestType.ITEM,
    "item": RequestType.ITEM,
    "user": RequestType.ACCOUNT,
    "account": RequestType.ACCOUNT,
    "all": RequestType.ALL,
}


def parse_request_type(value: str) -> RequestType:
    try:
        return _TYPE_ALIASES[value.strip().lower()]
    except KeyError:
        raise ConfigurationError(f"Unknown reanalysis request type: {value}") from None


def create_reanalysis_request(
    conn: sqlite3.Connection,
    request_type: str,
    tweet_id: int | None = None,
    twitter_user_id: int | None = None,
) -> int:
    """Queue a pending request. Returns its id."""
    parsed = parse_request_type(request_type)
    if parsed is RequestType.ITEM and tweet_id is None:
        raise ConfigurationError("Missing tweet_id for reanalysis request")
    if parsed is RequestType.ACCOUNT and twitter_user_id is None:
        raise ConfigurationError("Missing twitter_user_id for reanalysis request")

    cursor = conn.execute(
        """
        INSERT INTO reanalysis_requests (request_type, tweet_id, twitter_user_id, status, requested_at)
        VALUES (?, ?, ?, 'pending', ?)
        """,
        (parsed.value, tweet_id, twitter_user_id, to_rfc3339(utc_now())),
    )
    return cursor.lastrowid


def claim_pending_requests(conn: sqlite3.Connection, limit: int = 25) -> list[ReanalysisRequest]:
    """Return up to ``limit`` oldest pending requests (status is not changed here)."""
    cursor = conn.execute(
        """
        SELECT id, request_type, tweet_id, twitter_user_id, status, requested_at
        FROM reanalysis_requests
        WHERE status = 'pending'
        ORDER BY requested_at ASC, id ASC
        LIMIT ?
        """,
        (limit,),
    )
    return [ReanalysisRequest(**dict(row)) for row in cursor.fetchall()]


def mark_reanalysis_processing(conn: sqlite3.Connection, request_id: int) -> None:
    conn.execute(
        """
        UPDATE reanalysis_requests
        SET status = 'processing',
            claimed_at = ?
        WHERE id = ?
        """,
        (to_rfc3339(utc_now()), request_id),
    )


def mark_reanalysis_completed(conn: sqlite3.Connection, request_id: int) -> None:
    conn.execute(
        """
        UPDATE reanalysis_requests
        SET status = 'completed',
            processed_at = ?
        WHERE id = ?
        """,
        (to_rfc3339(utc_now()), request_id),
    )


def requeue_stale_requests(conn: sqlite3.Connection, claimed_before: datetime) -> int:
    """Return abandoned ``processing`` requests to ``pending``.

    A request with no ``claimed_at`` (claimed by a release that did not record
    it) counts as stale.
    """
    cursor = conn.execute(
        """
        UPDATE reanalysis_requests
        SET status = 'pending',
            claimed_at = NULL
        WHERE status = 'processing'
          AND (claimed_at IS NULL OR claimed_at < ?)
        """,
        (to_rfc3339(claimed_before),),
    )
    return cursor.rowcount


def get_request_counts(conn: sqlite3.Connection) -> dict[str, int]:
    cursor = conn.execute("SELECT status, COUNT(*) AS n FROM reanalysis_requests GROUP BY status")
    return {row["status"]: row["n"] for row in cursor.fetchall()}
