"""Tweet ingestion and analysis-job fan-out."""

import json
import sqlite3
from collections.abc import Iterable, Sequence
from datetime import datetime

from ..models import IngestResult, RemoteTweet
from ..time_utils import to_rfc3339


def enqueue_job(conn: sqlite3.Connection, tweet_id: int, llm_model_id: int | None) -> int:
    """Create one pending job unless the (tweet, model) target already has one."""
    cursor = conn.execute(
        """
        INSERT INTO analysis_queue (tweet_id, llm_model_id)
        VALUES (?, ?)
        ON CONFLICT DO NOTHING
        """,
        (tweet_id, llm_model_id),
    )
    return cursor.rowcount


def enqueue_jobs(conn: sqlite3.Connection, tweet_id: int, enabled_model_ids: Sequence[int]) -> int:
    """Fan a tweet out to every enabled model, or to one null-model job when none are enabled."""
    if not enabled_model_ids:
        return enqueue_job(conn, tweet_id, None)

    return sum(enqueue_job(conn, tweet_id, model_id) for model_id in enabled_model_ids)


def insert_tweet(conn: sqlite3.Connection, twitter_user_id: int, tweet: RemoteTweet) -> int | None:
    """Insert a tweet, returning its row id if new or None if the remote id was already stored."""
    cursor = conn.execute(
        """
        INSERT INTO tweets (
            twitter_user_id, tweet_id, content, tweet_timestamp,
            engagement_metrics, is_retweet, is_reply
        ) VALUES (?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT(tweet_id) DO NOTHING
        """,
        (
            twitter_user_id,
            tweet.id,
            tweet.text,
            to_rfc3339(tweet.created_at),
            json.dumps(tweet.engagement()),
            int(tweet.is_retweet),
            int(tweet.is_reply),
        ),
    )
    if cursor.rowcount == 0:
        return None
    return cursor.lastrowid


def ingest_tweets(
    conn: sqlite3.Connection,
    twitter_user_id: int,
    tweets: Iterable[RemoteTweet],
    enabled_model_ids: Sequence[int],
) -> IngestResult:
    """Insert new tweets and enqueue their analysis jobs.

    ``latest_timestamp`` covers every input tweet, including duplicates, so the
    caller can move the checkpoint past already-seen items. Does not commit.
    """
    result = IngestResult()
    latest: datetime | None = None

    for tweet in tweets:
        row_id = insert_tweet(conn, twitter_user_id, tweet)
        if row_id is not None:
            result.inserted += 1
            result.jobs_enqueued += enqueue_jobs(conn, row_id, enabled_model_ids)

        if latest is None or tweet.created_at > latest:
            latest = tweet.created_at

    result.latest_timestamp = latest
    return result


def enqueue_reanalysis_for_tweet(conn: sqlite3.Connection, tweet_id: int, enabled_model_ids: Sequence[int]) -> int:
    """Enqueue jobs for one stored tweet (internal id)."""
    row = conn.execute("SELECT id FROM tweets WHERE id = ?", (tweet_id,)).fetchone()
    if row is None:
        raise LookupError(f"Tweet {tweet_id} not found")
    return enqueue_jobs(conn, tweet_id, enabled_model_ids)


def enqueue_reanalysis_for_user(
    conn: sqlite3.Connection, twitter_user_id: int, enabled_model_ids: Sequence[int]
) -> int:
    """Enqueue jobs for every stored tweet of one account."""
    cursor = conn.execute("SELECT id FROM tweets WHERE twitter_user_id = ? ORDER BY id", (twitter_user_id,))
    tweet_ids = [row["id"] for row in cursor.fetchall()]
    return sum(enqueue_jobs(conn, tweet_id, enabled_model_ids) for tweet_id in tweet_ids)


def enqueue_reanalysis_for_all(conn: sqlite3.Connection, enabled_model_ids: Sequence[int]) -> int:
    """Enqueue jobs for every stored tweet."""
    cursor = conn.execute("SELECT id FROM tweets ORDER BY id")
    tweet_ids = [row["id"] for row in cursor.fetchall()]
    return sum(enqueue_jobs(conn, tweet_id, enabled_model_ids) for tweet_id in tweet_ids)


def reconcile_missing_jobs(
    conn: sqlite3.Connection,
    enabled_model_ids: Sequence[int],
    limit: int | None = None,
) -> int:
    """Create jobs for stored tweets that have no job at all.

    Covers tweets written without their jobs (an interrupted writer, or rows
    imported by another tool). Tweets that already have any job are left
    alone, so enabling a new model does not re-enqueue history.
    """
    limit_clause = f"LIMIT {int(limit)}" if limit else ""
    cursor = conn.execute(
        f"""
        SELECT t.id FROM tweets t
        WHERE NOT EXISTS (SELECT 1 FROM analysis_queue q WHERE q.tweet_id = t.id)
        ORDER BY t.id
        {limit_clause}
        """
    )
    tweet_ids = [row["id"] for row in cursor.fetchall()]
    return sum(enqueue_jobs(conn, tweet_id, enabled_model_ids) for tweet_id in tweet_ids)


def get_queue_counts(conn: sqlite3.Connection) -> dict[str, int]:
    """Job counts by status."""
    cursor = conn.execute("SELECT status, COUNT(*) AS n FROM analysis_queue GROUP BY status ORDER BY status")
    return {row["status"]: row["n"] for row in cursor.fetchall()}


def count_tweets(conn: sqlite3.Connection, twitter_user_id: int | None = None) -> int:
    if twitter_user_id is None:
        row = conn.execute("SELECT COUNT(*) FROM tweets").fetchone()
    else:
        row = conn.execute("SELECT COUNT(*) FROM tweets WHERE twitter_user_id = ?", (twitter_user_id,)).fetchone()
    return row[0]
