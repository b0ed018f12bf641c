"""Per-account crawl checkpoints."""

import sqlite3
from datetime import datetime

from ..time_utils import parse_timestamp, to_rfc3339, utc_now


def get_checkpoint(conn: sqlite3.Connection, twitter_user_id: int) -> datetime | None:
    """Return the newest tweet timestamp seen for an account, if any."""
    row = conn.execute(
        "SELECT last_tweet_timestamp FROM crawler_checkpoints WHERE twitter_user_id = ?",
        (twitter_user_id,),
    ).fetchone()
    if row is None:
        return None
    return parse_timestamp(row["last_tweet_timestamp"])


def set_checkpoint(conn: sqlite3.Connection, twitter_user_id: int, timestamp: datetime) -> None:
    """Upsert the literal timestamp; callers are responsible for never passing an older value."""
    conn.execute(
        """
        INSERT INTO crawler_checkpoints (twitter_user_id, last_tweet_timestamp, updated_at)
        VALUES (?, ?, ?)
        ON CONFLICT(twitter_user_id) DO UPDATE SET
            last_tweet_timestamp = excluded.last_tweet_timestamp,
            updated_at = excluded.updated_at
        """,
        (twitter_user_id, to_rfc3339(timestamp), to_rfc3339(utc_now())),
    )


def advance_checkpoint(conn: sqlite3.Connection, twitter_user_id: int, observed: datetime) -> datetime:
    """Move the checkpoint forward to ``observed`` if it is newer. Returns the stored value."""
    current = get_checkpoint(conn, twitter_user_id)
    if current is not None and current >= observed:
        return current
    set_checkpoint(conn, twitter_user_id, observed)
    return observed
