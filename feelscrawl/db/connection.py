"""Database connection management and initialization."""

import sqlite3
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from ..config import get_database_path
from .schema import JOB_UNIQUE_INDEX, SCHEMA


def init_db(db_path: Path | None = None) -> None:
    """Initialize the database with schema."""
    if db_path is None:
        db_path = get_database_path()

    db_path.parent.mkdir(parents=True, exist_ok=True)

    max_attempts = 3
    for attempt in range(max_attempts):
        try:
            with get_connection(db_path) as conn:
                conn.executescript(SCHEMA)
                _run_migrations(conn)
                conn.commit()
            return
        except sqlite3.OperationalError as e:
            if "database is locked" in str(e) and attempt < max_attempts - 1:
                time.sleep(1)
                continue
            raise


def _table_columns(conn: sqlite3.Connection, table: str) -> set[str]:
    cursor = conn.execute(f"PRAGMA table_info({table})")
    return {row[1] for row in cursor.fetchall()}


def _run_migrations(conn: sqlite3.Connection) -> None:
    """Run schema migrations for databases created by older releases or the admin backend."""
    user_columns = _table_columns(conn, "twitter_users")

    if "avatar_url" not in user_columns:
        conn.execute("ALTER TABLE twitter_users ADD COLUMN avatar_url TEXT")

    if "follower_count" not in user_columns:
        conn.execute("ALTER TABLE twitter_users ADD COLUMN follower_count INTEGER")

    if "following_count" not in user_columns:
        conn.execute("ALTER TABLE twitter_users ADD COLUMN following_count INTEGER")

    if "updated_at" not in user_columns:
        conn.execute("ALTER TABLE twitter_users ADD COLUMN updated_at TEXT")

    request_columns = _table_columns(conn, "reanalysis_requests")

    if "claimed_at" not in request_columns:
        conn.execute("ALTER TABLE reanalysis_requests ADD COLUMN claimed_at TEXT")

    run_columns = _table_columns(conn, "crawler_runs")

    if "completed_at" not in run_columns:
        conn.execute("ALTER TABLE crawler_runs ADD COLUMN completed_at TEXT")

    # Drop duplicate null-model jobs left by releases without the expression index
    conn.execute(
        """
        DELETE FROM analysis_queue
        WHERE llm_model_id IS NULL
          AND id NOT IN (
              SELECT MIN(id) FROM analysis_queue
              WHERE llm_model_id IS NULL
              GROUP BY tweet_id
          )
        """
    )
    conn.execute(JOB_UNIQUE_INDEX)


@contextmanager
def get_connection(db_path: Path | None = None, readonly: bool = False) -> Iterator[sqlite3.Connection]:
    """Get a database connection with row factory.

    Args:
        db_path: Path to database file. If None, uses default from config.
        readonly: If True, open in readonly mode to avoid write locks.
    """
    if db_path is None:
        db_path = get_database_path()

    if readonly:
        uri = f"file:{db_path}?mode=ro"
        conn = sqlite3.connect(uri, uri=True, timeout=30)
    else:
        conn = sqlite3.connect(db_path, timeout=30)
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA busy_timeout=30000")

    conn.execute("PRAGMA foreign_keys=ON")
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()
