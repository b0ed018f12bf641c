"""Tracked account operations."""

import sqlite3
from typing import Any

from ..models import RemoteUser, TrackedAccount
from ..time_utils import to_rfc3339, utc_now


def _row_to_account(row: sqlite3.Row) -> TrackedAccount:
    return TrackedAccount(
        id=row["id"],
        twitter_id=row["twitter_id"],
        username=row["username"],
        display_name=row["display_name"],
        is_active=bool(row["is_active"]),
    )


def upsert_tracked_account(
    conn: sqlite3.Connection,
    handle: str,
    display_name: str | None = None,
    is_active: bool = True,
) -> int:
    """Insert or re-activate an account. Returns its internal id."""
    handle = handle.strip().lstrip("@")
    now = to_rfc3339(utc_now())
    conn.execute(
        """
        INSERT INTO twitter_users (username, display_name, is_active, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?)
        ON CONFLICT(username) DO UPDATE SET
            display_name = COALESCE(excluded.display_name, display_name),
            is_active = excluded.is_active,
            updated_at = excluded.updated_at
        """,
        (handle, display_name, int(is_active), now, now),
    )
    row = conn.execute("SELECT id FROM twitter_users WHERE username = ?", (handle,)).fetchone()
    return row["id"]


def get_accounts(conn: sqlite3.Connection, include_inactive: bool = False) -> list[sqlite3.Row]:
    """Get accounts for display, ordered by id."""
    where_clause = "" if include_inactive else "WHERE is_active = 1"
    cursor = conn.execute(
        f"""
        SELECT u.*, c.last_tweet_timestamp,
               (SELECT COUNT(*) FROM tweets t WHERE t.twitter_user_id = u.id) AS tweet_count
        FROM twitter_users u
        LEFT JOIN crawler_checkpoints c ON c.twitter_user_id = u.id
        {where_clause}
        ORDER BY u.id ASC
        """
    )
    return cursor.fetchall()


def get_active_accounts(conn: sqlite3.Connection) -> list[TrackedAccount]:
    """Load the accounts included in a crawl cycle, in stable id order."""
    cursor = conn.execute(
        """
        SELECT id, twitter_id, username, display_name, is_active
        FROM twitter_users
        WHERE is_active = 1
        ORDER BY id ASC
        """
    )
    return [_row_to_account(row) for row in cursor.fetchall()]


def get_account_by_handle(conn: sqlite3.Connection, handle: str) -> TrackedAccount | None:
    row = conn.execute(
        "SELECT id, twitter_id, username, display_name, is_active FROM twitter_users WHERE username = ?",
        (handle.strip().lstrip("@"),),
    ).fetchone()
    return _row_to_account(row) if row else None


def set_account_active(conn: sqlite3.Connection, handle: str, active: bool) -> bool:
    """Toggle crawling for an account. Returns False if the handle is unknown."""
    cursor = conn.execute(
        "UPDATE twitter_users SET is_active = ?, updated_at = ? WHERE username = ?",
        (int(active), to_rfc3339(utc_now()), handle.strip().lstrip("@")),
    )
    return cursor.rowcount > 0


def update_account_from_profile(conn: sqlite3.Connection, username: str, profile: RemoteUser) -> None:
    """Refresh denormalized profile fields; missing values keep what is stored."""
    params: tuple[Any, ...] = (
        profile.id,
        profile.name,
        profile.profile_image_url,
        profile.follower_count,
        profile.following_count,
        to_rfc3339(utc_now()),
        username,
    )
    conn.execute(
        """
        UPDATE twitter_users
        SET twitter_id = COALESCE(?, twitter_id),
            display_name = COALESCE(?, display_name),
            avatar_url = COALESCE(?, avatar_url),
            follower_count = COALESCE(?, follower_count),
            following_count = COALESCE(?, following_count),
            updated_at = ?
        WHERE username = ?
        """,
        params,
    )
