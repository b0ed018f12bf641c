"""Crawl run bookkeeping and the standalone API error log."""

import json
import sqlite3
from collections.abc import Sequence
from datetime import timedelta

from ..errors import ErrorKind
from ..models import ApiErrorDetail, CrawlRun, RunStatus
from ..time_utils import to_rfc3339, utc_now


def start_run(conn: sqlite3.Connection) -> int:
    """Create a run in ``running`` state and return its id."""
    cursor = conn.execute(
        """
        INSERT INTO crawler_runs (status, tweets_fetched, tweets_analyzed, errors_count, started_at)
        VALUES ('running', 0, 0, 0, ?)
        """,
        (to_rfc3339(utc_now()),),
    )
    return cursor.lastrowid


def finish_run(
    conn: sqlite3.Connection,
    run_id: int,
    status: RunStatus,
    tweets_fetched: int,
    tweets_queued: int,
    errors: Sequence[ApiErrorDetail],
) -> None:
    """Stamp completion and persist the serialized error list."""
    error_json = json.dumps([e.model_dump(mode="json") for e in errors]) if errors else None
    conn.execute(
        """
        UPDATE crawler_runs
        SET status = ?,
            completed_at = ?,
            tweets_fetched = ?,
            tweets_analyzed = ?,
            errors_count = ?,
            error_details = ?
        WHERE id = ?
        """,
        (
            RunStatus(status).value,
            to_rfc3339(utc_now()),
            tweets_fetched,
            tweets_queued,
            len(errors),
            error_json,
            run_id,
        ),
    )


def _row_to_run(row: sqlite3.Row) -> CrawlRun:
    details: list[ApiErrorDetail] = []
    if row["error_details"]:
        try:
            decoded = json.loads(row["error_details"])
        except json.JSONDecodeError:
            decoded = []
        if isinstance(decoded, list):
            details = [ApiErrorDetail.model_validate(d) for d in decoded if isinstance(d, dict)]
    return CrawlRun(
        id=row["id"],
        status=row["status"],
        tweets_fetched=row["tweets_fetched"] or 0,
        tweets_analyzed=row["tweets_analyzed"] or 0,
        errors_count=row["errors_count"] or 0,
        error_details=details,
        started_at=row["started_at"],
        completed_at=row["completed_at"],
    )


def get_run(conn: sqlite3.Connection, run_id: int) -> CrawlRun | None:
    row = conn.execute("SELECT * FROM crawler_runs WHERE id = ?", (run_id,)).fetchone()
    return _row_to_run(row) if row else None


def get_recent_runs(conn: sqlite3.Connection, limit: int = 20) -> list[CrawlRun]:
    cursor = conn.execute("SELECT * FROM crawler_runs ORDER BY id DESC LIMIT ?", (limit,))
    return [_row_to_run(row) for row in cursor.fetchall()]


def log_api_error(
    conn: sqlite3.Connection,
    error_type: ErrorKind,
    message: str,
    code: str | None = None,
    endpoint: str | None = None,
) -> None:
    """Append one row to the standalone error log."""
    conn.execute(
        """
        INSERT INTO api_errors (error_type, error_message, error_code, endpoint, occurred_at, resolved)
        VALUES (?, ?, ?, ?, ?, 0)
        """,
        (ErrorKind(error_type).value, message, code, endpoint, to_rfc3339(utc_now())),
    )


def get_recent_api_errors(
    conn: sqlite3.Connection,
    limit: int = 50,
    error_type: str | None = None,
    include_resolved: bool = False,
) -> list[sqlite3.Row]:
    conditions = []
    params: list = []

    if error_type:
        conditions.append("error_type = ?")
        params.append(error_type)

    if not include_resolved:
        conditions.append("resolved = 0")

    where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""
    params.append(limit)

    cursor = conn.execute(
        f"""
        SELECT * FROM api_errors
        {where_clause}
        ORDER BY id DESC
        LIMIT ?
        """,
        params,
    )
    return cursor.fetchall()


def get_error_counts_by_kind(conn: sqlite3.Connection, since_hours: int | None = None) -> dict[str, int]:
    params: list = []
    where_clause = ""
    if since_hours:
        where_clause = "WHERE occurred_at >= ?"
        params.append(to_rfc3339(utc_now() - timedelta(hours=since_hours)))
    cursor = conn.execute(
        f"SELECT error_type, COUNT(*) AS n FROM api_errors {where_clause} GROUP BY error_type ORDER BY n DESC",
        params,
    )
    return {row["error_type"]: row["n"] for row in cursor.fetchall()}


def resolve_api_errors(conn: sqlite3.Connection, error_type: str | None = None) -> int:
    """Mark logged errors as resolved. Returns the number of rows changed."""
    if error_type:
        cursor = conn.execute(
            "UPDATE api_errors SET resolved = 1 WHERE resolved = 0 AND error_type = ?",
            (error_type,),
        )
    else:
        cursor = conn.execute("UPDATE api_errors SET resolved = 1 WHERE resolved = 0")
    return cursor.rowcount
