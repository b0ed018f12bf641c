"""Sentiment model registry (read by the crawler to fan out jobs)."""

import sqlite3


def get_enabled_model_ids(conn: sqlite3.Connection) -> list[int]:
    cursor = conn.execute("SELECT id FROM llm_models WHERE is_enabled = 1 ORDER BY id ASC")
    return [row["id"] for row in cursor.fetchall()]


def get_models(conn: sqlite3.Connection) -> list[sqlite3.Row]:
    cursor = conn.execute(
        """
        SELECT m.id, m.name, m.is_enabled,
               (SELECT COUNT(*) FROM analysis_queue q WHERE q.llm_model_id = m.id) AS job_count
        FROM llm_models m
        ORDER BY m.id ASC
        """
    )
    return cursor.fetchall()


def add_model(conn: sqlite3.Connection, name: str, enabled: bool = False) -> int:
    """Register a model by name (idempotent). Returns its id."""
    conn.execute(
        "INSERT INTO llm_models (name, is_enabled) VALUES (?, ?) ON CONFLICT(name) DO NOTHING",
        (name, int(enabled)),
    )
    row = conn.execute("SELECT id FROM llm_models WHERE name = ?", (name,)).fetchone()
    return row["id"]


def set_model_enabled(conn: sqlite3.Connection, name: str, enabled: bool) -> bool:
    cursor = conn.execute(
        "UPDATE llm_models SET is_enabled = ? WHERE name = ?",
        (int(enabled), name),
    )
    return cursor.rowcount > 0
