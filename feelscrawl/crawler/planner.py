"""Fetch-window planning from per-account checkpoints."""

from datetime import datetime, timedelta

from ..time_utils import utc_now


def history_floor(history_depth_days: int, now: datetime | None = None) -> datetime:
    """Oldest timestamp the crawler will ever ask for."""
    return (now or utc_now()) - timedelta(days=history_depth_days)


def plan_fetch_start(last_seen: datetime | None, floor: datetime) -> datetime:
    """Start just after the checkpoint, or at the floor when the checkpoint is missing or older.

    The API's ``start_time`` is inclusive, so one second is added to avoid
    refetching the newest stored tweet.
    """
    if last_seen is not None and last_seen > floor:
        return last_seen + timedelta(seconds=1)
    return floor
