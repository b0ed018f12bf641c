"""Tests for fetch-window planning."""

from datetime import datetime, timedelta, timezone

from feelscrawl.crawler import history_floor, plan_fetch_start

FLOOR = datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_no_checkpoint_starts_at_floor():
    assert plan_fetch_start(None, FLOOR) == FLOOR


def test_checkpoint_after_floor_starts_one_second_later():
    last_seen = FLOOR + timedelta(days=10)
    assert plan_fetch_start(last_seen, FLOOR) == last_seen + timedelta(seconds=1)


def test_checkpoint_equal_to_floor_starts_at_floor():
    assert plan_fetch_start(FLOOR, FLOOR) == FLOOR


def test_checkpoint_older_than_floor_starts_at_floor():
    assert plan_fetch_start(FLOOR - timedelta(days=400), FLOOR) == FLOOR


def test_history_floor_subtracts_days():
    now = datetime(2024, 4, 1, 12, 0, tzinfo=timezone.utc)
    assert history_floor(90, now=now) == now - timedelta(days=90)
    assert history_floor(0, now=now) == now
