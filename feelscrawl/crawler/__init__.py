"""Crawl orchestration: window planning, the cycle controller and its scheduler."""

from .cycle import CrawlCycle, CycleResult, TweetSource, run_crawl_cycle
from .planner import history_floor, plan_fetch_start
from .scheduler import Scheduler, database_cycle

__all__ = [
    "CrawlCycle",
    "CycleResult",
    "Scheduler",
    "TweetSource",
    "database_cycle",
    "history_floor",
    "plan_fetch_start",
    "run_crawl_cycle",
]
