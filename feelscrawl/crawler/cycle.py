"""One crawl cycle: drain reanalysis requests, resolve accounts, fetch and ingest."""

from __future__ import annotations

import logging
import sqlite3
import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from ..db import (
    advance_checkpoint,
    claim_pending_requests,
    enqueue_reanalysis_for_all,
    enqueue_reanalysis_for_tweet,
    enqueue_reanalysis_for_user,
    finish_run,
    get_active_accounts,
    get_checkpoint,
    get_enabled_model_ids,
    ingest_tweets,
    log_api_error,
    mark_reanalysis_completed,
    mark_reanalysis_processing,
    parse_request_type,
    reconcile_missing_jobs,
    requeue_stale_requests,
    start_run,
    update_account_from_profile,
)
from ..time_utils import minutes_ago, utc_now
from ..errors import ConfigurationError, ErrorKind, classify_error, should_abort
from ..fetcher.x_api import TWEETS_ENDPOINT, USERS_ENDPOINT
from ..models import (
    ApiErrorDetail,
    FeelsConfig,
    PartialError,
    ProfileLookupResult,
    ReanalysisRequest,
    RequestType,
    RunStatus,
    TrackedAccount,
    TweetFetchResult,
)
from .planner import history_floor, plan_fetch_start

log = logging.getLogger(__name__)


class TweetSource(Protocol):
    """What the cycle needs from the API client."""

    def fetch_profiles(self, usernames: Sequence[str]) -> ProfileLookupResult: ...

    def fetch_items(self, user_id: str, start_time: datetime) -> TweetFetchResult: ...


@dataclass
class CycleResult:
    """Outcome of one crawl cycle, mirrored into its ``crawler_runs`` row."""

    run_id: int
    status: RunStatus = RunStatus.RUNNING
    tweets_fetched: int = 0
    jobs_queued: int = 0
    requests_processed: int = 0
    requests_requeued: int = 0
    jobs_reconciled: int = 0
    errors: list[ApiErrorDetail] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return self.status is RunStatus.FAILED


class CrawlCycle:
    """Runs one cycle against an open connection.

    Errors are recorded into both the run's error list and ``api_errors``.
    Authentication and rate-limit failures abort the cycle; everything else
    skips the affected request or account and continues.
    """

    def __init__(
        self,
        conn: sqlite3.Connection,
        client: TweetSource,
        settings: FeelsConfig,
        shutdown: threading.Event | None = None,
    ) -> None:
        self.conn = conn
        self.client = client
        self.settings = settings
        self.shutdown = shutdown or threading.Event()
        self.result: CycleResult | None = None
        self._enabled_model_ids: list[int] = []

    # ------------------------------------------------------------------
    # Error recording
    # ------------------------------------------------------------------
    def record_error(
        self,
        kind: ErrorKind,
        message: str,
        code: str | None = None,
        endpoint: str | None = None,
    ) -> None:
        """Append to the run's error list and the ``api_errors`` table.

        A store failure here is logged and dropped so it never hides the
        error being recorded.
        """
        detail = ApiErrorDetail(error_type=kind, message=message, code=code, endpoint=endpoint)
        self.result.errors.append(detail)
        log.warning("[%s] %s", kind.value, message)

        try:
            log_api_error(self.conn, kind, message, code=code, endpoint=endpoint)
            self.conn.commit()
        except sqlite3.Error as e:
            log.warning("Failed to record api error: %s", e)

    def record_partial_errors(self, errors: Sequence[PartialError], endpoint: str) -> None:
        for partial in errors:
            self.record_error(ErrorKind.API_CHANGE, partial.message(), code=partial.type, endpoint=endpoint)

    def _shutdown_requested(self) -> bool:
        if not self.shutdown.is_set():
            return False
        self.result.status = RunStatus.FAILED
        self.record_error(ErrorKind.OTHER, "Shutdown requested")
        return True

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------
    def recover(self) -> None:
        """Reclaim abandoned reanalysis requests and enqueue jobs for job-less tweets."""
        crawler = self.settings.crawler
        self.result.requests_requeued = requeue_stale_requests(
            self.conn, minutes_ago(crawler.stale_processing_minutes)
        )
        if self.result.requests_requeued:
            log.info("Requeued %d stale reanalysis request(s)", self.result.requests_requeued)

        if crawler.reconcile_on_start:
            self.result.jobs_reconciled = reconcile_missing_jobs(self.conn, self._enabled_model_ids)
            if self.result.jobs_reconciled:
                log.info("Enqueued %d missing analysis job(s)", self.result.jobs_reconciled)

        self.conn.commit()

    def _dispatch_request(self, request: ReanalysisRequest) -> int:
        request_type = parse_request_type(request.request_type)
        if request_type is RequestType.ITEM:
            if request.tweet_id is None:
                raise ConfigurationError("Missing tweet_id for reanalysis request")
            return enqueue_reanalysis_for_tweet(self.conn, request.tweet_id, self._enabled_model_ids)
        if request_type is RequestType.ACCOUNT:
            if request.twitter_user_id is None:
                raise ConfigurationError("Missing twitter_user_id for reanalysis request")
            return enqueue_reanalysis_for_user(self.conn, request.twitter_user_id, self._enabled_model_ids)
        return enqueue_reanalysis_for_all(self.conn, self._enabled_model_ids)

    def drain_reanalysis(self) -> None:
        """Handle up to one batch of pending requests, oldest first.

        Every claimed request ends ``completed``, whether or not its enqueue
        succeeded; failures are recorded.
        """
        requests = claim_pending_requests(self.conn, limit=self.settings.crawler.reanalysis_batch_size)
        for request in requests:
            if self._shutdown_requested():
                return

            mark_reanalysis_processing(self.conn, request.id)
            self.conn.commit()

            try:
                enqueued = self._dispatch_request(request)
            except Exception as e:
                log.debug("Reanalysis request %d failed: %s", request.id, e)
                self.record_error(classify_error(e), f"Failed reanalysis request {request.id}: {e}")
            else:
                log.info("Reanalysis request %d (%s) enqueued %d job(s)", request.id, request.request_type, enqueued)

            mark_reanalysis_completed(self.conn, request.id)
            self.conn.commit()
            self.result.requests_processed += 1

    def crawl_account(self, account: TrackedAccount, twitter_id: str, floor: datetime) -> None:
        """Fetch and ingest one account's new tweets, then advance its checkpoint."""
        start_time = plan_fetch_start(get_checkpoint(self.conn, account.id), floor)

        try:
            fetched = self.client.fetch_items(twitter_id, start_time)
        except Exception as e:
            self.record_error(
                classify_error(e),
                f"Failed fetching tweets for @{account.username}: {e}",
                endpoint=TWEETS_ENDPOINT,
            )
            if should_abort(e):
                raise
            return

        self.record_partial_errors(fetched.errors, TWEETS_ENDPOINT)

        ingested = ingest_tweets(self.conn, account.id, fetched.tweets, self._enabled_model_ids)
        if ingested.latest_timestamp is not None:
            advance_checkpoint(self.conn, account.id, ingested.latest_timestamp)
        # Tweets, jobs and checkpoint become visible together
        self.conn.commit()

        self.result.tweets_fetched += ingested.inserted
        self.result.jobs_queued += ingested.jobs_enqueued
        log.info(
            "@%s: %d new tweet(s), %d job(s) from %d page(s)",
            account.username,
            ingested.inserted,
            ingested.jobs_enqueued,
            fetched.pages,
        )

    def crawl_accounts(self) -> None:
        accounts = get_active_accounts(self.conn)
        if not accounts:
            log.info("No active users to crawl.")
            return

        try:
            profiles = self.client.fetch_profiles([a.username for a in accounts])
        except Exception as e:
            self.record_error(classify_error(e), f"Failed resolving profiles: {e}", endpoint=USERS_ENDPOINT)
            raise

        self.record_partial_errors(profiles.errors, USERS_ENDPOINT)
        by_handle = profiles.by_handle()
        floor = history_floor(self.settings.crawler.history_depth_days, now=utc_now())

        for account in accounts:
            if self._shutdown_requested():
                return

            profile = by_handle.get(account.username.lower())
            if profile is None:
                self.record_error(
                    ErrorKind.API_CHANGE,
                    f"Twitter user not found: @{account.username}",
                    endpoint=USERS_ENDPOINT,
                )
                continue

            update_account_from_profile(self.conn, account.username, profile)
            self.conn.commit()
            self.crawl_account(account, profile.id, floor)

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------
    def run(self) -> CycleResult:
        """Run the cycle and persist its outcome.

        Any exception that escapes a step marks the run ``failed``, is
        recorded, and is re-raised after the run row is finished.
        """
        run_id = start_run(self.conn)
        self.conn.commit()
        self.result = CycleResult(run_id=run_id)
        log.info("Starting crawl cycle (run %d)", run_id)

        try:
            self._enabled_model_ids = get_enabled_model_ids(self.conn)
            self.recover()
            self.drain_reanalysis()
            if not self.result.failed:
                self.crawl_accounts()
        except Exception as e:
            self.conn.rollback()
            self.result.status = RunStatus.FAILED
            self.record_error(classify_error(e), f"Crawler cycle error: {e}")
            self._finish()
            raise

        if self.result.status is RunStatus.RUNNING:
            self.result.status = RunStatus.COMPLETED
        self._finish()
        log.info(
            "Crawl cycle complete: %d tweets fetched, %d analysis jobs queued",
            self.result.tweets_fetched,
            self.result.jobs_queued,
        )
        return self.result

    def _finish(self) -> None:
        finish_run(
            self.conn,
            self.result.run_id,
            self.result.status,
            self.result.tweets_fetched,
            self.result.jobs_queued,
            self.result.errors,
        )
        self.conn.commit()


def run_crawl_cycle(
    conn: sqlite3.Connection,
    client: TweetSource,
    settings: FeelsConfig,
    shutdown: threading.Event | None = None,
) -> CycleResult:
    """Run one crawl cycle. See ``CrawlCycle``."""
    return CrawlCycle(conn, client, settings, shutdown).run()

