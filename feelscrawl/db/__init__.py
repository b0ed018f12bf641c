"""SQLite store for feelscrawl."""

from .accounts import (
    get_account_by_handle,
    get_accounts,
    get_active_accounts,
    set_account_active,
    update_account_from_profile,
    upsert_tracked_account,
)
from .checkpoints import advance_checkpoint, get_checkpoint, set_checkpoint
from .connection import get_connection, init_db
from .llm_models import add_model, get_enabled_model_ids, get_models, set_model_enabled
from .reanalysis import (
    claim_pending_requests,
    create_reanalysis_request,
    get_request_counts,
    mark_reanalysis_completed,
    mark_reanalysis_processing,
    parse_request_type,
    requeue_stale_requests,
)
from .runs import (
    finish_run,
    get_error_counts_by_kind,
    get_recent_api_errors,
    get_recent_runs,
    get_run,
    log_api_error,
    resolve_api_errors,
    start_run,
)
from ..time_utils import parse_timestamp, to_rfc3339, utc_now
from .tweets import (
    count_tweets,
    enqueue_jobs,
    enqueue_reanalysis_for_all,
    enqueue_reanalysis_for_tweet,
    enqueue_reanalysis_for_user,
    get_queue_counts,
    ingest_tweets,
    insert_tweet,
    reconcile_missing_jobs,
)

__all__ = [
    "add_model",
    "advance_checkpoint",
    "claim_pending_requests",
    "count_tweets",
    "create_reanalysis_request",
    "enqueue_jobs",
    "enqueue_reanalysis_for_all",
    "enqueue_reanalysis_for_tweet",
    "enqueue_reanalysis_for_user",
    "finish_run",
    "get_account_by_handle",
    "get_accounts",
    "get_active_accounts",
    "get_checkpoint",
    "get_connection",
    "get_enabled_model_ids",
    "get_error_counts_by_kind",
    "get_models",
    "get_queue_counts",
    "get_recent_api_errors",
    "get_recent_runs",
    "get_request_counts",
    "get_run",
    "ingest_tweets",
    "init_db",
    "insert_tweet",
    "log_api_error",
    "mark_reanalysis_completed",
    "mark_reanalysis_processing",
    "parse_request_type",
    "parse_timestamp",
    "reconcile_missing_jobs",
    "requeue_stale_requests",
    "resolve_api_errors",
    "set_account_active",
    "set_checkpoint",
    "start_run",
    "to_rfc3339",
    "update_account_from_profile",
    "upsert_tracked_account",
    "utc_now",
]
