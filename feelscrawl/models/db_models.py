"""Pydantic models for database rows."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003 - pydantic needs this at runtime
from enum import Enum

from pydantic import BaseModel, Field

from ..errors import ErrorKind
from ..time_utils import to_rfc3339, utc_now


class RequestType(str, Enum):
    ITEM = "tweet"
    ACCOUNT = "user"
    ALL = "all"


class RequestStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"


class RunStatus(str, Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class TrackedAccount(BaseModel):
    """An account the crawler follows."""

    id: int
    twitter_id: str | None = None
    username: str
    display_name: str | None = None
    is_active: bool = True


class ReanalysisRequest(BaseModel):
    """A queued request to re-enqueue analysis jobs.

    ``request_type`` is kept as the raw stored string so that unknown types
    reach the dispatcher and are logged instead of failing row parsing.
    """

    id: int
    request_type: str
    tweet_id: int | None = None
    twitter_user_id: int | None = None
    status: str = RequestStatus.PENDING.value
    requested_at: str | None = None


class ApiErrorDetail(BaseModel):
    """One recorded error, kept in the run blob and the ``api_errors`` table."""

    error_type: ErrorKind
    message: str
    code: str | None = None
    endpoint: str | None = None
    timestamp: str = Field(default_factory=lambda: to_rfc3339(utc_now()))


class CrawlRun(BaseModel):
    """Audit record of one crawl cycle."""

    id: int
    status: RunStatus
    tweets_fetched: int = 0
    tweets_analyzed: int = 0
    errors_count: int = 0
    error_details: list[ApiErrorDetail] = []
    started_at: str | None = None
    completed_at: str | None = None


class IngestResult(BaseModel):
    """Outcome of one ``ingest_tweets`` call."""

    inserted: int = 0
    jobs_enqueued: int = 0
    latest_timestamp: datetime | None = None
