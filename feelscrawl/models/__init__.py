"""Pydantic models for the feelscrawl application."""

from __future__ import annotations

from .api import (
    PartialError,
    ProfileLookupResult,
    ReferencedTweet,
    RemoteTweet,
    RemoteUser,
    TweetFetchResult,
    TweetMetrics,
    TweetsMeta,
    TweetsResponse,
    UserMetrics,
    UsersResponse,
)
from .config import ApiConfig, CrawlerConfig, FeelsConfig, PathsConfig
from .db_models import (
    ApiErrorDetail,
    CrawlRun,
    IngestResult,
    ReanalysisRequest,
    RequestStatus,
    RequestType,
    RunStatus,
    TrackedAccount,
)

__all__ = [
    "ApiConfig",
    "ApiErrorDetail",
    "CrawlRun",
    "CrawlerConfig",
    "FeelsConfig",
    "IngestResult",
    "PartialError",
    "PathsConfig",
    "ProfileLookupResult",
    "ReanalysisRequest",
    "ReferencedTweet",
    "RemoteTweet",
    "RemoteUser",
    "RequestStatus",
    "RequestType",
    "RunStatus",
    "TrackedAccount",
    "TweetFetchResult",
    "TweetMetrics",
    "TweetsMeta",
    "TweetsResponse",
    "UserMetrics",
    "UsersResponse",
]
