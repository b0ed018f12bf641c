"""X API client and the rate limiter it shares."""

from .rate_limit import WINDOW_SECONDS, RateLimiter
from .x_api import (
    MAX_RESULTS_PER_PAGE,
    MAX_USERNAMES_PER_LOOKUP,
    TWEETS_ENDPOINT,
    USERS_ENDPOINT,
    XApiClient,
    chunked,
)

__all__ = [
    "MAX_RESULTS_PER_PAGE",
    "MAX_USERNAMES_PER_LOOKUP",
    "TWEETS_ENDPOINT",
    "USERS_ENDPOINT",
    "WINDOW_SECONDS",
    "RateLimiter",
    "XApiClient",
    "chunked",
]
