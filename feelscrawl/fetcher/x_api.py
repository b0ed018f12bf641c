"""X API v2 client: batched profile lookups and paginated timelines."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ..time_utils import to_rfc3339
from ..errors import ApiError, AuthenticationError, NetworkError, RateLimitExceededError
from ..models import ProfileLookupResult, TweetFetchResult, TweetsResponse, UsersResponse
from .rate_limit import RateLimiter

log = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.twitter.com/2"
USERS_ENDPOINT = "/2/users/by"
TWEETS_ENDPOINT = "/2/users/:id/tweets"

# Hard limits of the remote API
MAX_USERNAMES_PER_LOOKUP = 100
MAX_RESULTS_PER_PAGE = 100

USER_FIELDS = "public_metrics,profile_image_url"
TWEET_FIELDS = "created_at,public_metrics,referenced_tweets"

ResponseT = TypeVar("ResponseT", bound=BaseModel)


def chunked(values: Sequence[str], size: int) -> list[list[str]]:
    return [list(values[i : i + size]) for i in range(0, len(values), size)]


class XApiClient:
    """Rate-limited client; every request (each batch, each page) takes one token."""

    def __init__(
        self,
        bearer_token: str,
        rate_limiter: RateLimiter,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        user_agent: str = "feelscrawl/0.1",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.rate_limiter = rate_limiter
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {bearer_token}",
                "User-Agent": user_agent,
            },
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> XApiClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Request plumbing
    # ------------------------------------------------------------------
    def _get(self, path: str, params: dict[str, str], endpoint: str, model: type[ResponseT]) -> ResponseT:
        self.rate_limiter.acquire()

        try:
            response = self._client.get(path, params=params)
        except httpx.HTTPError as exc:
            log.error("Request to %s failed: %s", endpoint, exc)
            raise NetworkError(f"Network error at {endpoint}: {exc}") from exc

        status = response.status_code
        if status == 401:
            raise AuthenticationError(f"Twitter auth error at {endpoint}")
        if status == 429:
            raise RateLimitExceededError(endpoint=endpoint)
        if not response.is_success:
            body = response.text
            raise ApiError(
                f"Twitter API error at {endpoint}: {status} {body}",
                status_code=status,
                body=body,
                endpoint=endpoint,
            )

        try:
            return model.model_validate_json(response.content)
        except ValidationError as exc:
            raise ApiError(f"Failed to parse Twitter response: {exc}", status_code=status, endpoint=endpoint) from exc

    # ------------------------------------------------------------------
    # Public lookups
    # ------------------------------------------------------------------
    def fetch_profiles(self, usernames: Sequence[str]) -> ProfileLookupResult:
        """Look up profiles in batches of 100, unioning users and partial errors."""
        result = ProfileLookupResult()
        if not usernames:
            return result

        for batch in chunked(list(usernames), MAX_USERNAMES_PER_LOOKUP):
            response = self._get(
                "/users/by",
                {"usernames": ",".join(batch), "user.fields": USER_FIELDS},
                USERS_ENDPOINT,
                UsersResponse,
            )
            result.users.extend(response.data or [])
            result.errors.extend(response.errors or [])

        log.debug("Resolved %d/%d profiles", len(result.users), len(usernames))
        return result

    def fetch_items(self, user_id: str, start_time: datetime) -> TweetFetchResult:
        """Page through a user's timeline from ``start_time`` until no ``next_token`` is returned."""
        result = TweetFetchResult()
        next_token: str | None = None

        while True:
            params = {
                "tweet.fields": TWEET_FIELDS,
                "start_time": to_rfc3339(start_time),
                "max_results": str(MAX_RESULTS_PER_PAGE),
            }
            if next_token:
                params["pagination_token"] = next_token

            page = self._get(f"/users/{user_id}/tweets", params, TWEETS_ENDPOINT, TweetsResponse)
            result.pages += 1
            result.tweets.extend(page.data or [])
            result.errors.extend(page.errors or [])

            next_token = page.meta.next_token if page.meta else None
            if not next_token:
                break

        log.debug("Fetched %d tweets for %s in %d page(s)", len(result.tweets), user_id, result.pages)
        return result
