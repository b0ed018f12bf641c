"""Pydantic models for X API v2 response payloads."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003 - pydantic needs this at runtime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _Payload(BaseModel):
    """Remote payloads carry many fields we do not read."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class UserMetrics(_Payload):
    followers_count: int | None = None
    following_count: int | None = None


class RemoteUser(_Payload):
    """A user object from ``GET /users/by``."""

    id: str
    name: str
    username: str
    public_metrics: UserMetrics | None = None
    profile_image_url: str | None = None

    @property
    def follower_count(self) -> int | None:
        return self.public_metrics.followers_count if self.public_metrics else None

    @property
    def following_count(self) -> int | None:
        return self.public_metrics.following_count if self.public_metrics else None


class PartialError(_Payload):
    """Per-item error object embedded in an otherwise successful response."""

    title: str | None = None
    detail: str | None = None
    type: str | None = None
    value: str | None = None
    resource_type: str | None = None

    def message(self) -> str:
        title = self.title or "Twitter API error"
        detail = self.detail or "Unknown error"
        return f"{title}: {detail}"


class UsersResponse(_Payload):
    data: list[RemoteUser] | None = None
    errors: list[PartialError] | None = None


class TweetMetrics(_Payload):
    like_count: int | None = None
    retweet_count: int | None = None
    reply_count: int | None = None
    quote_count: int | None = None


class ReferencedTweet(_Payload):
    type: str
    id: str


class RemoteTweet(_Payload):
    """A tweet object from ``GET /users/{id}/tweets``."""

    id: str
    text: str
    created_at: datetime
    public_metrics: TweetMetrics | None = None
    referenced_tweets: list[ReferencedTweet] | None = None

    def _references(self, ref_type: str) -> bool:
        return any(ref.type == ref_type for ref in self.referenced_tweets or [])

    @property
    def is_retweet(self) -> bool:
        return self._references("retweeted")

    @property
    def is_reply(self) -> bool:
        return self._references("replied_to")

    def engagement(self) -> dict[str, Any]:
        metrics = self.public_metrics or TweetMetrics()
        return {
            "likes": metrics.like_count or 0,
            "retweets": metrics.retweet_count or 0,
            "replies": metrics.reply_count or 0,
            "quotes": metrics.quote_count or 0,
        }


class TweetsMeta(_Payload):
    result_count: int | None = None
    next_token: str | None = None


class TweetsResponse(_Payload):
    data: list[RemoteTweet] | None = None
    meta: TweetsMeta | None = None
    errors: list[PartialError] | None = None


class ProfileLookupResult(BaseModel):
    """Union of all batch lookups for one ``fetch_profiles`` call."""

    users: list[RemoteUser] = Field(default_factory=list)
    errors: list[PartialError] = Field(default_factory=list)

    def by_handle(self) -> dict[str, RemoteUser]:
        return {user.username.lower(): user for user in self.users}


class TweetFetchResult(BaseModel):
    """All pages of one ``fetch_items`` call."""

    tweets: list[RemoteTweet] = Field(default_factory=list)
    errors: list[PartialError] = Field(default_factory=list)
    pages: int = 0
