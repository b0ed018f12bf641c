"""Pydantic models for feelscrawl configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field


class CrawlerConfig(BaseModel):
    """Crawl cycle scheduling and window configuration."""

    interval_hours: float = Field(default=1, gt=0)
    history_depth_days: int = Field(default=90, ge=0)
    reanalysis_batch_size: int = Field(default=25, gt=0)
    stale_processing_minutes: int = Field(default=30, ge=0)
    reconcile_on_start: bool = True


class ApiConfig(BaseModel):
    """Remote API client configuration."""

    base_url: str = "https://api.twitter.com/2"
    rate_limit_per_15min: int = 450
    timeout_seconds: float = 30.0
    bearer_token_env: str = "TWITTER_BEARER_TOKEN"
    user_agent: str = "feelscrawl/0.1"


class PathsConfig(BaseModel):
    """Paths configuration."""

    data_dir: str | None = None


class FeelsConfig(BaseModel):
    """Top-level feelscrawl configuration."""

    crawler: CrawlerConfig = CrawlerConfig()
    api: ApiConfig = ApiConfig()
    paths: PathsConfig = PathsConfig()
