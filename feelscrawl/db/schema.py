"""Database schema definitions for feelscrawl."""

SCHEMA = """
-- Tracked accounts (rows are created by `feelscrawl accounts add` or the admin backend)
CREATE TABLE IF NOT EXISTS twitter_users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    twitter_id TEXT,
    username TEXT UNIQUE NOT NULL COLLATE NOCASE,
    display_name TEXT,
    avatar_url TEXT,
    follower_count INTEGER,
    following_count INTEGER,
    is_active INTEGER DEFAULT 1,
    created_at TEXT DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now')),
    updated_at TEXT DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now'))
);

-- Tweets: deduplicated on the remote tweet id
CREATE TABLE IF NOT EXISTS tweets (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    twitter_user_id INTEGER NOT NULL,
    tweet_id TEXT UNIQUE NOT NULL,
    content TEXT NOT NULL,
    tweet_timestamp TEXT NOT NULL,
    engagement_metrics TEXT,
    is_retweet INTEGER DEFAULT 0,
    is_reply INTEGER DEFAULT 0,
    created_at TEXT DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now')),
    FOREIGN KEY (twitter_user_id) REFERENCES twitter_users(id) ON DELETE CASCADE
);

-- Sentiment models; the analysis worker owns everything but is_enabled
CREATE TABLE IF NOT EXISTS llm_models (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT UNIQUE NOT NULL,
    is_enabled INTEGER DEFAULT 0,
    created_at TEXT DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now'))
);

-- Downstream work queue consumed by the analysis worker
CREATE TABLE IF NOT EXISTS analysis_queue (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    tweet_id INTEGER NOT NULL,
    llm_model_id INTEGER,
    status TEXT NOT NULL DEFAULT 'pending',
    attempt_count INTEGER DEFAULT 0,
    last_error TEXT,
    enqueued_at TEXT DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now')),
    updated_at TEXT DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now')),
    UNIQUE(tweet_id, llm_model_id),
    FOREIGN KEY (tweet_id) REFERENCES tweets(id) ON DELETE CASCADE,
    FOREIGN KEY (llm_model_id) REFERENCES llm_models(id)
);

-- Per-account watermark
CREATE TABLE IF NOT EXISTS crawler_checkpoints (
    twitter_user_id INTEGER PRIMARY KEY,
    last_tweet_timestamp TEXT NOT NULL,
    updated_at TEXT DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now')),
    FOREIGN KEY (twitter_user_id) REFERENCES twitter_users(id) ON DELETE CASCADE
);

-- Out-of-band reanalysis requests
CREATE TABLE IF NOT EXISTS reanalysis_requests (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    request_type TEXT NOT NULL,  -- 'tweet', 'user', 'all'
    tweet_id INTEGER,
    twitter_user_id INTEGER,
    status TEXT NOT NULL DEFAULT 'pending',  -- 'pending', 'processing', 'completed'
    requested_at TEXT DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now')),
    claimed_at TEXT,
    processed_at TEXT
);

-- One row per crawl cycle
CREATE TABLE IF NOT EXISTS crawler_runs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    status TEXT NOT NULL,  -- 'running', 'completed', 'failed'
    tweets_fetched INTEGER DEFAULT 0,
    tweets_analyzed INTEGER DEFAULT 0,
    errors_count INTEGER DEFAULT 0,
    error_details TEXT,
    started_at TEXT DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now')),
    completed_at TEXT
);

-- Standalone API error log
CREATE TABLE IF NOT EXISTS api_errors (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    error_type TEXT NOT NULL,
    error_message TEXT NOT NULL,
    error_code TEXT,
    endpoint TEXT,
    occurred_at TEXT DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now')),
    resolved INTEGER DEFAULT 0
);

-- Indexes
CREATE INDEX IF NOT EXISTS idx_tweets_user ON tweets(twitter_user_id, tweet_timestamp DESC);
CREATE INDEX IF NOT EXISTS idx_analysis_queue_status ON analysis_queue(status);
CREATE INDEX IF NOT EXISTS idx_analysis_queue_tweet ON analysis_queue(tweet_id);
CREATE INDEX IF NOT EXISTS idx_reanalysis_status ON reanalysis_requests(status, requested_at);
CREATE INDEX IF NOT EXISTS idx_api_errors_occurred ON api_errors(occurred_at DESC);
CREATE INDEX IF NOT EXISTS idx_crawler_runs_started ON crawler_runs(started_at DESC);
"""

# NULL model ids are distinct under UNIQUE(tweet_id, llm_model_id); this index
# makes the "no models enabled" job unique per tweet as well.
JOB_UNIQUE_INDEX = """
CREATE UNIQUE INDEX IF NOT EXISTS idx_analysis_queue_target
ON analysis_queue(tweet_id, COALESCE(llm_model_id, -1))
"""
