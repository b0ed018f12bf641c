"""feelscrawl - Incremental tweet crawler feeding a sentiment-analysis queue."""

try:
    from importlib.metadata import version

    __version__ = version("feelscrawl")
except Exception:
    __version__ = "0.0.0-dev"
