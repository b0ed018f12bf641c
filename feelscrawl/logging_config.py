"""Console logging setup for long-running commands."""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

LOG_LEVEL_ENV = "FEELSCRAWL_LOG_LEVEL"

# Third-party loggers that are too chatty at INFO
_QUIET_LOGGERS = ("httpx", "httpcore")


def resolve_log_level(level: str | None = None) -> int:
    """Map a level name (or ``FEELSCRAWL_LOG_LEVEL``) to a logging constant; unknown names mean INFO."""
    name = (level or os.environ.get(LOG_LEVEL_ENV) or "INFO").upper()
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.INFO


def setup_logging(level: str | None = None, console: Console | None = None) -> int:
    """Route the ``feelscrawl`` loggers through a RichHandler. Returns the level used."""
    resolved = resolve_log_level(level)

    handler = RichHandler(console=console, rich_tracebacks=True, markup=False, show_path=False)
    handler.setLevel(resolved)

    root = logging.getLogger()
    for existing in list(root.handlers):
        if isinstance(existing, RichHandler):
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(resolved)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if resolved <= logging.DEBUG else logging.WARNING)

    return resolved
