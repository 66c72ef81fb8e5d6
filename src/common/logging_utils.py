"""Centralized logging helpers.

Provides one place to configure handlers and a few helpers used for the
structured DEBUG traces emitted by the fetch and aggregation code.
"""
from __future__ import annotations

import logging
import os
import sys
import time
from typing import Any, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

from constants import Constants

ENV_LOG_LEVEL = "WOLFI_STATUS_LOG_LEVEL"
_DEFAULT_LEVEL = "WARNING"


def configure_logging(logfile: Optional[str] = None) -> None:
    """Install the root handlers once per process.

    The level comes from WOLFI_STATUS_LOG_LEVEL; main() exports the CLI
    --loglevel value there before calling this.
    """
    level_name = os.environ.get(ENV_LOG_LEVEL, _DEFAULT_LEVEL).upper()
    level = getattr(logging, level_name, logging.WARNING)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    formatter = logging.Formatter(Constants.LOG_FORMAT)
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    if logfile:
        file_handler = logging.FileHandler(logfile, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter("%(asctime)s " + Constants.LOG_FORMAT))
        root.addHandler(file_handler)

    root.setLevel(level)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted by logger."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**kwargs: Any) -> Dict[str, Any]:
    """Build an ``extra`` dict for structured log records, dropping None values."""
    return {k: v for k, v in kwargs.items() if v is not None}


def safe_url(url: str) -> str:
    """Strip userinfo and query string from a URL before it is logged."""
    if not url or "://" not in url:
        return url
    try:
        parts = urlsplit(url)
    except ValueError:
        return url.split("://", 1)[0] + "://<invalid url>"
    host = parts.netloc.rsplit("@", 1)[-1]
    return urlunsplit((parts.scheme, host, parts.path, "", ""))


def redact(token: Optional[str]) -> str:
    """Mask a secret, keeping only enough to recognise it."""
    if not token:
        return ""
    if len(token) <= 8:
        return "****"
    return f"{token[:4]}...{token[-2:]}"


class Timer:
    """Context manager measuring wall-clock duration."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *exc: Any) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        """Elapsed milliseconds; usable inside the block as well."""
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
