"""Logging helpers shared by every module.

Structured fields are attached through ``extra=extra_context(...)`` so a
formatter or log shipper can pick them up without parsing messages.
"""

from __future__ import annotations

import logging
import os
import re
import sys
import time
import urllib.parse
from typing import Any, Dict, Iterable, Optional

from ..constants import Constants

_SENSITIVE_QUERY_KEYS = {"token", "access_token", "auth", "password", "key", "secret"}
_TOKEN_PATTERN = re.compile(r"(npm_[A-Za-z0-9]{20,}|gh[pousr]_[A-Za-z0-9]{20,})")


def extra_context(**kwargs: Any) -> Dict[str, Any]:
    """Build the ``extra`` mapping for a log call, dropping ``None`` values."""
    return {k: v for k, v in kwargs.items() if v is not None}


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records from ``logger`` would be emitted."""
    return logger.isEnabledFor(logging.DEBUG)


def redact(text: str) -> str:
    """Mask things that look like registry or forge tokens."""
    if not text:
        return text
    return _TOKEN_PATTERN.sub("[REDACTED]", text)


def safe_url(url: str) -> str:
    """Strip credentials and sensitive query values from a URL for logging."""
    try:
        parts = urllib.parse.urlsplit(url)
    except ValueError:
        return redact(url)
    netloc = parts.netloc
    if "@" in netloc:
        netloc = "[REDACTED]@" + netloc.rsplit("@", 1)[1]
    query = parts.query
    if query:
        pairs = urllib.parse.parse_qsl(query, keep_blank_values=True)
        query = urllib.parse.urlencode(
            [(k, "[REDACTED]" if k.lower() in _SENSITIVE_QUERY_KEYS else v) for k, v in pairs]
        )
    return redact(urllib.parse.urlunsplit((parts.scheme, netloc, parts.path, query, parts.fragment)))


class Timer:
    """Context manager measuring wall-clock duration."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> float:
        """Milliseconds elapsed so far, or in total once the block exited."""
        end = self._end if self._end is not None else time.perf_counter()
        return round((end - self._start) * 1000.0, 2)


def configure_logging(level: Optional[str] = None) -> None:
    """Install a stderr handler on the root logger.

    The level comes from ``level``, then ``NPM_MIRROR_LOG_LEVEL``, then INFO.
    Calling this more than once does not stack handlers.
    """
    level_name = (level or os.environ.get(Constants.LOG_LEVEL_ENV) or "INFO").upper()
    level_value = getattr(logging, level_name, logging.INFO)
    root = logging.getLogger()
    if not any(getattr(h, "_npm_mirror", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
        handler._npm_mirror = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    root.setLevel(level_value)


def log_discovered_files(logger: logging.Logger, root: str, paths: Iterable[str]) -> None:
    """Log manifest discovery results at DEBUG."""
    if not is_debug_enabled(logger):
        return
    paths = list(paths)
    logger.debug(
        "Discovered manifests",
        extra=extra_context(
            event="discover",
            component="manifest",
            root=root,
            count=len(paths),
            files=paths,
        ),
    )
