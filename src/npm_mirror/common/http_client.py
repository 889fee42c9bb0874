"""Async registry client used to fetch package metadata.

Wraps an aiohttp session with a request timeout, bounded retries for
connection errors and 5xx answers, and DEBUG traces for each attempt.
Failures surface as ``TransportFailure`` subclasses; nothing here exits
the process.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional

import aiohttp

from ..constants import Constants
from ..errors import RegistryNotFound, TransportFailure
from .logging_utils import Timer, extra_context, is_debug_enabled, safe_url

logger = logging.getLogger(__name__)


class RegistryClient:
    """Download collaborator for registry documents."""

    def __init__(
        self,
        timeout: float = Constants.REQUEST_TIMEOUT,
        retry_max: int = Constants.HTTP_RETRY_MAX,
        retry_base_delay: float = Constants.HTTP_RETRY_BASE_DELAY_SEC,
        headers: Optional[Dict[str, str]] = None,
        connection_limit: int = 100,
    ):
        """Initialize the client.

        Args:
            timeout: Total per-request timeout in seconds.
            retry_max: Attempts per URL before giving up.
            retry_base_delay: First backoff delay; doubles per attempt.
            headers: Extra request headers (e.g. Authorization).
            connection_limit: Connector pool size.
        """
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._retry_max = max(1, retry_max)
        self._retry_base_delay = retry_base_delay
        self._connection_limit = connection_limit
        self._headers = self._build_request_headers(headers)
        self._session: Optional[aiohttp.ClientSession] = None

    async def start(self) -> None:
        """Start the HTTP session."""
        if self._session is None:
            connector = aiohttp.TCPConnector(limit=self._connection_limit)
            self._session = aiohttp.ClientSession(timeout=self._timeout, connector=connector)

    async def stop(self) -> None:
        """Stop the HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None

    def _build_request_headers(self, headers: Optional[Dict[str, str]]) -> Dict[str, str]:
        request_headers: Dict[str, str] = dict(headers or {})
        request_headers.setdefault("User-Agent", Constants.USER_AGENT)
        request_headers.setdefault("Accept", "application/json")
        return request_headers

    async def download(self, url: str) -> str:
        """Fetch ``url`` and return the body as text.

        Raises:
            RegistryNotFound: The registry answered 404.
            TransportFailure: Any other non-2xx answer, or retries exhausted.
        """
        if self._session is None:
            await self.start()
        assert self._session is not None

        safe_target = safe_url(url)
        last_error: Optional[str] = None
        for attempt in range(self._retry_max):
            if attempt:
                await asyncio.sleep(self._retry_base_delay * (2 ** (attempt - 1)))
            with Timer() as t:
                if is_debug_enabled(logger):
                    logger.debug(
                        "HTTP request",
                        extra=extra_context(
                            event="http_request",
                            component="http_client",
                            action="GET",
                            target=safe_target,
                            attempt=attempt + 1,
                        ),
                    )
                try:
                    async with self._session.get(url, headers=self._headers) as response:
                        status = response.status
                        body = await response.text()
                except asyncio.TimeoutError:
                    last_error = "timeout"
                    logger.debug(
                        "HTTP timeout",
                        extra=extra_context(
                            event="http_exception",
                            component="http_client",
                            outcome="timeout",
                            attempt=attempt + 1,
                            target=safe_target,
                        ),
                    )
                    continue
                except aiohttp.ClientError as exc:
                    last_error = str(exc)
                    logger.debug(
                        "HTTP request exception",
                        extra=extra_context(
                            event="http_exception",
                            component="http_client",
                            outcome="client_error",
                            attempt=attempt + 1,
                            target=safe_target,
                        ),
                    )
                    continue

            if status >= 500:
                last_error = f"HTTP {status}"
                continue

            if is_debug_enabled(logger):
                logger.debug(
                    "HTTP response",
                    extra=extra_context(
                        event="http_response",
                        component="http_client",
                        action="GET",
                        status_code=status,
                        duration_ms=t.duration_ms(),
                        target=safe_target,
                    ),
                )
            if status == 404:
                raise RegistryNotFound(f"Not found: {safe_target}", url=url, status=status)
            if status < 200 or status >= 300:
                raise TransportFailure(f"HTTP {status} for {safe_target}", url=url, status=status)
            return body

        logger.error("Registry request failed after %s attempts: %s", self._retry_max, safe_target)
        raise TransportFailure(
            f"Request failed after {self._retry_max} attempts: {last_error}", url=url
        )

    async def __aenter__(self) -> "RegistryClient":
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.stop()
