"""Fetcher for single page GETs.

This module provides the Fetcher class, which encapsulates the HTTP client,
the inter-request delay, response-encoding resolution, and the classification
of failed fetches.

The fetcher is responsible for:
- Sleeping the configured delay before every network request
- Maintaining the HTTP client (httpx.Client)
- Decoding the response body per the charset policy in trawl.common.encoding
- Turning 404/410, 5xx and malformed URLs into a FetchOutcome instead of
  an exception, so one bad link does not abort a batch
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

import httpx

from trawl.common.encoding import normalize_text, resolve_charset
from trawl.config import ScraperConfig
from trawl.data_types import FetchOutcome, FetchResult

logger = logging.getLogger(__name__)

NOT_FOUND_STATUSES = frozenset({404, 410})


class Fetcher:
    """Performs one throttled GET per call.

    Example::

        with Fetcher(ScraperConfig(sleep_time_between_requests=5)) as fetcher:
            result = fetcher.fetch("http://example.com/list")
            if result.ok:
                print(result.body)
    """

    def __init__(
        self,
        config: ScraperConfig | None = None,
        client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the fetcher.

        Args:
            config: Scrape settings; supplies delay, headers and timeout.
            client: Optional pre-built httpx.Client. When omitted the fetcher
                creates one and closes it in close().
            sleep: Function used for the inter-request delay.
        """
        self.config = config or ScraperConfig()
        self._sleep = sleep
        self._log_level = logging.INFO if self.config.verbose else logging.DEBUG

        if client is not None:
            self._client = client
            self._owns_client = False
        else:
            self._client = httpx.Client(
                follow_redirects=True, timeout=self.config.timeout
            )
            self._owns_client = True

    def close(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> Fetcher:
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit - closes the client."""
        self.close()

    def fetch(self, url: str) -> FetchResult:
        """GET ``url`` and classify the result.

        Args:
            url: Absolute URL to fetch. An empty string returns an empty OK
                result without sleeping or touching the network.

        Returns:
            FetchResult with the normalized body for OK outcomes and an empty
            body for NOT_FOUND, SERVER_ERROR and INVALID_URL.

        Raises:
            httpx.HTTPStatusError: For 4xx statuses other than 404/410 and
                for 3xx responses that were not followed.
            httpx.TransportError: For connection failures and timeouts.
        """
        if not url:
            return FetchResult(url=url, outcome=FetchOutcome.OK)

        logger.log(self._log_level, f"Fetching {url}")
        self._sleep(self.config.sleep_time_between_requests)

        try:
            if _has_malformed_host(httpx.URL(url)):
                raise httpx.InvalidURL(f"Malformed host in {url!r}")
            response = self._client.get(url, headers=self.config.http_headers())
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            logger.log(self._log_level, f"Invalid URL, skipping: {url} ({e})")
            return FetchResult(url=url, outcome=FetchOutcome.INVALID_URL)

        status = response.status_code
        content_type = response.headers.get("content-type")

        if status in NOT_FOUND_STATUSES:
            logger.log(self._log_level, f"{status} error, skipping: {url}")
            return FetchResult(
                url=url,
                outcome=FetchOutcome.NOT_FOUND,
                content_type=content_type,
                status_code=status,
            )
        if 500 <= status < 600:
            logger.log(self._log_level, f"{status} error, skipping: {url}")
            return FetchResult(
                url=url,
                outcome=FetchOutcome.SERVER_ERROR,
                content_type=content_type,
                status_code=status,
            )

        # Other 4xx and unfollowed 3xx (304, 300 without Location) raise
        response.raise_for_status()

        charset = resolve_charset(status, content_type)
        return FetchResult(
            url=url,
            outcome=FetchOutcome.OK,
            body=normalize_text(response.content, charset),
            content_type=content_type,
            status_code=status,
            encoding=charset,
        )


def _has_malformed_host(url: httpx.URL) -> bool:
    """True if the host contains whitespace, control characters or escapes.

    httpx passes such hosts straight to DNS.
    """
    host = url.host
    return "%" in host or any(ch.isspace() or ord(ch) < 32 for ch in host)
