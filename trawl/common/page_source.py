"""Stash-or-fetch page access."""

from __future__ import annotations

import logging

from trawl.common.cache import PageCache
from trawl.common.fetcher import Fetcher
from trawl.config import ScraperConfig
from trawl.data_types import UrlSource, as_url_source, cache_key

logger = logging.getLogger(__name__)


class PageSource:
    """Returns page bodies from the stash or the network.

    With ``use_cache`` set, a stashed page short-circuits the fetch, and a
    fetched page is written back whatever its outcome. Failed fetches are
    stashed as empty bodies, so later runs skip them without another request.

    Attributes:
        cache: The PageCache holding stashed pages.
        fetcher: The Fetcher used on a stash miss.
    """

    def __init__(
        self,
        config: ScraperConfig | None = None,
        fetcher: Fetcher | None = None,
        cache: PageCache | None = None,
    ) -> None:
        self.config = config or ScraperConfig()
        self.fetcher = fetcher or Fetcher(self.config)
        self.cache = cache or PageCache(self.config.stash_folder)
        self._log_level = logging.INFO if self.config.verbose else logging.DEBUG

    def close(self) -> None:
        self.fetcher.close()

    def get(self, url: str | UrlSource, use_cache: bool = False) -> str:
        """Return the body for ``url``.

        Args:
            url: A URL string, LiteralURL, or ResolvableIndex. Resolvable
                sources are resolved before anything else happens.
            use_cache: Read from and write to the stash.

        Returns:
            The normalized page body, or "" if the URL is empty or the fetch
            was classified as not found, server error or invalid URL.
        """
        resolved = as_url_source(url).resolve()
        if not resolved:
            return ""

        key = cache_key(resolved)
        if use_cache and not key:
            logger.warning(
                f"URL {resolved!r} has no usable stash key; not stashing it"
            )
            use_cache = False

        if use_cache and self.cache.has(key):
            logger.log(self._log_level, f"Using stashed copy of {resolved}")
            return self.cache.read(key)

        result = self.fetcher.fetch(resolved)
        body = result.body if result.ok else ""

        if use_cache:
            self.cache.write(key, body)
            logger.log(
                self._log_level,
                f"Stashed ({result.status_code}): {resolved}",
                extra={"outcome": result.outcome.value, "key": key},
            )
        return body
