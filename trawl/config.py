"""Scraper configuration.

A single immutable ScraperConfig is built once and handed to every component
(cache, fetcher, paginator, index, driver) at construction. Components read
it and never change it; derive variants with ``model_copy(update=...)``.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


class ScraperConfig(BaseModel):
    """Settings shared by every part of a scrape run.

    Attributes:
        verbose: Log progress messages at INFO instead of DEBUG.
        debug: Stash instance pages in the on-disk cache and reuse them.
        index_debug: Stash index pages in the on-disk cache and reuse them.
        sleep_time_between_requests: Seconds to wait before every network
            fetch. Cached pages are not delayed.
        stash_folder: Directory holding cached pages, one file per URL.
        timeout: HTTP timeout in seconds. None means wait forever.
        max_pages: Stop paginating after this many pages. None means keep
            going until the next-page function converges.
        accept: Accept header sent with every request.
        user_agent: Optional User-Agent header.
        resolve_relative_links: Join index links against the index page URL.
    """

    model_config = ConfigDict(frozen=True)

    verbose: bool = False
    debug: bool = True
    index_debug: bool = False
    sleep_time_between_requests: float = Field(default=30.0, ge=0)
    stash_folder: Path = Path("stashes")
    timeout: float | None = Field(default=None, gt=0)
    max_pages: int | None = Field(default=None, ge=1)
    accept: str = DEFAULT_ACCEPT
    user_agent: str | None = None
    resolve_relative_links: bool = False

    def http_headers(self) -> dict[str, str]:
        """Headers sent with every GET."""
        headers = {"Accept": self.accept}
        if self.user_agent:
            headers["User-Agent"] = self.user_agent
        return headers
