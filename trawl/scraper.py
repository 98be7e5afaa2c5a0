"""The caller-facing Scraper.

A Scraper is built from either an index (a listing URL plus the selector
that finds instance links on it) or an explicit list of instance URLs. It
can be used as-is with a process function, e.g. one from trawl.utils, or
subclassed to override pagination for sites whose pages span several URLs.

Example::

    class NewsScraper(Scraper):
        def next_instance_page_url(self, url, index):
            return f"{url.split('?')[0]}?page={index + 1}" if index < 3 else url

    scraper = NewsScraper("http://example.com/", selector="//h2/a")
    scraper.scrape_to_csv("articles.csv", list_items("//p"))
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Generic, TextIO, TypeVar

from trawl.common.page_source import PageSource
from trawl.common.paginator import NextPageFn, Paginator
from trawl.config import ScraperConfig
from trawl.driver.sync_driver import ProcessFn, SyncDriver
from trawl.index import Index

logger = logging.getLogger(__name__)

RecordType = TypeVar("RecordType")


class Scraper(Generic[RecordType]):
    """Scrapes instance pages listed by an index or given outright.

    Attributes:
        config: Settings shared with the index, fetcher and stash.
        index: The Index to resolve, or None when URLs were given directly.
        page_source: Stash-or-fetch access shared by index and instances.
    """

    def __init__(
        self,
        source: str | Index | Sequence[str],
        selector: str | None = None,
        selector_method: str = "xpath",
        config: ScraperConfig | None = None,
        page_source: PageSource | None = None,
        next_instance_page_url: NextPageFn | None = None,
        next_index_page_url: NextPageFn | None = None,
    ) -> None:
        """Initialize the scraper.

        Args:
            source: A listing URL (requires ``selector``), an Index, or a
                list of instance URLs.
            selector: Selector for instance links on the listing page.
            selector_method: "xpath" or "css".
            config: Scrape settings; defaults to ScraperConfig().
            page_source: Optional shared PageSource.
            next_instance_page_url: Optional next-page function for
                instances, used instead of the method of the same name.
            next_index_page_url: Optional next-page function for the listing
                when ``source`` is a URL.

        Raises:
            ValueError: If ``source`` is a URL and no selector is given, or
                if ``source`` is an Index and next_index_page_url is given.
        """
        self.config = config or ScraperConfig()
        self.page_source = page_source or PageSource(self.config)
        self._urls: list[str] | None = None

        if isinstance(source, Index):
            if next_index_page_url is not None:
                raise ValueError(
                    "next_index_page_url cannot be given with an Index source; "
                    "set it on the Index instead"
                )
            if type(self).next_index_page_url is not Scraper.next_index_page_url:
                logger.warning(
                    f"{type(self).__name__}.next_index_page_url is unused when "
                    "scraping from an Index; set it on the Index instead"
                )
            self.index: Index | None = source
        elif isinstance(source, str):
            if not selector:
                raise ValueError(
                    "A selector is required when scraping from an index URL"
                )
            self.index = Index(
                source,
                selector,
                selector_method,
                config=self.config,
                page_source=self.page_source,
                next_index_page_url=next_index_page_url
                or self.next_index_page_url,
            )
        else:
            self.index = None
            self._urls = list(source)

        if next_instance_page_url is not None:
            self.next_instance_page_url = next_instance_page_url  # type: ignore[method-assign]

    def close(self) -> None:
        self.page_source.close()
        index = self.index
        if index is not None and index.page_source is not self.page_source:
            index.close()

    def __enter__(self) -> Scraper[RecordType]:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def next_instance_page_url(self, url: str, index: int) -> str:
        """Return the URL of page ``index`` of an instance.

        The default returns ``url`` unchanged: instances are a single page.
        """
        return url

    def next_index_page_url(self, url: str, index: int) -> str:
        """Return the URL of listing page ``index`` (first call gets 2).

        Only used when the scraper builds its own Index from a URL.
        """
        return url

    @property
    def instance_urls(self) -> list[str]:
        """Instance URLs, resolving the index on first access."""
        if self._urls is None and self.index is not None:
            self._urls = self.index.get_index()
        return self._urls or []

    def driver(self) -> SyncDriver[RecordType]:
        return SyncDriver(
            self.instance_urls,
            Paginator(self.page_source, self.config.max_pages),
            next_instance_page_url=self.next_instance_page_url,
            use_cache=self.config.debug,
        )

    def scrape(self, process: ProcessFn[RecordType]) -> list[RecordType]:
        """Run ``process(body, url, position)`` over every instance."""
        return self.driver().run(process)

    def scrape_to_csv(
        self,
        destination: str | Path | TextIO,
        process: ProcessFn[RecordType],
    ) -> list[RecordType]:
        """Scrape and write one CSV row per record to ``destination``."""
        return self.driver().run_to_table(process, destination)

    @staticmethod
    def slug(url: str) -> str:
        """A short, almost certainly unique id for a page URL.

        The last path segment with the query string and any ``.html`` suffix
        removed: ``http://x.com/news/story-1.html?ref=a`` gives ``story-1``.
        """
        last = url.split("/")[-1]
        last = re.sub(r"\?.*", "", last)
        return re.sub(r"\.html.*", "", last)
