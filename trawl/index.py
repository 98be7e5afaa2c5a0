"""Index pages: resolving the list of instance URLs to scrape.

An Index fetches one or more listing pages (following their pagination),
concatenates them, and pulls the link targets matched by a selector. The
resulting URL order is the order the instances are scraped and reported in.

Index pagination starts counting at 1, so an overriding next-page function
first sees ``index=2`` for the second listing page. Instance pagination in
the driver starts at 0 instead; pagination functions written for either
depend on these exact values.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any
from urllib.parse import urljoin

from trawl.common.document import Document
from trawl.common.page_source import PageSource
from trawl.common.paginator import NextPageFn, Paginator
from trawl.config import ScraperConfig
from trawl.data_types import ResolvableIndex, SelectorMethod

logger = logging.getLogger(__name__)

INDEX_START = 1


class Index:
    """A paginated listing of links to instance pages.

    Subclass and override :meth:`next_index_page_url` for listings that span
    several pages, or :meth:`get_index` when the instance list comes from
    somewhere else entirely (an API, a sitemap).

    Example::

        index = Index("http://example.com/list", "//ul[@id='results']//a")
        urls = index.get_index()
    """

    def __init__(
        self,
        url: str | Sequence[str],
        selector: str = "",
        selector_method: SelectorMethod | str = SelectorMethod.XPATH,
        config: ScraperConfig | None = None,
        page_source: PageSource | None = None,
        next_index_page_url: NextPageFn | None = None,
    ) -> None:
        """Initialize the index.

        Args:
            url: The listing URL, or several listing URLs read in order.
            selector: XPath or CSS expression matching the link elements.
            selector_method: Language of ``selector``.
            config: Scrape settings. ``index_debug`` controls stashing.
            page_source: Shared PageSource. One is created if omitted.
            next_index_page_url: Optional next-page function, used instead of
                the method of the same name.
        """
        self.urls: list[str] = [url] if isinstance(url, str) else list(url)
        self.selector = selector
        self.selector_method = SelectorMethod(selector_method)
        self.config = config or ScraperConfig()
        self.page_source = page_source or PageSource(self.config)
        self.paginator = Paginator(self.page_source, self.config.max_pages)
        if next_index_page_url is not None:
            self.next_index_page_url = next_index_page_url  # type: ignore[method-assign]

    def close(self) -> None:
        self.page_source.close()

    def __enter__(self) -> Index:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    @property
    def url(self) -> str:
        """The first listing URL."""
        return self.urls[0] if self.urls else ""

    def as_source(self) -> ResolvableIndex:
        """Let this index stand in where a URL is expected."""
        return ResolvableIndex(lambda: self.url)

    def next_index_page_url(self, url: str, index: int) -> str:
        """Return the URL of listing page ``index``.

        The default returns ``url`` unchanged, meaning the listing has only
        one page.
        """
        return url

    def get_index_pages(self, url: str, index: int = INDEX_START) -> str:
        """Return the concatenated bodies of a paginated listing."""
        return self.paginator.accumulate(
            url, index, self.next_index_page_url, self.config.index_debug
        )

    def get_index(self) -> list[str]:
        """Return the instance URLs, in document order."""
        return self.resolve_links(self.selector, self.selector_method)

    def resolve_links(
        self,
        selector: str,
        selector_method: SelectorMethod | str = SelectorMethod.XPATH,
    ) -> list[str]:
        """Fetch every listing page and return the matched links.

        Raises:
            MarkupParseException: If the concatenated listing is not markup.
            SelectorException: If ``selector`` is invalid.
        """
        text = "".join(self.get_index_pages(u, INDEX_START) for u in self.urls)
        links = self.parse_index(text, selector, selector_method)
        logger.info(f"Resolved {len(links)} instance URLs from {self.url}")
        return links

    def parse_index(
        self,
        text: str,
        selector: str,
        selector_method: SelectorMethod | str = SelectorMethod.XPATH,
    ) -> list[str]:
        """Return the href of every element ``selector`` matches in ``text``.

        Matched elements without an href are skipped. A listing that came back
        empty (404, 5xx, bad URL) has no links.
        """
        if not text.strip():
            logger.warning(f"Index {self.url} is empty; no instances to scrape")
            return []
        document = Document.parse(text, url=self.url)
        hrefs = document.attributes(selector, selector_method, "href")
        links = [href for href in hrefs if href is not None]
        if len(links) < len(hrefs):
            logger.debug(
                f"Skipped {len(hrefs) - len(links)} matches without href"
            )
        if self.config.resolve_relative_links:
            links = [urljoin(self.url, link) for link in links]
        return links
