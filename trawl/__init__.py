"""
Index-and-instance scraping framework.

Most scraping jobs touch two kinds of pages: index pages, which list links,
and instance pages, which hold the data you actually want. trawl does the
repetitive parts (fetching, throttling, stashing pages on disk, following
simple pagination) so a scraper only has to supply the extraction logic.

Example::

    from trawl import Scraper, ScraperConfig
    from trawl.utils import list_items

    scraper = Scraper(
        "http://example.com/list",
        selector="//a[@class='story']",
        config=ScraperConfig(sleep_time_between_requests=2),
    )
    headlines = scraper.scrape(list_items("//h1"))
"""

from trawl.config import ScraperConfig
from trawl.data_types import (
    FetchOutcome,
    FetchResult,
    LiteralURL,
    ResolvableIndex,
    SelectorMethod,
    cache_key,
)
from trawl.index import Index
from trawl.scraper import Scraper

__all__ = [
    "FetchOutcome",
    "FetchResult",
    "Index",
    "LiteralURL",
    "ResolvableIndex",
    "Scraper",
    "ScraperConfig",
    "SelectorMethod",
    "cache_key",
]
