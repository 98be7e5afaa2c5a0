"""Tests for Index: resolving instance URLs from listing pages."""

from pathlib import Path

import pytest

from trawl.common.exceptions import SelectorException
from trawl.common.page_source import PageSource
from trawl.config import ScraperConfig
from trawl.data_types import SelectorMethod, cache_key
from trawl.index import Index
from trawl.scraper import Scraper
from tests.mock_server import FRONT_PAGES
from tests.utils import FakeSite, make_fetcher


def _source(site: FakeSite, tmp_path: Path, **overrides) -> PageSource:
    config = ScraperConfig(
        sleep_time_between_requests=0,
        stash_folder=tmp_path / "stashes",
        **overrides,
    )
    return PageSource(config, fetcher=make_fetcher(site, config))


class TestIndexScenario:
    """The basic single-page index."""

    def test_links_in_document_order(self, tmp_path):
        """Index shall return every matched href in document order."""
        site = FakeSite()
        site.add(
            "http://example.com/list",
            '<a href="/p1">A</a><a href="/p2">B</a>',
        )
        source = _source(site, tmp_path)
        index = Index(
            "http://example.com/list",
            "//a",
            config=source.config,
            page_source=source,
        )

        assert index.get_index() == ["/p1", "/p2"]
        assert site.hits("http://example.com/list") == 1

    def test_css_selector(self, tmp_path):
        """A CSS selector shall work like the equivalent XPath."""
        site = FakeSite()
        site.add(
            "http://example.com/list",
            '<ul><li><a class="s" href="/a">A</a></li></ul><a href="/x">X</a>',
        )
        source = _source(site, tmp_path)
        index = Index(
            "http://example.com/list",
            "a.s",
            SelectorMethod.CSS,
            config=source.config,
            page_source=source,
        )

        assert index.get_index() == ["/a"]

    def test_matches_without_href_skipped(self, tmp_path):
        """Matched elements without an href shall be skipped."""
        site = FakeSite()
        site.add("http://example.com/list", '<a name="top">T</a><a href="/p">P</a>')
        source = _source(site, tmp_path)
        index = Index("http://example.com/list", "//a", page_source=source)

        assert index.get_index() == ["/p"]

    def test_relative_links_resolved_when_configured(self, tmp_path):
        """resolve_relative_links shall join links against the index URL."""
        site = FakeSite()
        site.add("http://example.com/news/list", '<a href="story">S</a>')
        source = _source(site, tmp_path, resolve_relative_links=True)
        index = Index(
            "http://example.com/news/list",
            "//a",
            config=source.config,
            page_source=source,
        )

        assert index.get_index() == ["http://example.com/news/story"]


class TestIndexPagination:
    """Tests for paginated listings."""

    def test_index_pagination_starts_at_one(self, tmp_path):
        """The first next-page call for an index shall receive index 2."""
        site = FakeSite()
        site.add("http://example.com/list", '<a href="/1">1</a>')
        seen: list[int] = []

        def fn(url: str, index: int) -> str:
            seen.append(index)
            return url

        index = Index(
            "http://example.com/list",
            "//a",
            page_source=_source(site, tmp_path),
            next_index_page_url=fn,
        )
        index.get_index()

        assert seen == [2]

    def test_subclass_override(self, tmp_path):
        """Overriding next_index_page_url shall follow listing pages."""
        site = FakeSite()
        site.add("http://example.com/list", '<a href="/1">1</a>')
        site.add("http://example.com/list?page=2", '<a href="/2">2</a>')

        class PagedIndex(Index):
            def next_index_page_url(self, url: str, index: int) -> str:
                return f"http://example.com/list?page={index}"

        index = PagedIndex(
            "http://example.com/list", "//a", page_source=_source(site, tmp_path)
        )

        assert index.get_index() == ["/1", "/2"]
        assert site.hits("http://example.com/list?page=3") == 1

    def test_multiple_index_urls(self, tmp_path):
        """Several listing URLs shall be read in order."""
        site = FakeSite()
        site.add("http://example.com/a", '<a href="/a1">a</a>')
        site.add("http://example.com/b", '<a href="/b1">b</a>')
        index = Index(
            ["http://example.com/a", "http://example.com/b"],
            "//a",
            page_source=_source(site, tmp_path),
        )

        assert index.get_index() == ["/a1", "/b1"]
        assert index.url == "http://example.com/a"


class TestIndexStash:
    """Tests for stashing index pages."""

    def test_index_not_stashed_by_default(self, tmp_path):
        """index_debug shall default to off."""
        site = FakeSite()
        site.add("http://example.com/list", '<a href="/p">P</a>')
        source = _source(site, tmp_path)
        index = Index("http://example.com/list", "//a", page_source=source)

        index.get_index()
        index.get_index()

        assert site.hits("http://example.com/list") == 2
        assert not source.cache.has(cache_key("http://example.com/list"))

    def test_index_stashed_with_index_debug(self, tmp_path):
        """With index_debug, the listing shall be fetched once."""
        site = FakeSite()
        site.add("http://example.com/list", '<a href="/p">P</a>')
        source = _source(site, tmp_path, index_debug=True)
        index = Index(
            "http://example.com/list",
            "//a",
            config=source.config,
            page_source=source,
        )

        assert index.get_index() == index.get_index() == ["/p"]
        assert site.hits("http://example.com/list") == 1


class TestIndexErrors:
    """Tests for empty listings and selector errors."""

    def test_missing_listing_has_no_links(self, tmp_path):
        """A listing that 404s shall resolve to no instance URLs."""
        site = FakeSite()
        index = Index(
            "http://example.com/missing",
            "//a",
            page_source=_source(site, tmp_path),
        )

        assert index.get_index() == []
        assert site.hits("http://example.com/missing") == 1

    def test_missing_listing_scrapes_nothing(self, tmp_path):
        """A scrape over a listing that 404s shall finish with no records."""
        source = _source(FakeSite(), tmp_path)
        scraper = Scraper(
            "http://example.com/list",
            selector="//a",
            config=source.config,
            page_source=source,
        )

        assert scraper.scrape(lambda body, url, i: body) == []

    def test_blank_listing_has_no_links(self, tmp_path):
        """A whitespace-only listing shall resolve to no instance URLs."""
        site = FakeSite()
        site.add("http://example.com/list", "  \n ")
        index = Index(
            "http://example.com/list", "//a", page_source=_source(site, tmp_path)
        )

        assert index.get_index() == []

    def test_bad_selector(self, tmp_path):
        """An invalid XPath shall raise SelectorException."""
        site = FakeSite()
        site.add("http://example.com/list", '<a href="/p">P</a>')
        index = Index(
            "http://example.com/list",
            "//a[",
            page_source=_source(site, tmp_path),
        )

        with pytest.raises(SelectorException):
            index.get_index()


class TestIndexAsSource:
    """Tests for using an Index where a URL is expected."""

    def test_as_source_resolves_to_index_url(self, tmp_path):
        """as_source shall resolve to the first listing URL."""
        site = FakeSite()
        site.add("http://example.com/list", "<p>listing</p>")
        source = _source(site, tmp_path)
        index = Index("http://example.com/list", "//a", page_source=source)

        assert index.as_source().resolve() == "http://example.com/list"
        assert source.get(index.as_source()) == "<p>listing</p>"


class TestIndexOverHttp:
    """Tests against the aiohttp mock server."""

    def test_paginated_front_page(self, server_url, config, hits):
        """Both front pages shall be read, stopping at the 404 after them."""

        def fn(url: str, index: int) -> str:
            return f"{server_url}/?page={index}"

        with Index(
            f"{server_url}/",
            "//ul[@id='stories']//a",
            config=config,
            next_index_page_url=fn,
        ) as index:
            links = index.get_index()

        expected = [f"/articles/{slug}" for page in FRONT_PAGES for slug in page]
        assert links == expected
        assert hits["/?page=3"] == 1
