"""Data types shared by the fetch core and the orchestration layer.

- LiteralURL and ResolvableIndex form the UrlSource variant accepted
  wherever a page URL is expected.
- FetchOutcome and FetchResult describe what a single GET produced, before
  the page source collapses failures to an empty body.
- SelectorMethod names the query language of an index or extraction selector.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

# Characters kept in a cache key. Everything else is dropped, so URLs that
# differ only in dropped characters share a key.
_CACHE_KEY_STRIP = re.compile(r"[^A-Za-z0-9\-]")


def cache_key(url: str) -> str:
    """Derive the stash filename for a URL.

    Example::

        >>> cache_key("http://example.com/a?b=1")
        'httpexamplecomab1'
    """
    return _CACHE_KEY_STRIP.sub("", url)


@dataclass(frozen=True)
class LiteralURL:
    """A plain URL string."""

    url: str

    def resolve(self) -> str:
        return self.url


@dataclass(frozen=True)
class ResolvableIndex:
    """Something that can produce a URL on demand.

    Lets an index stand in wherever a URL is expected; the page source calls
    ``resolver`` right before computing the cache key.
    """

    resolver: Callable[[], str]

    def resolve(self) -> str:
        return self.resolver()


UrlSource = LiteralURL | ResolvableIndex


def as_url_source(url: str | UrlSource) -> UrlSource:
    """Wrap a bare string as a LiteralURL; pass variants through."""
    if isinstance(url, (LiteralURL, ResolvableIndex)):
        return url
    return LiteralURL(url)


class FetchOutcome(Enum):
    """How a single fetch ended.

    Values:
        OK: The server answered with a usable body (possibly empty).
        NOT_FOUND: HTTP 404 or 410.
        SERVER_ERROR: Any HTTP 5xx.
        INVALID_URL: The URL could not be requested at all (malformed,
            relative, or missing a supported scheme).
    """

    OK = "ok"
    NOT_FOUND = "not_found"
    SERVER_ERROR = "server_error"
    INVALID_URL = "invalid_url"


@dataclass(frozen=True)
class FetchResult:
    """Result of one Fetcher.fetch call.

    Attributes:
        url: The URL that was requested.
        outcome: Classification of the fetch.
        body: Normalized page text. Always empty unless outcome is OK.
        content_type: The response's Content-Type header, if any.
        status_code: HTTP status, or None when no request was made.
        encoding: The charset the body was decoded with, if one was resolved.
    """

    url: str
    outcome: FetchOutcome
    body: str = ""
    content_type: str | None = None
    status_code: int | None = None
    encoding: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is FetchOutcome.OK


class SelectorMethod(str, Enum):
    """Query language of a selector string."""

    XPATH = "xpath"
    CSS = "css"
