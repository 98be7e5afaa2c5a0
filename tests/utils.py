"""Test utilities for fetch-core tests.

Provides an in-memory site served through httpx.MockTransport, so unit tests
can count requests and delays without a running server.
"""

from collections.abc import Callable
from dataclasses import dataclass, field

import httpx

from trawl.common.fetcher import Fetcher
from trawl.config import ScraperConfig


@dataclass
class FakePage:
    """A canned response."""

    body: bytes = b""
    status_code: int = 200
    content_type: str | None = "text/html; charset=utf-8"


@dataclass
class FakeSite:
    """Serves FakePages by full URL and records every request.

    Unknown URLs answer 404.
    """

    pages: dict[str, FakePage] = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)

    def add(self, url: str, body: str | bytes, **kwargs) -> None:
        data = body.encode("utf-8") if isinstance(body, str) else body
        self.pages[url] = FakePage(body=data, **kwargs)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        page = self.pages.get(str(request.url))
        if page is None:
            return httpx.Response(404, content=b"not here")
        headers = {}
        if page.content_type is not None:
            headers["Content-Type"] = page.content_type
        return httpx.Response(
            page.status_code, content=page.body, headers=headers
        )

    def hits(self, url: str) -> int:
        return sum(1 for r in self.requests if str(r.url) == url)


def make_fetcher(
    site: FakeSite | Callable[[httpx.Request], httpx.Response],
    config: ScraperConfig | None = None,
    delays: list[float] | None = None,
) -> Fetcher:
    """Build a Fetcher wired to a fake site.

    Args:
        site: FakeSite or a raw MockTransport handler.
        config: Optional config; defaults to a zero-delay config.
        delays: If given, each requested delay is appended here instead of
            sleeping.
    """
    handler = site.handler if isinstance(site, FakeSite) else site
    client = httpx.Client(transport=httpx.MockTransport(handler))
    recorded = delays if delays is not None else []
    return Fetcher(
        config or ScraperConfig(sleep_time_between_requests=0),
        client=client,
        sleep=recorded.append,
    )
