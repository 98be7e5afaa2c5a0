"""Page accumulation for documents that span several URLs.

A next-page function maps ``(current_url, page_index)`` to the URL of the
following page. Accumulation stops when a page comes back empty or when the
function returns the current URL unchanged. Callers that compute real
next-page URLs must make sure one of those eventually happens; the optional
``max_pages`` setting is the only other brake.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from trawl.common.page_source import PageSource

logger = logging.getLogger(__name__)

NextPageFn = Callable[[str, int], str]


def same_page(url: str, index: int) -> str:
    """Default next-page function: there is no next page."""
    return url


class Paginator:
    """Concatenates the bodies of a paginated sequence of pages."""

    def __init__(
        self, page_source: PageSource, max_pages: int | None = None
    ) -> None:
        self.page_source = page_source
        self.max_pages = max_pages

    def accumulate(
        self,
        seed_url: str,
        start_index: int,
        next_page_url: NextPageFn = same_page,
        use_cache: bool = False,
    ) -> str:
        """Fetch ``seed_url`` and every page after it, joined in order.

        Args:
            seed_url: URL of the first page.
            start_index: Index of the first page. The next-page function is
                called with ``start_index + 1`` for the second page, and so on.
            next_page_url: Maps (current URL, next index) to the next URL.
            use_cache: Passed through to PageSource.get for every page.

        Returns:
            The concatenated bodies. Empty if the first page is empty.
        """
        bodies: list[str] = []
        url, index = seed_url, start_index

        while True:
            body = self.page_source.get(url, use_cache)
            bodies.append(body)
            if not body:
                break

            next_url = next_page_url(url, index + 1)
            if next_url == url:
                break

            if self.max_pages is not None and len(bodies) >= self.max_pages:
                logger.warning(
                    f"Stopped paginating {seed_url} after {len(bodies)} pages",
                    extra={"next_url": next_url, "max_pages": self.max_pages},
                )
                break

            url, index = next_url, index + 1

        return "".join(bodies)
