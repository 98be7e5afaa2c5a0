"""Exception types for scrape errors.

Fetch failures that should not abort a batch (404, 5xx, malformed URL) never
reach this module; the fetcher turns them into a FetchOutcome and the page
source into an empty body. What is left here are errors the caller has to fix:
bad selectors, content that cannot be parsed, and cache lookups for pages that
were never stashed.
"""

from typing import Any

from trawl.data_types import cache_key


class TrawlException(Exception):
    """Base class for trawl errors.

    ``str(exc)`` is the message followed by one indented ``name: value`` line
    per detail. When the error concerns a page, its URL and the stash key it
    maps to come first, so the stashed copy can be found from a log line.

    Attributes:
        message: Human-readable description of the failure.
        request_url: The page being processed, or "" if none.
        context: Extra details (selector, path, content length).
    """

    def __init__(
        self,
        message: str,
        request_url: str = "",
        context: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.request_url = request_url
        self.context = dict(context or {})
        super().__init__(self._format_message())

    @property
    def stash_key(self) -> str:
        """Stash filename of ``request_url``."""
        return cache_key(self.request_url)

    def details(self) -> dict[str, Any]:
        """URL, stash key and context, in display order."""
        details: dict[str, Any] = {}
        if self.request_url:
            details["url"] = self.request_url
            details["stash_key"] = self.stash_key
        details.update(self.context)
        return details

    def _format_message(self) -> str:
        lines = [self.message]
        lines.extend(f"  {name}: {value}" for name, value in self.details().items())
        return "\n".join(lines)


class MarkupParseException(TrawlException):
    """Raised when page content cannot be parsed as HTML.

    Empty listings never get here; they simply have no links. This is for
    non-empty content lxml rejects, e.g. a stash file holding binary data.
    It always propagates.
    """

    def __init__(self, request_url: str, reason: str, length: int) -> None:
        self.reason = reason
        super().__init__(
            f"Could not parse markup: {reason}",
            request_url,
            {"content_length": length},
        )


class SelectorException(TrawlException):
    """Raised when an XPath or CSS expression is invalid.

    Attributes:
        selector: The selector that failed.
        selector_type: "xpath" or "css".
    """

    def __init__(
        self,
        selector: str,
        selector_type: str,
        reason: str,
        request_url: str = "",
    ) -> None:
        self.selector = selector
        self.selector_type = selector_type
        super().__init__(
            f"Invalid {selector_type} selector: {reason}",
            request_url,
            {"selector": selector, "selector_type": selector_type},
        )


class CacheMissException(TrawlException, LookupError):
    """Raised when reading a stash key that has no stored page."""

    def __init__(self, key: str, path: str) -> None:
        self.key = key
        self.path = path
        super().__init__(
            f"No stashed page for key '{key}'",
            "",
            {"path": path},
        )
