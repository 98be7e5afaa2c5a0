"""Synchronous driver implementation.

The driver walks a pre-resolved list of instance URLs one at a time, fetches
each instance (following its pagination), and hands the body to the caller's
process function. Records come back in the same order as the URLs.

Fetches are strictly sequential: every network request waits the configured
delay first, so a run over N uncached instances takes at least N delays.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any, Generic, TextIO, TypeVar

from trawl.common.paginator import NextPageFn, Paginator, same_page
from trawl.common.table_writer import write_rows

logger = logging.getLogger(__name__)

RecordType = TypeVar("RecordType")

ProcessFn = Callable[[str, str, int], RecordType]

INSTANCE_START = 0


class SyncDriver(Generic[RecordType]):
    """Runs a process function over every instance page, in order.

    Example::

        driver = SyncDriver(urls, paginator, use_cache=True)
        records = driver.run(lambda body, url, i: [url, len(body)])
    """

    def __init__(
        self,
        urls: Sequence[str],
        paginator: Paginator,
        next_instance_page_url: NextPageFn = same_page,
        use_cache: bool = True,
        on_record: Callable[[RecordType], None] | None = None,
    ) -> None:
        """Initialize the driver.

        Args:
            urls: Instance URLs, in output order.
            paginator: Paginator wrapping the shared PageSource.
            next_instance_page_url: Next-page function for instances. Called
                with index 1 for the second page of an instance.
            use_cache: Stash instance pages (the ``debug`` setting).
            on_record: Optional callback invoked with each record as soon as
                it is produced. Useful for progress reporting or incremental
                persistence.
        """
        self.urls = list(urls)
        self.paginator = paginator
        self.next_instance_page_url = next_instance_page_url
        self.use_cache = use_cache
        self.on_record = on_record

    def get_instance(self, url: str, index: int = INSTANCE_START) -> str:
        """Return the concatenated body of a (possibly paginated) instance."""
        return self.paginator.accumulate(
            url, index, self.next_instance_page_url, self.use_cache
        )

    def run(self, process: ProcessFn[RecordType]) -> list[RecordType]:
        """Call ``process(body, url, position)`` for every instance.

        An instance that fails to fetch (404, 5xx, bad URL) is still
        processed, with an empty body.

        Returns:
            One record per URL, at the URL's position.
        """
        logger.info(f"Scraping {len(self.urls)} instances")
        records: list[RecordType] = []
        for position, url in enumerate(self.urls):
            body = self.get_instance(url)
            if not body:
                logger.debug(f"Empty body for instance {position}: {url}")
            record = process(body, url, position)
            records.append(record)
            if self.on_record is not None:
                self.on_record(record)
        return records

    def run_to_table(
        self,
        process: ProcessFn[RecordType],
        destination: str | Path | TextIO,
    ) -> list[RecordType]:
        """Run, then write each record as one CSV row to ``destination``."""
        records = self.run(process)
        count = write_rows(destination, records)  # type: ignore[arg-type]
        logger.info(f"Wrote {count} rows to {_describe(destination)}")
        return records


def _describe(destination: Any) -> str:
    if isinstance(destination, (str, Path)):
        return str(destination)
    return getattr(destination, "name", type(destination).__name__)
