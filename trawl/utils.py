"""Ready-made process functions.

Each helper returns a callable with the ``(body, url, position)`` signature
that Scraper.scrape and Scraper.scrape_to_csv expect.
"""

from __future__ import annotations

from collections.abc import Callable

from trawl.common.document import Document
from trawl.data_types import SelectorMethod


def table(
    table_selector: str,
    selector_method: SelectorMethod | str = SelectorMethod.XPATH,
) -> Callable[[str, str, int], list[list[str]]]:
    """Scrape an HTML ``<table>`` into a list of rows.

    The first row holds the ``<th>`` texts (empty if the table has no header
    cells). Every ``<tr>`` then contributes the texts of its ``<td>`` cells,
    so header rows show up as empty lists. An empty body (a page that
    failed to fetch) gives a single empty header row.
    """

    def process(body: str, url: str = "", position: int = 0) -> list[list[str]]:
        if not body.strip():
            return [[]]
        document = Document.parse(body, url=url)
        tables = document.select(table_selector, selector_method)
        headers = [th.text_content() for t in tables for th in t.cssselect("th")]
        rows = [
            [td.text_content() for td in tr.cssselect("td")]
            for t in tables
            for tr in t.cssselect("tr")
        ]
        return [headers, *rows]

    return process


def list_items(
    list_selector: str,
    selector_method: SelectorMethod | str = SelectorMethod.XPATH,
) -> Callable[[str, str, int], list[str]]:
    """Scrape the text of every element matching ``list_selector``."""

    def process(body: str, url: str = "", position: int = 0) -> list[str]:
        if not body.strip():
            return []
        return Document.parse(body, url=url).texts(list_selector, selector_method)

    return process
