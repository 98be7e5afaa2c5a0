"""Parsed HTML with XPath or CSS querying.

Wraps an lxml.html document so callers pick the selector language with a
SelectorMethod instead of calling xpath()/cssselect() directly.
"""

from __future__ import annotations

from lxml import etree, html
from lxml.cssselect import SelectorError
from lxml.html import HtmlElement

from trawl.common.encoding import CANONICAL_ENCODING
from trawl.common.exceptions import MarkupParseException, SelectorException
from trawl.data_types import SelectorMethod


class Document:
    """An HTML document ready for querying.

    Example::

        doc = Document.parse(body, url="http://example.com/list")
        links = doc.attributes("//a", SelectorMethod.XPATH, "href")
    """

    def __init__(self, root: HtmlElement, url: str = "") -> None:
        """Initialize the document.

        Args:
            root: The parsed root element.
            url: The URL the markup came from, for error context.
        """
        self.root = root
        self.url = url

    @classmethod
    def parse(cls, text: str, url: str = "") -> Document:
        """Parse markup text into a Document.

        Several concatenated pages parse as one document, with their elements
        in the order they appear in ``text``.

        Raises:
            MarkupParseException: If ``text`` is empty or not markup.
        """
        parser = html.HTMLParser(encoding=CANONICAL_ENCODING)
        try:
            root = html.document_fromstring(
                text.encode(CANONICAL_ENCODING), parser=parser
            )
        except etree.ParserError as e:
            raise MarkupParseException(url, str(e), len(text)) from e
        return cls(root, url)

    def select(
        self, selector: str, method: SelectorMethod | str = SelectorMethod.XPATH
    ) -> list[HtmlElement]:
        """Return the elements matched by ``selector`` in document order.

        XPath results that are not elements (strings, numbers) are dropped.

        Raises:
            SelectorException: If the selector is not valid for ``method``.
        """
        method = SelectorMethod(method)
        if method is SelectorMethod.CSS:
            try:
                results = self.root.cssselect(selector)
            except SelectorError as e:
                raise SelectorException(selector, "css", str(e), self.url) from e
        else:
            try:
                results = self.root.xpath(selector)
            except etree.XPathError as e:
                raise SelectorException(
                    selector, "xpath", str(e), self.url
                ) from e
            if not isinstance(results, list):
                return []
        return [r for r in results if isinstance(r, HtmlElement)]

    def attributes(
        self,
        selector: str,
        method: SelectorMethod | str,
        name: str,
    ) -> list[str | None]:
        """Return attribute ``name`` of every matched element.

        Elements lacking the attribute contribute None, so positions line up
        with select().
        """
        return [el.get(name) for el in self.select(selector, method)]

    def texts(
        self, selector: str, method: SelectorMethod | str = SelectorMethod.XPATH
    ) -> list[str]:
        """Return the text content of every matched element."""
        return [el.text_content() for el in self.select(selector, method)]
