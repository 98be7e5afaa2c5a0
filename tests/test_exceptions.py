"""Tests for trawl exception formatting."""

from trawl.common.exceptions import (
    CacheMissException,
    SelectorException,
    TrawlException,
)


class TestTrawlException:
    """Exception messages shall point at the page and its stashed copy."""

    def test_url_and_stash_key_lead_details(self):
        exc = SelectorException("//a[", "xpath", "bad", "http://x.com/a?b=1")

        assert str(exc).splitlines() == [
            "Invalid xpath selector: bad",
            "  url: http://x.com/a?b=1",
            "  stash_key: httpxcomab1",
            "  selector: //a[",
            "  selector_type: xpath",
        ]
        assert exc.stash_key == "httpxcomab1"

    def test_no_url_no_stash_key(self):
        """Errors not tied to a page shall list only their context."""
        exc = CacheMissException("abc", "/tmp/stashes/abc")

        assert "stash_key" not in str(exc)
        assert str(exc).splitlines()[1] == "  path: /tmp/stashes/abc"
        assert isinstance(exc, LookupError)

    def test_context_is_copied(self):
        context = {"n": 1}
        exc = TrawlException("boom", "", context)
        context["n"] = 2

        assert exc.context == {"n": 1}
        assert str(exc) == "boom\n  n: 1"
