"""Character-encoding policy for fetched and stashed pages.

Every body handed to a caller is a ``str`` that round-trips cleanly through
UTF-8. Bytes are decoded with the charset resolved from the response headers,
and anything that cannot be decoded or encoded is replaced, never raised.

Charset resolution only applies to successful responses (200-207) that carry
a Content-Type:

1. an explicit ``charset`` parameter wins;
2. ``text/xml`` with no charset is US-ASCII;
3. any other ``text/*`` type is ISO-8859-1;
4. everything else stays unresolved and is decoded as UTF-8.
"""

from __future__ import annotations

import codecs
import logging

logger = logging.getLogger(__name__)

CANONICAL_ENCODING = "utf-8"

_SUCCESS_STATUSES = range(200, 208)


def parse_content_type(content_type: str) -> tuple[str, dict[str, str]]:
    """Split a Content-Type header into its media type and parameters.

    Args:
        content_type: Raw header value, e.g. ``"text/html; charset=UTF-8"``.

    Returns:
        Lowercased ``type/subtype`` and a dict of lowercased parameter names
        to unquoted values.
    """
    media_type, _, rest = content_type.partition(";")
    params: dict[str, str] = {}
    for part in rest.split(";"):
        name, sep, value = part.partition("=")
        if not sep:
            continue
        params[name.strip().lower()] = value.strip().strip('"').strip("'")
    return media_type.strip().lower(), params


def resolve_charset(
    status_code: int | None, content_type: str | None
) -> str | None:
    """Pick the charset a response body should be read as.

    Args:
        status_code: HTTP status of the response.
        content_type: The Content-Type header, or None if absent.

    Returns:
        A charset label, or None when the policy leaves it unresolved.
    """
    if status_code not in _SUCCESS_STATUSES or not content_type:
        return None

    media_type, params = parse_content_type(content_type)
    if params.get("charset"):
        return params["charset"]
    if media_type == "text/xml":
        return "us-ascii"
    if media_type.split("/")[0] == "text":
        return "iso-8859-1"
    return None


def decode_body(content: bytes, charset: str | None = None) -> str:
    """Decode raw bytes to text, replacing anything undecodable.

    An unknown charset label is not an error; the body is read as UTF-8.
    """
    encoding = charset or CANONICAL_ENCODING
    try:
        codecs.lookup(encoding)
    except LookupError:
        logger.debug(
            f"Unknown charset '{encoding}', falling back to {CANONICAL_ENCODING}"
        )
        encoding = CANONICAL_ENCODING
    return content.decode(encoding, errors="replace")


def normalize_text(value: str | bytes, charset: str | None = None) -> str:
    """Return text that is guaranteed to encode as UTF-8.

    Bytes are decoded first. Characters UTF-8 cannot represent (lone
    surrogates) are replaced. Already-clean text comes back unchanged, so
    normalizing twice is the same as normalizing once.
    """
    if isinstance(value, bytes):
        value = decode_body(value, charset)
    return value.encode(CANONICAL_ENCODING, errors="replace").decode(
        CANONICAL_ENCODING
    )
